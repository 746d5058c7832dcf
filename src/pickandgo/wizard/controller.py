"""Vehicle submission wizard.

Phases and transitions:

    STEP(1..6) --next, valid--> STEP(n+1)       (n < 6)
    STEP(6)    --next, valid--> AGREEMENT       (agreement loaded)
    AGREEMENT  --back---------> STEP(6)
    AGREEMENT  --submit-------> SUBMITTING --success--> CLOSED
                                           --failure--> AGREEMENT
    any        --close--------> CLOSED        (draft reset)
    CLOSED     --open---------> STEP(1)

An invalid ``next`` stores the errors and stays on the current step.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pickandgo.client.agreements import VEHICLE_OWNER, AgreementService
from pickandgo.client.vehicles import VehicleService
from pickandgo.core.errors import PickAndGoError, WizardError
from pickandgo.core.events import EventBus, get_event_bus
from pickandgo.core.logging import get_logger
from pickandgo.vehicles.draft import DEFAULT_CURRENCY, FormStore, FormValue, VehicleDraft
from pickandgo.vehicles.staging import DocumentStaging, FileRef, PhotoStaging
from pickandgo.vehicles.validation import TOTAL_STEPS, validate_step
from pickandgo.wizard.agreement_gate import AgreementGate
from pickandgo.wizard.submission import (
    FAILURE_MESSAGE,
    SubmissionOrchestrator,
    SubmissionResult,
)

_logger = get_logger(__name__)


class WizardPhase(StrEnum):
    STEP = "step"
    AGREEMENT = "agreement"
    SUBMITTING = "submitting"
    CLOSED = "closed"


_ALLOWED_TRANSITIONS: dict[WizardPhase, set[WizardPhase]] = {
    WizardPhase.STEP: {WizardPhase.STEP, WizardPhase.AGREEMENT, WizardPhase.CLOSED},
    WizardPhase.AGREEMENT: {WizardPhase.STEP, WizardPhase.SUBMITTING, WizardPhase.CLOSED},
    WizardPhase.SUBMITTING: {WizardPhase.AGREEMENT, WizardPhase.CLOSED},
    WizardPhase.CLOSED: {WizardPhase.STEP},
}


@dataclass(frozen=True)
class WizardState:
    current_step: int
    phase: WizardPhase
    agreement_visible: bool
    submitting: bool
    uploading_photos: bool

    @property
    def name(self) -> str:
        if self.phase is WizardPhase.STEP:
            return f"step_{self.current_step}"
        return self.phase.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.name,
            "current_step": self.current_step,
            "agreement_visible": self.agreement_visible,
            "submitting": self.submitting,
            "uploading_photos": self.uploading_photos,
        }


class VehicleWizard:
    """Drives one vehicle owner through adding a vehicle."""

    def __init__(
        self,
        *,
        owner_id: str,
        vehicles: VehicleService,
        agreements: AgreementService | None = None,
        currency: str = DEFAULT_CURRENCY,
        on_success: Callable[[SubmissionResult], None] | None = None,
        on_alert: Callable[[str], None] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize wizard (opened on step 1).

        Args:
            owner_id: Vehicle owner the vehicle is created for
            vehicles: Vehicle endpoints
            agreements: Agreement endpoints (None uses the default template)
            currency: Pricing currency for new drafts
            on_success: Called after a successful submission, before reset
            on_alert: Receives user-facing alert messages
            event_bus: Bus for ``vehicle.added`` (defaults to the global bus)
        """
        self.owner_id = owner_id
        self.store = FormStore(currency)
        self.documents = DocumentStaging()
        self.photos = PhotoStaging()
        self.gate = AgreementGate(agreements, VEHICLE_OWNER)
        self.orchestrator = SubmissionOrchestrator(vehicles, owner_id)
        self.on_success = on_success
        self.on_alert = on_alert
        self.event_bus = event_bus or get_event_bus()

        self.errors: dict[str, str] = {}
        self.alerts: list[str] = []
        self._phase = WizardPhase.STEP
        self._step = 1

    # -- state -------------------------------------------------------------

    @property
    def draft(self) -> VehicleDraft:
        return self.store.get()

    @property
    def phase(self) -> WizardPhase:
        return self._phase

    @property
    def current_step(self) -> int:
        return self._step

    @property
    def state(self) -> WizardState:
        return WizardState(
            current_step=self._step,
            phase=self._phase,
            agreement_visible=self._phase in (WizardPhase.AGREEMENT, WizardPhase.SUBMITTING),
            submitting=self._phase is WizardPhase.SUBMITTING,
            uploading_photos=self.orchestrator.uploading_photos,
        )

    def _transition(self, new_phase: WizardPhase) -> None:
        if new_phase not in _ALLOWED_TRANSITIONS[self._phase]:
            raise WizardError(
                f"illegal wizard transition: {self._phase.value} -> {new_phase.value}"
            )
        self._phase = new_phase

    def _require_phase(self, *phases: WizardPhase) -> None:
        if self._phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise WizardError(
                f"Not allowed while wizard is '{self.state.name}'",
                f"Allowed in: {allowed}",
            )

    def _require_editable(self) -> None:
        self._require_phase(WizardPhase.STEP, WizardPhase.AGREEMENT)

    def _alert(self, message: str) -> None:
        self.alerts.append(message)
        if self.on_alert is not None:
            self.on_alert(message)

    # -- editing -----------------------------------------------------------

    def set_field(self, path: str, value: FormValue) -> None:
        self._require_editable()
        norm = self.store.set_field(path, value)
        self.errors.pop(norm, None)

    def set_fields(self, values: dict[str, FormValue]) -> None:
        self._require_editable()
        for norm in self.store.set_fields(values):
            self.errors.pop(norm, None)

    async def stage_document(self, doc_type: str, file: FileRef) -> tuple[str | None, list[str]]:
        self._require_editable()
        preview, errors = await self.documents.stage_document(doc_type, file)
        if not errors:
            self.errors.pop(f"documents.{doc_type}", None)
        return preview, errors

    def remove_document(self, doc_type: str) -> None:
        self._require_editable()
        self.documents.remove_document(doc_type)

    async def stage_photo(self, side: str, file: FileRef) -> tuple[str | None, list[str]]:
        self._require_editable()
        return await self.photos.stage_photo(side, file)

    def remove_photo(self, side: str) -> None:
        self._require_editable()
        self.photos.remove_photo(side)

    # -- navigation --------------------------------------------------------

    def validate_current(self) -> dict[str, str]:
        return validate_step(self._step, self.draft, self.documents)

    async def next(self) -> bool:
        """Advance if the current step is valid.

        Returns:
            True if the wizard moved on, False if errors were recorded
        """
        self._require_phase(WizardPhase.STEP)

        errors = self.validate_current()
        if errors:
            _logger.verbose(f"Step {self._step} has {len(errors)} validation error(s)")
            self.errors = errors
            return False

        self.errors = {}
        if self._step < TOTAL_STEPS:
            self._step += 1
            _logger.debug(f"Moved to step {self._step}")
            return True

        self._transition(WizardPhase.AGREEMENT)
        await self.gate.load()
        return True

    def back(self) -> bool:
        if self._phase is WizardPhase.AGREEMENT:
            self._transition(WizardPhase.STEP)
            self._step = TOTAL_STEPS
            return True

        self._require_phase(WizardPhase.STEP)
        if self._step == 1:
            return False
        self._step -= 1
        self.errors = {}
        return True

    def accept_agreement(self, accepted: bool) -> None:
        self._require_phase(WizardPhase.AGREEMENT)
        self.gate.accept(accepted)

    # -- submission --------------------------------------------------------

    async def submit(self) -> SubmissionResult:
        """Submit the draft once the agreement is accepted.

        Failure keeps the draft and returns to the agreement so the user can
        retry; success resets and closes the wizard.
        """
        self._require_phase(WizardPhase.AGREEMENT)

        if not self.gate.accepted:
            message = self.gate.refusal_message
            self._alert(message)
            return SubmissionResult(success=False, message=message)

        self._transition(WizardPhase.SUBMITTING)
        try:
            result = await self.orchestrator.submit(
                self.draft, self.documents, self.photos, accepted=self.gate.accepted
            )
        except PickAndGoError as e:
            result = SubmissionResult(success=False, message=e.message or FAILURE_MESSAGE)
        finally:
            if self._phase is WizardPhase.SUBMITTING:
                self._transition(WizardPhase.AGREEMENT)

        self._alert(result.message)
        if not result.success:
            return result

        if self.on_success is not None:
            self.on_success(result)
        self.event_bus.publish(
            "vehicle.added", {"owner_id": self.owner_id, "vehicle_id": result.vehicle_id}
        )
        self.close()
        return result

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Discard the draft and everything staged."""
        self._require_phase(WizardPhase.STEP, WizardPhase.AGREEMENT, WizardPhase.CLOSED)
        self._reset()
        self._phase = WizardPhase.CLOSED

    def open(self) -> None:
        if self._phase is WizardPhase.CLOSED:
            self._reset()
            self._transition(WizardPhase.STEP)

    def _reset(self) -> None:
        self.store.reset()
        self.documents.reset()
        self.photos.reset()
        self.gate.reset()
        self.errors = {}
        self._step = 1
