"""Agreement gate: load the agreement once, track explicit acceptance."""

from __future__ import annotations

from pickandgo.client.agreements import (
    CLIENT_RENTAL,
    VEHICLE_OWNER,
    AgreementService,
    AgreementSnapshot,
    default_agreement_template,
)
from pickandgo.core.errors import AgreementNotAcceptedError, PickAndGoError
from pickandgo.core.logging import get_logger

_logger = get_logger(__name__)

_REFUSAL_MESSAGES = {
    VEHICLE_OWNER: "Please accept the business agreement to continue",
    CLIENT_RENTAL: "Please accept the rental agreement before proceeding.",
}


class AgreementGate:
    """Blocks submission until the user explicitly accepts the agreement.

    ``load`` never fails: a network error or an unsuccessful response
    envelope falls back to the built-in template for the agreement type.
    """

    def __init__(
        self, service: AgreementService | None, agreement_type: str = VEHICLE_OWNER
    ) -> None:
        self.service = service
        self.agreement_type = agreement_type
        self.loading = False
        self._agreement: AgreementSnapshot | None = None
        self._accepted = False

    @property
    def agreement(self) -> AgreementSnapshot | None:
        return self._agreement

    @property
    def accepted(self) -> bool:
        return self._accepted

    @property
    def refusal_message(self) -> str:
        return _REFUSAL_MESSAGES.get(self.agreement_type, _REFUSAL_MESSAGES[VEHICLE_OWNER])

    async def load(self) -> AgreementSnapshot:
        """Fetch the agreement on first call; later calls return the cached one."""
        if self._agreement is not None:
            return self._agreement

        self.loading = True
        try:
            self._agreement = await self._fetch()
        finally:
            self.loading = False
        return self._agreement

    async def _fetch(self) -> AgreementSnapshot:
        if self.service is None:
            return default_agreement_template(self.agreement_type)

        try:
            response = await self.service.preview_agreement(self.agreement_type)
        except PickAndGoError as e:
            _logger.warning(f"Error loading business agreement: {e.message}")
            return default_agreement_template(self.agreement_type)

        agreement = response.get("agreement")
        if not response.get("success") or not isinstance(agreement, dict):
            _logger.warning(f"Agreement response not successful: {response.get('message')!r}")
            return default_agreement_template(self.agreement_type)

        return AgreementSnapshot.from_dict(agreement, self.agreement_type)

    def accept(self, accepted: bool) -> None:
        self._accepted = bool(accepted)

    def require_accepted(self) -> None:
        if not self._accepted:
            raise AgreementNotAcceptedError(self.refusal_message)

    def reset(self) -> None:
        """Withdraw acceptance; the loaded agreement stays cached."""
        self._accepted = False
