"""Sequential vehicle submission with best-effort secondary uploads.

Order: create the vehicle, then front/back photos, then documents
(insurance, registration, emissionTest). Each call is awaited before the
next starts. Only the vehicle creation is fatal; a failed photo or document
upload is logged and skipped, never retried, and earlier uploads stay in
place. The submission succeeds whenever the vehicle record was created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pickandgo.client.vehicles import VehicleService
from pickandgo.core.errors import AgreementNotAcceptedError, ApiError
from pickandgo.core.logging import get_logger
from pickandgo.vehicles.draft import VehicleDraft
from pickandgo.vehicles.staging import DocumentStaging, PhotoStaging

_logger = get_logger(__name__)

SUCCESS_MESSAGE = (
    "Vehicle submitted successfully! It will be reviewed by our business team "
    "for pricing and approval."
)
FAILURE_MESSAGE = "Failed to add vehicle"


@dataclass
class SubmissionResult:
    success: bool
    message: str
    vehicle_id: str | None = None
    vehicle: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "vehicle_id": self.vehicle_id,
            "vehicle": dict(self.vehicle),
        }


class SubmissionOrchestrator:
    def __init__(self, vehicles: VehicleService, owner_id: str) -> None:
        self.vehicles = vehicles
        self.owner_id = owner_id
        self.uploading_photos = False

    async def submit(
        self,
        draft: VehicleDraft,
        documents: DocumentStaging,
        photos: PhotoStaging,
        *,
        accepted: bool,
    ) -> SubmissionResult:
        """Create the vehicle and upload its staged media.

        Raises:
            AgreementNotAcceptedError: If the agreement was not accepted
        """
        if not accepted:
            raise AgreementNotAcceptedError()

        payload = draft.to_payload()
        _logger.verbose(f"Submitting vehicle for owner {self.owner_id}")

        try:
            response = await self.vehicles.add_vehicle(self.owner_id, payload)
        except ApiError as e:
            _logger.error(f"Error adding vehicle: {e.message}")
            return SubmissionResult(success=False, message=e.message or FAILURE_MESSAGE)

        vehicle = response.get("vehicle") if isinstance(response.get("vehicle"), dict) else {}
        vehicle_id = vehicle.get("_id") or vehicle.get("id")
        if not response.get("success") or not vehicle_id:
            message = str(response.get("message") or FAILURE_MESSAGE)
            _logger.error(f"Vehicle creation rejected: {message}")
            return SubmissionResult(success=False, message=message)

        vehicle_id = str(vehicle_id)
        _logger.info(f"Vehicle {vehicle_id} created")

        await self._upload_photos(vehicle_id, photos)
        await self._upload_documents(vehicle_id, documents)

        return SubmissionResult(
            success=True, message=SUCCESS_MESSAGE, vehicle_id=vehicle_id, vehicle=vehicle
        )

    async def _upload_photos(self, vehicle_id: str, photos: PhotoStaging) -> None:
        staged = photos.staged()
        if not staged:
            return

        self.uploading_photos = True
        try:
            for side, image in staged:
                try:
                    await self.vehicles.upload_vehicle_image(vehicle_id, image, side)
                except ApiError as e:
                    _logger.error(f"Error uploading {side} photo: {e.message}")
                    continue
                _logger.verbose(f"{side} photo uploaded")
        finally:
            self.uploading_photos = False

    async def _upload_documents(self, vehicle_id: str, documents: DocumentStaging) -> None:
        for doc_type, document in documents.staged():
            try:
                await self.vehicles.upload_vehicle_document(vehicle_id, doc_type, document)
            except ApiError as e:
                _logger.error(f"Error uploading {doc_type} document: {e.message}")
                continue
            _logger.verbose(f"{doc_type} document uploaded successfully")
