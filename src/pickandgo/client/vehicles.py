"""Vehicle endpoints of the backend."""

from __future__ import annotations

from typing import Any

from pickandgo.client.http import BackendClient
from pickandgo.vehicles.staging import DOCUMENT_TYPES, PHOTO_SIDES, FileRef


class VehicleService:
    """Vehicle creation, media upload and owner listing."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    async def add_vehicle(self, owner_id: str, vehicle: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post_json(f"/vehicles/owner/{owner_id}/add", vehicle)

    async def upload_vehicle_image(
        self, vehicle_id: str, image: FileRef, image_type: str
    ) -> dict[str, Any]:
        if image_type not in PHOTO_SIDES:
            raise ValueError(f"image_type must be one of {PHOTO_SIDES}, got {image_type!r}")
        return await self.client.post_multipart(
            f"/vehicles/{vehicle_id}/upload-image",
            files={"vehicleImage": image.as_upload()},
            data={"imageType": image_type},
        )

    async def upload_vehicle_document(
        self, vehicle_id: str, document_type: str, document: FileRef
    ) -> dict[str, Any]:
        if document_type not in DOCUMENT_TYPES:
            raise ValueError(
                f"document_type must be one of {DOCUMENT_TYPES}, got {document_type!r}"
            )
        return await self.client.post_multipart(
            f"/vehicles/{vehicle_id}/upload-document",
            files={"document": document.as_upload()},
            data={"documentType": document_type},
        )

    async def get_vehicles_by_owner(
        self, owner_id: str, status: str | None = None
    ) -> dict[str, Any]:
        params = {"status": status} if status else None
        return await self.client.get(f"/vehicles/owner/{owner_id}", params=params)
