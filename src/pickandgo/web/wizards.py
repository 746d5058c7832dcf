from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from pickandgo.client.agreements import AgreementService
from pickandgo.client.vehicles import VehicleService
from pickandgo.core.session import SessionContext
from pickandgo.vehicles.staging import FileRef
from pickandgo.wizard.controller import VehicleWizard


class OpenWizardBody(BaseModel):
    owner_id: str | None = None


class FieldsBody(BaseModel):
    fields: dict[str, Any]


class AcceptBody(BaseModel):
    accepted: bool


class WizardRegistry:
    """In-process wizard instances keyed by id."""

    def __init__(self) -> None:
        self._items: dict[str, VehicleWizard] = {}

    def add(self, wizard: VehicleWizard) -> str:
        wizard_id = uuid.uuid4().hex
        self._items[wizard_id] = wizard
        return wizard_id

    def get(self, wizard_id: str) -> VehicleWizard:
        wizard = self._items.get(wizard_id)
        if wizard is None:
            raise HTTPException(status_code=404, detail="wizard not found")
        return wizard

    def remove(self, wizard_id: str) -> VehicleWizard:
        wizard = self.get(wizard_id)
        del self._items[wizard_id]
        return wizard


def _serialize(wizard_id: str, wizard: VehicleWizard) -> dict[str, Any]:
    agreement = wizard.gate.agreement
    return {
        "id": wizard_id,
        **wizard.state.to_dict(),
        "draft": wizard.draft.to_payload(),
        "errors": dict(wizard.errors),
        "documents": wizard.documents.to_dict(),
        "photos": wizard.photos.to_dict(),
        "agreement": agreement.to_dict() if agreement is not None else None,
        "agreement_accepted": wizard.gate.accepted,
        "alert": wizard.alerts[-1] if wizard.alerts else None,
    }


async def _file_ref(upload: UploadFile) -> FileRef:
    content = await upload.read()
    return FileRef(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        content=content,
    )


def mount_vehicle_wizards(app: FastAPI) -> None:
    def _registry(request: Request) -> WizardRegistry:
        return request.app.state.wizards

    @app.post("/api/vehicle-wizards")
    def open_wizard(request: Request, body: OpenWizardBody | None = None) -> dict[str, Any]:
        session: SessionContext = request.app.state.session
        owner_id = body.owner_id if body and body.owner_id else session.require_user_id()
        backend = request.app.state.backend
        currency = request.app.state.config_resolver.resolve_str("pricing.currency")

        wizard = VehicleWizard(
            owner_id=owner_id,
            vehicles=VehicleService(backend),
            agreements=AgreementService(backend),
            currency=currency,
        )
        wizard_id = _registry(request).add(wizard)
        return _serialize(wizard_id, wizard)

    @app.get("/api/vehicle-wizards/{wizard_id}")
    def get_wizard(request: Request, wizard_id: str) -> dict[str, Any]:
        return _serialize(wizard_id, _registry(request).get(wizard_id))

    @app.patch("/api/vehicle-wizards/{wizard_id}/fields")
    def set_fields(request: Request, wizard_id: str, body: FieldsBody) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.set_fields(body.fields)
        return _serialize(wizard_id, wizard)

    @app.post("/api/vehicle-wizards/{wizard_id}/next")
    async def next_step(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        advanced = await wizard.next()
        return {"advanced": advanced, **_serialize(wizard_id, wizard)}

    @app.post("/api/vehicle-wizards/{wizard_id}/back")
    def previous_step(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.back()
        return _serialize(wizard_id, wizard)

    @app.put("/api/vehicle-wizards/{wizard_id}/documents/{doc_type}")
    async def stage_document(
        request: Request, wizard_id: str, doc_type: str, file: UploadFile = File(...)
    ) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        _preview, errors = await wizard.stage_document(doc_type, await _file_ref(file))
        return {"staged": not errors, **_serialize(wizard_id, wizard)}

    @app.delete("/api/vehicle-wizards/{wizard_id}/documents/{doc_type}")
    def remove_document(request: Request, wizard_id: str, doc_type: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.remove_document(doc_type)
        return _serialize(wizard_id, wizard)

    @app.put("/api/vehicle-wizards/{wizard_id}/photos/{side}")
    async def stage_photo(
        request: Request, wizard_id: str, side: str, file: UploadFile = File(...)
    ) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        _preview, errors = await wizard.stage_photo(side, await _file_ref(file))
        return {"staged": not errors, **_serialize(wizard_id, wizard)}

    @app.delete("/api/vehicle-wizards/{wizard_id}/photos/{side}")
    def remove_photo(request: Request, wizard_id: str, side: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.remove_photo(side)
        return _serialize(wizard_id, wizard)

    @app.get("/api/vehicle-wizards/{wizard_id}/agreement")
    async def get_agreement(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        agreement = await wizard.gate.load()
        return {"agreement": agreement.to_dict(), "accepted": wizard.gate.accepted}

    @app.post("/api/vehicle-wizards/{wizard_id}/agreement/accept")
    def accept_agreement(request: Request, wizard_id: str, body: AcceptBody) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.accept_agreement(body.accepted)
        return _serialize(wizard_id, wizard)

    @app.post("/api/vehicle-wizards/{wizard_id}/submit")
    async def submit(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        result = await wizard.submit()
        return {"result": result.to_dict(), **_serialize(wizard_id, wizard)}

    @app.post("/api/vehicle-wizards/{wizard_id}/open")
    def reopen(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).get(wizard_id)
        wizard.open()
        return _serialize(wizard_id, wizard)

    @app.delete("/api/vehicle-wizards/{wizard_id}")
    def close_wizard(request: Request, wizard_id: str) -> dict[str, Any]:
        wizard = _registry(request).remove(wizard_id)
        wizard.close()
        return {"id": wizard_id, "closed": True}
