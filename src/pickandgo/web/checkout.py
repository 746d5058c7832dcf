from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from pickandgo.bookings.checkout import BookingQuote, Checkout, CustomerInfo
from pickandgo.client.agreements import AGREEMENT_TYPES, AgreementService
from pickandgo.client.bookings import BookingService
from pickandgo.wizard.agreement_gate import AgreementGate


class QuoteBody(BaseModel):
    vehicle_daily_price: float
    rental_days: int = 1
    driver_daily_price: float | None = None


class CustomerBody(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""


class CheckoutBody(BaseModel):
    vehicle: dict[str, Any]
    driver: dict[str, Any] | None = None
    quote: QuoteBody
    customer: CustomerBody
    agreement_accepted: bool = False


def _quote(request: Request, body: QuoteBody) -> BookingQuote:
    fee = request.app.state.config_resolver.resolve_float("checkout.service_fee")
    try:
        return BookingQuote(
            vehicle_daily_price=body.vehicle_daily_price,
            rental_days=body.rental_days,
            driver_daily_price=body.driver_daily_price,
            service_fee=fee,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def mount_checkout(app: FastAPI) -> None:
    @app.get("/api/agreements/{agreement_type}")
    async def preview_agreement(request: Request, agreement_type: str) -> dict[str, Any]:
        if agreement_type not in AGREEMENT_TYPES:
            raise HTTPException(status_code=404, detail="unknown agreement type")
        gate = AgreementGate(AgreementService(request.app.state.backend), agreement_type)
        agreement = await gate.load()
        return {"agreement": agreement.to_dict()}

    @app.post("/api/checkout/quote")
    def quote(request: Request, body: QuoteBody) -> dict[str, Any]:
        return _quote(request, body).to_dict()

    @app.post("/api/checkout")
    async def checkout(request: Request, body: CheckoutBody) -> dict[str, Any]:
        backend = request.app.state.backend
        flow = Checkout(BookingService(backend), AgreementService(backend))
        flow.accept_agreement(body.agreement_accepted)
        invoice = await flow.place_booking(
            vehicle=body.vehicle,
            quote=_quote(request, body.quote),
            customer=CustomerInfo(**body.customer.model_dump()),
            driver=body.driver,
        )
        return {"invoice": invoice.to_dict()}
