"""Client checkout: price quote, rental agreement gate and invoice."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pickandgo.client.agreements import CLIENT_RENTAL, AgreementService, AgreementSnapshot
from pickandgo.client.bookings import BookingService
from pickandgo.core.errors import ApiError
from pickandgo.core.logging import get_logger
from pickandgo.wizard.agreement_gate import AgreementGate

_logger = get_logger(__name__)

DEFAULT_SERVICE_FEE = 15.0


@dataclass(frozen=True)
class BookingQuote:
    """Price of a rental: (vehicle + optional driver) per day, plus a flat fee."""

    vehicle_daily_price: float
    rental_days: int = 1
    driver_daily_price: float | None = None
    service_fee: float = DEFAULT_SERVICE_FEE

    def __post_init__(self) -> None:
        if self.rental_days < 1:
            raise ValueError("rental_days must be at least 1")
        if self.vehicle_daily_price < 0:
            raise ValueError("vehicle_daily_price must not be negative")
        if self.driver_daily_price is not None and self.driver_daily_price < 0:
            raise ValueError("driver_daily_price must not be negative")

    @property
    def vehicle_total(self) -> float:
        return self.vehicle_daily_price * self.rental_days

    @property
    def driver_total(self) -> float:
        return (self.driver_daily_price or 0.0) * self.rental_days

    @property
    def subtotal(self) -> float:
        return self.vehicle_total + self.driver_total

    @property
    def total(self) -> float:
        return self.subtotal + self.service_fee

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicleTotal": self.vehicle_total,
            "driverTotal": self.driver_total,
            "subtotal": self.subtotal,
            "serviceFee": self.service_fee,
            "totalAmount": self.total,
            "rentalDays": self.rental_days,
        }


@dataclass(frozen=True)
class CustomerInfo:
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""

    def to_payload(self) -> dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "zipCode": self.zip_code,
        }


@dataclass
class Invoice:
    booking_id: str
    vehicle: dict[str, Any]
    driver: dict[str, Any] | None
    customer: CustomerInfo
    quote: BookingQuote
    booking_date: str
    status: str = "confirmed"
    backend_response: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.booking_id,
            "vehicle": self.vehicle,
            "driver": self.driver,
            "customerInfo": self.customer.to_payload(),
            "rentalDays": self.quote.rental_days,
            "totalAmount": self.quote.total,
            "breakdown": self.quote.to_dict(),
            "bookingDate": self.booking_date,
            "status": self.status,
        }


class Checkout:
    """One checkout attempt for a selected vehicle (and optional driver)."""

    def __init__(
        self,
        bookings: BookingService,
        agreements: AgreementService | None = None,
    ) -> None:
        self.bookings = bookings
        self.gate = AgreementGate(agreements, CLIENT_RENTAL)

    async def load_agreement(self) -> AgreementSnapshot:
        return await self.gate.load()

    def accept_agreement(self, accepted: bool) -> None:
        self.gate.accept(accepted)

    async def place_booking(
        self,
        vehicle: dict[str, Any],
        quote: BookingQuote,
        customer: CustomerInfo,
        driver: dict[str, Any] | None = None,
    ) -> Invoice:
        """Create the booking and return its invoice.

        Raises:
            AgreementNotAcceptedError: If the rental agreement was not accepted
            ApiError: If the booking could not be created or the backend refused it
        """
        self.gate.require_accepted()

        booking_date = datetime.now(UTC).isoformat()
        payload = {
            "vehicle": vehicle,
            "driver": driver,
            "withDriver": driver is not None,
            "customerInfo": customer.to_payload(),
            "rentalDays": quote.rental_days,
            "totalAmount": quote.total,
            "bookingDate": booking_date,
        }
        response = await self.bookings.create_booking(payload)
        if not response.get("success"):
            message = str(response.get("message") or "Failed to create booking")
            _logger.error(f"Booking rejected: {message}")
            raise ApiError(message, payload=response)

        booking = response.get("booking") if isinstance(response.get("booking"), dict) else {}
        booking_id = str(booking.get("_id") or booking.get("id") or uuid.uuid4().hex[:9])
        _logger.info(f"Booking {booking_id} created for {quote.rental_days} day(s)")

        return Invoice(
            booking_id=booking_id,
            vehicle=vehicle,
            driver=driver,
            customer=customer,
            quote=quote,
            booking_date=booking_date,
            status=str(booking.get("status") or "confirmed"),
            backend_response=response,
        )
