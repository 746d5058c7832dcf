"""REST client for the Pick & Go backend."""

from pickandgo.client.agreements import (
    AgreementSection,
    AgreementService,
    AgreementSnapshot,
    default_agreement_template,
    validate_agreement_data,
)
from pickandgo.client.auth import AuthService
from pickandgo.client.bookings import BookingService
from pickandgo.client.http import BackendClient
from pickandgo.client.vehicles import VehicleService

__all__ = [
    "AgreementSection",
    "AgreementService",
    "AgreementSnapshot",
    "AuthService",
    "BackendClient",
    "BookingService",
    "VehicleService",
    "default_agreement_template",
    "validate_agreement_data",
]
