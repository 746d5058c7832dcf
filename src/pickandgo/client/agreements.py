"""Business agreement endpoints and the built-in default templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pickandgo.client.http import BackendClient

VEHICLE_OWNER = "vehicle-owner"
CLIENT_RENTAL = "client-rental"
AGREEMENT_TYPES = (VEHICLE_OWNER, CLIENT_RENTAL)


@dataclass(frozen=True)
class AgreementSection:
    section_title: str
    content: str


@dataclass(frozen=True)
class AgreementSnapshot:
    """Read-only view of an agreement shown before acceptance."""

    title: str
    agreement_type: str = VEHICLE_OWNER
    version: int | str | None = None
    last_modified: str | None = None
    terms: tuple[AgreementSection, ...] = ()
    commission_rate: float | None = None
    payment_terms: str | None = None
    minimum_availability: int | None = None
    is_default: bool = False

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], agreement_type: str = VEHICLE_OWNER
    ) -> AgreementSnapshot:
        terms = tuple(
            AgreementSection(
                section_title=str(t.get("sectionTitle", "")),
                content=str(t.get("content", "")),
            )
            for t in data.get("terms") or []
            if isinstance(t, dict)
        )
        return cls(
            title=str(data.get("title", "")),
            agreement_type=str(data.get("agreementType") or agreement_type),
            version=data.get("version"),
            last_modified=data.get("lastModified"),
            terms=terms,
            commission_rate=data.get("commissionRate"),
            payment_terms=data.get("paymentTerms"),
            minimum_availability=data.get("minimumAvailability"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "agreementType": self.agreement_type,
            "version": self.version,
            "lastModified": self.last_modified,
            "terms": [
                {"sectionTitle": t.section_title, "content": t.content} for t in self.terms
            ],
            "commissionRate": self.commission_rate,
            "paymentTerms": self.payment_terms,
            "minimumAvailability": self.minimum_availability,
            "isDefault": self.is_default,
        }


@dataclass
class AgreementValidation:
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_agreement_data(agreement: AgreementSnapshot) -> AgreementValidation:
    """Check an agreement before it is saved or displayed."""
    errors: dict[str, str] = {}

    if not agreement.title:
        errors["title"] = "Agreement title is required"

    if not agreement.terms:
        errors["terms"] = "At least one term section is required"
    for index, term in enumerate(agreement.terms):
        if not term.section_title:
            errors[f"term_{index}_title"] = f"Section {index + 1} title is required"
        if not term.content:
            errors[f"term_{index}_content"] = f"Section {index + 1} content is required"

    rate = agreement.commission_rate
    if rate is not None and (rate < 0 or rate > 50):
        errors["commissionRate"] = "Commission rate must be between 0 and 50 percent"

    return AgreementValidation(errors=errors)


_VEHICLE_OWNER_TERMS = (
    (
        "Vehicle Listing Agreement",
        "By submitting your vehicle, you agree to list it on the Pick-and-Go platform for "
        "rental purposes under the terms specified in this agreement.",
    ),
    (
        "Pricing Structure",
        "Our business team will evaluate your vehicle and may adjust rental rates based on "
        "market analysis, vehicle condition, and demand to ensure competitive pricing.",
    ),
    (
        "Commission Structure",
        "Pick-and-Go retains a commission from each rental transaction. Vehicle owners "
        "receive the remaining percentage of the rental fee after commission deduction.",
    ),
    (
        "Vehicle Standards",
        "Your vehicle must meet our safety and quality standards. We reserve the right to "
        "reject vehicles that don't meet these requirements or suspend listings for "
        "non-compliance.",
    ),
    (
        "Insurance & Liability",
        "Comprehensive insurance coverage is mandatory. Pick-and-Go provides additional "
        "coverage during rental periods. Vehicle owners are responsible for maintaining "
        "valid insurance.",
    ),
    (
        "Maintenance Requirements",
        "Regular maintenance and cleanliness are required. Rental income may be suspended "
        "for vehicles that don't meet maintenance standards.",
    ),
    (
        "Availability Requirements",
        "Consistent availability is recommended for optimal earnings. Extended "
        "unavailability may affect vehicle ranking in search results.",
    ),
    (
        "Payment Terms",
        "Rental payments are processed and transferred to your registered bank account "
        "according to the payment schedule specified in this agreement.",
    ),
    (
        "Termination",
        "Either party may terminate this agreement with proper notice. All pending "
        "payments will be processed according to standard terms.",
    ),
)

_CLIENT_RENTAL_TERMS = (
    (
        "Rental Terms & Conditions",
        "By proceeding with this rental, you agree to all terms and conditions set forth in "
        "this agreement. You must be 21 years or older with a valid driver's license.",
    ),
    (
        "Vehicle Use Policy",
        "The rented vehicle must be used responsibly and in accordance with local traffic "
        "laws. Smoking, pets, and illegal activities are strictly prohibited in the vehicle.",
    ),
    (
        "Insurance & Damage Policy",
        "Basic insurance coverage is included. You are responsible for any damage exceeding "
        "the insurance coverage. A security deposit will be held during the rental period.",
    ),
    (
        "Fuel & Mileage Policy",
        "Vehicle must be returned with the same fuel level as provided. Additional charges "
        "apply for excessive mileage beyond the agreed limit.",
    ),
    (
        "Late Return Policy",
        "Late returns will incur additional charges. Please contact us immediately if you "
        "need to extend your rental period.",
    ),
    (
        "Cancellation Policy",
        "Cancellations made 24 hours before pickup are eligible for full refund. "
        "Cancellations within 24 hours may incur charges.",
    ),
    (
        "Emergency Contact",
        "In case of emergency, accident, or breakdown, contact our 24/7 support line "
        "immediately. Do not attempt unauthorized repairs.",
    ),
)


def default_agreement_template(agreement_type: str = VEHICLE_OWNER) -> AgreementSnapshot:
    """Static fallback used whenever the agreement service cannot be reached."""
    if agreement_type == CLIENT_RENTAL:
        return AgreementSnapshot(
            title="Pick-and-Go Vehicle Rental Agreement",
            agreement_type=CLIENT_RENTAL,
            version=1,
            terms=tuple(AgreementSection(t, c) for t, c in _CLIENT_RENTAL_TERMS),
            commission_rate=0,
            payment_terms="Payment processed at booking confirmation",
            minimum_availability=0,
            is_default=True,
        )
    if agreement_type != VEHICLE_OWNER:
        raise ValueError(f"Unknown agreement type: {agreement_type!r}")
    return AgreementSnapshot(
        title="Pick-and-Go Business Partnership Agreement",
        agreement_type=VEHICLE_OWNER,
        version=1,
        terms=tuple(AgreementSection(t, c) for t, c in _VEHICLE_OWNER_TERMS),
        commission_rate=15,
        payment_terms="Weekly payments processed within 3-5 business days",
        minimum_availability=15,
        is_default=True,
    )


class AgreementService:
    """Read access to the agreement collaborator service."""

    def __init__(self, client: BackendClient) -> None:
        self.client = client

    async def preview_agreement(self, agreement_type: str = VEHICLE_OWNER) -> dict[str, Any]:
        return await self.client.get(
            "/business-agreements/preview", params={"type": agreement_type}
        )

    async def get_active_agreement(self, agreement_type: str = VEHICLE_OWNER) -> dict[str, Any]:
        return await self.client.get(
            "/business-agreements/active", params={"type": agreement_type}
        )
