"""Vehicle draft record and the form store that edits it.

The draft holds raw form values exactly as entered; parsing to numbers
happens in validation and when the backend payload is built. Nested
sections always default to empty records.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any

from pickandgo.core.errors import FormFieldError

DEFAULT_CURRENCY = "LKR"

VEHICLE_TYPES = ("car", "van", "truck", "motorcycle", "bicycle", "bus", "other")
FUEL_TYPES = ("petrol", "diesel", "electric", "hybrid", "lpg")
TRANSMISSIONS = ("manual", "automatic", "semi-automatic")
SEATING_CAPACITIES = (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 12, 15, 20, 25, 30)
COVERAGE_TYPES = ("comprehensive", "third-party", "collision")

FormValue = Any


@dataclass(frozen=True)
class VehicleLocation:
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


@dataclass(frozen=True)
class InsuranceInfo:
    provider: str = ""
    policy_number: str = ""
    expiry_date: str = ""
    coverage: str = ""


@dataclass(frozen=True)
class RegistrationInfo:
    registration_number: str = ""
    expiry_date: str = ""


@dataclass(frozen=True)
class VehiclePricing:
    daily_rate: FormValue = None
    weekly_rate: FormValue = None
    monthly_rate: FormValue = None
    security_deposit: FormValue = None
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class VehicleDraft:
    """The in-progress vehicle record composed by the wizard."""

    # Basic info
    vehicle_type: str = ""
    make: str = ""
    model: str = ""
    year: FormValue = None
    color: str = ""
    license_plate: str = ""

    # Specifications
    seating_capacity: FormValue = None
    fuel_type: str = ""
    transmission: str = ""
    mileage: FormValue = None
    engine_capacity: FormValue = None
    features: tuple[str, ...] = ()
    description: str = ""

    # Sections
    location: VehicleLocation | None = field(default_factory=VehicleLocation)
    insurance: InsuranceInfo | None = field(default_factory=InsuranceInfo)
    registration: RegistrationInfo | None = field(default_factory=RegistrationInfo)
    pricing: VehiclePricing | None = field(default_factory=VehiclePricing)

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for the vehicle-creation endpoint.

        ``pricing`` is sent as ``rentalPrice``; keys are camelCase.
        """
        location = self.location or VehicleLocation()
        insurance = self.insurance or InsuranceInfo()
        registration = self.registration or RegistrationInfo()
        pricing = self.pricing or VehiclePricing()

        return {
            "vehicleType": self.vehicle_type,
            "make": self.make,
            "model": self.model,
            "year": _coerce(self.year, int),
            "color": self.color,
            "licensePlate": self.license_plate,
            "seatingCapacity": _coerce(self.seating_capacity, int),
            "fuelType": self.fuel_type,
            "transmission": self.transmission,
            "mileage": _coerce(self.mileage, int),
            "engineCapacity": _coerce(self.engine_capacity, float),
            "features": list(self.features),
            "description": self.description,
            "location": {
                "address": location.address,
                "city": location.city,
                "state": location.state,
                "zipCode": location.zip_code,
            },
            "insurance": {
                "provider": insurance.provider,
                "policyNumber": insurance.policy_number,
                "expiryDate": insurance.expiry_date,
                "coverage": insurance.coverage,
            },
            "registration": {
                "registrationNumber": registration.registration_number,
                "expiryDate": registration.expiry_date,
            },
            "rentalPrice": {
                "dailyRate": _coerce(pricing.daily_rate, float),
                "weeklyRate": _coerce(pricing.weekly_rate, float),
                "monthlyRate": _coerce(pricing.monthly_rate, float),
                "securityDeposit": _coerce(pricing.security_deposit, float),
                "currency": pricing.currency,
            },
        }


def _coerce(value: FormValue, kind: type) -> Any:
    """Parse a raw form value; blanks and nan/inf become None, garbage is passed through."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        parsed = kind(value)
    except (TypeError, ValueError):
        return value
    if isinstance(parsed, float) and not math.isfinite(parsed):
        return None
    return parsed


def empty_draft(currency: str = DEFAULT_CURRENCY) -> VehicleDraft:
    return VehicleDraft(pricing=VehiclePricing(currency=currency))


_SECTIONS: dict[str, type] = {
    "location": VehicleLocation,
    "insurance": InsuranceInfo,
    "registration": RegistrationInfo,
    "pricing": VehiclePricing,
}
_TOP_LEVEL = frozenset(f.name for f in fields(VehicleDraft)) - _SECTIONS.keys()
_UPPERCASE = frozenset({"license_plate", "registration.registration_number"})

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_path(path: str) -> str:
    """Map ``location.zipCode`` style paths to ``location.zip_code``."""
    return ".".join(_CAMEL_RE.sub("_", part).lower() for part in path.strip().split("."))


class FormStore:
    """Holds the current draft and applies single-field edits."""

    def __init__(self, currency: str = DEFAULT_CURRENCY) -> None:
        self._currency = currency
        self._draft = empty_draft(currency)

    def get(self) -> VehicleDraft:
        return self._draft

    def set_field(self, path: str, value: FormValue) -> str:
        """Set one field by dotted path.

        Only the addressed record is replaced; sibling fields and sections
        keep their identity.

        Returns:
            The normalized path that was written

        Raises:
            FormFieldError: If the path does not name a draft field
        """
        norm = normalize_path(path)
        if norm in _UPPERCASE and isinstance(value, str):
            value = value.upper()

        parts = norm.split(".")
        if len(parts) == 1:
            name = parts[0]
            if name not in _TOP_LEVEL:
                raise FormFieldError(path)
            if name == "features":
                value = tuple(value or ())
            self._draft = replace(self._draft, **{name: value})
            return norm

        if len(parts) == 2:
            section, name = parts
            section_cls = _SECTIONS.get(section)
            if section_cls is None or name not in {f.name for f in fields(section_cls)}:
                raise FormFieldError(path)
            current = getattr(self._draft, section) or section_cls()
            self._draft = replace(self._draft, **{section: replace(current, **{name: value})})
            return norm

        raise FormFieldError(path)

    def set_fields(self, values: dict[str, FormValue]) -> list[str]:
        """Set several fields at once; an unknown path leaves the draft unchanged.

        Raises:
            FormFieldError: If any path does not name a draft field
        """
        before = self._draft
        try:
            return [self.set_field(path, value) for path, value in values.items()]
        except Exception:
            self._draft = before
            raise

    def reset(self) -> None:
        self._draft = empty_draft(self._currency)
