"""Per-step validation of the vehicle draft.

``validate_step`` is pure: it reads the draft (and document staging for
step 5) and returns a field path -> message map. An empty map means the
step may be left.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any

from pickandgo.vehicles.draft import (
    InsuranceInfo,
    RegistrationInfo,
    VehicleDraft,
    VehicleLocation,
    VehiclePricing,
)
from pickandgo.vehicles.staging import DOCUMENT_TYPES, DocumentStaging

TOTAL_STEPS = 6
MIN_YEAR = 1900

STEP_TITLES = {
    1: "Basic Information",
    2: "Specifications",
    3: "Location",
    4: "Pricing",
    5: "Insurance & Registration",
    6: "Photos",
}

_DOCUMENT_MESSAGES = {
    "insurance": "Insurance document is required",
    "registration": "Vehicle owner book/registration document is required",
    "emissionTest": "Emission test certificate is required",
}


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _parse_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _require(errors: dict[str, str], key: str, value: Any, message: str) -> None:
    if _blank(value):
        errors[key] = message


def _require_positive(errors: dict[str, str], key: str, value: Any, label: str) -> None:
    if _blank(value):
        errors[key] = f"{label} is required"
        return
    number = _parse_float(value)
    if number is None or number <= 0:
        errors[key] = f"{label} must be greater than 0"


def validate_step(
    step: int,
    draft: VehicleDraft,
    documents: DocumentStaging | None = None,
    *,
    current_year: int | None = None,
) -> dict[str, str]:
    """Validate one wizard step.

    Args:
        step: Step number, 1-6 (step 6, photos, has no required fields)
        draft: Draft to inspect (never modified)
        documents: Document staging, consulted by step 5
        current_year: Override for the year upper bound (defaults to today)

    Returns:
        Mapping of field path to human-readable message

    Raises:
        ValueError: If step is outside 1-6
    """
    if step < 1 or step > TOTAL_STEPS:
        raise ValueError(f"step must be within [1, {TOTAL_STEPS}], got {step}")

    errors: dict[str, str] = {}

    if step == 1:
        _require(errors, "vehicle_type", draft.vehicle_type, "Vehicle type is required")
        _require(errors, "make", draft.make, "Make is required")
        _require(errors, "model", draft.model, "Model is required")
        if _blank(draft.year):
            errors["year"] = "Year is required"
        else:
            max_year = (current_year or date.today().year) + 1
            year = _parse_int(draft.year)
            if year is None or year < MIN_YEAR or year > max_year:
                errors["year"] = f"Year must be between {MIN_YEAR} and {max_year}"
        _require(errors, "color", draft.color, "Color is required")
        _require(errors, "license_plate", draft.license_plate, "License plate is required")

    elif step == 2:
        _require(
            errors, "seating_capacity", draft.seating_capacity, "Seating capacity is required"
        )
        _require(errors, "fuel_type", draft.fuel_type, "Fuel type is required")
        _require(errors, "transmission", draft.transmission, "Transmission is required")

    elif step == 3:
        location = draft.location or VehicleLocation()
        _require(errors, "location.address", location.address, "Address is required")
        _require(errors, "location.city", location.city, "City is required")

    elif step == 4:
        pricing = draft.pricing or VehiclePricing()
        _require_positive(errors, "pricing.daily_rate", pricing.daily_rate, "Daily rate")
        _require_positive(
            errors, "pricing.security_deposit", pricing.security_deposit, "Security deposit"
        )

    elif step == 5:
        insurance = draft.insurance or InsuranceInfo()
        registration = draft.registration or RegistrationInfo()

        _require(
            errors, "insurance.provider", insurance.provider, "Insurance provider is required"
        )
        _require(
            errors, "insurance.policy_number", insurance.policy_number, "Policy number is required"
        )
        _require(
            errors,
            "insurance.expiry_date",
            insurance.expiry_date,
            "Insurance expiry date is required",
        )
        _require(errors, "insurance.coverage", insurance.coverage, "Coverage type is required")

        _require(
            errors,
            "registration.registration_number",
            registration.registration_number,
            "Registration number is required",
        )
        _require(
            errors,
            "registration.expiry_date",
            registration.expiry_date,
            "Registration expiry date is required",
        )

        for doc_type in DOCUMENT_TYPES:
            if documents is None or not documents.has_file(doc_type):
                errors[f"documents.{doc_type}"] = _DOCUMENT_MESSAGES[doc_type]

    return errors
