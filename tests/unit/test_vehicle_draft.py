"""Unit tests for vehicles.draft (FormStore and payload building)."""

import pytest

from pickandgo.core.errors import FormFieldError
from pickandgo.vehicles.draft import FormStore, VehicleDraft, empty_draft, normalize_path


class TestFormStore:
    """Tests for FormStore."""

    def test_starts_empty(self):
        """New store holds the empty draft with default currency."""
        store = FormStore()
        draft = store.get()

        assert draft == empty_draft()
        assert draft.make == ""
        assert draft.location.city == ""
        assert draft.pricing.currency == "LKR"

    def test_set_top_level_field(self):
        store = FormStore()
        store.set_field("make", "Honda")

        assert store.get().make == "Honda"

    def test_set_nested_field_keeps_siblings(self):
        """Writing location.city leaves other location fields and sections alone."""
        store = FormStore()
        store.set_field("location.address", "12 Galle Road")
        insurance_before = store.get().insurance

        store.set_field("location.city", "Colombo")
        draft = store.get()

        assert draft.location.address == "12 Galle Road"
        assert draft.location.city == "Colombo"
        assert draft.insurance is insurance_before

    def test_previous_draft_is_not_mutated(self):
        store = FormStore()
        before = store.get()

        store.set_field("pricing.daily_rate", 5000)

        assert before.pricing.daily_rate is None
        assert store.get().pricing.daily_rate == 5000

    def test_camel_case_paths_are_accepted(self):
        store = FormStore()
        written = store.set_field("location.zipCode", "00300")

        assert written == "location.zip_code"
        assert store.get().location.zip_code == "00300"

    def test_license_plate_is_uppercased(self):
        store = FormStore()
        store.set_field("license_plate", "cab-1234")
        store.set_field("registration.registration_number", "wp-cab-1234")

        assert store.get().license_plate == "CAB-1234"
        assert store.get().registration.registration_number == "WP-CAB-1234"

    @pytest.mark.parametrize("path", ["wheels", "location.planet", "pricing", "a.b.c"])
    def test_unknown_path_raises(self, path):
        store = FormStore()
        with pytest.raises(FormFieldError):
            store.set_field(path, "x")

    def test_missing_section_is_recreated_on_write(self):
        store = FormStore()
        store._draft = VehicleDraft(insurance=None)

        store.set_field("insurance.provider", "Ceylinco")

        assert store.get().insurance.provider == "Ceylinco"
        assert store.get().insurance.policy_number == ""

    def test_reset_restores_initial_shape(self):
        store = FormStore(currency="USD")
        store.set_field("make", "Honda")
        store.set_field("pricing.daily_rate", 10)

        store.reset()

        assert store.get() == empty_draft("USD")


class TestPayload:
    """Tests for VehicleDraft.to_payload."""

    def test_pricing_is_sent_as_rental_price(self):
        store = FormStore()
        store.set_field("pricing.daily_rate", "8500")
        store.set_field("pricing.security_deposit", 20000)

        payload = store.get().to_payload()

        assert "pricing" not in payload
        assert payload["rentalPrice"] == {
            "dailyRate": 8500.0,
            "weeklyRate": None,
            "monthlyRate": None,
            "securityDeposit": 20000.0,
            "currency": "LKR",
        }

    def test_camel_case_keys_and_coercion(self):
        store = FormStore()
        store.set_field("year", "2019")
        store.set_field("seating_capacity", "5")
        store.set_field("engine_capacity", "1.5")
        store.set_field("mileage", "")
        store.set_field("location.zip_code", "00300")
        store.set_field("features", ["AC", "Bluetooth"])

        payload = store.get().to_payload()

        assert payload["year"] == 2019
        assert payload["seatingCapacity"] == 5
        assert payload["engineCapacity"] == 1.5
        assert payload["mileage"] is None
        assert payload["location"]["zipCode"] == "00300"
        assert payload["features"] == ["AC", "Bluetooth"]

    def test_missing_sections_serialize_as_empty(self):
        payload = VehicleDraft(location=None, insurance=None).to_payload()

        assert payload["location"]["city"] == ""
        assert payload["insurance"]["policyNumber"] == ""


def test_normalize_path():
    assert normalize_path("pricing.dailyRate") == "pricing.daily_rate"
    assert normalize_path("licensePlate") == "license_plate"
    assert normalize_path("location.city") == "location.city"


def test_payload_never_carries_non_finite_numbers():
    store = FormStore()
    store.set_field("pricing.daily_rate", "nan")
    store.set_field("pricing.weekly_rate", float("inf"))
    store.set_field("engine_capacity", "1e999")
    store.set_field("year", float("nan"))

    payload = store.get().to_payload()

    assert payload["rentalPrice"]["dailyRate"] is None
    assert payload["rentalPrice"]["weeklyRate"] is None
    assert payload["engineCapacity"] is None
    assert payload["year"] is None


class TestSetFields:
    """Tests for FormStore.set_fields."""

    def test_applies_all_fields(self):
        store = FormStore()

        written = store.set_fields({"make": "Toyota", "location.zipCode": "00300"})

        assert written == ["make", "location.zip_code"]
        assert store.get().make == "Toyota"
        assert store.get().location.zip_code == "00300"

    def test_unknown_path_leaves_draft_unchanged(self):
        store = FormStore()
        store.set_field("model", "Axio")
        before = store.get()

        with pytest.raises(FormFieldError):
            store.set_fields({"make": "Toyota", "bogus": 1, "color": "White"})

        assert store.get() is before
        assert store.get().make == ""
