"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

# Add src to path (for 'pickandgo.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from pickandgo.client.http import BackendClient  # noqa: E402
from pickandgo.core.log_bus import LogRecord, get_log_bus  # noqa: E402
from pickandgo.core.logging import VerbosityLevel, set_colors, set_verbosity  # noqa: E402
from pickandgo.vehicles.staging import FileRef  # noqa: E402

BASE_URL = "http://backend.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Scripted backend served through httpx.MockTransport.

    Routes are keyed by (method, path relative to the API root). Every request
    is recorded, including those that end in a transport error.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def on(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        status: int = 200,
        error: type[httpx.HTTPError] | None = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is not None:
            self._routes[(method.upper(), path)] = handler
            return

        def _handler(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error("scripted failure", request=request)
            return httpx.Response(status, json=json if json is not None else {})

        self._routes[(method.upper(), path)] = _handler

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        handler = self._routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"success": False, "message": f"no route {path}"})
        return handler(request)

    def client(self, timeout: float = 5.0) -> BackendClient:
        return BackendClient(BASE_URL, timeout, transport=httpx.MockTransport(self._handle))

    def calls(self) -> list[str]:
        return [f"{r.method} {r.url.path.removeprefix('/api')}" for r in self.requests]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(autouse=True)
def _quiet_console():
    """Keep console output plain and at the default verbosity."""
    set_colors(False)
    set_verbosity(VerbosityLevel.NORMAL)
    yield
    set_verbosity(VerbosityLevel.NORMAL)


@pytest.fixture
def log_records():
    """Collect every record published to the LogBus during the test."""
    records: list[LogRecord] = []
    bus = get_log_bus()
    bus.subscribe(records.append)
    yield records
    bus.unsubscribe(records.append)


@pytest.fixture
def jpeg_file() -> FileRef:
    return FileRef("front.jpg", "image/jpeg", b"\xff\xd8\xff\xe0fake-jpeg")


@pytest.fixture
def png_file() -> FileRef:
    return FileRef("back.png", "image/png", b"\x89PNGfake-png")


@pytest.fixture
def pdf_file() -> FileRef:
    return FileRef("policy.pdf", "application/pdf", b"%PDF-1.4 fake")


VALID_FIELDS: dict[str, Any] = {
    "vehicle_type": "car",
    "make": "Toyota",
    "model": "Axio",
    "year": 2019,
    "color": "White",
    "license_plate": "cab-1234",
    "seating_capacity": 5,
    "fuel_type": "petrol",
    "transmission": "automatic",
    "location.address": "12 Galle Road",
    "location.city": "Colombo",
    "pricing.daily_rate": 8500,
    "pricing.security_deposit": 20000,
    "insurance.provider": "Ceylinco",
    "insurance.policy_number": "POL-889",
    "insurance.expiry_date": "2027-01-31",
    "insurance.coverage": "comprehensive",
    "registration.registration_number": "wp-cab-1234",
    "registration.expiry_date": "2027-06-30",
}


@pytest.fixture
def make_wizard(fake_backend):
    """Build a VehicleWizard wired to the fake backend and a private EventBus."""
    from pickandgo.client.agreements import AgreementService
    from pickandgo.client.vehicles import VehicleService
    from pickandgo.core.events import EventBus
    from pickandgo.wizard.controller import VehicleWizard

    def _make(**kwargs: Any) -> VehicleWizard:
        client = fake_backend.client()
        kwargs.setdefault("event_bus", EventBus())
        return VehicleWizard(
            owner_id="owner-1",
            vehicles=VehicleService(client),
            agreements=AgreementService(client),
            **kwargs,
        )

    return _make


@pytest.fixture
def fill_valid(pdf_file, jpeg_file):
    """Fill every field and stage all three documents on a wizard."""

    async def _fill(wizard) -> None:
        for path, value in VALID_FIELDS.items():
            wizard.set_field(path, value)
        await wizard.stage_document("insurance", pdf_file)
        await wizard.stage_document("registration", jpeg_file)
        await wizard.stage_document("emissionTest", pdf_file)

    return _fill


@pytest.fixture
def reach_agreement(fill_valid):
    """Fill the wizard and click Next until the agreement is shown."""

    async def _reach(wizard) -> None:
        await fill_valid(wizard)
        for _ in range(6):
            assert await wizard.next(), wizard.errors

    return _reach


@pytest.fixture
def valid_fields() -> dict[str, Any]:
    return dict(VALID_FIELDS)
