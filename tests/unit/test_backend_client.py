"""Unit tests for client.http.BackendClient error normalization."""

import asyncio
import json

import httpx
import pytest

from pickandgo.client.http import BackendClient
from pickandgo.client.vehicles import VehicleService
from pickandgo.core.config import ConfigResolver
from pickandgo.core.errors import ApiError, NetworkTimeoutError, PickAndGoError


def _run(coro):
    return asyncio.run(coro)


def test_success_returns_body(fake_backend):
    fake_backend.on("GET", "/vehicles/owner/o1", json={"success": True, "vehicles": []})
    client = fake_backend.client()

    body = _run(client.get("/vehicles/owner/o1"))

    assert body == {"success": True, "vehicles": []}


def test_error_status_uses_body_message(fake_backend):
    fake_backend.on(
        "POST",
        "/vehicles/owner/o1/add",
        status=400,
        json={"success": False, "message": "License plate already registered"},
    )
    client = fake_backend.client()

    with pytest.raises(ApiError) as exc_info:
        _run(client.post_json("/vehicles/owner/o1/add", {"make": "x"}))

    err = exc_info.value
    assert err.message == "License plate already registered"
    assert err.status_code == 400
    assert err.payload["success"] is False


def test_error_status_without_message(fake_backend):
    fake_backend.on("GET", "/x", status=503, json={})

    with pytest.raises(ApiError, match="status code 503"):
        _run(fake_backend.client().get("/x"))


def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = BackendClient("http://backend.test/api", transport=httpx.MockTransport(handler))

    with pytest.raises(ApiError) as exc_info:
        _run(client.get("/x"))

    assert exc_info.value.message == "Bad Gateway"


def test_transport_error_is_network_error(fake_backend):
    fake_backend.on("GET", "/x", error=httpx.ConnectError)

    with pytest.raises(ApiError) as exc_info:
        _run(fake_backend.client().get("/x"))

    assert exc_info.value.message == "Network error"
    assert exc_info.value.status_code is None
    assert not isinstance(exc_info.value, NetworkTimeoutError)


def test_timeout_is_network_timeout(fake_backend):
    fake_backend.on("POST", "/x", error=httpx.ReadTimeout)

    with pytest.raises(NetworkTimeoutError) as exc_info:
        _run(fake_backend.client(timeout=2.5).post_json("/x"))

    err = exc_info.value
    assert isinstance(err, ApiError)
    assert isinstance(err, PickAndGoError)
    assert err.timeout == 2.5
    assert "POST /x" in err.message


def test_list_body_is_wrapped(fake_backend):
    fake_backend.on("GET", "/list", json=[1, 2])

    assert _run(fake_backend.client().get("/list")) == {"data": [1, 2]}


def test_from_resolver_uses_api_settings(tmp_path):
    resolver = ConfigResolver(
        cli_args={"api": {"base_url": "http://example.test/api/", "timeout_seconds": 7}},
        user_config_path=tmp_path / "missing.yaml",
        system_config_path=tmp_path / "missing.yaml",
    )

    client = BackendClient.from_resolver(resolver)

    assert client.base_url == "http://example.test/api"
    assert client.timeout == 7.0
    _run(client.aclose())


class TestVehicleService:
    """Request shapes produced by VehicleService."""

    def test_add_vehicle_posts_payload(self, fake_backend):
        fake_backend.on(
            "POST", "/vehicles/owner/o1/add", json={"success": True, "vehicle": {"_id": "v1"}}
        )
        service = VehicleService(fake_backend.client())

        body = _run(service.add_vehicle("o1", {"make": "Toyota"}))

        assert body["vehicle"]["_id"] == "v1"
        assert json.loads(fake_backend.requests[0].read()) == {"make": "Toyota"}

    def test_upload_image_is_multipart(self, fake_backend, jpeg_file):
        fake_backend.on("POST", "/vehicles/v1/upload-image", json={"success": True})
        service = VehicleService(fake_backend.client())

        _run(service.upload_vehicle_image("v1", jpeg_file, "front"))

        request = fake_backend.requests[0]
        body = request.read()
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'name="vehicleImage"; filename="front.jpg"' in body
        assert b'name="imageType"' in body
        assert b"front" in body

    def test_upload_document_is_multipart(self, fake_backend, pdf_file):
        fake_backend.on("POST", "/vehicles/v1/upload-document", json={"success": True})
        service = VehicleService(fake_backend.client())

        _run(service.upload_vehicle_document("v1", "emissionTest", pdf_file))

        body = fake_backend.requests[0].read()
        assert b'name="document"; filename="policy.pdf"' in body
        assert b'name="documentType"' in body
        assert b"emissionTest" in body

    def test_vehicles_by_owner_with_status(self, fake_backend):
        fake_backend.on("GET", "/vehicles/owner/o1", json={"success": True, "vehicles": []})
        service = VehicleService(fake_backend.client())

        _run(service.get_vehicles_by_owner("o1", status="pending"))

        assert fake_backend.requests[0].url.params["status"] == "pending"
