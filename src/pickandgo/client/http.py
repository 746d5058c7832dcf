"""Thin async HTTP client for the Pick & Go REST backend.

All backend calls go through ``BackendClient`` so that every request gets
the same base URL, bounded timeout and error normalization:

- a response with an error status raises ``ApiError`` carrying the body's
  ``message`` (or a status-derived message) and the decoded payload
- a timeout raises ``NetworkTimeoutError``
- any other transport failure raises ``ApiError("Network error")``
"""

from __future__ import annotations

from typing import Any

import httpx

from pickandgo.core.config import ConfigResolver
from pickandgo.core.errors import ApiError, NetworkTimeoutError
from pickandgo.core.logging import get_logger

_logger = get_logger(__name__)


class BackendClient:
    """Async JSON/multipart client bound to one backend base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Backend API root, e.g. ``http://localhost:9000/api``
            timeout: Per-request timeout in seconds
            transport: Optional transport override (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_resolver(
        cls,
        resolver: ConfigResolver,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> BackendClient:
        settings = resolver.resolve_api_settings()
        return cls(settings.base_url, settings.timeout_seconds, transport=transport)

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self._request("POST", path, json=payload or {})

    async def put_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", path, json=payload)

    async def post_multipart(
        self,
        path: str,
        files: dict[str, tuple[str, bytes, str]],
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a multipart form.

        Args:
            path: Request path relative to the base URL
            files: field name -> (filename, content, content type)
            data: Plain form fields
        """
        return await self._request("POST", path, files=files, data=data or {})

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        operation = f"{method} {path}"
        _logger.debug(f"{operation}: start")

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            _logger.debug(f"{operation}: timeout after {self.timeout:g}s")
            raise NetworkTimeoutError(operation, self.timeout) from e
        except httpx.HTTPError as e:
            _logger.debug(f"{operation}: transport error {type(e).__name__}: {e}")
            raise ApiError("Network error") from e

        payload = _decode(response)
        _logger.debug(f"{operation}: status={response.status_code}")

        if response.is_error:
            message = payload.get("message") or (
                f"Request failed with status code {response.status_code}"
            )
            raise ApiError(str(message), status_code=response.status_code, payload=payload)

        return payload


def _decode(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {"message": response.text}
    if isinstance(body, dict):
        return body
    return {"data": body}
