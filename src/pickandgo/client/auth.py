"""Login/logout against the backend, backed by an explicit SessionContext."""

from __future__ import annotations

from typing import Any

from pickandgo.client.http import BackendClient
from pickandgo.core.logging import get_logger
from pickandgo.core.session import SessionContext

_logger = get_logger(__name__)


class AuthService:
    def __init__(self, client: BackendClient, session: SessionContext) -> None:
        self.client = client
        self.session = session

    async def login(self, identifier: str, password: str) -> dict[str, Any]:
        """Log in; the backend detects the role from the identifier.

        On success both session tiers are initialized. The raw response is
        returned either way so callers can show ``message``.
        """
        response = await self.client.post_json(
            "/auth/login", {"identifier": identifier, "password": password}
        )
        if response.get("success"):
            self.session.begin(response.get("user") or {}, response.get("dashboardRoute"))
            _logger.info(
                f"Signed in as {self.session.persistent.user_id} ({self.session.persistent.role})"
            )
        return response

    def logout(self) -> None:
        self.session.end()

    def current_user_id(self) -> str | None:
        return self.session.persistent.user_id
