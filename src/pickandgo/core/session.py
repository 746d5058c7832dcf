"""Explicit session context for the signed-in user.

Two lifetimes are kept apart:
- persistent: the user profile and identity (survives across app restarts
  when a caller chooses to save it via ``to_dict``/``from_dict``)
- ephemeral: per-login data (session id, login time, dashboard route)

The context is created once and passed to services that need it; nothing
reads ambient global state.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pickandgo.core.errors import AuthError


@dataclass
class PersistentSession:
    user: dict[str, Any] = field(default_factory=dict)
    user_id: str | None = None
    role: str | None = None
    is_authenticated: bool = False


@dataclass
class EphemeralSession:
    session_id: str | None = None
    login_time: str | None = None
    dashboard_route: str | None = None


@dataclass
class SessionContext:
    persistent: PersistentSession = field(default_factory=PersistentSession)
    ephemeral: EphemeralSession = field(default_factory=EphemeralSession)

    def begin(self, user: dict[str, Any], dashboard_route: str | None = None) -> None:
        """Initialize both tiers from a login response's ``user`` object."""
        user_id = user.get("id") or user.get("_id") or user.get("userId")
        if not user_id:
            raise AuthError("Login response did not include a user id")

        login_time = datetime.now(UTC).isoformat()
        self.persistent = PersistentSession(
            user={
                **user,
                "userId": str(user_id),
                "loginTime": login_time,
                "dashboardRoute": dashboard_route,
            },
            user_id=str(user_id),
            role=user.get("role"),
            is_authenticated=True,
        )
        self.ephemeral = EphemeralSession(
            session_id=uuid.uuid4().hex,
            login_time=login_time,
            dashboard_route=dashboard_route,
        )

    def end(self) -> None:
        """Tear down both tiers."""
        self.persistent = PersistentSession()
        self.ephemeral = EphemeralSession()

    @property
    def is_authenticated(self) -> bool:
        return self.persistent.is_authenticated

    def require_user_id(self) -> str:
        if not self.persistent.is_authenticated or not self.persistent.user_id:
            raise AuthError("Not signed in", "Log in before adding a vehicle")
        return self.persistent.user_id

    def update_user(self, profile: dict[str, Any]) -> None:
        """Replace the stored profile after a successful profile update."""
        self.persistent.user = dict(profile)
        if profile.get("_id"):
            self.persistent.user_id = str(profile["_id"])

    def to_dict(self) -> dict[str, Any]:
        """Persistent tier only; ephemeral data never leaves the process."""
        return {
            "user": dict(self.persistent.user),
            "userId": self.persistent.user_id,
            "userRole": self.persistent.role,
            "isAuthenticated": self.persistent.is_authenticated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionContext:
        return cls(
            persistent=PersistentSession(
                user=dict(data.get("user") or {}),
                user_id=data.get("userId"),
                role=data.get("userRole"),
                is_authenticated=bool(data.get("isAuthenticated", False)),
            )
        )
