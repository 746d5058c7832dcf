from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from pydantic import BaseModel

from pickandgo.client.auth import AuthService


class LoginBody(BaseModel):
    identifier: str
    password: str


def mount_auth(app: FastAPI) -> None:
    def _auth(request: Request) -> AuthService:
        return AuthService(request.app.state.backend, request.app.state.session)

    @app.post("/api/auth/login")
    async def login(request: Request, body: LoginBody) -> dict[str, Any]:
        response = await _auth(request).login(body.identifier, body.password)
        return {
            "success": bool(response.get("success")),
            "message": response.get("message"),
            "session": request.app.state.session.to_dict(),
        }

    @app.post("/api/auth/logout")
    def logout(request: Request) -> dict[str, Any]:
        _auth(request).logout()
        return {"success": True}

    @app.get("/api/auth/session")
    def current_session(request: Request) -> dict[str, Any]:
        return request.app.state.session.to_dict()
