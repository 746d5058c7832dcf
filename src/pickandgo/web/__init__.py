"""FastAPI application over the vehicle wizard, auth and checkout flows."""

from pickandgo.web.app import create_app

__all__ = ["create_app"]
