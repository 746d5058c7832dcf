"""Booking endpoints."""

from __future__ import annotations

from typing import Any

from pickandgo.client.http import BackendClient


class BookingService:
    def __init__(self, client: BackendClient) -> None:
        self.client = client

    async def create_booking(self, booking: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post_json("/bookings/create", booking)

    async def get_client_bookings(
        self, client_id: str, status: str | None = None
    ) -> dict[str, Any]:
        params = {"status": status} if status else None
        return await self.client.get(f"/bookings/client/{client_id}", params=params)
