from __future__ import annotations

from typing import Dict, Optional

import httpx

from config.settings import Settings, get_settings
from quiz.errors import DeliveryWarning


class DisabledDeviceMessaging:
    """Used when device messaging is not configured; nothing is ever sent."""

    enabled = False
    device_id: Optional[str] = None

    async def send(self, device_id: str, payload: bytes) -> None:
        return None


class DeviceMessagingClient:
    """Publishes reply payloads to a device through the messaging endpoint."""

    enabled = True

    def __init__(
        self,
        base_url: str,
        device_id: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.device_id = device_id
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def send(self, device_id: str, payload: bytes) -> None:
        endpoint = f"{self.base_url}/devices/{device_id}/messages"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(endpoint, content=payload, headers=self._headers())
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeliveryWarning(
                f"Device message to {device_id} failed: {exc}",
                trace="DeviceMessagingClient.send",
            ) from exc


def build_device_messaging(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    if not settings.device_messaging_enabled:
        return DisabledDeviceMessaging()
    return DeviceMessagingClient(
        base_url=settings.device_messaging_url,
        device_id=settings.device_id,
        token=settings.device_messaging_token,
        timeout=settings.device_messaging_timeout,
    )
