"""WhatsApp Cloud API channel."""

import hashlib
import hmac
from typing import Protocol

import httpx

from ..logging_config import get_logger

logger = get_logger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"


class IMessageChannel(Protocol):
    """Sends reply text back to a sender."""

    async def send_text(self, to: str, body: str) -> None:
        """Send a text message."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class WhatsAppChannel:
    """Sends text replies through the Graph API messages endpoint."""

    def __init__(
        self,
        token: str | None,
        phone_number_id: str | None,
        api_version: str = "v22.0",
        client: httpx.AsyncClient | None = None,
        base_url: str = GRAPH_API_URL,
    ):
        self._token = token
        self._phone_number_id = phone_number_id
        self._api_version = api_version
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=10.0)

    @property
    def messages_url(self) -> str:
        return f"{self._base_url}/{self._api_version}/{self._phone_number_id}/messages"

    async def send_text(self, to: str, body: str) -> None:
        """Send a text message."""
        if not self._token or not self._phone_number_id:
            logger.warning("WhatsApp credentials not configured; reply to %s dropped", to)
            return

        try:
            response = await self._client.post(
                self.messages_url,
                headers={"Authorization": f"Bearer {self._token}"},
                json={
                    "messaging_product": "whatsapp",
                    "to": to,
                    "type": "text",
                    "text": {"body": body},
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            # The message is already processed; a failed send must not trigger a retry
            logger.error("Failed to send WhatsApp reply to %s: %s", to, e, exc_info=True)

    async def close(self) -> None:
        await self._client.aclose()


def verify_signature(app_secret: str | None, body: bytes, header: str | None) -> bool:
    """Check X-Hub-Signature-256 (HMAC-SHA256 of the raw body)."""
    if not app_secret or not header:
        return False

    signature = header.removeprefix("sha256=")
    expected = hmac.new(app_secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(signature, expected)


def extract_message(payload: dict) -> dict | None:
    """Return the first message of a webhook payload, if any."""
    try:
        return payload["entry"][0]["changes"][0]["value"]["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None
