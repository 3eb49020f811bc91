"""
Contact automation client.
Posts leads to the configured webhook that starts the WhatsApp conversation.
"""
import logging
from typing import Dict, Any, Optional

import httpx

from leadfunnel.config import settings
from leadfunnel.core.exceptions import ConfigurationError, UpstreamDeliveryError
from leadfunnel.services.integrations.base import ContactDispatcher

logger = logging.getLogger(__name__)


class WebhookContactDispatcher(ContactDispatcher):
    """Sends one JSON POST per lead to the automation webhook."""

    def __init__(self, url: str, timeout: float = 15.0, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def dispatch(self, payload: Dict[str, Any]) -> None:
        try:
            response = await self.client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as e:
            raise UpstreamDeliveryError("Contact automation", str(e)) from e

        if response.is_error:
            raise UpstreamDeliveryError(
                "Contact automation",
                f"{response.status_code} - {response.text[:200]}"
            )

    async def aclose(self) -> None:
        await self.client.aclose()


# Dispatcher factory
_current_dispatcher: Optional[ContactDispatcher] = None


def get_contact_dispatcher() -> ContactDispatcher:
    """Get the current dispatcher, building the webhook client from settings on first use."""
    global _current_dispatcher
    if _current_dispatcher is None:
        if not settings.CONTACT_WEBHOOK_URL:
            raise ConfigurationError("Contact webhook is not configured (CONTACT_WEBHOOK_URL)")
        _current_dispatcher = WebhookContactDispatcher(
            settings.CONTACT_WEBHOOK_URL,
            timeout=settings.CONTACT_WEBHOOK_TIMEOUT_SECONDS
        )
        logger.info("Contact dispatcher initialized for configured webhook")
    return _current_dispatcher


def set_contact_dispatcher(dispatcher: Optional[ContactDispatcher]) -> None:
    """Set the dispatcher (for testing or switching automations)."""
    global _current_dispatcher
    _current_dispatcher = dispatcher
