import asyncio

import httpx
import pytest

from leadfunnel.core.exceptions import ConfigurationError, UpstreamDeliveryError
from leadfunnel.services.integrations.contact import (
    WebhookContactDispatcher, get_contact_dispatcher, set_contact_dispatcher,
)

URL = "https://automation.example.com/webhook/contact"


def _dispatch(handler, payload):
    async def _run():
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        dispatcher = WebhookContactDispatcher(URL, client=client)
        try:
            await dispatcher.dispatch(payload)
        finally:
            await dispatcher.aclose()

    asyncio.run(_run())


def test_posts_json_payload():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    _dispatch(handler, {"lead_id": "abc"})

    assert str(seen[0].url) == URL
    assert seen[0].method == "POST"
    assert b'"lead_id"' in seen[0].content


def test_error_status_raises():
    with pytest.raises(UpstreamDeliveryError) as exc:
        _dispatch(lambda request: httpx.Response(500, text="boom"), {})

    assert "500" in exc.value.message


def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamDeliveryError):
        _dispatch(handler, {})


def test_factory_requires_url(monkeypatch):
    set_contact_dispatcher(None)
    monkeypatch.setattr("leadfunnel.services.integrations.contact.settings.CONTACT_WEBHOOK_URL", None)

    with pytest.raises(ConfigurationError):
        get_contact_dispatcher()


def test_factory_builds_webhook_dispatcher(monkeypatch):
    set_contact_dispatcher(None)
    monkeypatch.setattr("leadfunnel.services.integrations.contact.settings.CONTACT_WEBHOOK_URL", URL)

    try:
        dispatcher = get_contact_dispatcher()
        assert isinstance(dispatcher, WebhookContactDispatcher)
        assert get_contact_dispatcher() is dispatcher
    finally:
        set_contact_dispatcher(None)
