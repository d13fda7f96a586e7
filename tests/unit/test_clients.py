"""Unit tests for the edge function and notification clients"""

import asyncio
import httpx
import json
import pytest
from datetime import datetime, timezone
from applehub_checkout.domain.exceptions import EdgeFunctionError
from applehub_checkout.infrastructure.clients.edge_functions import EdgeFunctionClient
from applehub_checkout.infrastructure.clients.notifications import NotificationClient

BASE_URL = "http://edge.test"


def _edge_client(handler) -> EdgeFunctionClient:
    return EdgeFunctionClient(base_url=BASE_URL, api_key="secret", transport=httpx.MockTransport(handler))


def test_generate_pix_posts_to_function_and_parses_charge():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "qr_code": "000201",
                "qr_code_url": "https://pix.test/qr.png",
                "amount": 20.0,
                "expires_at": "2026-10-17T16:00:00Z",
            },
        )

    charge = asyncio.run(_edge_client(handler).generate_pix(19.999, "Entrada", "user-1", "order-1"))

    assert seen["url"] == f"{BASE_URL}/functions/v1/generate-pix"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {
        "amount": 20.0,
        "description": "Entrada",
        "user_id": "user-1",
        "order_id": "order-1",
        "expires_in": 3600,
    }
    assert charge.qr_code == "000201"
    assert charge.amount == 20.0
    assert charge.expires_at == datetime(2026, 10, 17, 16, 0, tzinfo=timezone.utc)


def test_edge_function_http_error_raises_domain_error():
    client = _edge_client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(EdgeFunctionError, match="500"):
        asyncio.run(client.invoke("generate-pix", {}))


def test_edge_function_network_error_raises_domain_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EdgeFunctionError, match="unreachable"):
        asyncio.run(_edge_client(handler).invoke("generate-pix", {}))


def test_generate_pix_rejects_incomplete_payload():
    client = _edge_client(lambda request: httpx.Response(200, json={"qr_code": "000201"}))

    with pytest.raises(EdgeFunctionError, match="Invalid PIX data"):
        asyncio.run(client.generate_pix(10, "Entrada", "user-1"))


def test_edge_function_non_json_response():
    client = _edge_client(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(EdgeFunctionError, match="Invalid response"):
        asyncio.run(client.invoke("generate-pix", {}))


def _notification_client(handler, max_retries: int = 3) -> NotificationClient:
    client = NotificationClient(base_url=BASE_URL, api_key="", transport=httpx.MockTransport(handler))
    client.max_retries = max_retries
    client.backoff_base = 0
    return client


def test_notification_retries_until_success():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json={"ok": True})

    asyncio.run(_notification_client(handler).send_order_event({"order_id": "o-1", "event": "created"}))

    assert len(attempts) == 3
    assert str(attempts[0].url) == f"{BASE_URL}/functions/v1/send-order-notification"
    assert "Authorization" not in attempts[0].headers


def test_notification_gives_up_after_max_retries():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(500)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_notification_client(handler, max_retries=2).send_order_event({"order_id": "o-1"}))

    assert len(attempts) == 2


def test_notification_uses_configured_timeout():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200)

    client = NotificationClient(base_url=BASE_URL, api_key="", timeout=2.5, transport=httpx.MockTransport(handler))
    asyncio.run(client.send_order_event({"order_id": "o-1"}))

    assert seen["timeout"]["read"] == 2.5
    assert seen["timeout"]["connect"] == 2.5
