"""Order notification client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any, Optional
from applehub_checkout.config import settings
from applehub_checkout.infrastructure.observability.metrics import (
    edge_function_failure_counter,
    edge_function_latency_histogram,
)

FUNCTION_NAME = "send-order-notification"


class NotificationClient:
    """Client for sending order events to the notification edge function"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = f"{base_url or settings.edge_functions_base_url}/functions/v1/{FUNCTION_NAME}"
        self.api_key = api_key if api_key is not None else settings.edge_functions_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.notification_max_retries
        self.backoff_base = settings.notification_backoff_base
        self.transport = transport

    async def send_order_event(self, payload: Dict[str, Any]) -> None:
        """
        Send an order event (created, status change) with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Args:
            payload: Event data for the notification e-mail
        """
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with edge_function_latency_histogram.labels(function=FUNCTION_NAME).time():
                        response = await client.post(
                            self.url,
                            json=payload,
                            headers=headers,
                            timeout=self.timeout,
                        )
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    edge_function_failure_counter.labels(function=FUNCTION_NAME).inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Order notification failed after {attempt} attempts: {e}",
                            extra={"order_id": payload.get("order_id")},
                        )
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
