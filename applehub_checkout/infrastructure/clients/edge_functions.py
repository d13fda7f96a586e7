"""HTTP client for the backend's serverless edge functions"""

import httpx
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from applehub_checkout.domain.exceptions import EdgeFunctionError
from applehub_checkout.config import settings
from applehub_checkout.infrastructure.observability.metrics import (
    edge_function_failure_counter,
    edge_function_latency_histogram,
)


@dataclass
class PixCharge:
    """PIX payload returned by the generate-pix function"""

    qr_code: str
    qr_code_url: str
    amount: float
    expires_at: datetime


class EdgeFunctionClient:
    """Client that invokes edge functions by name"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.edge_functions_base_url
        self.api_key = api_key if api_key is not None else settings.edge_functions_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def invoke(self, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON body to functions/v1/{name} and return the decoded response.

        Raises:
            EdgeFunctionError: On timeout, HTTP errors, or a non-JSON response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with edge_function_latency_histogram.labels(function=name).time():
                    response = await client.post(
                        f"{self.base_url}/functions/v1/{name}",
                        json=body,
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                    return response.json()

            except httpx.TimeoutException as e:
                edge_function_failure_counter.labels(function=name).inc()
                raise EdgeFunctionError(f"Edge function {name} timed out after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                edge_function_failure_counter.labels(function=name).inc()
                raise EdgeFunctionError(f"Edge function {name} error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                edge_function_failure_counter.labels(function=name).inc()
                raise EdgeFunctionError(f"Edge function {name} unreachable: {e}") from e
            except ValueError as e:
                edge_function_failure_counter.labels(function=name).inc()
                raise EdgeFunctionError(f"Invalid response from edge function {name}: {e}") from e

    async def generate_pix(
        self,
        amount: float,
        description: str,
        user_id: str,
        order_id: str | None = None,
    ) -> PixCharge:
        """
        Request a PIX charge for the given amount.

        Raises:
            EdgeFunctionError: On transport errors or a payload without the PIX fields
        """
        data = await self.invoke(
            "generate-pix",
            {
                "amount": round(amount, 2),
                "description": description,
                "user_id": user_id,
                "order_id": order_id,
                "expires_in": settings.pix_expiry_seconds,
            },
        )

        try:
            return PixCharge(
                qr_code=data["qr_code"],
                qr_code_url=data["qr_code_url"],
                amount=float(data["amount"]),
                expires_at=datetime.fromisoformat(data["expires_at"].replace("Z", "+00:00")),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise EdgeFunctionError(f"Invalid PIX data from generate-pix: {e}") from e
