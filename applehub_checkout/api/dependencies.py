"""Dependency injection for FastAPI endpoints"""

from datetime import datetime, timezone
from fastapi import Request
from applehub_checkout.domain.credit import CreditPolicy, FixedPercentagePolicy
from applehub_checkout.infrastructure.clients.edge_functions import EdgeFunctionClient
from applehub_checkout.infrastructure.clients.notifications import NotificationClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_now() -> datetime:
    """Current instant, injected so pricing stays deterministic under test"""
    return datetime.now(timezone.utc)


def get_credit_policy() -> CreditPolicy:
    """Provide the credit decisioning strategy"""
    return FixedPercentagePolicy()


def get_edge_function_client() -> EdgeFunctionClient:
    """Provide edge function client instance"""
    return EdgeFunctionClient()


def get_notification_client() -> NotificationClient:
    """Provide order notification client instance"""
    return NotificationClient()
