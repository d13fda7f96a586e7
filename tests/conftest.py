"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from applehub_checkout.api.main import create_app
from applehub_checkout.api.dependencies import get_edge_function_client, get_notification_client, get_now
from applehub_checkout.infrastructure.clients.edge_functions import PixCharge
from applehub_checkout.infrastructure.database.models import Base
from applehub_checkout.infrastructure.database.session import get_db
from applehub_checkout.domain.models import Coupon, DiscountType


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FROZEN_NOW = datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc)


class FakeClock:
    """Starts at FROZEN_NOW and moves forward 1ms per call (unique order numbers)"""

    def __init__(self, start: datetime = FROZEN_NOW):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(milliseconds=1)
        return now


class FakeEdgeFunctionClient:
    """Records generate-pix calls and returns a fixed charge"""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.error: Exception | None = None

    async def generate_pix(self, amount: float, description: str, user_id: str, order_id: str | None = None) -> PixCharge:
        self.calls.append(
            {"amount": amount, "description": description, "user_id": user_id, "order_id": order_id}
        )
        if self.error is not None:
            raise self.error
        return PixCharge(
            qr_code="00020126580014br.gov.bcb.pix",
            qr_code_url="https://pix.test/qr.png",
            amount=round(amount, 2),
            expires_at=FROZEN_NOW + timedelta(hours=1),
        )


class FakeNotificationClient:
    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    async def send_order_event(self, payload: Dict[str, Any]) -> None:
        self.events.append(payload)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def edge_client() -> FakeEdgeFunctionClient:
    return FakeEdgeFunctionClient()


@pytest.fixture
def notification_client() -> FakeNotificationClient:
    return FakeNotificationClient()


@pytest.fixture
def client(
    db: Session,
    edge_client: FakeEdgeFunctionClient,
    notification_client: FakeNotificationClient,
) -> TestClient:
    """Create FastAPI test client with test database, frozen clock and fake edge functions"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = FakeClock()
    app.dependency_overrides[get_edge_function_client] = lambda: edge_client
    app.dependency_overrides[get_notification_client] = lambda: notification_client
    return TestClient(app)


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW


@pytest.fixture
def percentage_coupon() -> Coupon:
    """10% off, valid around FROZEN_NOW, 5 uses, minimum purchase R$ 100"""
    return Coupon(
        code="PROMO10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=10,
        active=True,
        used_count=0,
        valid_from=FROZEN_NOW - timedelta(days=7),
        valid_until=FROZEN_NOW + timedelta(days=7),
        max_uses=5,
        min_purchase_value=100,
    )


@pytest.fixture
def customer() -> Dict[str, str]:
    return {"name": "Maria Silva", "cpf": "11144477735", "phone": "11987654321"}
