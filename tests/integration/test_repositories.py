"""Integration tests for repository writes against the test database"""

from applehub_checkout.infrastructure.database.models import CouponRecord
from applehub_checkout.infrastructure.database.repositories import CouponRepository


def _add_coupon(db, code: str, used_count: int = 0, max_uses=None) -> None:
    db.add(
        CouponRecord(
            code=code,
            discount_type="fixed",
            discount_value=10,
            used_count=used_count,
            max_uses=max_uses,
        )
    )
    db.commit()


def test_increment_usage_stops_at_max_uses(db):
    _add_coupon(db, "LAST", used_count=4, max_uses=5)
    repo = CouponRepository(db)

    assert repo.increment_usage("LAST") is True
    assert repo.increment_usage("LAST") is False
    db.commit()

    assert repo.get_by_code("LAST").used_count == 5


def test_increment_usage_unlimited_coupon(db):
    _add_coupon(db, "ALWAYS")
    repo = CouponRepository(db)

    for _ in range(3):
        assert repo.increment_usage("ALWAYS") is True
    db.commit()

    assert repo.get_by_code("ALWAYS").used_count == 3


def test_increment_usage_unknown_code(db):
    assert CouponRepository(db).increment_usage("MISSING") is False
