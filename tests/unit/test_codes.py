"""Unit tests for order codes and Brasília date helpers"""

import random
import re
from datetime import date, datetime, timezone
from applehub_checkout.utils.codes import generate_order_number, generate_tracking_code
from applehub_checkout.utils.date_utils import (
    ensure_aware,
    format_brasilia,
    format_date_brasilia,
    format_time_brasilia,
    local_date,
    to_utc,
)

NOW = datetime(2026, 10, 17, 15, 0, tzinfo=timezone.utc)


def test_order_number_is_epoch_millis():
    assert generate_order_number(NOW) == "APH1792249200000"


def test_tracking_code_format():
    code = generate_tracking_code()

    assert re.fullmatch(r"[A-Z]{2}\d{9}BR", code)


def test_tracking_code_is_reproducible_with_seeded_rng():
    assert generate_tracking_code(random.Random(42)) == generate_tracking_code(random.Random(42))


def test_format_brasilia_converts_from_utc():
    assert format_brasilia(NOW) == "17/10/2026 12:00:00"
    assert format_date_brasilia(NOW) == "17/10/2026"
    assert format_time_brasilia(NOW) == "12:00:00"


def test_local_date_crosses_midnight():
    late_utc = datetime(2026, 10, 18, 1, 30, tzinfo=timezone.utc)

    assert local_date(late_utc) == date(2026, 10, 17)
    assert local_date(late_utc, "UTC") == date(2026, 10, 18)


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime(2026, 10, 17, 15, 0)

    assert ensure_aware(naive) == NOW
    assert to_utc(naive) == NOW
    assert to_utc(NOW).tzinfo == timezone.utc
