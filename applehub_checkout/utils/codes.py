"""Order numbers and Correios tracking codes"""

import random
import string
from datetime import datetime
from typing import Optional


def generate_order_number(now: datetime) -> str:
    """APH followed by the epoch timestamp in milliseconds"""
    return f"APH{int(now.timestamp() * 1000)}"


def generate_tracking_code(rng: Optional[random.Random] = None) -> str:
    """Correios format: two letters, nine digits, BR (e.g. AB123456789BR)"""
    rng = rng or random.Random()
    prefix = "".join(rng.choice(string.ascii_uppercase) for _ in range(2))
    number = rng.randint(100_000_000, 999_999_999)
    return f"{prefix}{number}BR"
