"""Freight simulation for the checkout page"""

import random
from typing import Optional

from applehub_checkout.domain.exceptions import InvalidCepError
from applehub_checkout.domain.models import FreightMode, FreightQuote
from applehub_checkout.utils.formatters import only_digits

NORMAL_BASE = 15.0
NORMAL_SPREAD = 10.0
EXPRESS_MULTIPLIER = 1.8

DELIVERY_WINDOWS = {
    FreightMode.NORMAL: (5, 7),
    FreightMode.EXPRESS: (2, 3),
}


def quote_freight(cep: str, mode: FreightMode = FreightMode.NORMAL, rng: Optional[random.Random] = None) -> FreightQuote:
    """
    Simulated freight: 15 + U[0, 10) for normal delivery, 1.8x that for express.

    Raises:
        InvalidCepError: postal code does not have 8 digits
    """
    digits = only_digits(cep)
    if len(digits) != 8:
        raise InvalidCepError(f"CEP must have 8 digits, got {cep!r}")

    rng = rng or random.Random()
    amount = NORMAL_BASE + rng.random() * NORMAL_SPREAD
    if mode == FreightMode.EXPRESS:
        amount *= EXPRESS_MULTIPLIER

    min_days, max_days = DELIVERY_WINDOWS[mode]
    return FreightQuote(
        cep=digits,
        mode=mode,
        amount=amount,
        min_business_days=min_days,
        max_business_days=max_days,
    )
