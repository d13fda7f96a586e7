"""Brazilian document, phone, card and currency masks and validators"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

NBSP = "\u00a0"
_NON_DIGITS = re.compile(r"\D")


@dataclass
class ExpiryValidation:
    valid: bool
    message: Optional[str] = None


def only_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def format_cpf(value: str) -> str:
    """Progressive mask ###.###.###-## applied as digits are typed"""
    digits = only_digits(value)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:11]}"


def format_phone(value: str) -> str:
    """Progressive mask (##) #####-#### (landlines: (##) ####-####)"""
    digits = only_digits(value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 6:
        return f"({digits[:2]}) {digits[2:]}"
    if len(digits) <= 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:11]}"


def format_cep(value: str) -> str:
    digits = only_digits(value)[:8]
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:]}"


def format_date(value: str) -> str:
    """Progressive mask DD/MM/YYYY"""
    digits = only_digits(value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}/{digits[2:]}"
    return f"{digits[:2]}/{digits[2:4]}/{digits[4:8]}"


def format_card_number(value: str) -> str:
    digits = only_digits(value)[:16]
    return " ".join(digits[i:i + 4] for i in range(0, len(digits), 4))


def format_card_expiry(value: str) -> str:
    digits = only_digits(value)[:4]
    if len(digits) >= 2:
        return f"{digits[:2]}/{digits[2:4]}"
    return digits


def format_brl(value: float) -> str:
    """
    Format an amount as Brazilian Real, the way pt-BR Intl.NumberFormat does.

    Example:
        1234.5 -> "R$ 1.234,50" (non-breaking space after the symbol)
    """
    grouped = f"{abs(value):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if round(value, 2) < 0 else ""
    return f"{sign}R${NBSP}{localized}"


def format_currency_mask(value: str) -> str:
    """Currency input mask: typed digits are read as cents"""
    digits = only_digits(value)
    cents = int(digits) if digits else 0
    return format_brl(cents / 100)


def unformat_currency(value: str) -> str:
    return only_digits(value)


def _cpf_check_digit(digits: str, first_weight: int) -> int:
    total = sum(int(d) * w for d, w in zip(digits, range(first_weight, 1, -1)))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cpf(cpf: str) -> bool:
    """
    Validate a CPF with its two mod-11 check digits.

    Rejects anything that is not 11 digits and sequences of a single
    repeated digit (000.000.000-00, 111.111.111-11, ...).
    """
    digits = only_digits(cpf)
    if len(digits) != 11:
        return False
    if len(set(digits)) == 1:
        return False

    first = _cpf_check_digit(digits[:9], 10)
    if first != int(digits[9]):
        return False

    second = _cpf_check_digit(digits[:10], 11)
    return second == int(digits[10])


def validate_phone(phone: str) -> bool:
    """Mobile number with area code: exactly 11 digits"""
    return len(only_digits(phone)) == 11


def validate_card_expiry(expiry: str, today: date) -> ExpiryValidation:
    """
    Validate an MM/YY card expiry against the current month.

    A card expiring in the current month is still valid.
    """
    digits = only_digits(expiry)
    if len(digits) != 4:
        return ExpiryValidation(valid=False, message="Data inválida")

    month = int(digits[:2])
    year = int(digits[2:])
    if month < 1 or month > 12:
        return ExpiryValidation(valid=False, message="Mês inválido")

    current_year = today.year % 100
    if year < current_year or (year == current_year and month < today.month):
        return ExpiryValidation(valid=False, message="Cartão vencido")

    return ExpiryValidation(valid=True)
