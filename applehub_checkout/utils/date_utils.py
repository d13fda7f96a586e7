"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

BRASILIA_TZ = ZoneInfo("America/Sao_Paulo")


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_brasilia(value: datetime, fmt: str = "%d/%m/%Y %H:%M:%S") -> str:
    """Render a datetime in Brasília local time"""
    return ensure_aware(value).astimezone(BRASILIA_TZ).strftime(fmt)


def format_date_brasilia(value: datetime) -> str:
    return format_brasilia(value, "%d/%m/%Y")


def format_time_brasilia(value: datetime) -> str:
    return format_brasilia(value, "%H:%M:%S")


def local_date(now: datetime, tz_name: str = "America/Sao_Paulo") -> date:
    """Calendar date of an instant in the given timezone (Brasília by default)"""
    return ensure_aware(now).astimezone(ZoneInfo(tz_name)).date()


def to_utc(value: datetime) -> datetime:
    """Normalize to UTC before storage; naive values are taken as UTC"""
    return ensure_aware(value).astimezone(timezone.utc)
