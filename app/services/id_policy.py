"""
Primary-key defaulting and audit timestamps shared by every row store.
"""

import secrets
import string
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

KeyGenerator = Callable[[], str]

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Any) -> Any:
    """
    Normalize date-like values to canonical ISO-8601 strings.

    Datetimes are converted to UTC and rendered with millisecond precision
    and a trailing Z (naive datetimes are taken to be UTC already). Plain
    dates render as YYYY-MM-DD. Any other value is returned unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    if isinstance(value, date):
        return value.isoformat()
    return value


def now_iso() -> str:
    """Current time as an ISO-8601 UTC string"""
    return to_iso(utc_now())


def random_suffix(length: int = 8) -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def generate_lot_id(prefix: str = "lot_", suffix_length: int = 8, now: Optional[datetime] = None) -> str:
    """
    Build a lot key from the current date, time and a random suffix.

    Example: lot_20261019_153012_k3j9x2ab

    Keys are practically unique but not guaranteed to be; the store checks
    the generated key against existing rows before writing.
    """
    now = now or utc_now()
    return f"{prefix}{now:%Y%m%d}_{now:%H%M%S}_{random_suffix(suffix_length)}"


def lot_id_generator(prefix: str = "lot_", suffix_length: int = 8) -> KeyGenerator:
    """Key generator bound to the configured prefix and suffix length"""

    def generate() -> str:
        return generate_lot_id(prefix=prefix, suffix_length=suffix_length)

    return generate
