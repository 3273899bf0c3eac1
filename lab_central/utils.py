# utils.py
import secrets
import string
from datetime import datetime, timezone

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_id(prefix: str, length: int = 9) -> str:
    """Prefixed random base-36 identifier, e.g. ``bk-4f9k2m1zq``."""
    return prefix + "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
