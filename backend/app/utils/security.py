import secrets
from datetime import datetime, timedelta, timezone

import bcrypt

VERIFICATION_TOKEN_TTL = timedelta(hours=24)


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt directly (bypasses passlib+version issues).

    bcrypt truncates at 72 *bytes* and newer builds raise if you exceed it,
    so enforce the limit explicitly.
    """
    if not password:
        raise ValueError("Password is required")

    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > 72:
        raise ValueError("Password must be 72 bytes or less")

    hashed = bcrypt.hashpw(pw_bytes, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    pw_bytes = password.encode("utf-8")
    if len(pw_bytes) > 72:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


def generate_verification_token() -> tuple[str, datetime]:
    """Return a fresh email-verification token and its expiry (24h from now)."""
    return secrets.token_hex(32), datetime.now(timezone.utc) + VERIFICATION_TOKEN_TTL


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
