"""
Validation utilities for request input.

Every helper raises `ValidationError` (HTTP 400) with a message naming the field.
"""
import re
from datetime import datetime, timezone
from typing import Any

from ..models.enums import SIGNUP_ROLES, JobStatus, ProposalStatus, Role
from .error_handlers import ValidationError

_EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def validate_email(email: Any) -> str:
    """Validate email format."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip().lower()
    if len(email) > 255:
        raise ValidationError("Email too long (max 255 characters)")

    if not re.match(_EMAIL_PATTERN, email):
        raise ValidationError("Invalid email format")

    return email


def validate_password(password: Any) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters")

    # bcrypt only looks at the first 72 bytes.
    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password too long (max 72 bytes)")


def validate_string_field(
    value: Any,
    field_name: str,
    min_length: int = 1,
    max_length: int = 1000,
    required: bool = True,
) -> str | None:
    """Validate a string field with common rules."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    value = value.strip()

    if required and not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if value and len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(value) > max_length:
        raise ValidationError(f"{field_name} must not exceed {max_length} characters")

    return value


def validate_number_field(
    value: Any,
    field_name: str,
    min_value: float | None = None,
    required: bool = True,
) -> float | None:
    """Validate a numeric (money) field."""
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number")

    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationError(f"{field_name} must be a number")

    if min_value is not None and number <= min_value:
        raise ValidationError(f"{field_name} must be greater than {min_value:g}")

    return number


def validate_integer_field(
    value: Any,
    field_name: str,
    min_value: int | None = None,
    max_value: int | None = None,
    required: bool = True,
) -> int | None:
    """Validate an integer field."""
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a valid integer")
    if not isinstance(value, int):
        try:
            value = int(value)
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid integer")

    if min_value is not None and value < min_value:
        raise ValidationError(f"{field_name} must be at least {min_value}")

    if max_value is not None and value > max_value:
        raise ValidationError(f"{field_name} must not exceed {max_value}")

    return value


def validate_rating(value: Any) -> int:
    """Ratings are whole stars from 1 to 5."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, float):
        raise ValidationError("Rating must be between 1 and 5")
    try:
        return validate_integer_field(value, "Rating", min_value=1, max_value=5)
    except ValidationError as e:
        if "required" in e.message:
            raise
        raise ValidationError("Rating must be between 1 and 5")


def validate_signup_role(role: Any) -> Role:
    """Validate the role a visitor picks at signup."""
    if not role or not isinstance(role, str):
        raise ValidationError("Role is required")

    normalized = role.strip().upper()
    allowed = {r.value: r for r in SIGNUP_ROLES}
    if normalized not in allowed:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(allowed)}")

    return allowed[normalized]


def validate_job_status(status: Any) -> JobStatus:
    """Validate job status."""
    try:
        return JobStatus(str(status).strip().upper())
    except ValueError:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(s.value for s in JobStatus)}"
        )


def validate_proposal_status(status: Any) -> ProposalStatus:
    if not status:
        raise ValidationError("Status is required")
    try:
        return ProposalStatus(str(status).strip().upper())
    except ValueError:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(s.value for s in ProposalStatus)}"
        )


def parse_deadline(value: Any, field_name: str = "Deadline") -> datetime:
    """Parse an ISO date or datetime string into an aware UTC datetime."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        dt = value
    else:
        raw = str(value).strip()
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD) or datetime")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
