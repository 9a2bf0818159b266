"""
Pure validation helpers shared by the directory, booking and contract services.

All `ensure_*` functions raise ValidationError on the first violated rule;
the `is_*` functions are side-effect free predicates.
"""

from datetime import date, datetime
from typing import Optional, Union

from email_validator import EmailNotValidError, validate_email

from conference_center.core.exceptions import ValidationError

MAX_EMAIL_LENGTH = 254

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def today() -> date:
    return date.today()


def strip_timezone(value: datetime) -> datetime:
    """Booking windows are facility wall-clock times; drop any offset."""
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


def is_date_in_past(value: DateLike) -> bool:
    return _as_date(value) < today()


def is_valid_range(start: datetime, end: datetime) -> bool:
    return not is_date_in_past(start) and end > start


def ensure_valid_range(start: datetime, end: datetime) -> None:
    if not is_valid_range(start, end):
        raise ValidationError(
            "Invalid date range: start must be today or later and end must be after start.",
            start=start.isoformat(),
            end=end.isoformat(),
        )


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    if email is None or not email.strip():
        return False
    candidate = email.strip()
    if len(candidate) > MAX_EMAIL_LENGTH:
        return False
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def ensure_required(value: Optional[str], field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def ensure_customer(first_name: Optional[str], last_name: Optional[str], email: Optional[str]) -> None:
    display_name = f"{first_name or ''} {last_name or ''}".strip()
    if not display_name:
        raise ValidationError("Customer name is required.")
    ensure_required(email, "Email")
    if not is_valid_email(email):
        raise ValidationError("Invalid customer email address.", email=email)


def ensure_positive(value: int, field_name: str) -> None:
    if value <= 0:
        raise ValidationError(f"{field_name} must be greater than zero.")


def ensure_non_negative(value, field_name: str) -> None:
    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative.")


def clean_optional(value: Optional[str]) -> str:
    return value.strip() if value else ""
