import re
from datetime import UTC, date, datetime, time

COUNTRY_CODE_RE = re.compile(r"^[A-Z]{3}$")


def is_country_code(value: str) -> bool:
    """Check for an ISO 3166-1 alpha-3 code (upper case)."""
    return bool(COUNTRY_CODE_RE.fullmatch(value))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def age_on(date_of_birth: date, today: date) -> int:
    """Full years between date_of_birth and today."""
    years = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


def start_of_day(value: date) -> datetime:
    """Midnight UTC of a calendar date; MongoDB stores datetimes only."""
    return datetime.combine(value, time(), tzinfo=UTC)


def now() -> datetime:
    return datetime.now(UTC)
