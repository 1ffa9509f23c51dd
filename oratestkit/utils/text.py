"""Random strings and date checks used when generating test data."""

import random
import string
from datetime import date, datetime
from typing import Any

__all__ = ("generate_random_password", "is_date", "random_string")

_PASSWORD_CHOICES = string.ascii_letters
_STRING_CHOICES = string.ascii_letters + string.digits


def generate_random_password(length: int = 6) -> str:
    """Generate a random password made of ASCII letters.

    Args:
        length: Number of characters.

    Returns:
        The generated password.
    """
    return "".join(random.choice(_PASSWORD_CHOICES) for _ in range(length))


def random_string(length: int) -> str:
    """Generate a random alphanumeric string of exactly ``length`` characters."""
    return "".join(random.choices(_STRING_CHOICES, k=length))


def is_date(value: Any) -> bool:
    """Check whether a value is a date or an ISO-8601 date string.

    Args:
        value: A ``date``/``datetime`` instance or a string.

    Returns:
        True if the value is, or parses as, a date.
    """
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.strip())
    except ValueError:
        return False
    return True
