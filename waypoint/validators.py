"""Email validation helpers."""

from __future__ import annotations

import re
from typing import Optional

EMAIL_MAX_LENGTH = 254
EMAIL_PATTERN = re.compile(r"^[^\s@]+@([A-Za-z0-9-]+\.)+[A-Za-z]{2,}$")


def normalize_email(email: str) -> str:
    """Strip surrounding whitespace and lowercase an email address."""
    return email.strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    """Check that a value looks like a usable email address.

    Args:
        email: Raw email value, possibly None

    Returns:
        True if the normalized value is a non-empty local@domain.tld address
        within the maximum length, False otherwise
    """
    if not email or not isinstance(email, str):
        return False

    email = normalize_email(email)
    if len(email) > EMAIL_MAX_LENGTH:
        return False

    return EMAIL_PATTERN.match(email) is not None
