"""Phone number validation."""

import re

_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")


def is_valid_phone(number: str | None) -> bool:
    """Digits, spaces, hyphens, parentheses and an optional leading +; at least one digit."""
    if not number or len(number) > 20:
        return False
    if not re.search(r"\d", number):
        return False
    return bool(_PHONE_PATTERN.match(number))
