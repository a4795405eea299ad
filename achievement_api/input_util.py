import re
import secrets
import string
from typing import Any
from urllib.parse import urlparse

CUID_PATTERN = re.compile(r"^c[a-z0-9]{24}$")
_CUID_ALPHABET = string.ascii_lowercase + string.digits


def generate_cuid() -> str:
    """
    Generates a collision-resistant id shaped like a CUID: 'c' followed by
    24 lowercase alphanumerics.

    Returns:
        str: The new identifier.
    """
    return "c" + "".join(secrets.choice(_CUID_ALPHABET) for _ in range(24))


def is_valid_cuid(value: Any) -> bool:
    return isinstance(value, str) and bool(CUID_PATTERN.match(value))


def sanitize_string(value: Any) -> str:
    """Trims the value and strips angle brackets; non-strings become ''."""
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")


def is_valid_url(value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme and (parsed.netloc or parsed.path))


def is_valid_icon(value: str) -> bool:
    """Icons are URLs or short strings such as an emoji."""
    return is_valid_url(value) or len(value) <= 100
