"""
Common utility functions used across the condition algebra.

These helpers handle edge cases from documents written by older editors.
"""

import random
import string
import time
from typing import Any, Optional

_BASE36 = string.digits + string.ascii_lowercase


def safe_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """
    Safely convert value to int, handling edge cases from stored documents.

    Older editors sometimes persisted:
    - Empty strings "" instead of 0 or null
    - String numbers "5" instead of 5
    - Floats 5.0 for integer fields

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Int value or default

    Examples:
        >>> safe_int("5")
        5
        >>> safe_int("")
        0
        >>> safe_int(None, default=None) is None
        True
    """
    if value is None or value == "" or value == " ":
        return default
    if isinstance(value, bool):
        return default
    try:
        return int(float(value))  # Handle "123.0" -> 123
    except (ValueError, TypeError):
        return default


def safe_str(value: Any, default: str = "") -> str:
    """
    Safely convert value to string.

    Args:
        value: Value to convert
        default: Default value if None

    Returns:
        String value or default
    """
    if value is None:
        return default
    return str(value)


def format_scalar(value: Any) -> str:
    """
    Format a scalar for display.

    Booleans render lowercase and integral floats drop the trailing ".0",
    so documents written by the browser editor read the same here.

    Examples:
        >>> format_scalar(True)
        'true'
        >>> format_scalar(5.0)
        '5'
        >>> format_scalar(2.5)
        '2.5'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def random_base36(length: int = 9) -> str:
    """Random lowercase base36 token."""
    return "".join(random.choice(_BASE36) for _ in range(length))


def generate_id(prefix: str, separator: str = "-") -> str:
    """
    Generate a time-ordered identifier.

    Examples:
        generate_id("condition")     -> "condition-1718000000000-k3j9x0a1b"
        generate_id("tf", "_")       -> "tf_1718000000000_p0q1r2s3t"
    """
    return f"{prefix}{separator}{int(time.time() * 1000)}{separator}{random_base36()}"
