"""
Timeframe token parsing and formatting.

Single source of truth for the short display tokens ("1m", "5m", "1h", "1d",
"1w") and the legacy {number, unit} shape older documents carry.
"""

import re
from typing import Optional


# Tokens the resolver accepts as already-displayable (no lookup needed)
DISPLAY_TOKEN_PATTERN = re.compile(r"^(\d+)([mhd])$")

# Tokens the migration service can turn into a timeframe definition
TIMEFRAME_TOKEN_PATTERN = re.compile(r"^(\d+)([mhdw])$")

# timeframeId values written before IDs were canonical ("5m", "TF1", "DAILY")
LEGACY_TIMEFRAME_ID_PATTERN = re.compile(r"^(\d+[mhdw]|[A-Z0-9_-]{2,10})$")

# Legacy unit names -> token suffix
UNIT_TO_SUFFIX = {
    "minute": "m",
    "minutes": "m",
    "hour": "h",
    "hours": "h",
    "day": "d",
    "days": "d",
    "week": "w",
    "weeks": "w",
}

# Token suffix -> canonical unit name
SUFFIX_TO_UNIT = {
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def is_display_token(value: object) -> bool:
    """True if value already reads like a display timeframe ("5m", "1h", "1d")."""
    return isinstance(value, str) and DISPLAY_TOKEN_PATTERN.match(value) is not None


def parse_timeframe(token: str) -> Optional[tuple[str, int]]:
    """
    Parse a timeframe token into (unit, number).

    Args:
        token: Timeframe string (e.g., "5m", "1h", "1w")

    Returns:
        ("minutes", 5) style tuple, or None if the token is not parsable
    """
    if not isinstance(token, str):
        return None
    match = TIMEFRAME_TOKEN_PATTERN.match(token.strip())
    if not match:
        return None
    number_str, suffix = match.groups()
    return SUFFIX_TO_UNIT[suffix], int(number_str)


def format_timeframe(number: object, unit: object) -> Optional[str]:
    """
    Format a legacy {number, unit} pair as a display token.

    Returns:
        "5m" style token, or None if the unit is unknown or number is missing
    """
    if number is None or isinstance(number, bool):
        return None
    suffix = UNIT_TO_SUFFIX.get(str(unit).strip().lower()) if unit is not None else None
    if suffix is None:
        return None
    try:
        count = int(float(number))
    except (TypeError, ValueError):
        return None
    return f"{count}{suffix}"


def is_legacy_timeframe_id(value: object, canonical_prefix: str = "tf_") -> bool:
    """
    True if a timeframeId value still carries a pre-migration token.

    Canonical IDs contain the canonical prefix and never match.
    """
    if not isinstance(value, str) or canonical_prefix in value:
        return False
    return LEGACY_TIMEFRAME_ID_PATTERN.match(value) is not None
