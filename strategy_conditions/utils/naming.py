"""
Expression naming utilities.

Display names are built with dots for hierarchy and underscores for word
separation, so that a hyphenated identifier is never mistaken for a minus
operator inside a rendered formula.
"""

from __future__ import annotations

from typing import Optional

UUID_MIN_LENGTH = 36
UUID_DISPLAY_CHARS = 8


def sanitize_expression_name(name: str) -> str:
    """Replace hyphens with underscores."""
    if not name:
        return name
    return name.replace("-", "_")


def offset_label(display_name: str, offset: Optional[int]) -> str:
    """
    Wrap a display name with its candle offset label.

    0 -> Current[...], -1 -> Previous[...], -N -> Nago[...]; positive or
    missing offsets leave the name untouched.
    """
    if offset is None:
        return display_name
    if offset == 0:
        return f"Current[{display_name}]"
    if offset == -1:
        return f"Previous[{display_name}]"
    if offset < 0:
        return f"{abs(offset)}ago[{display_name}]"
    return display_name


def format_expression_display_name(
    base_name: str,
    instrument_type: Optional[str] = None,
    timeframe: Optional[str] = None,
    parameter: Optional[str] = None,
    offset: Optional[int] = None,
) -> str:
    """
    Build a hierarchical display name.

    Examples:
        >>> format_expression_display_name("RSI", "TI", "5m", "value", 0)
        'Current[TI.5m.RSI.value]'
        >>> format_expression_display_name("Close", "TI", "1m", offset=-1)
        'Previous[TI.1m.Close]'
        >>> format_expression_display_name("LTP", "SI")
        'SI.LTP'
    """
    parts = []
    if instrument_type:
        parts.append(instrument_type)
    if timeframe:
        parts.append(timeframe)
    parts.append(sanitize_expression_name(base_name))
    if parameter:
        parts.append(parameter)
    return offset_label(".".join(parts), offset)


def looks_like_uuid(identifier: str) -> bool:
    return bool(identifier) and len(identifier) >= UUID_MIN_LENGTH and "-" in identifier


def format_uuid_for_display(uuid: str) -> str:
    """
    Shorten a UUID to an uppercase 8-character prefix.

    Examples:
        >>> format_uuid_for_display("3f2a9c1e-0b7d-4c55-9a61-2f0d8e7b6a10")
        'ID_3F2A9C1E'
    """
    if not uuid or len(uuid) < UUID_DISPLAY_CHARS:
        return uuid
    if looks_like_uuid(uuid):
        return f"ID_{uuid[:UUID_DISPLAY_CHARS].upper()}"
    return sanitize_expression_name(uuid)


def normalize_expression_identifier(identifier: str) -> str:
    """Turn node IDs, UUIDs and hyphenated keys into formula-friendly names."""
    if not identifier:
        return identifier
    if looks_like_uuid(identifier):
        return format_uuid_for_display(identifier)
    return sanitize_expression_name(identifier)


def format_node_variable_reference(node_id: str, variable_name: str) -> str:
    """
    Examples:
        >>> format_node_variable_reference("entry-node-1", "stop-level")
        'entry_node_1.stop_level'
    """
    return f"{normalize_expression_identifier(node_id)}.{sanitize_expression_name(variable_name)}"
