"""
Utility modules.
"""

from .logger import get_logger, setup_logger, ConditionsLogger
from .helpers import safe_int, safe_str, format_scalar, generate_id
from .timeframes import (
    is_display_token,
    parse_timeframe,
    format_timeframe,
    is_legacy_timeframe_id,
)
from .naming import (
    sanitize_expression_name,
    format_expression_display_name,
    normalize_expression_identifier,
    format_node_variable_reference,
)

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "ConditionsLogger",
    # Type conversion helpers
    "safe_int",
    "safe_str",
    "format_scalar",
    "generate_id",
    # Timeframe tokens
    "is_display_token",
    "parse_timeframe",
    "format_timeframe",
    "is_legacy_timeframe_id",
    # Display names
    "sanitize_expression_name",
    "format_expression_display_name",
    "normalize_expression_identifier",
    "format_node_variable_reference",
]
