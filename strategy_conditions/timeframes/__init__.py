"""
Timeframe identity: definitions, id resolution and document migration.
"""

from .models import TimeframeConfig, is_legacy_timeframe_dict
from .resolver import UNKNOWN_TIMEFRAME, TimeframeResolver
from .visitor import ExpressionVisitor, is_expression_dict, is_condition_dict
from .migration import (
    NO_START_NODE,
    MigrationResult,
    migrate_document,
    apply_created_timeframes,
)

__all__ = [
    "TimeframeConfig",
    "is_legacy_timeframe_dict",
    "UNKNOWN_TIMEFRAME",
    "TimeframeResolver",
    "ExpressionVisitor",
    "is_expression_dict",
    "is_condition_dict",
    "NO_START_NODE",
    "MigrationResult",
    "migrate_document",
    "apply_created_timeframes",
]
