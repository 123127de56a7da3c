"""
Strategy Conditions - condition algebra for visual trading strategies

Typed expression and condition trees for strategy documents: path-addressed
copy-on-write editing, human-readable formula rendering, id-keyed timeframe
resolution, and one-shot migration of legacy timeframe references.
"""

__version__ = "0.1.0"
__author__ = "Strategy Conditions"

from .config import get_config
# timeframes must load before conditions
from .timeframes import (
    TimeframeConfig,
    TimeframeResolver,
    MigrationResult,
    migrate_document,
    apply_created_timeframes,
)
from .conditions import (
    Condition,
    GroupCondition,
    RenderContext,
    create_condition,
    create_group_condition,
    condition_from_dict,
    condition_to_dict,
    group_condition_to_string,
)
from .document import load_condition_tree, store_condition_tree

__all__ = [
    "get_config",
    "TimeframeConfig",
    "TimeframeResolver",
    "MigrationResult",
    "migrate_document",
    "apply_created_timeframes",
    "Condition",
    "GroupCondition",
    "RenderContext",
    "create_condition",
    "create_group_condition",
    "condition_from_dict",
    "condition_to_dict",
    "group_condition_to_string",
    "load_condition_tree",
    "store_condition_tree",
]
