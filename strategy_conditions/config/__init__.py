"""
Configuration management.
"""

from .config import (
    Config,
    get_config,
    LogConfig,
    EditingConfig,
    MigrationConfig,
)

from .constants import (
    START_NODE_TYPE,
    TRADING_INSTRUMENT_KEY,
    SUPPORTING_INSTRUMENT_KEY,
    INSTRUMENT_CONFIG_KEYS,
    CONDITION_TREE_KEYS,
    TRADING_INSTRUMENT,
    SUPPORTING_INSTRUMENT,
    INSTRUMENT_TYPES,
    CANONICAL_TIMEFRAME_ID_PREFIX,
    validate_instrument_type,
)

__all__ = [
    # Config classes
    "Config",
    "get_config",
    "LogConfig",
    "EditingConfig",
    "MigrationConfig",
    # Document shape
    "START_NODE_TYPE",
    "TRADING_INSTRUMENT_KEY",
    "SUPPORTING_INSTRUMENT_KEY",
    "INSTRUMENT_CONFIG_KEYS",
    "CONDITION_TREE_KEYS",
    # Instruments
    "TRADING_INSTRUMENT",
    "SUPPORTING_INSTRUMENT",
    "INSTRUMENT_TYPES",
    "validate_instrument_type",
    # Timeframe identity
    "CANONICAL_TIMEFRAME_ID_PREFIX",
]
