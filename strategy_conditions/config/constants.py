"""
Centralized constants for strategy documents.

These describe the shape of the documents the editor persists. They are
shared by the migration service, the document helpers and the renderer.
"""

from typing import List


# ==================== Document Shape ====================

# Node type of the node that owns instrument/timeframe configuration
START_NODE_TYPE = "startNode"

# Keys inside the start node's data holding instrument configuration
TRADING_INSTRUMENT_KEY = "tradingInstrumentConfig"
SUPPORTING_INSTRUMENT_KEY = "supportingInstrumentConfig"
INSTRUMENT_CONFIG_KEYS: List[str] = [TRADING_INSTRUMENT_KEY, SUPPORTING_INSTRUMENT_KEY]

# Keys inside node data that hold condition trees
CONDITION_TREE_KEYS: List[str] = ["entryConditions", "exitConditions", "conditions"]


# ==================== Instruments ====================

TRADING_INSTRUMENT = "TI"      # Trading Instrument
SUPPORTING_INSTRUMENT = "SI"   # Supporting Instrument
INSTRUMENT_TYPES = {TRADING_INSTRUMENT, SUPPORTING_INSTRUMENT}


# ==================== Timeframe Identity ====================

# Canonical timeframe IDs look like tf_<epoch-ms>_<random>
CANONICAL_TIMEFRAME_ID_PREFIX = "tf_"


def validate_instrument_type(instrument_type: str) -> str:
    """
    Validate and normalize an instrument type token.

    Args:
        instrument_type: "TI" or "SI" (case-insensitive)

    Returns:
        Normalized instrument type

    Raises:
        ValueError: If the token is not a known instrument type
    """
    normalized = (instrument_type or "").strip().upper()
    if normalized not in INSTRUMENT_TYPES:
        raise ValueError(
            f"Invalid instrument type: '{instrument_type}'. "
            f"Must be one of: {sorted(INSTRUMENT_TYPES)}"
        )
    return normalized
