"""
Constants for the condition expression language.

This module defines all constant values used by the node types:
- Expression type tags (document discriminants)
- Operator sets (comparison, crossover, range, membership, math)
- Group logic
- Display labels for position fields
"""

from __future__ import annotations

# =============================================================================
# Expression Type Tags
# =============================================================================
# The "type" discriminant stored in documents for each expression variant.

CONSTANT = "constant"
INDICATOR = "indicator"
CANDLE_DATA = "candle_data"
LIVE_DATA = "live_data"
TIME_FUNCTION = "time_function"
CURRENT_TIME = "current_time"
COMPLEX = "expression"
FUNCTION = "function"
POSITION_DATA = "position_data"
EXTERNAL_TRIGGER = "external_trigger"
NODE_VARIABLE = "node_variable"
GLOBAL_VARIABLE = "global_variable"
PNL = "pnl_data"
UNDERLYING_PNL = "underlying_pnl"
MATH_EXPRESSION = "math_expression"
TRAILING_VARIABLE = "trailing_variable"
POSITION_TIME = "position_time"
TIME_OFFSET = "time_offset"
CANDLE_RANGE = "candle_range"
AGGREGATION = "aggregation"
LIST = "list"

EXPRESSION_TYPES = frozenset({
    CONSTANT, INDICATOR, CANDLE_DATA, LIVE_DATA, TIME_FUNCTION, CURRENT_TIME,
    COMPLEX, FUNCTION, POSITION_DATA, EXTERNAL_TRIGGER, NODE_VARIABLE,
    GLOBAL_VARIABLE, PNL, UNDERLYING_PNL, MATH_EXPRESSION, TRAILING_VARIABLE,
    POSITION_TIME, TIME_OFFSET, CANDLE_RANGE, AGGREGATION, LIST,
})

# =============================================================================
# Condition Operators
# =============================================================================

COMPARISON_OPERATORS = frozenset({
    ">",                # Greater than: lhs > rhs
    "<",                # Less than: lhs < rhs
    ">=",               # Greater than or equal
    "<=",               # Less than or equal
    "==",               # Equal
    "!=",               # Not equal
})

CROSSOVER_OPERATORS = frozenset({
    "crosses_above",    # prev_lhs <= prev_rhs AND lhs > rhs
    "crosses_below",    # prev_lhs >= prev_rhs AND lhs < rhs
})

RANGE_OPERATORS = frozenset({
    "between",          # rhs <= lhs <= rhs_upper
    "not_between",
})

MEMBERSHIP_OPERATORS = frozenset({
    "in",               # lhs in [rhs items]
    "not_in",
})

VALID_OPERATORS = (
    COMPARISON_OPERATORS | CROSSOVER_OPERATORS | RANGE_OPERATORS | MEMBERSHIP_OPERATORS
)

DEFAULT_OPERATOR = ">"

# =============================================================================
# Group Logic
# =============================================================================

AND = "AND"
OR = "OR"
GROUP_LOGIC = frozenset({AND, OR})

# =============================================================================
# Math
# =============================================================================
# "+%" / "-%" add or subtract a percentage of the left value.

MATH_OPERATORS = frozenset({"+", "-", "*", "/", "%", "+%", "-%"})

# =============================================================================
# Display Labels
# =============================================================================

POSITION_FIELD_LABELS = {
    "entryPrice": "Entry Price",
    "currentPrice": "Current Price",
    "quantity": "Quantity",
    "status": "Status",
    "underlyingPriceOnEntry": "Underlying Price on Entry",
    "underlyingPriceOnExit": "Underlying Price on Exit",
    "instrumentName": "Instrument Name",
    "instrumentType": "Instrument Type",
    "symbol": "Symbol",
    "expiryDate": "Expiry Date",
    "strikePrice": "Strike Price",
    "optionType": "Option Type",
    "strikeType": "Strike Type",
    "underlyingName": "Underlying Name",
    "entryTime": "Entry Time",
    "exitTime": "Exit Time",
}


__all__ = [
    # Expression tags
    "CONSTANT", "INDICATOR", "CANDLE_DATA", "LIVE_DATA", "TIME_FUNCTION",
    "CURRENT_TIME", "COMPLEX", "FUNCTION", "POSITION_DATA", "EXTERNAL_TRIGGER",
    "NODE_VARIABLE", "GLOBAL_VARIABLE", "PNL", "UNDERLYING_PNL", "MATH_EXPRESSION",
    "TRAILING_VARIABLE", "POSITION_TIME", "TIME_OFFSET", "CANDLE_RANGE",
    "AGGREGATION", "LIST",
    "EXPRESSION_TYPES",
    # Operators
    "COMPARISON_OPERATORS",
    "CROSSOVER_OPERATORS",
    "RANGE_OPERATORS",
    "MEMBERSHIP_OPERATORS",
    "VALID_OPERATORS",
    "DEFAULT_OPERATOR",
    # Groups
    "AND", "OR", "GROUP_LOGIC",
    # Math
    "MATH_OPERATORS",
    # Labels
    "POSITION_FIELD_LABELS",
]
