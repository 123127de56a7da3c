"""
Type aliases and the expression class registry.

Placed in a separate module to avoid circular imports.
"""

from __future__ import annotations

from .base import (
    ConstantExpression,
    IndicatorExpression,
    CandleDataExpression,
    LiveDataExpression,
    TimeFunctionExpression,
    CurrentTimeExpression,
    PositionTimeExpression,
    PositionDataExpression,
    TrailingVariableExpression,
    PnlExpression,
    UnderlyingPnlExpression,
    ExternalTriggerExpression,
    NodeVariableExpression,
    GlobalVariableExpression,
    UnknownExpression,
)
from .composite import (
    ComplexExpression,
    FunctionExpression,
    MathExpression,
    TimeOffsetExpression,
    CandleRangeExpression,
    AggregationExpression,
    ListExpression,
)
from .condition import Condition
from .group import GroupCondition


# =============================================================================
# Type Aliases
# =============================================================================

# Every value-producing node that can sit on either side of a condition
Expression = (
    ConstantExpression | IndicatorExpression | CandleDataExpression
    | LiveDataExpression | TimeFunctionExpression | CurrentTimeExpression
    | ComplexExpression | FunctionExpression | PositionDataExpression
    | ExternalTriggerExpression | NodeVariableExpression | GlobalVariableExpression
    | PnlExpression | UnderlyingPnlExpression | MathExpression
    | TrailingVariableExpression | PositionTimeExpression | TimeOffsetExpression
    | CandleRangeExpression | AggregationExpression | ListExpression
    | UnknownExpression
)

# Nodes addressable by a path
ConditionNode = Condition | GroupCondition

# Index path from the root group
Path = tuple[int, ...]


# =============================================================================
# Registry
# =============================================================================

EXPRESSION_CLASSES: dict[str, type] = {
    cls.type_tag: cls
    for cls in (
        ConstantExpression, IndicatorExpression, CandleDataExpression,
        LiveDataExpression, TimeFunctionExpression, CurrentTimeExpression,
        ComplexExpression, FunctionExpression, PositionDataExpression,
        ExternalTriggerExpression, NodeVariableExpression, GlobalVariableExpression,
        PnlExpression, UnderlyingPnlExpression, MathExpression,
        TrailingVariableExpression, PositionTimeExpression, TimeOffsetExpression,
        CandleRangeExpression, AggregationExpression, ListExpression,
    )
}


def is_expression(value: object) -> bool:
    """True for any expression node, including UnknownExpression."""
    return isinstance(value, tuple(EXPRESSION_CLASSES.values())) or isinstance(
        value, UnknownExpression
    )


def expression_type(expr: object) -> str:
    """Document tag of an expression node ("" if not an expression)."""
    if isinstance(expr, UnknownExpression):
        return expr.type_name
    return getattr(type(expr), "type_tag", "")


__all__ = [
    "Expression",
    "ConditionNode",
    "Path",
    "EXPRESSION_CLASSES",
    "is_expression",
    "expression_type",
]
