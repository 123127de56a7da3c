"""
Composite expression nodes.

Expressions that contain other expressions:
- ComplexExpression: legacy binary operation (left op right)
- FunctionExpression: min/max over N expressions
- MathExpression: ordered list of MathItem (operator applies to the item)
- TimeOffsetExpression: a time expression shifted by an amount
- CandleRangeExpression: a window of candles
- AggregationExpression: min/max/avg/... over a candle range or a list
- ListExpression: literal list of expressions (membership operands)

``nested_fields`` names the attributes holding child expressions and their
shape, so serialization and the migration visitor walk every variant the
same way:
- "expression": a single child
- "expressions": a tuple of children
- "math_items": a tuple of MathItem
- "candle_range": a nested CandleRangeExpression
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from . import constants as c
from .base import ConstantExpression, CurrentTimeExpression

if TYPE_CHECKING:
    from .types import Expression


def _as_tuple(instance: Any, name: str) -> None:
    """Freeze a sequence attribute passed as list."""
    value = getattr(instance, name)
    if value is not None and not isinstance(value, tuple):
        object.__setattr__(instance, name, tuple(value))


# =============================================================================
# Binary / N-ary
# =============================================================================

@dataclass(frozen=True)
class ComplexExpression:
    """
    Legacy binary arithmetic: (left operation right).

    Superseded by MathExpression in the editor, still present in older
    documents.
    """
    type_tag: ClassVar[str] = c.COMPLEX
    nested_fields: ClassVar[dict[str, str]] = {"left": "expression", "right": "expression"}

    expression_string: str = ""
    operation: Optional[str] = None
    left: Optional["Expression"] = None
    right: Optional["Expression"] = None


@dataclass(frozen=True)
class FunctionExpression:
    """
    A named function over N expressions.

    Examples:
        FunctionExpression("max", (IndicatorExpression(...), ConstantExpression(value=30)))
    """
    type_tag: ClassVar[str] = c.FUNCTION
    nested_fields: ClassVar[dict[str, str]] = {"expressions": "expressions"}

    function_name: str = "max"
    expressions: tuple = ()

    def __post_init__(self):
        _as_tuple(self, "expressions")


@dataclass(frozen=True)
class MathItem:
    """
    One term of a MathExpression.

    The operator joins this term to the running value on its left; the
    first item's operator is ignored.
    """
    expression: "Expression"
    operator: Optional[str] = None

    def __post_init__(self):
        if self.operator is not None and self.operator not in c.MATH_OPERATORS:
            raise ValueError(
                f"Invalid math operator '{self.operator}'. "
                f"Must be one of: {sorted(c.MATH_OPERATORS)}"
            )


@dataclass(frozen=True)
class MathExpression:
    """
    Flat arithmetic chain evaluated left to right.

    Examples:
        MathExpression((MathItem(Const(5)), MathItem(Const(3), "+")))  # (5 + 3)
    """
    type_tag: ClassVar[str] = c.MATH_EXPRESSION
    nested_fields: ClassVar[dict[str, str]] = {"items": "math_items"}

    items: tuple = ()

    def __post_init__(self):
        _as_tuple(self, "items")
        if len(self.items) < 1:
            raise ValueError("MathExpression requires at least one item")
        for item in self.items:
            if not isinstance(item, MathItem):
                raise ValueError(
                    f"MathExpression items must be MathItem, got {type(item).__name__}"
                )


# =============================================================================
# Time Arithmetic
# =============================================================================

@dataclass(frozen=True)
class TimeOffsetExpression:
    """
    A base time shifted before or after by an amount.

    Attributes:
        base_time: current_time, position_time or time_function expression
        offset_type: days/hours/minutes/seconds/candles
        direction: "before" or "after"
    """
    type_tag: ClassVar[str] = c.TIME_OFFSET
    nested_fields: ClassVar[dict[str, str]] = {"base_time": "expression"}

    base_time: "Expression" = field(default_factory=CurrentTimeExpression)
    offset_type: str = "minutes"
    offset_value: float = 0
    direction: str = "after"


# =============================================================================
# Ranges and Aggregation
# =============================================================================

@dataclass(frozen=True)
class CandleRangeExpression:
    """
    A window of candles on one timeframe.

    Range types:
        by_count:   start_index..end_index (0 = current candle)
        by_time:    start_time..end_time (HH:MM)
        relative:   candle_count candles before/after a reference
        to_current: from a reference up to the current candle
    """
    type_tag: ClassVar[str] = c.CANDLE_RANGE

    range_type: str = "by_count"
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reference_type: Optional[str] = None
    reference_time: Optional[str] = None
    reference_candle_number: Optional[int] = None
    reference_vpi: Optional[str] = None
    candle_count: Optional[int] = None
    direction: Optional[str] = None
    instrument_type: Optional[str] = None
    timeframe_id: Optional[str] = None
    timeframe: Optional[str] = None


@dataclass(frozen=True)
class AggregationExpression:
    """
    Aggregates a candle range field or a list of expressions.

    Examples:
        AggregationExpression("max", "candle_range", candle_range=..., ohlcv_field="high")
        AggregationExpression("min", "expression_list", expressions=(a, b))
    """
    type_tag: ClassVar[str] = c.AGGREGATION
    nested_fields: ClassVar[dict[str, str]] = {
        "candle_range": "candle_range",
        "expressions": "expressions",
    }

    aggregation_type: str = "max"
    source_type: str = "candle_range"
    candle_range: Optional[CandleRangeExpression] = None
    expressions: Optional[tuple] = None
    ohlcv_field: Optional[str] = None

    def __post_init__(self):
        _as_tuple(self, "expressions")


@dataclass(frozen=True)
class ListExpression:
    """Literal list, the right-hand side of in/not_in."""
    type_tag: ClassVar[str] = c.LIST
    nested_fields: ClassVar[dict[str, str]] = {"items": "expressions"}

    items: tuple = field(default_factory=lambda: (ConstantExpression(number_value=0, value=0),))

    def __post_init__(self):
        _as_tuple(self, "items")


__all__ = [
    "ComplexExpression",
    "FunctionExpression",
    "MathItem",
    "MathExpression",
    "TimeOffsetExpression",
    "CandleRangeExpression",
    "AggregationExpression",
    "ListExpression",
]
