"""
String rendering of expressions, conditions and groups.

Produces the human-readable formula shown in condition previews, e.g.

    Current[TI.5m.RSI.value] > 70 AND (TI.LTP crosses_above Entry Price (pos-1) OR Realized P&L (Overall) < -500)

Rendering is a pure function of the node and a read-only RenderContext.
It never raises: unknown variants render "Unknown Expression", and any
failure while rendering is logged and degrades to a placeholder.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Optional

from ..timeframes.models import TimeframeConfig
from ..timeframes.resolver import TimeframeResolver
from ..document import find_instrument_node, node_data, timeframes_from_node_data
from ..utils.helpers import format_scalar
from ..utils.naming import (
    format_expression_display_name,
    format_node_variable_reference,
    normalize_expression_identifier,
    sanitize_expression_name,
)
from .nodes import (
    AggregationExpression,
    CandleDataExpression,
    CandleRangeExpression,
    ComplexExpression,
    Condition,
    ConditionNode,
    ConstantExpression,
    CurrentTimeExpression,
    Expression,
    ExternalTriggerExpression,
    FunctionExpression,
    GlobalVariableExpression,
    GroupCondition,
    IndicatorExpression,
    ListExpression,
    LiveDataExpression,
    MathExpression,
    NodeVariableExpression,
    PnlExpression,
    PositionDataExpression,
    PositionTimeExpression,
    RANGE_OPERATORS,
    TimeFunctionExpression,
    TimeOffsetExpression,
    TrailingVariableExpression,
    UnderlyingPnlExpression,
)
from .nodes.constants import POSITION_FIELD_LABELS

logger = logging.getLogger(__name__)

UNKNOWN_EXPRESSION = "Unknown Expression"
EXPRESSION_ERROR = "Error"
INCOMPLETE_CONDITION = "Incomplete condition"
CONDITION_ERROR = "Error formatting condition"
NO_CONDITIONS = "No conditions defined"

_PNL_LABELS = {"realized": "Realized", "unrealized": "Unrealized"}
_CAMEL_SPLIT = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


# =============================================================================
# Context
# =============================================================================

@dataclass(frozen=True)
class RenderContext:
    """
    Read-only snapshot of the instrument timeframes used for lookups.

    Attributes:
        trading_timeframes: Timeframes of the trading instrument
        supporting_timeframes: Timeframes of the supporting instrument
        resolver: Document resolver; when None, one is built over the
            context's own timeframes
    """
    trading_timeframes: tuple[TimeframeConfig, ...] = ()
    supporting_timeframes: tuple[TimeframeConfig, ...] = ()
    resolver: Optional[TimeframeResolver] = None

    @classmethod
    def from_node_data(cls, data: Optional[dict], resolver: Optional[TimeframeResolver] = None) -> "RenderContext":
        """Context from the data of the node holding instrument configuration."""
        trading, supporting = timeframes_from_node_data(data or {})
        return cls(trading, supporting, resolver)

    @classmethod
    def from_document(cls, document: Any, resolver: Optional[TimeframeResolver] = None) -> "RenderContext":
        return cls.from_node_data(node_data(find_instrument_node(document)), resolver)

    @property
    def all_timeframes(self) -> tuple[TimeframeConfig, ...]:
        return self.trading_timeframes + self.supporting_timeframes

    @cached_property
    def timeframe_resolver(self) -> TimeframeResolver:
        return self.resolver or TimeframeResolver(self.all_timeframes)

    def timeframe_display(self, timeframe_id: Optional[str], legacy_timeframe: Optional[str] = None) -> str:
        """Display string for an expression's timeframe reference ("" if none)."""
        if timeframe_id:
            for config in self.all_timeframes:
                if config.id == timeframe_id and config.display_value:
                    return config.display_value
            return self.timeframe_resolver.get_display_value(timeframe_id)
        return legacy_timeframe or ""

    def find_indicator(self, indicator_key: str) -> tuple[Optional[dict], Optional[TimeframeConfig]]:
        """
        Find indicator metadata by key, trading instrument first.

        Returns:
            (metadata dict, owning timeframe) or (None, None)
        """
        for config in self.all_timeframes:
            metadata = config.indicators.get(indicator_key)
            if isinstance(metadata, dict):
                return metadata, config
        return None, None


_EMPTY_CONTEXT = RenderContext()


def _as_context(context: RenderContext | dict | None) -> RenderContext:
    if context is None:
        return _EMPTY_CONTEXT
    if isinstance(context, dict):
        return RenderContext.from_node_data(context)
    return context


# =============================================================================
# Expressions
# =============================================================================

def expression_to_string(expr: Optional[Expression], context: RenderContext | dict | None = None) -> str:
    """
    Render an expression.

    Args:
        expr: Any expression node
        context: RenderContext, or the instrument node's data dict

    Returns:
        Display string; "Unknown Expression" for unrecognized variants and
        "Error" if rendering failed
    """
    ctx = _as_context(context)
    try:
        return _format(expr, ctx)
    except Exception:
        logger.error("Error formatting expression %r", expr, exc_info=True)
        return EXPRESSION_ERROR


def _format(expr: Any, ctx: RenderContext) -> str:
    match expr:
        case ConstantExpression():
            return _format_constant(expr)
        case IndicatorExpression():
            return _format_indicator(expr, ctx)
        case CandleDataExpression():
            return format_expression_display_name(
                expr.field or "Close",
                instrument_type=expr.instrument_type,
                timeframe=ctx.timeframe_display(expr.timeframe_id, expr.timeframe),
                offset=expr.offset,
            )
        case LiveDataExpression():
            field = expr.field or "LTP"
            if field == "mark":
                field = "LTP"
            return format_expression_display_name(field, instrument_type=expr.instrument_type)
        case TimeFunctionExpression():
            return expr.time_value or "Time"
        case CurrentTimeExpression():
            return "Current Time"
        case PositionTimeExpression():
            return _with_position(_field_label(expr.time_field or "entryTime"), expr.vpi)
        case PositionDataExpression():
            return _with_position(_field_label(expr.field or expr.position_field or "Position Data"), expr.vpi)
        case TrailingVariableExpression():
            return _with_position(_field_label(expr.trailing_field or "trailingPosition"), expr.variable_id)
        case ExternalTriggerExpression():
            return expr.trigger_type or expr.trigger_id or "External Trigger"
        case NodeVariableExpression():
            return format_node_variable_reference(expr.node_id, expr.variable_name)
        case GlobalVariableExpression():
            name = expr.variable_name or expr.variable_id
            return f"Global.{sanitize_expression_name(name)}" if name else "Global Variable"
        case PnlExpression():
            return _format_pnl(expr.pnl_type, expr.scope, expr.vpi)
        case UnderlyingPnlExpression():
            return "Underlying " + _format_pnl(expr.pnl_type, expr.scope, expr.vpi)
        case ComplexExpression():
            if expr.left is not None and expr.right is not None and expr.operation:
                return f"({_format(expr.left, ctx)} {expr.operation} {_format(expr.right, ctx)})"
            return expr.expression_string or "Complex Expression"
        case FunctionExpression():
            if expr.function_name and expr.expressions:
                args = ", ".join(_format(item, ctx) for item in expr.expressions)
                return f"{expr.function_name}({args})"
            return "Function Expression"
        case MathExpression():
            return _format_math(expr, ctx)
        case TimeOffsetExpression():
            sign = "-" if expr.direction == "before" else "+"
            return f"({_format(expr.base_time, ctx)} {sign} {format_scalar(expr.offset_value)} {expr.offset_type})"
        case CandleRangeExpression():
            return _range_path(expr, ctx) + _range_token(expr)
        case AggregationExpression():
            return _format_aggregation(expr, ctx)
        case ListExpression():
            return "[" + ", ".join(_format(item, ctx) for item in expr.items) + "]"
        case _:
            return UNKNOWN_EXPRESSION


def _format_constant(expr: ConstantExpression) -> str:
    for value in (expr.value, expr.number_value, expr.string_value, expr.boolean_value, expr.status_value):
        if value is not None:
            return format_scalar(value)
    return "0"


def _format_indicator(expr: IndicatorExpression, ctx: RenderContext) -> str:
    key = expr.indicator_id or expr.name
    name = "Indicator"
    timeframe = ""
    if key:
        metadata, owner = ctx.find_indicator(key)
        if metadata is not None:
            name = metadata.get("display_name") or metadata.get("indicator_name") or normalize_expression_identifier(key)
            timeframe = owner.display_value
        else:
            name = normalize_expression_identifier(key)

    if not timeframe:
        timeframe = ctx.timeframe_display(expr.timeframe_id, expr.timeframe)

    return format_expression_display_name(
        name,
        instrument_type=expr.instrument_type,
        timeframe=timeframe,
        parameter=expr.indicator_param or expr.parameter,
        offset=expr.offset,
    )


def _field_label(field: str) -> str:
    """entryPrice -> Entry Price"""
    if field in POSITION_FIELD_LABELS:
        return POSITION_FIELD_LABELS[field]
    words = _CAMEL_SPLIT.sub(" ", field)
    return words[:1].upper() + words[1:]


def _with_position(label: str, vpi: Optional[str]) -> str:
    return f"{label} ({vpi})" if vpi else label


def _format_pnl(pnl_type: str, scope: str, vpi: Optional[str]) -> str:
    label = _PNL_LABELS.get(pnl_type, "Total")
    if scope == "overall":
        return f"{label} P&L (Overall)"
    if vpi and vpi != "_any":
        return f"{label} P&L ({vpi})"
    return f"{label} P&L (Position)"


def _format_math(expr: MathExpression, ctx: RenderContext) -> str:
    parts = []
    for index, item in enumerate(expr.items):
        text = _format(item.expression, ctx)
        parts.append(text if index == 0 else f"{item.operator or '+'} {text}")
    return "(" + " ".join(parts) + ")"


# =============================================================================
# Ranges and Aggregation
# =============================================================================

def _range_path(expr: Optional[CandleRangeExpression], ctx: RenderContext) -> str:
    """Dotted instrument.timeframe prefix of a candle range ("" if neither is set)."""
    if expr is None:
        return ""
    parts = [expr.instrument_type, ctx.timeframe_display(expr.timeframe_id, expr.timeframe)]
    return ".".join(part for part in parts if part)


def _reference_label(expr: CandleRangeExpression) -> str:
    match expr.reference_type:
        case "time":
            return expr.reference_time or "time"
        case "candle_number":
            return f"#{expr.reference_candle_number if expr.reference_candle_number is not None else 0}"
        case "position_entry":
            return _with_position("Entry", expr.reference_vpi)
        case "position_exit":
            return _with_position("Exit", expr.reference_vpi)
        case _:
            return "Current"


def _range_token(expr: Optional[CandleRangeExpression]) -> str:
    if expr is None:
        return "[]"
    match expr.range_type:
        case "by_count":
            start = expr.start_index if expr.start_index is not None else 0
            end = expr.end_index if expr.end_index is not None else 0
            return f"[{start}:{end}]"
        case "by_time":
            return f"[{expr.start_time or '--:--'}-{expr.end_time or '--:--'}]"
        case "relative":
            count = expr.candle_count if expr.candle_count is not None else 0
            return f"[{count} {expr.direction or 'before'} {_reference_label(expr)}]"
        case "to_current":
            return f"[{_reference_label(expr)} → now]"
        case _:
            return f"[{expr.range_type}]"


def _format_aggregation(expr: AggregationExpression, ctx: RenderContext) -> str:
    name = (expr.aggregation_type or "").title()
    if expr.source_type == "expression_list":
        items = ", ".join(_format(item, ctx) for item in expr.expressions or ())
        return f"[{items}].{name}"

    field = (expr.ohlcv_field or "close").title()
    path = _range_path(expr.candle_range, ctx)
    base = f"{path}.{field}" if path else field
    return f"{base}{_range_token(expr.candle_range)}.{name}"


# =============================================================================
# Conditions and Groups
# =============================================================================

def condition_to_string(condition: Condition, context: RenderContext | dict | None = None) -> str:
    """
    Render "lhs op rhs" ("lhs between lower and upper" for range operators).

    Returns:
        Display string, "Incomplete condition" when a side is missing, or
        "Error formatting condition" if rendering failed
    """
    ctx = _as_context(context)
    try:
        if condition.lhs is None or condition.rhs is None:
            return INCOMPLETE_CONDITION
        left = expression_to_string(condition.lhs, ctx)
        right = expression_to_string(condition.rhs, ctx)
        if condition.operator in RANGE_OPERATORS:
            if condition.rhs_upper is None:
                return INCOMPLETE_CONDITION
            upper = expression_to_string(condition.rhs_upper, ctx)
            return f"{left} {condition.operator} {right} and {upper}"
        return f"{left} {condition.operator} {right}"
    except Exception:
        logger.error("Error formatting condition %r", condition, exc_info=True)
        return CONDITION_ERROR


def group_condition_to_string(group: Optional[GroupCondition], context: RenderContext | dict | None = None) -> str:
    """
    Render a group, joining children with its logic and wrapping nested groups in parentheses.

    Returns:
        Display string, or "No conditions defined" for a missing or empty group
    """
    if group is None or not group.conditions:
        return NO_CONDITIONS
    ctx = _as_context(context)
    try:
        parts = [
            f"({group_condition_to_string(child, ctx)})"
            if isinstance(child, GroupCondition)
            else condition_to_string(child, ctx)
            for child in group.conditions
        ]
        return f" {group.group_logic} ".join(parts)
    except Exception:
        logger.error("Error formatting group %r", group, exc_info=True)
        return CONDITION_ERROR


def node_to_string(node: ConditionNode, context: RenderContext | dict | None = None) -> str:
    """Render a Condition or GroupCondition."""
    if isinstance(node, GroupCondition):
        return group_condition_to_string(node, context)
    return condition_to_string(node, context)


__all__ = [
    "UNKNOWN_EXPRESSION",
    "EXPRESSION_ERROR",
    "INCOMPLETE_CONDITION",
    "CONDITION_ERROR",
    "NO_CONDITIONS",
    "RenderContext",
    "expression_to_string",
    "condition_to_string",
    "group_condition_to_string",
    "node_to_string",
]
