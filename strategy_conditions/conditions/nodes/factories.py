"""
Factory functions for expression and condition nodes.

Every factory returns a fully-defaulted, valid node. Nodes are frozen, so a
factory result can be placed anywhere in a tree without aliasing concerns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional

from ...config.constants import TRADING_INSTRUMENT
from ...utils.helpers import generate_id
from . import constants as c
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
)
from .composite import (
    ComplexExpression,
    FunctionExpression,
    MathItem,
    MathExpression,
    TimeOffsetExpression,
    CandleRangeExpression,
    AggregationExpression,
    ListExpression,
)
from .condition import Condition
from .group import GroupCondition
from .types import ConditionNode, Expression

logger = logging.getLogger(__name__)


# =============================================================================
# Identifiers
# =============================================================================

def new_condition_id() -> str:
    return generate_id("condition")


def new_group_id() -> str:
    return generate_id("group")


# =============================================================================
# Value Expressions
# =============================================================================

def create_constant_expression(value_type: str = "number", value: Any = 0) -> ConstantExpression:
    """
    Create a constant, filling the typed field that matches value_type.

    A value of the wrong Python type falls back to the type's zero value
    (0, "", False).
    """
    if value_type == "number":
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        return ConstantExpression(value_type, value, number_value=value if is_number else 0)
    if value_type == "string":
        return ConstantExpression(value_type, value, string_value=value if isinstance(value, str) else "")
    if value_type == "boolean":
        return ConstantExpression(value_type, value, boolean_value=value if isinstance(value, bool) else False)
    if value_type == "status":
        return ConstantExpression(value_type, value, status_value=value if isinstance(value, str) else "")
    return ConstantExpression(value_type, value)


def create_indicator_expression(
    indicator_id: str = "",
    indicator_param: str = "",
    indicator_field_type: str = "value",
    indicator_param_type: str = "input",
) -> IndicatorExpression:
    return IndicatorExpression(
        indicator_id=indicator_id,
        indicator_param=indicator_param,
        indicator_field_type=indicator_field_type,
        indicator_param_type=indicator_param_type,
        name="",
        parameter="",
        offset=0,
    )


def create_candle_data_expression() -> CandleDataExpression:
    """Empty market data selection; instrument, timeframe and field are picked later."""
    return CandleDataExpression(data_field="")


def create_live_data_expression(data_field: str = "ltp") -> LiveDataExpression:
    return LiveDataExpression(data_field=data_field, field=data_field, instrument_type=TRADING_INSTRUMENT)


def create_time_expression(time_value: str = "09:00", operator: str = ">=") -> TimeFunctionExpression:
    return TimeFunctionExpression(time_value=time_value, operator=operator)


def create_current_time_expression() -> CurrentTimeExpression:
    return CurrentTimeExpression()


def create_position_data_expression(
    position_field: str = "entryPrice",
    vpi: str = "",
) -> PositionDataExpression:
    return PositionDataExpression(position_field=position_field, vpi=vpi or None, field=position_field)


def create_position_time_expression(
    time_field: str = "entryTime",
    vpi: Optional[str] = None,
) -> PositionTimeExpression:
    return PositionTimeExpression(time_field=time_field, vpi=vpi)


def create_trailing_variable_expression(
    variable_id: Optional[str] = None,
    trailing_field: str = "trailingPosition",
) -> TrailingVariableExpression:
    return TrailingVariableExpression(trailing_field=trailing_field, variable_id=variable_id)


def create_pnl_expression(
    pnl_type: str = "unrealized",
    scope: str = "overall",
    vpi: Optional[str] = None,
) -> PnlExpression:
    return PnlExpression(pnl_type=pnl_type, scope=scope, vpi=vpi)


def create_underlying_pnl_expression(
    pnl_type: str = "unrealized",
    scope: str = "overall",
    vpi: Optional[str] = None,
) -> UnderlyingPnlExpression:
    return UnderlyingPnlExpression(pnl_type=pnl_type, scope=scope, vpi=vpi)


def create_external_trigger_expression(
    trigger_id: str = "",
    trigger_type: str = "",
    parameters: Optional[dict] = None,
) -> ExternalTriggerExpression:
    return ExternalTriggerExpression(
        trigger_id=trigger_id,
        trigger_type=trigger_type,
        parameters=dict(parameters) if parameters else {},
    )


def create_node_variable_expression(node_id: str = "", variable_name: str = "") -> NodeVariableExpression:
    return NodeVariableExpression(node_id=node_id, variable_name=variable_name)


def create_global_variable_expression(variable_id: str = "", variable_name: str = "") -> GlobalVariableExpression:
    return GlobalVariableExpression(variable_id=variable_id, variable_name=variable_name)


# =============================================================================
# Composite Expressions
# =============================================================================

def _zero() -> ConstantExpression:
    return create_constant_expression("number", 0)


def create_complex_expression(
    operation: Optional[str] = None,
    left: Optional[Expression] = None,
    right: Optional[Expression] = None,
) -> ComplexExpression:
    return ComplexExpression(
        expression_string="",
        operation=operation,
        left=left or _zero(),
        right=right or _zero(),
    )


def create_function_expression(
    function_name: str = "max",
    expressions: Optional[Iterable[Expression]] = None,
) -> FunctionExpression:
    items = tuple(expressions or ())
    return FunctionExpression(function_name=function_name, expressions=items or (_zero(), _zero()))


def create_math_expression(items: Optional[Iterable[MathItem]] = None) -> MathExpression:
    items = tuple(items or ())
    return MathExpression(items=items or (MathItem(_zero()),))


def add_math_item(
    math_expr: MathExpression,
    operator: str = "+",
    expression: Optional[Expression] = None,
) -> MathExpression:
    """Append a term to a math expression."""
    return MathExpression(items=math_expr.items + (MathItem(expression or _zero(), operator),))


def remove_math_item(math_expr: MathExpression, index: int) -> MathExpression:
    """
    Remove a term from a math expression.

    Removing the first term clears the operator of the new first term;
    removing the only term leaves a single zero constant.

    Raises:
        IndexError: If index is out of range
    """
    if not 0 <= index < len(math_expr.items):
        raise IndexError(f"Math item index {index} out of range ({len(math_expr.items)} items)")
    items = list(math_expr.items)
    del items[index]
    if index == 0 and items:
        items[0] = MathItem(items[0].expression, None)
    return MathExpression(items=tuple(items) or (MathItem(_zero()),))


def create_time_offset_expression(
    base_time: Optional[Expression] = None,
    offset_type: str = "minutes",
    offset_value: float = 0,
    direction: str = "after",
) -> TimeOffsetExpression:
    return TimeOffsetExpression(
        base_time=base_time or create_current_time_expression(),
        offset_type=offset_type,
        offset_value=offset_value,
        direction=direction,
    )


def create_candle_range_expression(range_type: str = "by_count") -> CandleRangeExpression:
    return CandleRangeExpression(
        range_type=range_type, start_index=0, end_index=5, instrument_type=TRADING_INSTRUMENT
    )


def create_aggregation_expression(
    aggregation_type: str = "max",
    source_type: str = "candle_range",
    candle_range: Optional[CandleRangeExpression] = None,
    expressions: Optional[Iterable[Expression]] = None,
    ohlcv_field: str = "close",
) -> AggregationExpression:
    """
    Create an aggregation over a candle range or an expression list.

    The source matching source_type is filled with a default when omitted.
    """
    if source_type == "expression_list":
        return AggregationExpression(
            aggregation_type=aggregation_type,
            source_type=source_type,
            expressions=tuple(expressions or ()) or (_zero(), _zero()),
        )
    return AggregationExpression(
        aggregation_type=aggregation_type,
        source_type=source_type,
        candle_range=candle_range or create_candle_range_expression(),
        ohlcv_field=ohlcv_field,
    )


def create_list_expression(items: Optional[Iterable[Expression]] = None) -> ListExpression:
    items = tuple(items) if items is not None else (_zero(),)
    return ListExpression(items=items)


# =============================================================================
# Default Expression by Tag
# =============================================================================

EXPRESSION_FACTORIES: dict[str, Callable[[], Expression]] = {
    c.CONSTANT: _zero,
    c.INDICATOR: create_indicator_expression,
    c.CANDLE_DATA: create_candle_data_expression,
    c.LIVE_DATA: create_live_data_expression,
    c.TIME_FUNCTION: create_time_expression,
    c.CURRENT_TIME: create_current_time_expression,
    c.COMPLEX: create_complex_expression,
    c.FUNCTION: create_function_expression,
    c.POSITION_DATA: create_position_data_expression,
    c.EXTERNAL_TRIGGER: create_external_trigger_expression,
    c.NODE_VARIABLE: create_node_variable_expression,
    c.GLOBAL_VARIABLE: create_global_variable_expression,
    c.PNL: create_pnl_expression,
    c.UNDERLYING_PNL: create_underlying_pnl_expression,
    c.MATH_EXPRESSION: create_math_expression,
    c.TRAILING_VARIABLE: create_trailing_variable_expression,
    c.POSITION_TIME: create_position_time_expression,
    c.TIME_OFFSET: create_time_offset_expression,
    c.CANDLE_RANGE: create_candle_range_expression,
    c.AGGREGATION: create_aggregation_expression,
    c.LIST: create_list_expression,
}


def create_default_expression(type_tag: str) -> Expression:
    """
    Create the default expression for a document type tag.

    Unknown tags fall back to a numeric zero constant.
    """
    factory = EXPRESSION_FACTORIES.get(type_tag)
    if factory is None:
        logger.warning("Unknown expression type '%s', defaulting to constant", type_tag)
        return _zero()
    return factory()


# =============================================================================
# Conditions and Groups
# =============================================================================

def create_condition(
    operator: str = c.DEFAULT_OPERATOR,
    lhs: Optional[Expression] = None,
    rhs: Optional[Expression] = None,
    rhs_upper: Optional[Expression] = None,
) -> Condition:
    """
    Create a condition with a fresh id.

    Missing sides default to zero constants. Range operators get a default
    upper bound; other operators drop rhs_upper. Membership operators wrap a
    non-list rhs into a one-item list. Unknown operators fall back to the
    default operator.
    """
    if operator not in c.VALID_OPERATORS:
        logger.warning("Unknown operator '%s', defaulting to '%s'", operator, c.DEFAULT_OPERATOR)
        operator = c.DEFAULT_OPERATOR
    lhs = lhs or _zero()
    if operator in c.MEMBERSHIP_OPERATORS:
        if rhs is None:
            rhs = create_list_expression()
        elif not isinstance(rhs, ListExpression):
            rhs = ListExpression(items=(rhs,))
    else:
        rhs = rhs or _zero()

    if operator in c.RANGE_OPERATORS:
        rhs_upper = rhs_upper or _zero()
    else:
        rhs_upper = None

    return Condition(id=new_condition_id(), operator=operator, lhs=lhs, rhs=rhs, rhs_upper=rhs_upper)


def create_group_condition(
    group_logic: str = c.AND,
    conditions: Optional[Iterable[ConditionNode]] = None,
) -> GroupCondition:
    """Create a group with a fresh id. Unknown logic falls back to AND."""
    if group_logic not in c.GROUP_LOGIC:
        logger.warning("Unknown group logic '%s', defaulting to '%s'", group_logic, c.AND)
        group_logic = c.AND
    return GroupCondition(id=new_group_id(), group_logic=group_logic, conditions=tuple(conditions or ()))


def create_default_condition() -> Condition:
    """0 > 0 placeholder condition."""
    return create_condition(c.DEFAULT_OPERATOR, _zero(), _zero())


def create_default_group_condition() -> GroupCondition:
    """AND group holding one default condition."""
    return create_group_condition(c.AND, [create_default_condition()])


__all__ = [
    "new_condition_id",
    "new_group_id",
    "create_constant_expression",
    "create_indicator_expression",
    "create_candle_data_expression",
    "create_live_data_expression",
    "create_time_expression",
    "create_current_time_expression",
    "create_position_data_expression",
    "create_position_time_expression",
    "create_trailing_variable_expression",
    "create_pnl_expression",
    "create_underlying_pnl_expression",
    "create_external_trigger_expression",
    "create_node_variable_expression",
    "create_global_variable_expression",
    "create_complex_expression",
    "create_function_expression",
    "create_math_expression",
    "add_math_item",
    "remove_math_item",
    "create_time_offset_expression",
    "create_candle_range_expression",
    "create_aggregation_expression",
    "create_list_expression",
    "EXPRESSION_FACTORIES",
    "create_default_expression",
    "create_condition",
    "create_group_condition",
    "create_default_condition",
    "create_default_group_condition",
]
