"""
Expression and condition node types.

Nodes are frozen dataclasses, so every tree edit builds new nodes along the
edited path and shares the rest with the previous tree.

Node Categories:
- Value expressions: ConstantExpression, IndicatorExpression, CandleDataExpression, ...
- Composite expressions: MathExpression, FunctionExpression, AggregationExpression, ...
- Condition: lhs OPERATOR rhs[, rhs_upper]
- GroupCondition: AND/OR container of conditions and groups

Type Hierarchy:
    Expression = ConstantExpression | IndicatorExpression | ... | UnknownExpression
    ConditionNode = Condition | GroupCondition

Usage:
    # RSI > 70 AND Close < 100
    root = create_group_condition("AND", [
        create_condition(
            ">",
            IndicatorExpression(indicator_id="rsi_14", instrument_type="TI", timeframe_id="tf_5m", offset=0),
            create_constant_expression("number", 70),
        ),
        create_condition(
            "<",
            CandleDataExpression(field="Close", instrument_type="TI", timeframe_id="tf_1m"),
            create_constant_expression("number", 100),
        ),
    ])
"""

# Constants
from .constants import (
    EXPRESSION_TYPES,
    COMPARISON_OPERATORS,
    CROSSOVER_OPERATORS,
    RANGE_OPERATORS,
    MEMBERSHIP_OPERATORS,
    VALID_OPERATORS,
    DEFAULT_OPERATOR,
    AND,
    OR,
    GROUP_LOGIC,
    MATH_OPERATORS,
)

# Value expressions
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

# Composite expressions
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

# Condition nodes
from .condition import Condition
from .group import GroupCondition

# Type aliases
from .types import (
    Expression,
    ConditionNode,
    Path,
    EXPRESSION_CLASSES,
    is_expression,
    expression_type,
)

# Factories
from .factories import (
    new_condition_id,
    new_group_id,
    create_constant_expression,
    create_indicator_expression,
    create_candle_data_expression,
    create_live_data_expression,
    create_time_expression,
    create_current_time_expression,
    create_position_data_expression,
    create_position_time_expression,
    create_trailing_variable_expression,
    create_pnl_expression,
    create_underlying_pnl_expression,
    create_external_trigger_expression,
    create_node_variable_expression,
    create_global_variable_expression,
    create_complex_expression,
    create_function_expression,
    create_math_expression,
    add_math_item,
    remove_math_item,
    create_time_offset_expression,
    create_candle_range_expression,
    create_aggregation_expression,
    create_list_expression,
    EXPRESSION_FACTORIES,
    create_default_expression,
    create_condition,
    create_group_condition,
    create_default_condition,
    create_default_group_condition,
)

# Serialization
from .serialization import (
    expression_to_dict,
    expression_from_dict,
    is_group_dict,
    condition_to_dict,
    condition_from_dict,
    group_condition_from_dict,
)


__all__ = [
    # Constants
    "EXPRESSION_TYPES",
    "COMPARISON_OPERATORS",
    "CROSSOVER_OPERATORS",
    "RANGE_OPERATORS",
    "MEMBERSHIP_OPERATORS",
    "VALID_OPERATORS",
    "DEFAULT_OPERATOR",
    "AND",
    "OR",
    "GROUP_LOGIC",
    "MATH_OPERATORS",
    # Value expressions
    "ConstantExpression",
    "IndicatorExpression",
    "CandleDataExpression",
    "LiveDataExpression",
    "TimeFunctionExpression",
    "CurrentTimeExpression",
    "PositionTimeExpression",
    "PositionDataExpression",
    "TrailingVariableExpression",
    "PnlExpression",
    "UnderlyingPnlExpression",
    "ExternalTriggerExpression",
    "NodeVariableExpression",
    "GlobalVariableExpression",
    "UnknownExpression",
    # Composite expressions
    "ComplexExpression",
    "FunctionExpression",
    "MathItem",
    "MathExpression",
    "TimeOffsetExpression",
    "CandleRangeExpression",
    "AggregationExpression",
    "ListExpression",
    # Condition nodes
    "Condition",
    "GroupCondition",
    # Type aliases
    "Expression",
    "ConditionNode",
    "Path",
    "EXPRESSION_CLASSES",
    "is_expression",
    "expression_type",
    # Factories
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
    # Serialization
    "expression_to_dict",
    "expression_from_dict",
    "is_group_dict",
    "condition_to_dict",
    "condition_from_dict",
    "group_condition_from_dict",
]
