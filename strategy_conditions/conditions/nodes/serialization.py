"""
Serialization between document dicts and typed nodes.

Documents use camelCase keys and a "type" discriminant on expressions;
nodes use snake_case attributes. ``None`` attributes are omitted on output.

Loading is forgiving: legacy condition shapes are repaired (and the repair
logged at DEBUG), unknown expression tags become UnknownExpression, and an
expression whose fields cannot form a valid node degrades to
UnknownExpression rather than raising.
"""

from __future__ import annotations

import logging
import re
from dataclasses import fields
from typing import Any, Optional

from ...utils.helpers import safe_int
from . import constants as c
from .base import UnknownExpression
from .composite import CandleRangeExpression, ListExpression, MathItem
from .condition import Condition
from .group import GroupCondition
from .factories import (
    create_constant_expression,
    new_condition_id,
    new_group_id,
)
from .types import EXPRESSION_CLASSES, ConditionNode, Expression

logger = logging.getLogger(__name__)

# Integer attributes older editors sometimes stored as strings
_INT_FIELDS = frozenset({
    "offset", "start_index", "end_index", "reference_candle_number", "candle_count",
})

_CAMEL_BOUNDARY = re.compile(r"_([a-z])")


def to_camel(name: str) -> str:
    """indicator_id -> indicatorId"""
    return _CAMEL_BOUNDARY.sub(lambda m: m.group(1).upper(), name)


# =============================================================================
# Expressions
# =============================================================================

def expression_to_dict(expr: Expression) -> dict:
    """Convert an expression node to its document dict."""
    if isinstance(expr, UnknownExpression):
        return dict(expr.payload)

    cls = type(expr)
    nested = getattr(cls, "nested_fields", {})
    result: dict[str, Any] = {"type": cls.type_tag}
    for f in fields(expr):
        value = getattr(expr, f.name)
        if value is None:
            continue
        kind = nested.get(f.name)
        if kind == "expression" or kind == "candle_range":
            value = expression_to_dict(value)
        elif kind == "expressions":
            value = [expression_to_dict(item) for item in value]
        elif kind == "math_items":
            value = [_math_item_to_dict(item) for item in value]
        elif isinstance(value, dict):
            value = dict(value)
        result[to_camel(f.name)] = value
    return result


def _math_item_to_dict(item: MathItem) -> dict:
    result: dict[str, Any] = {}
    if item.operator is not None:
        result["operator"] = item.operator
    result["expression"] = expression_to_dict(item.expression)
    return result


def expression_from_dict(data: Any) -> Optional[Expression]:
    """
    Build an expression node from a document dict.

    Returns:
        The node, None if data is not a dict, or UnknownExpression when the
        tag is unrecognized or the fields are unusable
    """
    if not isinstance(data, dict):
        return None

    tag = data.get("type")
    cls = EXPRESSION_CLASSES.get(tag) if isinstance(tag, str) else None
    if cls is None:
        return UnknownExpression(type_name=str(tag or ""), payload=dict(data))

    try:
        return cls(**_expression_kwargs(cls, data))
    except (TypeError, ValueError) as e:
        logger.warning("Unusable '%s' expression kept as unknown: %s", tag, e)
        return UnknownExpression(type_name=tag, payload=dict(data))


def _expression_kwargs(cls: type, data: dict) -> dict[str, Any]:
    nested = getattr(cls, "nested_fields", {})
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        key = to_camel(f.name)
        if key not in data:
            continue
        value = data[key]
        kind = nested.get(f.name)
        if kind == "expression":
            value = expression_from_dict(value)
        elif kind == "candle_range":
            value = expression_from_dict(value)
            if not isinstance(value, CandleRangeExpression):
                value = None
        elif kind == "expressions":
            value = _expressions_from_list(value)
        elif kind == "math_items":
            value = tuple(
                MathItem(expression_from_dict(item.get("expression")) or create_constant_expression(),
                         item.get("operator"))
                for item in (value or [])
                if isinstance(item, dict)
            )
        elif f.name in _INT_FIELDS:
            value = safe_int(value, default=None)
        kwargs[f.name] = value
    return kwargs


def _expressions_from_list(value: Any) -> Optional[tuple]:
    if value is None:
        return None
    if not isinstance(value, list):
        return ()
    items = (expression_from_dict(item) for item in value)
    return tuple(item for item in items if item is not None)


# =============================================================================
# Conditions and Groups
# =============================================================================

def is_group_dict(data: Any) -> bool:
    """True if a document dict has the group shape."""
    return isinstance(data, dict) and ("groupLogic" in data or "conditions" in data)


def condition_to_dict(node: ConditionNode) -> dict:
    """Convert a Condition or GroupCondition to its document dict."""
    if isinstance(node, GroupCondition):
        return {
            "id": node.id,
            "groupLogic": node.group_logic,
            "conditions": [condition_to_dict(child) for child in node.conditions],
        }
    result: dict[str, Any] = {"id": node.id, "operator": node.operator}
    if node.lhs is not None:
        result["lhs"] = expression_to_dict(node.lhs)
    if node.rhs is not None:
        result["rhs"] = expression_to_dict(node.rhs)
    if node.rhs_upper is not None:
        result["rhsUpper"] = expression_to_dict(node.rhs_upper)
    return result


def condition_from_dict(data: dict) -> ConditionNode:
    """
    Build a Condition or GroupCondition from a document dict.

    Legacy shapes are repaired:
    - expressionA/expressionB become lhs/rhs
    - missing ids are generated, missing operator/groupLogic get defaults
    - missing sides become zero constants
    - range operators without rhsUpper get a zero upper bound, other
      operators drop rhsUpper
    - membership operators wrap a non-list rhs into a list

    Raises:
        ValueError: If data is not a dict
    """
    if not isinstance(data, dict):
        raise ValueError(f"Condition data must be a dict, got {type(data).__name__}")
    if is_group_dict(data):
        return group_condition_from_dict(data)
    return _leaf_condition_from_dict(data)


def group_condition_from_dict(data: dict) -> GroupCondition:
    group_id = data.get("id")
    if not group_id:
        group_id = new_group_id()
        logger.debug("Generated missing group id %s", group_id)

    logic = data.get("groupLogic")
    if logic not in c.GROUP_LOGIC:
        logger.debug("Group %s: group logic %r defaulted to AND", group_id, logic)
        logic = c.AND

    children = tuple(
        condition_from_dict(child)
        for child in (data.get("conditions") or [])
        if isinstance(child, dict)
    )
    return GroupCondition(id=group_id, group_logic=logic, conditions=children)


def _leaf_condition_from_dict(data: dict) -> Condition:
    condition_id = data.get("id")
    if not condition_id:
        condition_id = new_condition_id()
        logger.debug("Generated missing condition id %s", condition_id)

    operator = data.get("operator")
    if operator not in c.VALID_OPERATORS:
        logger.debug("Condition %s: operator %r defaulted to '%s'", condition_id, operator, c.DEFAULT_OPERATOR)
        operator = c.DEFAULT_OPERATOR

    lhs = _side(data, "lhs", "expressionA", condition_id)
    rhs = _side(data, "rhs", "expressionB", condition_id)

    rhs_upper = expression_from_dict(data.get("rhsUpper"))
    if operator in c.RANGE_OPERATORS and rhs_upper is None:
        logger.debug("Condition %s: missing rhsUpper for '%s' set to 0", condition_id, operator)
        rhs_upper = create_constant_expression()
    elif operator not in c.RANGE_OPERATORS and rhs_upper is not None:
        logger.debug("Condition %s: dropped rhsUpper for '%s'", condition_id, operator)
        rhs_upper = None

    if operator in c.MEMBERSHIP_OPERATORS and not isinstance(rhs, ListExpression):
        logger.debug("Condition %s: wrapped rhs into a list for '%s'", condition_id, operator)
        rhs = ListExpression(items=(rhs,))

    return Condition(id=condition_id, operator=operator, lhs=lhs, rhs=rhs, rhs_upper=rhs_upper)


def _side(data: dict, key: str, legacy_key: str, condition_id: str) -> Expression:
    expr = expression_from_dict(data.get(key))
    if expr is not None:
        return expr
    expr = expression_from_dict(data.get(legacy_key))
    if expr is not None:
        logger.debug("Condition %s: %s read from legacy %s", condition_id, key, legacy_key)
        return expr
    logger.debug("Condition %s: missing %s set to 0", condition_id, key)
    return create_constant_expression()


__all__ = [
    "to_camel",
    "expression_to_dict",
    "expression_from_dict",
    "is_group_dict",
    "condition_to_dict",
    "condition_from_dict",
    "group_condition_from_dict",
]
