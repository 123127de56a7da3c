"""
Visitor over raw document data.

Walks node data by shape instead of inspecting every key of every object:
condition trees are walked through groups and condition sides, expressions
through the nested fields their variant declares. Anything else in node
data is descended generically, but only dicts carrying a recognized
expression ``type`` are ever handed to ``visit_expression``, so unrelated
fields named ``timeframe`` are never touched.

Subclasses override ``visit_expression`` (and call ``generic_visit_expression``
to keep descending), following the ast.NodeVisitor pattern.
"""

from __future__ import annotations

from typing import Any

from ..conditions.nodes.serialization import is_group_dict, to_camel
from ..conditions.nodes.types import EXPRESSION_CLASSES
from ..config.constants import CONDITION_TREE_KEYS, INSTRUMENT_CONFIG_KEYS

# Condition keys holding expressions (current and legacy names)
CONDITION_SIDE_KEYS = ("lhs", "rhs", "rhsUpper", "expressionA", "expressionB")


def is_expression_dict(value: Any) -> bool:
    return isinstance(value, dict) and value.get("type") in EXPRESSION_CLASSES


def is_condition_dict(value: Any) -> bool:
    return isinstance(value, dict) and any(key in value for key in CONDITION_SIDE_KEYS)


class ExpressionVisitor:
    """
    Base visitor for expressions inside document node data.

    Args:
        scan_node_data: Also search node data outside the condition tree
            keys (custom variables, action settings) for expressions
    """

    def __init__(self, scan_node_data: bool = True):
        self.scan_node_data = scan_node_data

    # ==================== Entry Points ====================

    def visit_document(self, nodes: list) -> None:
        for node in nodes:
            if isinstance(node, dict) and isinstance(node.get("data"), dict):
                self.visit_node_data(node["data"])

    def visit_node_data(self, data: dict) -> None:
        """Visit condition trees, then (optionally) the rest of the node data."""
        for key in CONDITION_TREE_KEYS:
            if key in data:
                self.visit_condition_tree(data[key])

        if not self.scan_node_data:
            return
        for key, value in data.items():
            if key in CONDITION_TREE_KEYS or key in INSTRUMENT_CONFIG_KEYS:
                continue
            self.generic_visit(value)

    # ==================== Typed Walk ====================

    def visit_condition_tree(self, tree: Any) -> None:
        if is_group_dict(tree):
            children = tree.get("conditions")
            for child in children if isinstance(children, list) else []:
                self.visit_condition_tree(child)
        elif is_condition_dict(tree):
            for key in CONDITION_SIDE_KEYS:
                if is_expression_dict(tree.get(key)):
                    self.visit_expression(tree[key])

    def visit_expression(self, expr: dict) -> None:
        """Called for every expression dict. Default: descend into children."""
        self.generic_visit_expression(expr)

    def generic_visit_expression(self, expr: dict) -> None:
        """Visit the nested expressions declared by the variant's nested_fields."""
        cls = EXPRESSION_CLASSES[expr["type"]]
        for name, kind in getattr(cls, "nested_fields", {}).items():
            value = expr.get(to_camel(name))
            if kind in ("expression", "candle_range"):
                if is_expression_dict(value):
                    self.visit_expression(value)
            elif kind == "expressions":
                for item in value if isinstance(value, list) else []:
                    if is_expression_dict(item):
                        self.visit_expression(item)
            elif kind == "math_items":
                for item in value if isinstance(value, list) else []:
                    inner = item.get("expression") if isinstance(item, dict) else None
                    if is_expression_dict(inner):
                        self.visit_expression(inner)

    # ==================== Generic Fallback ====================

    def generic_visit(self, value: Any) -> None:
        """Descend unknown data, dispatching recognized shapes to the typed walk."""
        if isinstance(value, list):
            for item in value:
                self.generic_visit(item)
        elif isinstance(value, dict):
            if is_expression_dict(value):
                self.visit_expression(value)
            elif is_group_dict(value) or is_condition_dict(value):
                self.visit_condition_tree(value)
            else:
                for item in value.values():
                    self.generic_visit(item)


__all__ = [
    "CONDITION_SIDE_KEYS",
    "is_expression_dict",
    "is_condition_dict",
    "ExpressionVisitor",
]
