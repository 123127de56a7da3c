"""
Condition algebra: expression and condition nodes, path editing, rendering.

Nodes are immutable values. Structural edits go through the functions in
``paths`` and return a new root; rendering goes through ``render``.

Usage:
    from strategy_conditions.conditions import (
        create_condition, create_group_condition, create_indicator_expression,
        create_constant_expression, group_condition_to_string,
    )

    rsi = create_indicator_expression("rsi_14", "value")
    root = create_group_condition("AND", [create_condition(">", rsi, create_constant_expression("number", 70))])
    group_condition_to_string(root, context)
"""

from .errors import ConditionTreeError, InvalidPathError, InvalidGroupSizeError
from .nodes import *  # noqa: F401,F403
from .nodes import __all__ as _nodes_all
from .paths import (
    DROP_POSITIONS,
    get_at,
    find_path,
    iter_nodes,
    get_all_condition_paths,
    get_all_groups,
    clone_node,
    set_at,
    insert_at,
    remove_many,
    duplicate_many,
    is_valid_drop,
    move_to,
    group,
    ungroup,
    prune_empty_groups,
)
from .render import (
    UNKNOWN_EXPRESSION,
    EXPRESSION_ERROR,
    INCOMPLETE_CONDITION,
    CONDITION_ERROR,
    NO_CONDITIONS,
    RenderContext,
    expression_to_string,
    condition_to_string,
    group_condition_to_string,
    node_to_string,
)

__all__ = [
    # Errors
    "ConditionTreeError",
    "InvalidPathError",
    "InvalidGroupSizeError",
    # Path editing
    "DROP_POSITIONS",
    "get_at",
    "find_path",
    "iter_nodes",
    "get_all_condition_paths",
    "get_all_groups",
    "clone_node",
    "set_at",
    "insert_at",
    "remove_many",
    "duplicate_many",
    "is_valid_drop",
    "move_to",
    "group",
    "ungroup",
    "prune_empty_groups",
    # Rendering
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
] + list(_nodes_all)
