"""
Path-addressed editing of condition trees.

A path is a tuple of zero-based indices into successive ``conditions``
tuples, starting at the root GroupCondition. Paths are lookup keys only:
every structural edit invalidates paths computed before it.

All edits are copy-on-write. They take a root and return a new root built
with ``dataclasses.replace`` along the edited paths; untouched subtrees are
shared with the old root, which stays a valid snapshot.

Ordering rules for multi-path edits:
- remove_many / ungroup: deepest first, then highest index first, so an
  edit never shifts the index of a path still waiting to be processed
- duplicate_many: shallowest first, then lowest index first, shifting the
  pending sibling paths forward after each insertion

Every path is validated before the first edit, so a call that raises
InvalidPathError never leaves a partial result behind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import replace
from typing import Optional

from ..config import get_config
from .errors import InvalidGroupSizeError, InvalidPathError
from .nodes import (
    AND,
    Condition,
    ConditionNode,
    GroupCondition,
    Path,
    create_group_condition,
    new_condition_id,
    new_group_id,
)

logger = logging.getLogger(__name__)

DROP_POSITIONS = frozenset({"before", "after", "inside"})


# =============================================================================
# Path Helpers
# =============================================================================

def _as_path(path: Iterable[int]) -> Path:
    return tuple(path)


def _sort_deepest_first(paths: Iterable[Path]) -> list[Path]:
    return sorted(set(paths), key=lambda p: (len(p), p), reverse=True)


def _sort_shallowest_first(paths: Iterable[Path]) -> list[Path]:
    return sorted(set(paths), key=lambda p: (len(p), p))


def _is_prefix(prefix: Path, path: Path) -> bool:
    return len(prefix) <= len(path) and path[:len(prefix)] == prefix


def _collapse_descendants(paths: Iterable[Path]) -> list[Path]:
    """Drop paths nested under another path of the set; result is in document order."""
    ordered = sorted(set(paths))
    kept: list[Path] = []
    for path in ordered:
        if not any(_is_prefix(ancestor, path) for ancestor in kept):
            kept.append(path)
    return kept


def _adjust_for_removals(path: Path, removed: Iterable[Path]) -> Path:
    """
    Recompute a path after the given (non-ancestor) paths are removed.

    Each removed earlier sibling of an ancestor of path decrements that
    ancestor's index by one.
    """
    adjusted = list(path)
    for gone in removed:
        depth = len(gone) - 1
        if len(path) > depth and path[:depth] == gone[:depth] and gone[depth] < path[depth]:
            adjusted[depth] -= 1
    return tuple(adjusted)


# =============================================================================
# Lookup
# =============================================================================

def get_at(root: GroupCondition, path: Sequence[int]) -> Optional[ConditionNode]:
    """
    Get the node at path.

    Returns:
        The node, or None if an index is out of range or a leaf
        Condition is indexed into
    """
    node: ConditionNode = root
    for index in path:
        if not isinstance(node, GroupCondition) or not 0 <= index < len(node.conditions):
            return None
        node = node.conditions[index]
    return node


def _require(root: GroupCondition, path: Path) -> ConditionNode:
    node = get_at(root, path)
    if node is None:
        raise InvalidPathError(path, "no node at this path")
    return node


def _require_group(root: GroupCondition, path: Path) -> GroupCondition:
    node = _require(root, path)
    if not isinstance(node, GroupCondition):
        raise InvalidPathError(path, "node is a condition, not a group")
    return node


def _require_non_root(root: GroupCondition, path: Path, action: str) -> ConditionNode:
    if not path:
        raise InvalidPathError(path, f"cannot {action} the root group")
    return _require(root, path)


def find_path(root: GroupCondition, node_id: str) -> Optional[Path]:
    """Path of the node with the given id, or None."""
    for path, node in iter_nodes(root):
        if node.id == node_id:
            return path
    return None


def iter_nodes(root: GroupCondition) -> Iterator[tuple[Path, ConditionNode]]:
    """Yield (path, node) for every node in document order, root first."""
    stack: list[tuple[Path, ConditionNode]] = [((), root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        if isinstance(node, GroupCondition):
            for index in range(len(node.conditions) - 1, -1, -1):
                stack.append((path + (index,), node.conditions[index]))


def get_all_condition_paths(root: GroupCondition) -> list[Path]:
    """Paths of every node below the root (conditions and groups), document order."""
    return [path for path, _ in iter_nodes(root) if path]


def get_all_groups(root: GroupCondition) -> list[dict]:
    """
    Groups below the root, for move-to-group pickers.

    Returns:
        [{"path": (0, 2), "label": "OR Group (3 items)"}, ...]
    """
    return [
        {"path": path, "label": f"{node.group_logic} Group ({len(node.conditions)} items)"}
        for path, node in iter_nodes(root)
        if path and isinstance(node, GroupCondition)
    ]


# =============================================================================
# Copy-on-write Primitives
# =============================================================================

def _update_at(node: ConditionNode, path: Path, update: Callable[[ConditionNode], ConditionNode]) -> ConditionNode:
    """Rebuild the nodes along an already validated path, applying update at its end."""
    if not path:
        return update(node)
    index = path[0]
    children = node.conditions
    new_child = _update_at(children[index], path[1:], update)
    return replace(node, conditions=children[:index] + (new_child,) + children[index + 1:])


def _splice(root: GroupCondition, parent: Path, start: int, stop: int, nodes: tuple) -> GroupCondition:
    """Replace children[start:stop] of the group at parent with nodes."""
    def update(group: ConditionNode) -> ConditionNode:
        children = group.conditions
        return replace(group, conditions=children[:start] + nodes + children[stop:])
    return _update_at(root, parent, update)


def clone_node(node: ConditionNode) -> ConditionNode:
    """Copy a subtree, giving every condition and group a fresh id."""
    if isinstance(node, GroupCondition):
        return replace(
            node,
            id=new_group_id(),
            conditions=tuple(clone_node(child) for child in node.conditions),
        )
    return replace(node, id=new_condition_id())


def _check_node(node: object) -> None:
    if not isinstance(node, (Condition, GroupCondition)):
        raise ValueError(f"Expected Condition or GroupCondition, got {type(node).__name__}")


def _should_prune(prune_empty: Optional[bool]) -> bool:
    if prune_empty is None:
        return get_config().editing.prune_empty_groups
    return prune_empty


# =============================================================================
# Single-node Edits
# =============================================================================

def set_at(root: GroupCondition, path: Sequence[int], node: ConditionNode) -> GroupCondition:
    """
    Replace the node at path.

    An empty path makes node the new root, which must then be a group.

    Raises:
        InvalidPathError: If path does not address a node
    """
    path = _as_path(path)
    _check_node(node)
    if not path:
        if not isinstance(node, GroupCondition):
            raise InvalidPathError(path, "the root must be a GroupCondition")
        return node
    _require(root, path)
    return _splice(root, path[:-1], path[-1], path[-1] + 1, (node,))


def insert_at(
    root: GroupCondition,
    parent_path: Sequence[int],
    index: int,
    node: ConditionNode,
) -> GroupCondition:
    """
    Insert node into the children of the group at parent_path.

    Raises:
        InvalidPathError: If parent_path is not a group or index is
            outside 0..len(children)
    """
    parent_path = _as_path(parent_path)
    _check_node(node)
    parent = _require_group(root, parent_path)
    if not 0 <= index <= len(parent.conditions):
        raise InvalidPathError(
            parent_path + (index,),
            f"insert index out of range (group has {len(parent.conditions)} children)",
        )
    return _splice(root, parent_path, index, index, (node,))


# =============================================================================
# Multi-node Edits
# =============================================================================

def _remove_validated(root: GroupCondition, paths: Iterable[Path]) -> GroupCondition:
    for path in _sort_deepest_first(paths):
        root = _splice(root, path[:-1], path[-1], path[-1] + 1, ())
    return root


def remove_many(
    root: GroupCondition,
    paths: Iterable[Sequence[int]],
    prune_empty: Optional[bool] = None,
) -> GroupCondition:
    """
    Remove every addressed node.

    Groups left without children are kept unless prune_empty is true
    (None reads the editing config).

    Raises:
        InvalidPathError: If a path is invalid or addresses the root
    """
    paths = [_as_path(p) for p in paths]
    for path in paths:
        _require_non_root(root, path, "remove")

    result = _remove_validated(root, paths)
    if _should_prune(prune_empty):
        result = prune_empty_groups(result)
    return result


def duplicate_many(root: GroupCondition, paths: Iterable[Sequence[int]]) -> GroupCondition:
    """
    Insert a clone of every addressed node right after the original.

    Clones get fresh ids throughout their subtree.

    Raises:
        InvalidPathError: If a path is invalid or addresses the root
    """
    pending = [_as_path(p) for p in paths]
    for path in pending:
        _require_non_root(root, path, "duplicate")

    pending = _sort_shallowest_first(pending)
    result = root
    while pending:
        path = pending.pop(0)
        parent, index = path[:-1], path[-1]
        result = _splice(result, parent, index + 1, index + 1, (clone_node(get_at(result, path)),))

        depth = len(parent)
        pending = [
            p[:depth] + (p[depth] + 1,) + p[depth + 1:]
            if len(p) > depth and p[:depth] == parent and p[depth] > index
            else p
            for p in pending
        ]
    return result


def is_valid_drop(
    source_paths: Iterable[Sequence[int]],
    target_path: Sequence[int],
    position: str,
) -> bool:
    """
    Check that a move would not drop nodes into themselves.

    False when there are no sources, the position is unknown, the target
    equals or descends from a source, or before/after targets the root.
    """
    target = _as_path(target_path)
    sources = [_as_path(p) for p in source_paths]
    if not sources or position not in DROP_POSITIONS:
        return False
    if position != "inside" and not target:
        return False
    return not any(_is_prefix(source, target) for source in sources)


def move_to(
    root: GroupCondition,
    source_paths: Iterable[Sequence[int]],
    target_path: Sequence[int],
    position: str,
    prune_empty: Optional[bool] = None,
) -> GroupCondition:
    """
    Move nodes before, after or inside the target.

    Moved nodes keep their document order. A drop rejected by is_valid_drop
    returns root unchanged.

    Raises:
        InvalidPathError: If a source or the target does not exist, or an
            "inside" target is not a group
    """
    sources = [_as_path(p) for p in source_paths]
    target = _as_path(target_path)
    if not is_valid_drop(sources, target, position):
        logger.debug("Rejected drop of %s %s %s", sources, position, list(target))
        return root

    for path in sources:
        _require(root, path)
    if position == "inside":
        _require_group(root, target)
    else:
        _require(root, target)

    sources = _collapse_descendants(sources)
    moving = tuple(get_at(root, path) for path in sources)

    result = _remove_validated(root, sources)
    adjusted = _adjust_for_removals(target, sources)
    if position == "inside":
        parent, index = adjusted, len(get_at(result, adjusted).conditions)
    elif position == "before":
        parent, index = adjusted[:-1], adjusted[-1]
    else:
        parent, index = adjusted[:-1], adjusted[-1] + 1

    result = _splice(result, parent, index, index, moving)
    if _should_prune(prune_empty):
        result = prune_empty_groups(result)
    return result


def group(
    root: GroupCondition,
    paths: Iterable[Sequence[int]],
    logic: str = AND,
) -> GroupCondition:
    """
    Wrap the addressed nodes into a new group.

    The group goes into the parent of the first selected node (document
    order), at that node's index. Selected nodes nested under another
    selected node move with their ancestor and are not counted twice.

    Raises:
        InvalidGroupSizeError: If fewer than two distinct nodes are selected
        InvalidPathError: If a path is invalid or addresses the root
    """
    selected = [_as_path(p) for p in paths]
    for path in selected:
        _require_non_root(root, path, "group")

    selected = _collapse_descendants(selected)
    if len(selected) < 2:
        raise InvalidGroupSizeError(len(selected))

    first = selected[0]
    wrapper = create_group_condition(logic, [get_at(root, path) for path in selected])

    result = _remove_validated(root, selected)
    parent = _adjust_for_removals(first[:-1], selected)
    return _splice(result, parent, first[-1], first[-1], (wrapper,))


def ungroup(root: GroupCondition, paths: Iterable[Sequence[int]]) -> GroupCondition:
    """
    Replace each addressed group with its children, in place.

    Raises:
        InvalidPathError: If a path is invalid, addresses the root, or
            addresses a condition rather than a group
    """
    targets = [_as_path(p) for p in paths]
    for path in targets:
        _require_non_root(root, path, "ungroup")
        _require_group(root, path)

    result = root
    for path in _sort_deepest_first(targets):
        inner = get_at(result, path)
        result = _splice(result, path[:-1], path[-1], path[-1] + 1, inner.conditions)
    return result


# =============================================================================
# Cleanup
# =============================================================================

def prune_empty_groups(root: GroupCondition) -> GroupCondition:
    """
    Remove groups left without children, bottom-up.

    A group whose only children were empty groups is removed too. The
    root is kept even when it ends up empty.
    """
    def prune(node: GroupCondition) -> GroupCondition:
        kept = []
        changed = False
        for child in node.conditions:
            if isinstance(child, GroupCondition):
                pruned = prune(child)
                changed = changed or pruned is not child
                if not pruned.conditions:
                    changed = True
                    continue
                kept.append(pruned)
            else:
                kept.append(child)
        return replace(node, conditions=tuple(kept)) if changed else node

    return prune(root)


__all__ = [
    "DROP_POSITIONS",
    "get_at",
    "set_at",
    "insert_at",
    "remove_many",
    "duplicate_many",
    "is_valid_drop",
    "move_to",
    "group",
    "ungroup",
    "get_all_condition_paths",
    "get_all_groups",
    "find_path",
    "iter_nodes",
    "clone_node",
    "prune_empty_groups",
]
