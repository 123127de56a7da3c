"""
Developer preview of a condition tree in the terminal.

    AND (2 items)
    ├── TI.5m.RSI.value > 70
    └── OR (2 items)
        ├── TI.LTP crosses_above Entry Price (pos-1)
        └── Realized P&L (Overall) < -500
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.text import Text
from rich.tree import Tree

from ..conditions import GroupCondition, RenderContext, condition_to_string


def _group_label(group: GroupCondition, path: tuple) -> str:
    location = f" [dim]@ {escape(str(list(path)))}[/]" if path else ""
    return f"[bold cyan]{group.group_logic}[/] [dim]({len(group.conditions)} items)[/]{location}"


def build_condition_tree(
    root: GroupCondition,
    context: RenderContext | dict | None = None,
    show_paths: bool = False,
) -> Tree:
    """
    Build a rich Tree for a condition tree.

    Args:
        root: Root group
        context: Render context (or instrument node data) for leaf labels
        show_paths: Append each node's path to its label

    Returns:
        Tree with groups as branches and rendered conditions as leaves
    """
    tree = Tree(_group_label(root, ()))

    def add_group(group: GroupCondition, parent: Tree, path: tuple):
        if not group.conditions:
            parent.add("[dim]No conditions defined[/]")
            return
        for index, child in enumerate(group.conditions):
            child_path = path + (index,)
            if isinstance(child, GroupCondition):
                branch = parent.add(_group_label(child, child_path if show_paths else ()))
                add_group(child, branch, child_path)
            else:
                # Rendered conditions contain brackets; keep them out of markup
                label = Text(condition_to_string(child, context))
                if show_paths:
                    label.append(f" @ {list(child_path)}", style="dim")
                parent.add(label)

    add_group(root, tree, ())
    return tree


def print_condition_tree(
    root: GroupCondition,
    context: RenderContext | dict | None = None,
    console: Optional[Console] = None,
    show_paths: bool = False,
) -> None:
    """Print a condition tree preview."""
    (console or Console()).print(build_condition_tree(root, context, show_paths))


__all__ = [
    "build_condition_tree",
    "print_condition_tree",
]
