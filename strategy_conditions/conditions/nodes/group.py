"""
Group condition node.

A GroupCondition is an AND/OR container that exclusively owns an ordered
tuple of Condition and nested GroupCondition children. The root of every
trigger tree is a GroupCondition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import GROUP_LOGIC
from .condition import Condition

if TYPE_CHECKING:
    from .types import ConditionNode


@dataclass(frozen=True)
class GroupCondition:
    """
    AND/OR group of conditions.

    Attributes:
        id: Stable identifier ("group-<ms>-<rand>")
        group_logic: "AND" or "OR"
        conditions: Tuple of Condition/GroupCondition children (may be empty)

    Examples:
        GroupCondition("group-1", "AND", (cond1, cond2))  # cond1 AND cond2
    """
    id: str
    group_logic: str
    conditions: tuple["ConditionNode", ...] = ()

    def __post_init__(self):
        """Validate logic and children."""
        if not isinstance(self.conditions, tuple):
            object.__setattr__(self, "conditions", tuple(self.conditions))

        if self.group_logic not in GROUP_LOGIC:
            raise ValueError(
                f"GroupCondition: unknown group logic '{self.group_logic}'. "
                f"Must be one of: {sorted(GROUP_LOGIC)}"
            )

        for child in self.conditions:
            if not isinstance(child, (Condition, GroupCondition)):
                raise ValueError(
                    "GroupCondition: children must be Condition or GroupCondition, "
                    f"got {type(child).__name__}"
                )

    @property
    def is_empty(self) -> bool:
        return not self.conditions

    def __repr__(self) -> str:
        children_str = ", ".join(repr(child) for child in self.conditions)
        return f"{self.group_logic.title()}({children_str})"


__all__ = [
    "GroupCondition",
]
