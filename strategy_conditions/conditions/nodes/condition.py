"""
Condition node.

This module defines the Condition class, a single comparison
``lhs OPERATOR rhs[, rhs_upper]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .constants import VALID_OPERATORS, RANGE_OPERATORS, MEMBERSHIP_OPERATORS
from .composite import ListExpression

if TYPE_CHECKING:
    from .types import Expression


# =============================================================================
# Condition Node
# =============================================================================

@dataclass(frozen=True)
class Condition:
    """
    A single condition comparing LHS to RHS via an operator.

    Attributes:
        id: Stable identifier ("condition-<ms>-<rand>")
        operator: Operator string (from VALID_OPERATORS)
        lhs: Left-hand side expression
        rhs: Right-hand side expression (ListExpression for in/not_in)
        rhs_upper: Upper bound, present only for between/not_between

    Examples:
        # RSI > 70
        Condition(
            id="condition-1",
            operator=">",
            lhs=IndicatorExpression(indicator_id="rsi_14", timeframe_id="tf_5m"),
            rhs=ConstantExpression(value=70),
        )

        # Close between 100 and 120
        Condition(
            id="condition-2",
            operator="between",
            lhs=CandleDataExpression(field="Close"),
            rhs=ConstantExpression(value=100),
            rhs_upper=ConstantExpression(value=120),
        )
    """
    id: str
    operator: str
    lhs: Optional["Expression"]
    rhs: Optional["Expression"]
    rhs_upper: Optional["Expression"] = None

    def __post_init__(self):
        """Validate operator and operand shape."""
        if self.operator not in VALID_OPERATORS:
            raise ValueError(
                f"Condition: unknown operator '{self.operator}'. "
                f"Valid operators: {sorted(VALID_OPERATORS)}"
            )

        if self.operator in RANGE_OPERATORS:
            if self.rhs_upper is None:
                raise ValueError(
                    f"Condition: operator '{self.operator}' requires rhs_upper"
                )
        elif self.rhs_upper is not None:
            raise ValueError(
                f"Condition: rhs_upper is only allowed with {sorted(RANGE_OPERATORS)}, "
                f"got operator '{self.operator}'"
            )

        if self.operator in MEMBERSHIP_OPERATORS and not isinstance(self.rhs, ListExpression):
            raise ValueError(
                f"Condition: operator '{self.operator}' requires ListExpression, "
                f"got {type(self.rhs).__name__}"
            )

    @property
    def is_range(self) -> bool:
        return self.operator in RANGE_OPERATORS

    def __repr__(self) -> str:
        if self.rhs_upper is not None:
            return f"Condition({self.lhs!r} {self.operator} {self.rhs!r}..{self.rhs_upper!r})"
        return f"Condition({self.lhs!r} {self.operator} {self.rhs!r})"


__all__ = [
    "Condition",
]
