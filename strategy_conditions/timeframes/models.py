"""
Timeframe definitions.

A TimeframeConfig is one charting interval of an instrument, keyed by a
stable id so expressions can reference it while its display string changes.

Canonical shape:  {"id": "tf_...", "timeframe": "5m", "indicators": {...}, "unit": "minutes", "number": 5}
Legacy shape:     {"id": "TF1", "number": 5, "unit": "minutes", "indicators": {...}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..utils.helpers import safe_int
from ..utils.timeframes import format_timeframe, parse_timeframe


@dataclass(frozen=True)
class TimeframeConfig:
    """
    One timeframe of an instrument.

    Attributes:
        id: Opaque stable identifier ("tf_<ms>_<rand>" once canonical)
        timeframe: Display token ("5m"); None on legacy configs
        indicators: Indicator definitions keyed by indicator id
        unit: "minutes"/"hours"/"days"/"weeks"
        number: Interval length in units
    """
    id: str
    timeframe: Optional[str] = None
    indicators: dict = field(default_factory=dict)
    unit: Optional[str] = None
    number: Optional[int] = None

    @property
    def display_value(self) -> str:
        """Display token, derived from number/unit for legacy configs."""
        if self.timeframe:
            return self.timeframe
        return format_timeframe(self.number, self.unit) or ""

    @property
    def is_legacy(self) -> bool:
        return not self.timeframe and self.number is not None and self.unit is not None

    @classmethod
    def from_token(cls, config_id: str, token: str) -> Optional["TimeframeConfig"]:
        """
        Build a canonical config from a display token.

        Returns:
            The config, or None if the token does not parse
        """
        parsed = parse_timeframe(token)
        if parsed is None:
            return None
        unit, number = parsed
        return cls(id=config_id, timeframe=token, indicators={}, unit=unit, number=number)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeframeConfig":
        """Build from a document dict, tolerating missing and stringly-typed fields."""
        timeframe = data.get("timeframe")
        indicators = data.get("indicators")
        return cls(
            id=str(data.get("id") or ""),
            timeframe=timeframe if isinstance(timeframe, str) and timeframe else None,
            indicators=dict(indicators) if isinstance(indicators, dict) else {},
            unit=data.get("unit"),
            number=safe_int(data.get("number"), default=None),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id}
        if self.timeframe is not None:
            result["timeframe"] = self.timeframe
        result["indicators"] = dict(self.indicators)
        if self.unit is not None:
            result["unit"] = self.unit
        if self.number is not None:
            result["number"] = self.number
        return result


def is_legacy_timeframe_dict(data: Any) -> bool:
    """True for a {number, unit} config that has no display string yet."""
    if not isinstance(data, dict):
        return False
    timeframe = data.get("timeframe")
    has_display = isinstance(timeframe, str) and bool(timeframe)
    return not has_display and data.get("number") is not None and data.get("unit") is not None


__all__ = [
    "TimeframeConfig",
    "is_legacy_timeframe_dict",
]
