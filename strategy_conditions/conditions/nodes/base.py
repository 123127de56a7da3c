"""
Value expression nodes.

This module defines the leaf expression variants, each producing a single
value inside a condition:
- ConstantExpression: literal number/string/boolean/status
- IndicatorExpression, CandleDataExpression, LiveDataExpression: market data
- TimeFunctionExpression, CurrentTimeExpression, PositionTimeExpression: time
- PositionDataExpression, TrailingVariableExpression: open positions
- PnlExpression, UnderlyingPnlExpression: profit and loss
- ExternalTriggerExpression, NodeVariableExpression, GlobalVariableExpression
- UnknownExpression: a variant this library does not recognize

Every node is a frozen dataclass. The ``type_tag`` class attribute holds the
discriminant stored in documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from . import constants as c


# =============================================================================
# Literal
# =============================================================================

@dataclass(frozen=True)
class ConstantExpression:
    """
    A literal value.

    The typed value fields mirror the editor's form; ``value`` is the
    untyped copy older documents carry. Rendering prints the first of
    value/number_value/string_value/boolean_value that is set.

    Examples:
        ConstantExpression(value_type="number", value=70, number_value=70)
        ConstantExpression(value_type="status", status_value="Open")
    """
    type_tag: ClassVar[str] = c.CONSTANT

    value_type: str = "number"
    value: Any = None
    number_value: Optional[float] = None
    string_value: Optional[str] = None
    boolean_value: Optional[bool] = None
    status_value: Optional[str] = None

    def __repr__(self) -> str:
        for candidate in (self.value, self.number_value, self.string_value, self.boolean_value):
            if candidate is not None:
                return f"Const({candidate!r})"
        return "Const()"


# =============================================================================
# Market Data
# =============================================================================

@dataclass(frozen=True)
class IndicatorExpression:
    """
    A reading of an indicator configured on a timeframe.

    Attributes:
        indicator_id: Key of the indicator inside TimeframeConfig.indicators
        indicator_param: Output of the indicator to read ("value", "signal")
        instrument_type: "TI" (trading) or "SI" (supporting)
        timeframe_id: ID of the TimeframeConfig the indicator lives on
        timeframe: Legacy display string, replaced by timeframe_id on migration
        offset: Candle offset (0=current, -1=previous, -N=N candles ago)
    """
    type_tag: ClassVar[str] = c.INDICATOR

    indicator_id: str = ""
    indicator_param: str = ""
    indicator_field_type: str = "value"
    indicator_param_type: str = "input"
    instrument_type: Optional[str] = None
    timeframe_id: Optional[str] = None
    timeframe: Optional[str] = None
    name: Optional[str] = None
    parameter: Optional[str] = None
    offset: Optional[int] = None

    def __repr__(self) -> str:
        key = self.indicator_id or self.name or "?"
        tf = self.timeframe_id or self.timeframe
        return f"Indicator({key!r}, tf={tf!r}, offset={self.offset})"


@dataclass(frozen=True)
class CandleDataExpression:
    """
    An OHLCV field of a candle on a timeframe.

    Attributes:
        data_field: Field picked in the editor ("close")
        field: Display field name ("Close")
        timeframe_id / timeframe: as for IndicatorExpression
        offset: Candle offset (0=current, -1=previous, ...)
    """
    type_tag: ClassVar[str] = c.CANDLE_DATA

    data_field: str = ""
    instrument_type: Optional[str] = None
    timeframe_id: Optional[str] = None
    timeframe: Optional[str] = None
    field: Optional[str] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class LiveDataExpression:
    """A real-time market field (LTP, bid, ask) of an instrument or position."""
    type_tag: ClassVar[str] = c.LIVE_DATA

    data_field: str = "ltp"
    instrument_type: Optional[str] = None
    field: Optional[str] = None
    vpi: Optional[str] = None


# =============================================================================
# Time
# =============================================================================

@dataclass(frozen=True)
class TimeFunctionExpression:
    """A wall-clock time of day in HH:MM format."""
    type_tag: ClassVar[str] = c.TIME_FUNCTION

    time_value: str = "09:00"
    operator: Optional[str] = None


@dataclass(frozen=True)
class CurrentTimeExpression:
    """The time of the candle being evaluated."""
    type_tag: ClassVar[str] = c.CURRENT_TIME


@dataclass(frozen=True)
class PositionTimeExpression:
    """Entry or exit time of a position."""
    type_tag: ClassVar[str] = c.POSITION_TIME

    time_field: str = "entryTime"
    vpi: Optional[str] = None


# =============================================================================
# Positions and P&L
# =============================================================================

@dataclass(frozen=True)
class PositionDataExpression:
    """
    A field of an open position, addressed by its virtual position id (vpi).

    Examples:
        PositionDataExpression(position_field="entryPrice", vpi="entry-1-pos1")
    """
    type_tag: ClassVar[str] = c.POSITION_DATA

    position_field: str = "entryPrice"
    vpi: Optional[str] = None
    field: Optional[str] = None


@dataclass(frozen=True)
class TrailingVariableExpression:
    """The current level of a trailing variable."""
    type_tag: ClassVar[str] = c.TRAILING_VARIABLE

    trailing_field: str = "trailingPosition"
    variable_id: Optional[str] = None


@dataclass(frozen=True)
class PnlExpression:
    """
    Profit and loss.

    Attributes:
        pnl_type: "realized", "unrealized" or "total"
        scope: "overall" or "position" (then vpi names the position)
    """
    type_tag: ClassVar[str] = c.PNL

    pnl_type: str = "unrealized"
    scope: str = "overall"
    vpi: Optional[str] = None


@dataclass(frozen=True)
class UnderlyingPnlExpression:
    """Profit and loss measured on the underlying of an options position."""
    type_tag: ClassVar[str] = c.UNDERLYING_PNL

    pnl_type: str = "unrealized"
    scope: str = "overall"
    vpi: Optional[str] = None


# =============================================================================
# References
# =============================================================================

@dataclass(frozen=True)
class ExternalTriggerExpression:
    """A signal raised outside of the strategy (webhook, manual trigger)."""
    type_tag: ClassVar[str] = c.EXTERNAL_TRIGGER

    trigger_id: str = ""
    trigger_type: Optional[str] = None
    parameters: Optional[dict] = None


@dataclass(frozen=True)
class NodeVariableExpression:
    """A variable defined on another node of the strategy."""
    type_tag: ClassVar[str] = c.NODE_VARIABLE

    node_id: str = ""
    variable_name: str = ""


@dataclass(frozen=True)
class GlobalVariableExpression:
    """A strategy-wide variable."""
    type_tag: ClassVar[str] = c.GLOBAL_VARIABLE

    variable_id: str = ""
    variable_name: str = ""


# =============================================================================
# Unknown
# =============================================================================

@dataclass(frozen=True)
class UnknownExpression:
    """
    An expression whose type tag is not recognized.

    Keeps the raw payload so documents written by newer editors survive a
    load/save cycle untouched.
    """
    type_tag: ClassVar[str] = ""

    type_name: str = ""
    payload: dict = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Unknown({self.type_name!r})"


__all__ = [
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
]
