"""
Timeframe identity resolver.

Maps stable timeframe ids to their display strings, so expressions keep
referencing a timeframe by id while its display string changes.

One resolver belongs to one document. ``initialize`` is the only mutation
and replaces the whole table.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from ..utils.timeframes import is_display_token
from .models import TimeframeConfig

logger = logging.getLogger(__name__)

UNKNOWN_TIMEFRAME = "Unknown"


class TimeframeResolver:
    """
    Lookup table from timeframe id to TimeframeConfig.

    Lookups never raise: unknown ids degrade to the id itself.

    Usage:
        resolver = TimeframeResolver.from_document(document)
        resolver.get_display_value("tf_1718000000000_k3j9x0a1b")  # "5m"
        resolver.get_display_value("15m")                          # "15m"
    """

    def __init__(self, timeframes: Optional[Iterable[TimeframeConfig | dict]] = None):
        self._configs: dict[str, TimeframeConfig] = {}
        if timeframes is not None:
            self.initialize(timeframes)

    @classmethod
    def from_document(cls, document: Any) -> "TimeframeResolver":
        """Resolver over the trading and supporting timeframes of a document."""
        from ..document import collect_timeframes
        return cls(collect_timeframes(document))

    def initialize(self, timeframes: Iterable[TimeframeConfig | dict]) -> None:
        """Clear the table and load the given timeframes (dicts are converted)."""
        self._configs.clear()
        for entry in timeframes:
            config = TimeframeConfig.from_dict(entry) if isinstance(entry, dict) else entry
            if not config.id:
                logger.debug("Skipping timeframe without id: %r", entry)
                continue
            self._configs[config.id] = config
        logger.debug("Timeframe resolver initialized with %d timeframes", len(self._configs))

    def get_display_value(self, timeframe_id: Optional[str]) -> str:
        """
        Display string for a timeframe id.

        Returns:
            The config's display value when the id is known, the id itself
            when it already reads like a display token ("5m") or as a
            fallback, and "Unknown" for an empty id
        """
        if not timeframe_id:
            return UNKNOWN_TIMEFRAME
        config = self._configs.get(timeframe_id)
        if config is not None:
            return config.display_value or timeframe_id
        if is_display_token(timeframe_id):
            return timeframe_id
        logger.debug("No timeframe found for id %s", timeframe_id)
        return timeframe_id

    def resolve_timeframe(self, value: Optional[str]) -> str:
        """Resolve a value that may be an id or an old display string."""
        if value and self.exists(value):
            return self.get_display_value(value)
        if is_display_token(value):
            return value
        return value or UNKNOWN_TIMEFRAME

    def exists(self, timeframe_id: Optional[str]) -> bool:
        return timeframe_id in self._configs

    def get_config(self, timeframe_id: Optional[str]) -> Optional[TimeframeConfig]:
        return self._configs.get(timeframe_id)

    def get_all(self) -> list[TimeframeConfig]:
        return list(self._configs.values())

    def __contains__(self, timeframe_id: object) -> bool:
        return timeframe_id in self._configs

    def __repr__(self) -> str:
        return f"TimeframeResolver({sorted(self._configs)})"


__all__ = [
    "UNKNOWN_TIMEFRAME",
    "TimeframeResolver",
]
