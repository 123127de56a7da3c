"""
One-shot migration of a document to id-keyed timeframe references.

Older documents reference timeframes by display string: expressions carry
``timeframe: "5m"`` or a short ``timeframeId`` token, and instrument
timeframes carry ``{number, unit}`` without a display string. Migration
rewrites the document in place so that every instrument timeframe has the
canonical shape and every expression references one by ``timeframeId``.

Steps:
1. Normalize legacy instrument timeframes (ids starting with the canonical
   prefix are kept, others are replaced and remembered)
2. Collect legacy tokens from expressions (typed visitor)
3. Map each token to a config by display value, raw timeframe, id or
   replaced id; synthesize a config for tokens that parse but match nothing
4. Rewrite expressions: ``timeframe`` becomes ``timeframeId``, stale
   ``timeframeId`` values are replaced

Migration never raises on document content. Problems become warnings and
the offending field is left as it was. A second run finds nothing to do.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

from ..config import get_config
from ..config.constants import INSTRUMENT_CONFIG_KEYS, TRADING_INSTRUMENT_KEY
from ..document import append_timeframes, find_instrument_node, iter_document_nodes, node_data, timeframe_dicts
from ..utils.helpers import generate_id
from ..utils.logger import get_logger
from ..utils.timeframes import format_timeframe, is_legacy_timeframe_id, parse_timeframe
from .models import TimeframeConfig, is_legacy_timeframe_dict
from .visitor import ExpressionVisitor

NO_START_NODE = "No start node found"


@dataclass
class MigrationResult:
    """
    Outcome of one migration run.

    Attributes:
        migrated: True if the document changed
        warnings: Human-readable problems (unparsable tokens, unknown units)
        created_timeframes: Configs synthesized for unmatched tokens; the
            caller persists them (see apply_created_timeframes)
    """
    migrated: bool = False
    warnings: list[str] = field(default_factory=list)
    created_timeframes: list[TimeframeConfig] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "migrated": self.migrated,
            "warnings": list(self.warnings),
            "createdTimeframes": [config.to_dict() for config in self.created_timeframes],
        }


# =============================================================================
# Visitors
# =============================================================================

class _TokenCollector(ExpressionVisitor):
    """Collects legacy timeframe tokens referenced by expressions."""

    def __init__(self, prefix: str, replaced_ids: dict[str, str], scan_node_data: bool):
        super().__init__(scan_node_data=scan_node_data)
        self.prefix = prefix
        self.replaced_ids = replaced_ids
        self.tokens: dict[str, None] = {}

    def visit_expression(self, expr: dict) -> None:
        timeframe = expr.get("timeframe")
        if isinstance(timeframe, str) and timeframe:
            self.tokens[timeframe] = None

        timeframe_id = expr.get("timeframeId")
        if isinstance(timeframe_id, str) and (
            timeframe_id in self.replaced_ids or is_legacy_timeframe_id(timeframe_id, self.prefix)
        ):
            self.tokens[timeframe_id] = None

        self.generic_visit_expression(expr)


class _TokenRewriter(ExpressionVisitor):
    """Rewrites expression timeframe references through a token -> id mapping."""

    def __init__(self, mapping: dict[str, str], scan_node_data: bool):
        super().__init__(scan_node_data=scan_node_data)
        self.mapping = mapping
        self.rewritten = 0

    def visit_expression(self, expr: dict) -> None:
        timeframe = expr.get("timeframe")
        timeframe_id = expr.get("timeframeId")
        if isinstance(timeframe, str) and timeframe in self.mapping:
            del expr["timeframe"]
            expr["timeframeId"] = self.mapping[timeframe]
            self.rewritten += 1
        elif isinstance(timeframe_id, str) and self.mapping.get(timeframe_id, timeframe_id) != timeframe_id:
            expr["timeframeId"] = self.mapping[timeframe_id]
            self.rewritten += 1

        self.generic_visit_expression(expr)


# =============================================================================
# Steps
# =============================================================================

def _normalize_instrument_timeframes(
    data: dict,
    prefix: str,
    new_id: Callable[[], str],
    result: MigrationResult,
) -> dict[str, str]:
    """
    Rewrite legacy {number, unit} configs into canonical shape, in place.

    Returns:
        Mapping of replaced ids to their new ids
    """
    replaced: dict[str, str] = {}
    for key in INSTRUMENT_CONFIG_KEYS:
        timeframes = timeframe_dicts(data, key)
        for index, entry in enumerate(timeframes):
            if not is_legacy_timeframe_dict(entry):
                continue

            token = format_timeframe(entry.get("number"), entry.get("unit"))
            parsed = parse_timeframe(token) if token else None
            if parsed is None:
                result.warnings.append(
                    f"Could not normalize timeframe {entry.get('id')!r}: "
                    f"number={entry.get('number')!r}, unit={entry.get('unit')!r}"
                )
                continue

            old_id = entry.get("id")
            keep_id = isinstance(old_id, str) and old_id.startswith(prefix)
            config_id = old_id if keep_id else new_id()
            unit, number = parsed

            normalized = dict(entry)
            normalized.update({
                "id": config_id,
                "timeframe": token,
                "indicators": entry.get("indicators") or {},
                "unit": unit,
                "number": number,
            })
            timeframes[index] = normalized
            result.migrated = True
            if isinstance(old_id, str) and old_id and old_id != config_id:
                replaced[old_id] = config_id
    return replaced


def _map_tokens(
    tokens: list[str],
    configs: list[TimeframeConfig],
    replaced_ids: dict[str, str],
    new_id: Callable[[], str],
    result: MigrationResult,
) -> dict[str, str]:
    """Resolve each token to a config id, creating configs where needed."""
    mapping: dict[str, str] = {}
    for token in tokens:
        if token in replaced_ids:
            mapping[token] = replaced_ids[token]
            continue

        match = next(
            (
                config for config in configs
                if token in (config.display_value, config.timeframe, config.id)
            ),
            None,
        )
        if match is not None:
            mapping[token] = match.id
            continue

        created = TimeframeConfig.from_token(new_id(), token)
        if created is None:
            result.warnings.append(f"Could not parse timeframe: {token}")
            continue
        mapping[token] = created.id
        configs.append(created)
        result.created_timeframes.append(created)
    return mapping


# =============================================================================
# Entry Points
# =============================================================================

def migrate_document(document: Any, id_factory: Optional[Callable[[], str]] = None) -> MigrationResult:
    """
    Migrate a document to id-keyed timeframe references, in place.

    Args:
        document: {"nodes": [{"id", "type", "data"}, ...], ...}
        id_factory: Generates ids for new timeframe configs
            (default "tf_<epoch-ms>_<random>")

    Returns:
        MigrationResult; created_timeframes are not added to the document
    """
    settings = get_config().migration
    prefix = settings.timeframe_id_prefix
    new_id = id_factory or (lambda: generate_id(prefix.rstrip("_"), "_"))
    result = MigrationResult()

    start_node = find_instrument_node(document)
    if start_node is None:
        result.warnings.append(NO_START_NODE)
        get_logger().migration(result.migrated, len(result.warnings), 0)
        return result

    start_data = node_data(start_node)
    replaced_ids = _normalize_instrument_timeframes(start_data, prefix, new_id, result)
    configs = [
        TimeframeConfig.from_dict(entry)
        for key in INSTRUMENT_CONFIG_KEYS
        for entry in timeframe_dicts(start_data, key)
        if isinstance(entry, dict)
    ]

    nodes = list(iter_document_nodes(document))
    collector = _TokenCollector(prefix, replaced_ids, settings.scan_node_data)
    collector.visit_document(nodes)

    mapping = _map_tokens(list(collector.tokens), configs, replaced_ids, new_id, result)

    rewriter = _TokenRewriter(mapping, settings.scan_node_data)
    rewriter.visit_document(nodes)
    if rewriter.rewritten:
        result.migrated = True

    get_logger().migration(
        result.migrated,
        len(result.warnings),
        len(result.created_timeframes),
        tokens=len(collector.tokens),
        rewritten=rewriter.rewritten,
        normalized_ids=len(replaced_ids),
    )
    return result


def apply_created_timeframes(
    document: Any,
    result: MigrationResult,
    instrument_key: str = TRADING_INSTRUMENT_KEY,
) -> int:
    """
    Persist a migration's created timeframes into the document, in place.

    Returns:
        Number of timeframes added to the instrument's timeframe list
    """
    if not result.created_timeframes:
        return 0
    return append_timeframes(document, result.created_timeframes, instrument_key)


__all__ = [
    "NO_START_NODE",
    "MigrationResult",
    "migrate_document",
    "apply_created_timeframes",
]
