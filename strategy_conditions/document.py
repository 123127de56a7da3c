"""
Helpers for strategy documents.

A document is the editor's persisted graph:

    {
        "nodes": [
            {"id": "start-1", "type": "startNode", "data": {
                "tradingInstrumentConfig": {"timeframes": [...]},
                "supportingInstrumentConfig": {"timeframes": [...]},
            }},
            {"id": "entry-1", "type": "entryNode", "data": {
                "entryConditions": {"id": ..., "groupLogic": "AND", "conditions": [...]},
            }},
        ],
        "edges": [...],
    }

Documents are plain dicts in camelCase. Missing or malformed sections read
as empty.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Optional

from .config.constants import (
    CONDITION_TREE_KEYS,
    START_NODE_TYPE,
    SUPPORTING_INSTRUMENT,
    SUPPORTING_INSTRUMENT_KEY,
    TRADING_INSTRUMENT_KEY,
    validate_instrument_type,
)
from .conditions.nodes import (
    GroupCondition,
    condition_from_dict,
    condition_to_dict,
    create_group_condition,
    is_group_dict,
)
from .timeframes.models import TimeframeConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Nodes
# =============================================================================

def iter_document_nodes(document: Any) -> Iterator[dict]:
    """Yield node dicts of a document, skipping malformed entries."""
    if not isinstance(document, dict):
        return
    nodes = document.get("nodes")
    if not isinstance(nodes, list):
        return
    for node in nodes:
        if isinstance(node, dict):
            yield node


def node_data(node: Any) -> dict:
    data = node.get("data") if isinstance(node, dict) else None
    return data if isinstance(data, dict) else {}


def find_node(document: Any, node_id: str) -> Optional[dict]:
    for node in iter_document_nodes(document):
        if node.get("id") == node_id:
            return node
    return None


def find_instrument_node(document: Any) -> Optional[dict]:
    """
    Find the node holding instrument configuration.

    The start node wins; otherwise the first node whose data carries a
    trading instrument config.
    """
    fallback = None
    for node in iter_document_nodes(document):
        if node.get("type") == START_NODE_TYPE:
            return node
        if fallback is None and TRADING_INSTRUMENT_KEY in node_data(node):
            fallback = node
    return fallback


# =============================================================================
# Timeframes
# =============================================================================

def timeframe_dicts(data: dict, instrument_key: str) -> list:
    """Raw timeframe list of one instrument config (empty if absent)."""
    config = data.get(instrument_key) if isinstance(data, dict) else None
    if not isinstance(config, dict):
        return []
    timeframes = config.get("timeframes")
    return timeframes if isinstance(timeframes, list) else []


def timeframes_from_node_data(data: dict) -> tuple[tuple[TimeframeConfig, ...], tuple[TimeframeConfig, ...]]:
    """
    Typed timeframes of the trading and supporting instruments.

    Returns:
        (trading, supporting) tuples of TimeframeConfig
    """
    def load(key: str) -> tuple[TimeframeConfig, ...]:
        return tuple(
            TimeframeConfig.from_dict(entry)
            for entry in timeframe_dicts(data, key)
            if isinstance(entry, dict)
        )
    return load(TRADING_INSTRUMENT_KEY), load(SUPPORTING_INSTRUMENT_KEY)


def collect_timeframes(document: Any) -> list[TimeframeConfig]:
    """All timeframes of the document, trading instrument first."""
    trading, supporting = timeframes_from_node_data(node_data(find_instrument_node(document)))
    return [*trading, *supporting]


def instrument_timeframes(document: Any, instrument_type: str) -> list[TimeframeConfig]:
    """
    Timeframes of one instrument.

    Raises:
        ValueError: If instrument_type is not "TI" or "SI"
    """
    instrument_type = validate_instrument_type(instrument_type)
    trading, supporting = timeframes_from_node_data(node_data(find_instrument_node(document)))
    return list(supporting if instrument_type == SUPPORTING_INSTRUMENT else trading)


def append_timeframes(
    document: Any,
    configs: Iterable[TimeframeConfig],
    instrument_key: str = TRADING_INSTRUMENT_KEY,
) -> int:
    """
    Append timeframe configs to an instrument's timeframe list, in place.

    Configs whose id is already present are skipped. The instrument config
    is only written when it already exists.

    Returns:
        Number of configs appended
    """
    node = find_instrument_node(document)
    data = node_data(node)
    instrument = data.get(instrument_key)
    if not isinstance(instrument, dict):
        logger.warning("Cannot add timeframes: no %s in document", instrument_key)
        return 0

    timeframes = instrument.get("timeframes")
    if not isinstance(timeframes, list):
        timeframes = []
        instrument["timeframes"] = timeframes

    existing = {entry.get("id") for entry in timeframes if isinstance(entry, dict)}
    appended = 0
    for config in configs:
        if config.id in existing:
            continue
        timeframes.append(config.to_dict())
        existing.add(config.id)
        appended += 1
    return appended


# =============================================================================
# Condition Trees
# =============================================================================

def iter_condition_trees(document: Any) -> Iterator[tuple[dict, str, dict]]:
    """Yield (node, key, raw tree) for every condition tree in the document."""
    for node in iter_document_nodes(document):
        data = node_data(node)
        for key in CONDITION_TREE_KEYS:
            tree = data.get(key)
            if is_group_dict(tree):
                yield node, key, tree


def load_condition_tree(document: Any, node_id: str, key: str = "entryConditions") -> Optional[GroupCondition]:
    """
    Load a node's condition tree as typed nodes.

    A bare condition stored at the top is wrapped into an AND group.

    Returns:
        The root group, or None if the node or key is missing
    """
    tree = node_data(find_node(document, node_id)).get(key)
    if not isinstance(tree, dict):
        return None
    root = condition_from_dict(tree)
    if not isinstance(root, GroupCondition):
        root = create_group_condition("AND", [root])
    return root


def store_condition_tree(document: Any, node_id: str, root: GroupCondition, key: str = "entryConditions") -> None:
    """
    Write a condition tree back into a node's data, in place.

    Raises:
        KeyError: If the node does not exist
    """
    node = find_node(document, node_id)
    if node is None:
        raise KeyError(f"Node '{node_id}' not found")
    data = node.get("data")
    if not isinstance(data, dict):
        data = {}
        node["data"] = data
    data[key] = condition_to_dict(root)


__all__ = [
    "iter_document_nodes",
    "node_data",
    "find_node",
    "find_instrument_node",
    "timeframe_dicts",
    "timeframes_from_node_data",
    "collect_timeframes",
    "instrument_timeframes",
    "append_timeframes",
    "iter_condition_trees",
    "load_condition_tree",
    "store_condition_tree",
]
