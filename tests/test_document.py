"""
Tests for strategy document helpers.
"""

import pytest

from strategy_conditions.conditions import GroupCondition, condition_to_dict, set_at
from strategy_conditions.document import (
    append_timeframes,
    collect_timeframes,
    find_instrument_node,
    find_node,
    instrument_timeframes,
    iter_condition_trees,
    load_condition_tree,
    store_condition_tree,
)
from strategy_conditions.timeframes import TimeframeConfig


class TestNodes:
    """Test node lookup."""

    def test_start_node_wins(self, legacy_document):
        assert find_instrument_node(legacy_document)["id"] == "start-1"

    def test_fallback_to_node_with_instrument_config(self):
        document = {"nodes": [
            {"id": "a", "type": "actionNode", "data": {}},
            {"id": "b", "type": "customNode", "data": {"tradingInstrumentConfig": {"timeframes": []}}},
        ]}
        assert find_instrument_node(document)["id"] == "b"

    @pytest.mark.parametrize("document", [None, {}, {"nodes": "broken"}, {"nodes": ["junk", 3]}])
    def test_malformed_documents(self, document):
        assert find_instrument_node(document) is None
        assert find_node(document, "start-1") is None
        assert collect_timeframes(document) == []


class TestTimeframes:
    """Test timeframe collection and persistence."""

    def test_collect_trading_first(self, legacy_document):
        legacy_document["nodes"][0]["data"]["supportingInstrumentConfig"]["timeframes"] = [
            {"id": "tf_si", "timeframe": "1d", "indicators": {}},
        ]
        assert [config.id for config in collect_timeframes(legacy_document)] == ["tf_existing_1", "TF2", "tf_si"]

    def test_instrument_timeframes(self, legacy_document):
        assert [config.id for config in instrument_timeframes(legacy_document, "ti")] == ["tf_existing_1", "TF2"]
        assert instrument_timeframes(legacy_document, "SI") == []

    def test_instrument_type_validated(self, legacy_document):
        with pytest.raises(ValueError, match="Invalid instrument type"):
            instrument_timeframes(legacy_document, "XX")

    def test_append_skips_existing_ids(self, legacy_document):
        added = append_timeframes(legacy_document, [
            TimeframeConfig("tf_existing_1", "5m"),
            TimeframeConfig("tf_30", "30m", {}, "minutes", 30),
        ])
        assert added == 1
        timeframes = legacy_document["nodes"][0]["data"]["tradingInstrumentConfig"]["timeframes"]
        assert timeframes[-1] == {"id": "tf_30", "timeframe": "30m", "indicators": {}, "unit": "minutes", "number": 30}

    def test_append_without_instrument_config(self, caplog):
        document = {"nodes": [{"id": "start-1", "type": "startNode", "data": {}}]}
        assert append_timeframes(document, [TimeframeConfig("tf_1", "5m")]) == 0
        assert "Cannot add timeframes" in caplog.text


class TestConditionTrees:
    """Test loading and storing condition trees."""

    def test_load(self, legacy_document):
        root = load_condition_tree(legacy_document, "entry-1")
        assert isinstance(root, GroupCondition)
        assert root.id == "group-root"
        assert len(root.conditions) == 4

    def test_load_missing(self, legacy_document):
        assert load_condition_tree(legacy_document, "entry-1", "exitConditions") is None
        assert load_condition_tree(legacy_document, "nope") is None

    def test_bare_condition_is_wrapped(self):
        document = {"nodes": [{"id": "exit-1", "type": "exitNode", "data": {
            "exitConditions": {"id": "c1", "operator": "<", "lhs": {"type": "constant", "value": 1}},
        }}]}
        root = load_condition_tree(document, "exit-1", "exitConditions")
        assert root.group_logic == "AND"
        assert [child.id for child in root.conditions] == ["c1"]

    def test_store_round_trip(self, legacy_document, condition_factory):
        root = load_condition_tree(legacy_document, "entry-1")
        edited = set_at(root, (0,), condition_factory("replaced"))
        store_condition_tree(legacy_document, "entry-1", edited)

        assert legacy_document["nodes"][1]["data"]["entryConditions"] == condition_to_dict(edited)
        assert load_condition_tree(legacy_document, "entry-1") == edited

    def test_store_missing_node(self, legacy_document, sample_tree):
        with pytest.raises(KeyError):
            store_condition_tree(legacy_document, "nope", sample_tree)

    def test_iter_condition_trees(self, legacy_document):
        found = [(node["id"], key) for node, key, _ in iter_condition_trees(legacy_document)]
        assert found == [("entry-1", "entryConditions")]
