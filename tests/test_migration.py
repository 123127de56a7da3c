"""
Tests for timeframe migration.

Validates that:
1. Legacy instrument timeframes are normalized to the canonical shape
2. Expression references move from display strings to timeframeId
3. Unmatched tokens create timeframes; unparsable tokens produce warnings
4. Unrelated fields named "timeframe" are left alone
5. A second run finds nothing to do
"""

import json
import logging

from strategy_conditions.conditions import group_condition_to_string, RenderContext
from strategy_conditions.document import load_condition_tree
from strategy_conditions.timeframes import (
    NO_START_NODE,
    ExpressionVisitor,
    TimeframeConfig,
    apply_created_timeframes,
    migrate_document,
)


def entry_conditions(document):
    return document["nodes"][1]["data"]["entryConditions"]["conditions"]


def trading_timeframes(document):
    return document["nodes"][0]["data"]["tradingInstrumentConfig"]["timeframes"]


class TestMigration:
    """Test migrate_document on a legacy strategy."""

    def test_normalizes_legacy_instrument_timeframes(self, legacy_document, id_factory):
        migrate_document(legacy_document, id_factory)
        assert trading_timeframes(legacy_document)[1] == {
            "id": "tf_new_1",
            "timeframe": "1h",
            "indicators": {},
            "unit": "hours",
            "number": 1,
        }

    def test_canonical_timeframes_keep_their_id(self, legacy_document, id_factory):
        migrate_document(legacy_document, id_factory)
        assert trading_timeframes(legacy_document)[0]["id"] == "tf_existing_1"

    def test_rewrites_expression_references(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        lhs = [condition["lhs"] for condition in entry_conditions(legacy_document)]

        assert result.migrated
        assert lhs[0]["timeframeId"] == "tf_existing_1"
        assert "timeframe" not in lhs[0]
        assert lhs[1]["timeframeId"] == "tf_new_1"
        assert lhs[2]["timeframeId"] == "tf_new_2"

    def test_creates_timeframes_for_unmatched_tokens(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        assert result.created_timeframes == [TimeframeConfig("tf_new_2", "15m", {}, "minutes", 15)]
        # Created configs are reported, not written
        assert len(trading_timeframes(legacy_document)) == 2

    def test_unparsable_token_warns_and_stays(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        assert result.warnings == ["Could not parse timeframe: weird"]
        assert entry_conditions(legacy_document)[3]["lhs"]["timeframe"] == "weird"

    def test_unrelated_timeframe_fields_untouched(self, legacy_document, id_factory):
        migrate_document(legacy_document, id_factory)
        assert legacy_document["nodes"][1]["data"]["settings"] == {"timeframe": "daily-report"}

    def test_second_run_is_noop(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        apply_created_timeframes(legacy_document, result)

        again = migrate_document(legacy_document, id_factory)
        assert not again.migrated
        assert again.created_timeframes == []

    def test_second_run_leaves_document_unchanged(self, legacy_document, id_factory):
        """Without applying created timeframes, a second run rewrites nothing."""
        migrate_document(legacy_document, id_factory)
        first = json.dumps(legacy_document, sort_keys=True)

        again = migrate_document(legacy_document, id_factory)
        assert json.dumps(legacy_document, sort_keys=True) == first
        assert not again.migrated
        assert again.warnings == ["Could not parse timeframe: weird"]

    def test_second_run_after_apply_leaves_document_unchanged(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        apply_created_timeframes(legacy_document, result)
        first = json.dumps(legacy_document, sort_keys=True)

        migrate_document(legacy_document, id_factory)
        assert json.dumps(legacy_document, sort_keys=True) == first

    def test_migrated_document_renders(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        apply_created_timeframes(legacy_document, result)

        root = load_condition_tree(legacy_document, "entry-1")
        text = group_condition_to_string(root, RenderContext.from_document(legacy_document))
        assert text == (
            "Current[TI.5m.RSI.value] > 70 AND Previous[TI.1h.Close] < 100 AND "
            "Current[TI.15m.Close] > 1 AND Current[TI.weird.High] > 1"
        )

    def test_no_start_node(self, id_factory):
        document = {"nodes": [{"id": "entry-1", "type": "entryNode", "data": {}}]}
        result = migrate_document(document, id_factory)
        assert not result.migrated
        assert result.warnings == [NO_START_NODE]

    def test_result_to_dict(self, legacy_document, id_factory):
        data = migrate_document(legacy_document, id_factory).to_dict()
        assert data["migrated"] is True
        assert data["createdTimeframes"][0]["id"] == "tf_new_2"

    def test_default_ids_use_canonical_prefix(self, legacy_document):
        result = migrate_document(legacy_document)
        assert result.created_timeframes[0].id.startswith("tf_")
        assert trading_timeframes(legacy_document)[1]["id"].startswith("tf_")

    def test_logs_summary(self, legacy_document, id_factory, caplog):
        with caplog.at_level(logging.INFO, logger="strategy_conditions"):
            migrate_document(legacy_document, id_factory)
        assert "[MIGRATION]" in caplog.text
        assert "rewritten=3" in caplog.text

    def test_scan_node_data_disabled(self, id_factory, monkeypatch):
        """With scanning off, expressions outside condition trees are not migrated."""
        monkeypatch.setenv("CONDITIONS_MIGRATION_SCAN_NODE_DATA", "false")
        variable = {"type": "candle_data", "field": "Close", "timeframe": "5m"}
        document = {"nodes": [
            {"id": "start-1", "type": "startNode", "data": {
                "tradingInstrumentConfig": {"timeframes": [{"id": "tf_1", "timeframe": "5m", "indicators": {}}]},
                "customVariables": [{"name": "x", "expression": variable}],
            }},
        ]}
        result = migrate_document(document, id_factory)
        assert not result.migrated
        assert variable["timeframe"] == "5m"


class TestApplyCreatedTimeframes:
    """Test persisting created timeframes."""

    def test_appends_once(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        assert apply_created_timeframes(legacy_document, result) == 1
        assert apply_created_timeframes(legacy_document, result) == 0
        assert trading_timeframes(legacy_document)[-1]["timeframe"] == "15m"

    def test_supporting_instrument(self, legacy_document, id_factory):
        result = migrate_document(legacy_document, id_factory)
        added = apply_created_timeframes(legacy_document, result, "supportingInstrumentConfig")
        assert added == 1
        supporting = legacy_document["nodes"][0]["data"]["supportingInstrumentConfig"]["timeframes"]
        assert supporting[0]["id"] == "tf_new_2"


class TestExpressionVisitor:
    """Test the typed document walk."""

    def test_visits_nested_expressions(self):
        seen = []

        class Recorder(ExpressionVisitor):
            def visit_expression(self, expr):
                seen.append(expr["type"])
                self.generic_visit_expression(expr)

        tree = {"conditions": [{
            "operator": ">",
            "lhs": {"type": "math_expression", "items": [
                {"expression": {"type": "indicator", "indicatorId": "rsi"}},
                {"operator": "+", "expression": {"type": "constant", "value": 1}},
            ]},
            "rhs": {"type": "aggregation", "candleRange": {"type": "candle_range"}, "expressions": None},
        }]}
        Recorder().visit_node_data({"exitConditions": tree, "note": {"type": "sticky"}})
        assert seen == ["math_expression", "indicator", "constant", "aggregation", "candle_range"]


class TestLegacyScenario:
    """A {number, unit} timeframe referenced by display string."""

    def test_display_string_reference_becomes_id(self, id_factory):
        expression = {"type": "indicator", "indicatorId": "ema_9", "timeframe": "5m", "offset": 0}
        document = {"nodes": [
            {"id": "start-1", "type": "startNode", "data": {
                "tradingInstrumentConfig": {"timeframes": [{"id": "1", "number": 5, "unit": "minutes"}]},
            }},
            {"id": "entry-1", "type": "entryNode", "data": {
                "entryConditions": {"id": "root", "groupLogic": "AND", "conditions": [
                    {"id": "c1", "operator": ">", "lhs": expression, "rhs": {"type": "constant", "value": 1}},
                ]},
            }},
        ]}

        result = migrate_document(document, id_factory)

        timeframe = trading_timeframes(document)[0]
        assert timeframe["id"] == "tf_new_1"
        assert timeframe["timeframe"] == "5m"
        assert expression == {"type": "indicator", "indicatorId": "ema_9", "timeframeId": "tf_new_1", "offset": 0}
        assert result.migrated
        assert result.warnings == []
        assert result.created_timeframes == []
