"""
Tests for naming, timeframe token and conversion helpers.
"""

import re

import pytest

from strategy_conditions.utils import (
    format_expression_display_name,
    format_node_variable_reference,
    format_scalar,
    format_timeframe,
    generate_id,
    is_display_token,
    is_legacy_timeframe_id,
    normalize_expression_identifier,
    parse_timeframe,
    safe_int,
    safe_str,
    sanitize_expression_name,
)
from strategy_conditions.utils.naming import format_uuid_for_display, offset_label


class TestNaming:
    """Test display name helpers."""

    @pytest.mark.parametrize("args,expected", [
        (("RSI", "TI", "5m", "value", 0), "Current[TI.5m.RSI.value]"),
        (("Close", "TI", "1m", None, -1), "Previous[TI.1m.Close]"),
        (("Close", "SI", "1d", None, -5), "5ago[SI.1d.Close]"),
        (("LTP", "SI"), "SI.LTP"),
        (("bb-upper", None, "15m"), "15m.bb_upper"),
    ])
    def test_display_name(self, args, expected):
        assert format_expression_display_name(*args) == expected

    def test_positive_offset_has_no_label(self):
        assert offset_label("TI.Close", 2) == "TI.Close"
        assert offset_label("TI.Close", None) == "TI.Close"

    def test_sanitize(self):
        assert sanitize_expression_name("stop-loss-level") == "stop_loss_level"
        assert sanitize_expression_name("") == ""

    def test_uuid_display(self):
        uuid = "3f2a9c1e-0b7d-4c55-9a61-2f0d8e7b6a10"
        assert format_uuid_for_display(uuid) == "ID_3F2A9C1E"
        assert normalize_expression_identifier(uuid) == "ID_3F2A9C1E"
        assert normalize_expression_identifier("exit-node") == "exit_node"

    def test_node_variable_reference(self):
        assert format_node_variable_reference("entry-node-1", "stop-level") == "entry_node_1.stop_level"


class TestTimeframeTokens:
    """Test timeframe token parsing and formatting."""

    @pytest.mark.parametrize("token,expected", [
        ("5m", ("minutes", 5)),
        ("1h", ("hours", 1)),
        ("1d", ("days", 1)),
        ("2w", ("weeks", 2)),
        ("5x", None),
        ("", None),
        ("m5", None),
    ])
    def test_parse(self, token, expected):
        assert parse_timeframe(token) == expected

    @pytest.mark.parametrize("number,unit,expected", [
        (5, "minutes", "5m"),
        ("2", " Hours ", "2h"),
        (1, "day", "1d"),
        (1, "fortnight", None),
        (None, "minutes", None),
        (5, None, None),
    ])
    def test_format(self, number, unit, expected):
        assert format_timeframe(number, unit) == expected

    def test_display_tokens(self):
        assert is_display_token("15m")
        assert not is_display_token("1w")
        assert not is_display_token("tf_1718000000000_abc")
        assert not is_display_token(None)

    @pytest.mark.parametrize("value,expected", [
        ("5m", True),
        ("TF1", True),
        ("DAILY", True),
        ("tf_1718000000000_k3j9x0a1b", False),
        ("some-lowercase-id", False),
        (None, False),
    ])
    def test_legacy_ids(self, value, expected):
        assert is_legacy_timeframe_id(value) is expected


class TestHelpers:
    """Test conversion helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("5", 5),
        ("5.0", 5),
        (7.9, 7),
        ("", 0),
        (None, 0),
        ("abc", 0),
        (True, 0),
    ])
    def test_safe_int(self, value, expected):
        assert safe_int(value) == expected

    def test_safe_int_custom_default(self):
        assert safe_int(None, default=None) is None

    def test_safe_str(self):
        assert safe_str(None) == ""
        assert safe_str(5) == "5"

    def test_format_scalar(self):
        assert format_scalar(False) == "false"
        assert format_scalar(10.0) == "10"
        assert format_scalar(-0.25) == "-0.25"

    def test_generate_id(self):
        assert re.match(r"^condition-\d{13}-[0-9a-z]{9}$", generate_id("condition"))
        assert re.match(r"^tf_\d{13}_[0-9a-z]{9}$", generate_id("tf", "_"))
