"""
Pytest configuration for condition algebra tests.
"""

import copy
import itertools
from pathlib import Path

import pytest
import yaml

from strategy_conditions.config.config import Config
from strategy_conditions.conditions import (
    CandleDataExpression,
    Condition,
    GroupCondition,
    IndicatorExpression,
    RenderContext,
    create_constant_expression,
)
from strategy_conditions.timeframes import TimeframeConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from a config built from the current environment."""
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture
def id_factory():
    """Deterministic timeframe id generator: tf_new_1, tf_new_2, ..."""
    counter = itertools.count(1)
    return lambda: f"tf_new_{next(counter)}"


@pytest.fixture
def legacy_document() -> dict:
    """Strategy document with legacy timeframe references (fresh copy per test)."""
    with open(FIXTURES_DIR / "legacy_strategy.yaml", encoding="utf-8") as f:
        return copy.deepcopy(yaml.safe_load(f))


def make_condition(condition_id: str, operator: str = ">", value: float = 0) -> Condition:
    return Condition(
        id=condition_id,
        operator=operator,
        lhs=CandleDataExpression(field="Close"),
        rhs=create_constant_expression("number", value),
    )


@pytest.fixture
def sample_tree() -> GroupCondition:
    """
    AND
    ├── c0                  (0,)
    ├── OR g1               (1,)
    │   ├── c10             (1, 0)
    │   └── c11             (1, 1)
    └── c2                  (2,)
    """
    return GroupCondition("root", "AND", (
        make_condition("c0", value=0),
        GroupCondition("g1", "OR", (
            make_condition("c10", value=10),
            make_condition("c11", value=11),
        )),
        make_condition("c2", value=2),
    ))


@pytest.fixture
def render_context() -> RenderContext:
    """Trading instrument with a 5m timeframe carrying RSI metadata."""
    return RenderContext(
        trading_timeframes=(
            TimeframeConfig(
                id="tf_1",
                timeframe="5m",
                indicators={"rsi_14": {"display_name": "RSI", "indicator_name": "rsi"}},
            ),
        ),
        supporting_timeframes=(
            TimeframeConfig(id="tf_si_1", number=15, unit="minutes"),
        ),
    )


@pytest.fixture
def rsi_expression() -> IndicatorExpression:
    return IndicatorExpression(
        indicator_id="rsi_14",
        indicator_param="value",
        instrument_type="TI",
        timeframe_id="tf_1",
        offset=0,
    )


@pytest.fixture
def condition_factory():
    """make_condition(condition_id, operator=">", value=0) -> Close <op> value"""
    return make_condition
