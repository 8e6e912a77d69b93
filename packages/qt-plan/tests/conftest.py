"""Pytest configuration and fixtures for qt-plan tests."""

from datetime import datetime, timezone

import pytest

from qt_plan.builder import ParseOptions
from qt_plan.ingest import parse
from qt_plan.normalize import make_node
from qt_plan.samples import SAMPLE_INDENTED, SAMPLE_SQL, SAMPLE_TABULAR, SAMPLE_TREE_DATA
from qt_plan.schemas import PlanMetric


# =============================================================================
# RAW PLAN FIXTURES
# =============================================================================

@pytest.fixture
def tree_data_text() -> str:
    """JSON plan: Aggregate -> Hash Join -> [Seq Scan, Index Scan]."""
    return SAMPLE_TREE_DATA


@pytest.fixture
def indented_text() -> str:
    return SAMPLE_INDENTED


@pytest.fixture
def tabular_text() -> str:
    return SAMPLE_TABULAR


# =============================================================================
# EXECUTION FIXTURES
# =============================================================================

@pytest.fixture
def captured_at() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def tree_execution(tree_data_text, captured_at):
    """Parsed JSON sample with the demo query attached."""
    return parse(tree_data_text, ParseOptions(sql_text=SAMPLE_SQL, captured_at=captured_at))


@pytest.fixture
def tabular_execution(tabular_text):
    return parse(tabular_text)


@pytest.fixture
def node_factory():
    """Build a node with just the metrics a test cares about."""
    def _make(name="Seq Scan", level=0, children=None, warnings=None, **metrics):
        node = make_node(name, level, metrics=PlanMetric(**metrics), warnings=warnings)
        node.children.extend(children or [])
        return node
    return _make
