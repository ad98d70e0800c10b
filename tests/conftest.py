"""Shared fixtures for workflow insights tests."""

from datetime import datetime, timezone

import pytest

from workflow_insights.adapters.memory_store import MemoryInsightStore
from workflow_insights.adapters.sqlite_store import SqliteInsightStore
from workflow_insights.adapters.static_directory import StaticDirectory
from workflow_insights.models import Finding, FindingEvent, SourceMeta

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Auto-use fixtures: cleanup global state between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_metrics():
    """Reset in-process counters after every test."""
    yield
    from workflow_insights import observability
    observability.reset_metrics()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging() calls made by CLI and observability tests."""
    import logging
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Run every test from an empty directory without settings overrides."""
    monkeypatch.chdir(tmp_path)
    for key in ("DATA_RANGE_HOURS", "POLICY_TAGS", "DESCRIPTION", "ACTION_TYPE",
                "DB_BACKEND", "DB_PATH"):
        monkeypatch.delenv(f"WORKFLOW_INSIGHTS_{key}", raising=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def fixed_clock():
    return NOW


def make_finding(group, *events):
    """Shared test helper: build a Finding from (value, signer_id) pairs.

    Usage::

        from conftest import make_finding
        finding = make_finding("AV-X", ("/usr/bin/av", None), ("/x", "SIG1"))
    """
    return Finding(
        group=group,
        events=tuple(FindingEvent(value=v, signer_id=s) for v, s in events),
    )


SOURCE = SourceMeta(connector_id="conn-1", model="gpt-4o")


class CountingDirectory:
    """Wraps a DirectoryPort and counts resolve_os calls."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def resolve_os(self, endpoint_ids):
        self.calls += 1
        return self.inner.resolve_os(endpoint_ids)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def directory():
    return CountingDirectory(StaticDirectory({
        "e1": "macos",
        "e2": "windows",
        "e3": "linux",
        "e4": "windows",
    }))


@pytest.fixture
def memory_store():
    return MemoryInsightStore()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "insights.db"


@pytest.fixture
def store(db_path):
    """Return a fresh SqliteInsightStore."""
    return SqliteInsightStore(db_path)


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests (HTTP stack, SQLite files)")
