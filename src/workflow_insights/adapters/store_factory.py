"""Factory for creating the configured InsightStorePort backend.

Reads ``WORKFLOW_INSIGHTS_DB_BACKEND`` (default: ``sqlite``) and returns the
corresponding store implementation.
"""

from __future__ import annotations

import os
from pathlib import Path

from workflow_insights.defaults import DEFAULT_DB_PATH
from workflow_insights.ports import InsightStorePort


def create_store(
    *,
    backend: str | None = None,
    db_path: str | Path | None = None,
) -> InsightStorePort:
    """Create and return an ``InsightStorePort`` for the requested backend.

    Parameters
    ----------
    backend:
        ``"sqlite"`` or ``"memory"``.  Falls back to the
        ``WORKFLOW_INSIGHTS_DB_BACKEND`` env var (default ``"sqlite"``).
    db_path:
        Path to the SQLite file.  Falls back to ``WORKFLOW_INSIGHTS_DB_PATH``.
    """
    backend = (backend or os.environ.get("WORKFLOW_INSIGHTS_DB_BACKEND", "sqlite")).lower()

    if backend == "sqlite":
        from workflow_insights.adapters.sqlite_store import SqliteInsightStore

        path = db_path or os.environ.get("WORKFLOW_INSIGHTS_DB_PATH", DEFAULT_DB_PATH)
        return SqliteInsightStore(path)

    if backend == "memory":
        from workflow_insights.adapters.memory_store import MemoryInsightStore

        return MemoryInsightStore()

    raise ValueError(f"Unknown backend: {backend!r}  (expected 'sqlite' or 'memory')")
