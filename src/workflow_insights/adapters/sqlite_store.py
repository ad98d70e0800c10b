"""SQLite implementation of InsightStorePort.

Each insight record is stored as its JSON document, with the fields used
for filtering copied into indexed columns.  Records are append-only: a
new generation run adds rows, it never rewrites earlier ones.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Iterable

from workflow_insights.defaults import QUERY_LIMIT_SMALL
from workflow_insights.models import InsightRecord


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_SCHEMA = """
CREATE TABLE IF NOT EXISTS insights (
    seq         INTEGER PRIMARY KEY AUTOINCREMENT,
    id          TEXT NOT NULL UNIQUE,
    timestamp   TEXT NOT NULL,
    type        TEXT NOT NULL,
    value       TEXT NOT NULL,
    source_id   TEXT NOT NULL,
    document    TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_insights_type ON insights(type);
CREATE INDEX IF NOT EXISTS idx_insights_time ON insights(timestamp);

CREATE TABLE IF NOT EXISTS insight_targets (
    insight_id  TEXT NOT NULL,
    target_id   TEXT NOT NULL,
    PRIMARY KEY (insight_id, target_id)
);
CREATE INDEX IF NOT EXISTS idx_insight_targets_target ON insight_targets(target_id);
"""


# ---------------------------------------------------------------------------
# SqliteInsightStore
# ---------------------------------------------------------------------------

class SqliteInsightStore:
    """InsightStorePort backed by a single SQLite file."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path))
        try:
            conn.executescript(_SCHEMA)
        finally:
            conn.close()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        pass  # connections are per-call; nothing to tear down

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def save_insights(self, records: Iterable[InsightRecord]) -> int:
        rows: list[tuple[Any, ...]] = []
        targets: list[tuple[str, str]] = []
        for record in records:
            insight_id = uuid.uuid4().hex
            doc = record.to_dict()
            doc["id"] = insight_id
            rows.append((
                insight_id, doc["@timestamp"], doc["type"], doc["value"],
                doc["source"]["id"], json.dumps(doc),
            ))
            targets.extend((insight_id, t) for t in doc["target"]["ids"])

        # One transaction: a batch is stored whole or not at all.
        conn = self._connect()
        try:
            with conn:
                conn.executemany(
                    "INSERT INTO insights (id, timestamp, type, value, source_id, document) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    rows,
                )
                conn.executemany(
                    "INSERT OR IGNORE INTO insight_targets (insight_id, target_id) VALUES (?, ?)",
                    targets,
                )
        finally:
            conn.close()
        return len(rows)

    def list_insights(
        self,
        *,
        insight_type: str | None = None,
        target_id: str | None = None,
        limit: int = QUERY_LIMIT_SMALL,
    ) -> list[dict[str, Any]]:
        sql = "SELECT i.document FROM insights i"
        clauses: list[str] = []
        params: list[Any] = []
        if target_id is not None:
            sql += " JOIN insight_targets t ON t.insight_id = i.id"
            clauses.append("t.target_id = ?")
            params.append(target_id)
        if insight_type is not None:
            clauses.append("i.type = ?")
            params.append(insight_type)
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY i.seq DESC LIMIT ?"
        params.append(limit)

        conn = self._connect()
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            conn.close()
        return [json.loads(r["document"]) for r in rows]

    def count_insights(self, *, insight_type: str | None = None) -> int:
        conn = self._connect()
        try:
            if insight_type is None:
                row = conn.execute("SELECT COUNT(*) AS n FROM insights").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) AS n FROM insights WHERE type = ?", (insight_type,),
                ).fetchone()
        finally:
            conn.close()
        return row["n"]
