"""Store contract tests: SQLite and in-memory insight stores."""

import sqlite3
from unittest.mock import patch

import pytest

from conftest import SOURCE, fixed_clock, make_finding
from workflow_insights import engine
from workflow_insights.adapters.memory_store import MemoryInsightStore
from workflow_insights.adapters.sqlite_store import SqliteInsightStore
from workflow_insights.adapters.store_factory import create_store
from workflow_insights.models import InsightRecord
from workflow_insights.ports import InsightStorePort


def _records(directory, insight_type="incompatible_antivirus", group="AV"):
    result = engine.generate(
        insight_type, [make_finding(group, ("/a", None), ("/b", None))], ["e1", "e2", "e4"],
        directory=directory, source=SOURCE, clock=fixed_clock,
    )
    return result.records


@pytest.fixture(params=["sqlite", "memory"])
def any_store(request, db_path):
    if request.param == "sqlite":
        return SqliteInsightStore(db_path)
    return MemoryInsightStore()


class TestStoreContract:
    def test_implements_port(self, any_store):
        assert isinstance(any_store, InsightStorePort)

    def test_save_and_count(self, any_store, directory):
        assert any_store.save_insights(_records(directory)) == 4
        assert any_store.count_insights() == 4
        assert any_store.count_insights(insight_type="noisy_process_tree") == 0

    def test_list_filters_by_type(self, any_store, directory):
        any_store.save_insights(_records(directory))
        any_store.save_insights(_records(directory, insight_type="noisy_process_tree", group="chatty"))
        docs = any_store.list_insights(insight_type="noisy_process_tree")
        assert len(docs) == 4
        assert {d["value"] for d in docs} == {"chatty"}

    def test_list_filters_by_target(self, any_store, directory):
        any_store.save_insights(_records(directory))
        docs = any_store.list_insights(target_id="e4")
        assert len(docs) == 2
        assert all(d["target"]["ids"] == ["e2", "e4"] for d in docs)
        assert any_store.list_insights(target_id="e1", insight_type="incompatible_antivirus")

    def test_list_newest_first_with_limit(self, any_store, directory):
        any_store.save_insights(_records(directory, group="old"))
        any_store.save_insights(_records(directory, group="new"))
        docs = any_store.list_insights(limit=2)
        assert [d["value"] for d in docs] == ["new", "new"]

    def test_documents_round_trip(self, any_store, directory):
        records = _records(directory)
        any_store.save_insights(records)
        stored = [InsightRecord.from_dict(d) for d in reversed(any_store.list_insights())]
        assert stored == list(records)

    def test_save_empty_batch(self, any_store):
        assert any_store.save_insights([]) == 0
        assert any_store.count_insights() == 0


class TestSqliteStore:
    def test_persists_across_instances(self, db_path, directory):
        SqliteInsightStore(db_path).save_insights(_records(directory))
        assert SqliteInsightStore(db_path).count_insights() == 4

    def test_assigns_document_ids(self, store, directory):
        store.save_insights(_records(directory))
        ids = [d["id"] for d in store.list_insights()]
        assert len(set(ids)) == 4

    def test_schema_connection_is_closed(self, db_path):
        opened = []
        real_connect = sqlite3.connect

        class _Tracked:
            def __init__(self, conn):
                self.conn = conn
                self.closed = False

            def executescript(self, script):
                return self.conn.executescript(script)

            def close(self):
                self.closed = True
                self.conn.close()

        def _connect(*args, **kwargs):
            tracked = _Tracked(real_connect(*args, **kwargs))
            opened.append(tracked)
            return tracked

        with patch("sqlite3.connect", _connect):
            SqliteInsightStore(db_path)
        assert opened and all(c.closed for c in opened)
        assert SqliteInsightStore(db_path).count_insights() == 0

    def test_creates_parent_directory(self, tmp_path):
        store = SqliteInsightStore(tmp_path / "nested" / "dir" / "insights.db")
        assert store.db_path.parent.is_dir()


class TestStoreFactory:
    def test_sqlite_default(self, db_path):
        store = create_store(db_path=db_path)
        assert isinstance(store, SqliteInsightStore)
        assert store.db_path == db_path

    def test_memory_from_env(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_INSIGHTS_DB_BACKEND", "memory")
        assert isinstance(create_store(), MemoryInsightStore)

    def test_db_path_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WORKFLOW_INSIGHTS_DB_PATH", str(tmp_path / "env.db"))
        assert create_store().db_path == tmp_path / "env.db"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            create_store(backend="postgres")
