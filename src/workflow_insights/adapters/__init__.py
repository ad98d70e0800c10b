"""Collaborator adapters: endpoint directories and insight stores."""

from workflow_insights.adapters.http_directory import HttpDirectory
from workflow_insights.adapters.memory_store import MemoryInsightStore
from workflow_insights.adapters.sqlite_store import SqliteInsightStore
from workflow_insights.adapters.static_directory import StaticDirectory
from workflow_insights.adapters.store_factory import create_store

__all__ = [
    "HttpDirectory",
    "MemoryInsightStore",
    "SqliteInsightStore",
    "StaticDirectory",
    "create_store",
]
