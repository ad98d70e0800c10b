"""In-memory InsightStorePort for tests and dry runs."""

from __future__ import annotations

from typing import Any, Iterable

from workflow_insights.defaults import QUERY_LIMIT_SMALL
from workflow_insights.models import InsightRecord


class MemoryInsightStore:
    def __init__(self) -> None:
        self._docs: list[dict[str, Any]] = []

    def save_insights(self, records: Iterable[InsightRecord]) -> int:
        docs = [r.to_dict() for r in records]
        self._docs.extend(docs)
        return len(docs)

    def list_insights(
        self,
        *,
        insight_type: str | None = None,
        target_id: str | None = None,
        limit: int = QUERY_LIMIT_SMALL,
    ) -> list[dict[str, Any]]:
        docs = [
            d for d in reversed(self._docs)
            if (insight_type is None or d["type"] == insight_type)
            and (target_id is None or target_id in d["target"]["ids"])
        ]
        return docs[:limit]

    def count_insights(self, *, insight_type: str | None = None) -> int:
        return sum(1 for d in self._docs if insight_type is None or d["type"] == insight_type)

    def close(self) -> None:
        pass
