"""Collaborator port interfaces.

Generation depends on these protocols only; concrete directory and store
implementations live under ``workflow_insights.adapters``.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence, runtime_checkable

from workflow_insights.models import InsightRecord


@runtime_checkable
class DirectoryPort(Protocol):
    """Endpoint metadata service: maps endpoint ids to an OS name.

    Ids it cannot resolve are either omitted or mapped to ``None``.  Raising
    means the service as a whole is unavailable.
    """

    def resolve_os(self, endpoint_ids: Sequence[str]) -> dict[str, str | None]: ...


@runtime_checkable
class InsightStorePort(Protocol):
    def save_insights(self, records: Iterable[InsightRecord]) -> int: ...
    def list_insights(
        self,
        *,
        insight_type: str | None = None,
        target_id: str | None = None,
        limit: int = 200,
    ) -> list[dict[str, Any]]: ...
    def count_insights(self, *, insight_type: str | None = None) -> int: ...
    def close(self) -> None: ...
