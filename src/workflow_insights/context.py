"""Per-run context shared by every builder of a generation run."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from workflow_insights.config import GenerationSettings
from workflow_insights.errors import GenerationCancelled
from workflow_insights.models import InsightType, OSPartition, SourceMeta


class CancelToken:
    """Caller-owned cancellation flag, safe to set from another thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelled("generation run cancelled by caller")


@dataclass(frozen=True)
class BuildContext:
    insight_type: InsightType
    partition: OSPartition
    source: SourceMeta
    now: datetime
    settings: GenerationSettings = field(default_factory=GenerationSettings)
    cancel: CancelToken | None = None

    def check_cancelled(self) -> None:
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()
