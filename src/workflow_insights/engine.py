"""Generation run: findings + endpoints -> insight records.

Stateless per call.  One directory lookup, one shared OS partition, then
the category builder.  All-or-nothing: records reach the store only after
the whole batch was built; cancellation or a directory outage returns
nothing and stores nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from workflow_insights import observability
from workflow_insights.builders import BuilderRegistry, default_registry
from workflow_insights.config import GenerationSettings
from workflow_insights.context import BuildContext, CancelToken
from workflow_insights.errors import UnknownCategory
from workflow_insights.models import (
    Clock,
    Finding,
    InsightRecord,
    InsightType,
    OSPartition,
    SourceMeta,
    utc_now,
)
from workflow_insights.partition import partition
from workflow_insights.ports import DirectoryPort, InsightStorePort

log = logging.getLogger("workflow_insights.engine")


@dataclass(frozen=True)
class GenerationResult:
    insight_type: InsightType
    records: tuple[InsightRecord, ...]
    partition: OSPartition

    @property
    def unresolved(self) -> tuple[str, ...]:
        return self.partition.unresolved

    def summary(self) -> dict[str, Any]:
        return {
            "insight_type": self.insight_type.value,
            "records_generated": len(self.records),
            "unresolved_count": len(self.partition.unresolved),
            "unresolved_ids": list(self.partition.unresolved),
            "os_buckets": {os.value: len(ids) for os, ids in self.partition.by_os.items()},
        }


def _resolve_category(category: InsightType | str, registry: BuilderRegistry) -> InsightType:
    if category not in registry:
        key = category.value if isinstance(category, InsightType) else str(category)
        raise UnknownCategory(key, registry.categories())
    return InsightType(category)


def generate(
    insight_type: InsightType | str,
    findings: Sequence[Finding],
    endpoint_ids: Iterable[str],
    *,
    directory: DirectoryPort,
    source: SourceMeta,
    registry: BuilderRegistry | None = None,
    settings: GenerationSettings | None = None,
    clock: Clock | None = None,
    cancel: CancelToken | None = None,
    store: InsightStorePort | None = None,
) -> GenerationResult:
    """Run one generation batch for *insight_type*.

    Raises ``UnknownCategory`` before any I/O, ``CollaboratorUnavailable``
    when the directory fails, ``GenerationCancelled`` when *cancel* fires.
    """
    registry = registry or default_registry()
    settings = settings or GenerationSettings()
    clock = clock or utc_now

    category = _resolve_category(insight_type, registry)
    if cancel is not None:
        cancel.raise_if_cancelled()

    os_partition = partition(endpoint_ids, directory)
    if cancel is not None:
        cancel.raise_if_cancelled()

    context = BuildContext(
        insight_type=category,
        partition=os_partition,
        source=source,
        now=clock(),
        settings=settings,
        cancel=cancel,
    )
    records = tuple(registry.build(category, findings, context))

    if cancel is not None:
        cancel.raise_if_cancelled()

    if store is not None and records:
        store.save_insights(records)

    observability.record_generation(category.value, len(records), len(os_partition.unresolved))
    log.info(
        "Generated %d %s insights from %d findings (%d endpoints unresolved)",
        len(records), category.value, len(findings), len(os_partition.unresolved),
        extra={"insight_type": category.value, "connector_id": source.connector_id},
    )
    return GenerationResult(insight_type=category, records=records, partition=os_partition)
