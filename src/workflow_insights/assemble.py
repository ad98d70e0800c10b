"""Record assembly: wrap one remediation entry into a full insight record.

Pure construction, no I/O.  The caller supplies ``now`` from its clock so a
whole run shares one timestamp.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from workflow_insights.config import GenerationSettings
from workflow_insights.models import (
    Category,
    ExceptionListItem,
    Finding,
    InsightAction,
    InsightRecord,
    InsightSource,
    InsightTarget,
    InsightType,
    OSType,
    RemediationEntry,
    SourceMeta,
    SourceType,
    TargetType,
)


def assemble(
    finding: Finding,
    entry: RemediationEntry,
    os_type: OSType,
    endpoint_ids: Sequence[str],
    source: SourceMeta,
    *,
    insight_type: InsightType,
    message: str,
    list_id: str,
    now: datetime,
    settings: GenerationSettings,
) -> InsightRecord:
    """Build the record for *entry* targeting the endpoints running *os_type*.

    The data range is a fixed window of ``settings.data_range_hours``
    starting at *now*; real inference time ranges are not tracked yet.
    """
    item = ExceptionListItem(
        list_id=list_id,
        name=finding.group,
        description=settings.description,
        entries=(entry,),
        tags=tuple(settings.policy_tags),
        os_types=(os_type,),
    )
    return InsightRecord(
        timestamp=now,
        message=message,
        category=Category.ENDPOINT,
        type=insight_type,
        source=InsightSource(
            type=SourceType.LLM_CONNECTOR,
            id=source.connector_id,
            data_range_start=now,
            data_range_end=now + timedelta(hours=settings.data_range_hours),
        ),
        target=InsightTarget(type=TargetType.ENDPOINT, ids=tuple(endpoint_ids)),
        action=InsightAction(type=settings.action_type, timestamp=now),
        value=finding.group,
        metadata={
            "notes": {"llm_model": source.model or ""},
            "message_variables": [finding.group],
        },
        exception_list_items=(item,),
    )
