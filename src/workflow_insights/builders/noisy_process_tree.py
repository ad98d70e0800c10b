"""Noisy process trees: suggest event-filter entries for chatty processes."""

from __future__ import annotations

from typing import Sequence

from workflow_insights.builders.base import build_remediation_insights
from workflow_insights.context import BuildContext
from workflow_insights.defaults import EVENT_FILTERS_LIST_ID
from workflow_insights.models import Finding, InsightRecord

MESSAGE = "Noisy process trees detected"


def build_noisy_process_tree_insights(
    findings: Sequence[Finding],
    context: BuildContext,
) -> list[InsightRecord]:
    return build_remediation_insights(
        findings, context, message=MESSAGE, list_id=EVENT_FILTERS_LIST_ID,
    )
