"""Shared pipeline for remediation-style insight builders.

normalize -> synthesize -> assemble, once per finding.  Category builders
only supply their labels (message and exception list id).
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from workflow_insights.assemble import assemble
from workflow_insights.context import BuildContext
from workflow_insights.models import Finding, InsightRecord
from workflow_insights.normalize import normalize
from workflow_insights.synthesize import synthesize

log = logging.getLogger("workflow_insights.builders")

InsightBuilder = Callable[[Sequence[Finding], BuildContext], list[InsightRecord]]


def build_remediation_insights(
    findings: Sequence[Finding],
    context: BuildContext,
    *,
    message: str,
    list_id: str,
) -> list[InsightRecord]:
    records: list[InsightRecord] = []
    by_os = context.partition.by_os

    for finding in findings:
        context.check_cancelled()

        identities = normalize(finding.events)
        if identities.empty:
            log.debug("Finding %r has no identity evidence, skipping", finding.group)
            continue

        for os_type, entry in synthesize(identities, by_os):
            records.append(assemble(
                finding,
                entry,
                os_type,
                by_os[os_type],
                context.source,
                insight_type=context.insight_type,
                message=message,
                list_id=list_id,
                now=context.now,
                settings=context.settings,
            ))

    return records
