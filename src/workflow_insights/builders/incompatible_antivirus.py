"""Incompatible antivirus: suggest trusted-app entries for third-party AV."""

from __future__ import annotations

from typing import Sequence

from workflow_insights.builders.base import build_remediation_insights
from workflow_insights.context import BuildContext
from workflow_insights.defaults import TRUSTED_APPS_LIST_ID
from workflow_insights.models import Finding, InsightRecord

MESSAGE = "Incompatible antiviruses detected"


def build_incompatible_antivirus_insights(
    findings: Sequence[Finding],
    context: BuildContext,
) -> list[InsightRecord]:
    return build_remediation_insights(
        findings, context, message=MESSAGE, list_id=TRUSTED_APPS_LIST_ID,
    )
