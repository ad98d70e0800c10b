"""Workflow insights: turn defend insight findings into remediation records.

Pipeline per run: partition endpoints by OS, then for each finding
normalize its identities, synthesize exception-list entries per OS and
assemble one immutable insight record per entry.
"""

from workflow_insights.builders import BuilderRegistry, default_registry
from workflow_insights.config import GenerationSettings, load_settings
from workflow_insights.context import BuildContext, CancelToken
from workflow_insights.engine import GenerationResult, generate
from workflow_insights.errors import (
    CollaboratorUnavailable,
    GenerationCancelled,
    InsightGenerationError,
    UnknownCategory,
)
from workflow_insights.models import Finding, FindingEvent, InsightRecord, InsightType, OSType, SourceMeta

__all__ = [
    "BuildContext",
    "BuilderRegistry",
    "CancelToken",
    "CollaboratorUnavailable",
    "Finding",
    "FindingEvent",
    "GenerationCancelled",
    "GenerationResult",
    "GenerationSettings",
    "InsightGenerationError",
    "InsightRecord",
    "InsightType",
    "OSType",
    "SourceMeta",
    "UnknownCategory",
    "default_registry",
    "generate",
    "load_settings",
]
