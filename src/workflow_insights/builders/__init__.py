"""Insight builders: one per insight category, dispatched via a registry."""

from workflow_insights.builders.base import InsightBuilder, build_remediation_insights
from workflow_insights.builders.incompatible_antivirus import build_incompatible_antivirus_insights
from workflow_insights.builders.noisy_process_tree import build_noisy_process_tree_insights
from workflow_insights.builders.registry import BuilderRegistry
from workflow_insights.models import InsightType


def default_registry() -> BuilderRegistry:
    """Registry with every built-in category, validated."""
    registry = BuilderRegistry()
    registry.register(InsightType.INCOMPATIBLE_ANTIVIRUS, build_incompatible_antivirus_insights)
    registry.register(InsightType.NOISY_PROCESS_TREE, build_noisy_process_tree_insights)
    registry.validate()
    return registry


__all__ = [
    "BuilderRegistry",
    "InsightBuilder",
    "build_incompatible_antivirus_insights",
    "build_noisy_process_tree_insights",
    "build_remediation_insights",
    "default_registry",
]
