"""Insight builder registry: category tag -> builder function."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from workflow_insights.builders.base import InsightBuilder
from workflow_insights.context import BuildContext
from workflow_insights.errors import UnknownCategory
from workflow_insights.models import Finding, InsightRecord, InsightType

log = logging.getLogger("workflow_insights.builders.registry")


def _key(category: InsightType | str) -> str:
    return category.value if isinstance(category, InsightType) else str(category)


class BuilderRegistry:
    """Explicit dispatch table; adding a category never touches ``build``.

    Keys come from the closed ``InsightType`` vocabulary: every record
    carries its type and stored documents are read back through that enum,
    so a new category is one ``InsightType`` member plus one ``register``
    call.
    """

    def __init__(self) -> None:
        self._builders: dict[str, InsightBuilder] = {}

    def register(
        self,
        category: InsightType | str,
        builder: InsightBuilder,
        *,
        replace: bool = False,
    ) -> None:
        key = _key(category)
        if key not in {t.value for t in InsightType}:
            raise ValueError(f"{key!r} is not an InsightType; add the member before registering a builder")
        if key in self._builders and not replace:
            raise ValueError(f"Builder already registered for {key!r}")
        self._builders[key] = builder

    def get(self, category: InsightType | str) -> InsightBuilder:
        key = _key(category)
        builder = self._builders.get(key)
        if builder is None:
            raise UnknownCategory(key, list(self._builders))
        return builder

    def __contains__(self, category: object) -> bool:
        if not isinstance(category, (InsightType, str)):
            return False
        return _key(category) in self._builders

    def categories(self) -> list[str]:
        return sorted(self._builders)

    def validate(self, required: Iterable[InsightType | str] | None = None) -> None:
        """Fail fast if any *required* category (default: all) lacks a builder."""
        wanted = [_key(c) for c in (required if required is not None else InsightType)]
        missing = [c for c in wanted if c not in self._builders]
        if missing:
            raise UnknownCategory(missing[0], list(self._builders))

    def build(
        self,
        category: InsightType | str,
        findings: Sequence[Finding],
        context: BuildContext,
    ) -> list[InsightRecord]:
        builder = self.get(category)
        records = builder(findings, context)
        log.debug("Builder %s produced %d records from %d findings",
                  _key(category), len(records), len(findings))
        return records
