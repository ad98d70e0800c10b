"""Exceptions raised by insight generation.

Partial endpoint resolution and empty evidence are not errors: the first is
reported on ``OSPartition.unresolved``, the second yields zero records.
"""

from __future__ import annotations


class InsightGenerationError(Exception):
    """Base class for generation failures surfaced to the caller."""
    pass


class UnknownCategory(InsightGenerationError):
    """No builder is registered for the requested insight category."""

    def __init__(self, category: str, known: list[str] | None = None) -> None:
        self.category = category
        self.known = sorted(known or [])
        super().__init__(
            f"No insight builder registered for {category!r} (known: {', '.join(self.known) or 'none'})"
        )


class CollaboratorUnavailable(InsightGenerationError):
    """The endpoint directory failed as a whole; the run emits nothing."""
    pass


class GenerationCancelled(InsightGenerationError):
    """The caller cancelled the run before it completed."""
    pass
