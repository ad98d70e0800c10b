"""Identity extraction from a finding's evidence events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from workflow_insights.models import FindingEvent


@dataclass(frozen=True)
class Identities:
    """Distinct identity keys of one finding, in first-seen order."""

    paths: tuple[str, ...] = ()
    signatures: tuple[str, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.paths and not self.signatures


def normalize(events: Iterable[FindingEvent]) -> Identities:
    """Collect distinct non-empty file paths and code-signing identities.

    Repeats collapse; empty values are dropped.  No events means no
    identities, which callers treat as nothing to remediate.
    """
    paths: dict[str, None] = {}
    signatures: dict[str, None] = {}
    for event in events:
        if event.value:
            paths.setdefault(event.value, None)
        if event.signer_id:
            signatures.setdefault(event.signer_id, None)
    return Identities(paths=tuple(paths), signatures=tuple(signatures))
