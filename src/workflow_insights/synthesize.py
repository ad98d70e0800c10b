"""Remediation synthesis: pick identity kind and field per OS.

Tie-break (kept exactly as the upstream builders behave): if a finding has
any code-signing identity, only signature entries are emitted, for every OS
in scope; paths are used only when no signature evidence exists at all.
The choice is made once per finding, not per OS, so a signature that only
matters on one OS still suppresses path entries on the others.
"""

from __future__ import annotations

from typing import Iterable

from workflow_insights.defaults import (
    FIELD_CODE_SIGNATURE,
    FIELD_CODE_SIGNATURE_MACOS,
    FIELD_EXECUTABLE_CASELESS,
)
from workflow_insights.models import OSType, RemediationEntry
from workflow_insights.normalize import Identities


def signature_field(os_type: OSType) -> str:
    if os_type == OSType.MACOS:
        return FIELD_CODE_SIGNATURE_MACOS
    return FIELD_CODE_SIGNATURE


def synthesize(
    identities: Identities,
    os_types: Iterable[OSType],
) -> list[tuple[OSType, RemediationEntry]]:
    """Emit one entry per (OS, identity) pair, OS-major order."""
    entries: list[tuple[OSType, RemediationEntry]] = []
    seen: set[tuple[OSType, str]] = set()

    for os_type in os_types:
        if identities.signatures:
            field = signature_field(os_type)
            values = identities.signatures
        else:
            field = FIELD_EXECUTABLE_CASELESS
            values = identities.paths

        for value in values:
            if not value or (os_type, value) in seen:
                continue
            seen.add((os_type, value))
            entries.append((os_type, RemediationEntry(field=field, value=value, os_type=os_type)))

    return entries
