"""Endpoint partitioning by operating system.

One directory lookup per run.  Endpoints the directory cannot place on a
supported OS are excluded from every bucket and reported as unresolved;
only a failure of the directory as a whole aborts the run.
"""

from __future__ import annotations

import logging
from typing import Iterable

from workflow_insights.defaults import OS_ALIASES
from workflow_insights.errors import CollaboratorUnavailable
from workflow_insights.models import OSPartition, OSType
from workflow_insights.ports import DirectoryPort

log = logging.getLogger("workflow_insights.partition")


def normalize_os(name: str | None) -> OSType | None:
    """Map a directory OS name onto a supported ``OSType`` (or None)."""
    if not name:
        return None
    key = name.strip().lower()
    alias = OS_ALIASES.get(key)
    if alias is None and key.startswith("windows"):
        alias = "windows"
    return OSType(alias) if alias else None


def _dedupe(endpoint_ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(e for e in endpoint_ids if e))


def partition(endpoint_ids: Iterable[str], directory: DirectoryPort) -> OSPartition:
    """Group *endpoint_ids* by resolved OS.

    Bucket order follows the first endpoint seen for each OS, and ids keep
    their input order within a bucket.
    """
    ids = _dedupe(endpoint_ids)
    if not ids:
        return OSPartition()

    try:
        resolved = directory.resolve_os(ids)
    except Exception as e:
        log.error("Endpoint directory unavailable for %d endpoints: %s", len(ids), e)
        raise CollaboratorUnavailable(f"endpoint directory unavailable: {e}") from e

    by_os: dict[OSType, list[str]] = {}
    unresolved: list[str] = []
    for endpoint_id in ids:
        os_type = normalize_os(resolved.get(endpoint_id))
        if os_type is None:
            unresolved.append(endpoint_id)
            continue
        by_os.setdefault(os_type, []).append(endpoint_id)

    if unresolved:
        log.warning(
            "%d of %d endpoints have no resolvable OS and are excluded",
            len(unresolved), len(ids),
        )

    return OSPartition(
        by_os={os_type: tuple(members) for os_type, members in by_os.items()},
        unresolved=tuple(unresolved),
    )
