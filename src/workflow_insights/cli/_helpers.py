"""Shared CLI helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from workflow_insights.defaults import DEFAULT_DB_PATH
from workflow_insights.models import Finding
from workflow_insights.ports import DirectoryPort


def _default_db() -> str:
    return os.environ.get("WORKFLOW_INSIGHTS_DB_PATH", DEFAULT_DB_PATH)


def _out(data: Any) -> int:
    print(json.dumps(data, indent=2, default=str))
    if isinstance(data, dict) and "error" in data:
        return 1
    return 0


def _load_findings(path: str) -> list[Finding]:
    """Read findings from a JSON list, or an object with a ``findings`` key."""
    data = json.loads(Path(path).read_text())
    if isinstance(data, dict):
        data = data.get("findings", [])
    return [Finding.from_dict(d) for d in data]


def _split_ids(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _open_directory(location: str) -> DirectoryPort:
    """A URL selects the metadata HTTP service; anything else is a JSON file."""
    if location.startswith(("http://", "https://")):
        from workflow_insights.adapters.http_directory import HttpDirectory

        return HttpDirectory(location, api_key=os.environ.get("WORKFLOW_INSIGHTS_DIRECTORY_API_KEY", ""))

    from workflow_insights.adapters.static_directory import StaticDirectory

    return StaticDirectory.from_file(location)
