"""Generation settings: embedded defaults, JSON config file, environment.

Load order (later wins):
  1. Defaults from ``workflow_insights.defaults``.
  2. First existing JSON file among the explicit path,
     ``.workflow_insights/config.json`` and ``insights.json``.
  3. ``WORKFLOW_INSIGHTS_*`` environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from workflow_insights.defaults import (
    DEFAULT_ACTION_TYPE,
    DEFAULT_DATA_RANGE_HOURS,
    DEFAULT_DESCRIPTION,
    DEFAULT_POLICY_TAGS,
)
from workflow_insights.models import ActionType

_ENV_PREFIX = "WORKFLOW_INSIGHTS_"


@dataclass(frozen=True)
class GenerationSettings:
    data_range_hours: int = DEFAULT_DATA_RANGE_HOURS
    policy_tags: tuple[str, ...] = DEFAULT_POLICY_TAGS
    description: str = DEFAULT_DESCRIPTION
    action_type: ActionType = ActionType(DEFAULT_ACTION_TYPE)
    source: str = field(default="default", compare=False)

    def __post_init__(self) -> None:
        if self.data_range_hours <= 0:
            raise ValueError(f"data_range_hours must be positive, got {self.data_range_hours}")
        if not self.policy_tags:
            raise ValueError("policy_tags must not be empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_range_hours": self.data_range_hours,
            "policy_tags": list(self.policy_tags),
            "description": self.description,
            "action_type": self.action_type.value,
            "source": self.source,
        }


def _apply(settings: GenerationSettings, data: dict[str, Any], source: str) -> GenerationSettings:
    changes: dict[str, Any] = {}
    if "data_range_hours" in data:
        changes["data_range_hours"] = int(data["data_range_hours"])
    if "policy_tags" in data:
        tags = data["policy_tags"]
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        changes["policy_tags"] = tuple(tags)
    if "description" in data:
        changes["description"] = str(data["description"])
    if "action_type" in data:
        changes["action_type"] = ActionType(data["action_type"])
    if not changes:
        return settings
    return replace(settings, source=source, **changes)


def load_settings(config_path: str | Path | None = None) -> GenerationSettings:
    settings = GenerationSettings()

    paths_to_try: list[Path] = []
    if config_path:
        paths_to_try.append(Path(config_path))
    paths_to_try.extend([
        Path(".workflow_insights/config.json"),
        Path("insights.json"),
    ])

    for p in paths_to_try:
        if p.exists():
            with open(p) as f:
                data = json.load(f)
            settings = _apply(settings, data, source="config")
            break

    env: dict[str, Any] = {}
    for key in ("data_range_hours", "policy_tags", "description", "action_type"):
        val = os.environ.get(f"{_ENV_PREFIX}{key.upper()}")
        if val is not None:
            env[key] = val
    return _apply(settings, env, source="env")
