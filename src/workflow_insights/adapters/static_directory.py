"""Static endpoint directory backed by an in-memory mapping or JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence


class StaticDirectory:
    """DirectoryPort over a fixed ``{endpoint_id: os_name}`` mapping."""

    def __init__(self, mapping: Mapping[str, str | None]) -> None:
        self._mapping = dict(mapping)

    @classmethod
    def from_file(cls, path: str | Path) -> StaticDirectory:
        """Load a JSON object of endpoint id -> OS name."""
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object of endpoint id -> OS")
        return cls(data)

    def resolve_os(self, endpoint_ids: Sequence[str]) -> dict[str, str | None]:
        return {e: self._mapping[e] for e in endpoint_ids if e in self._mapping}
