"""Core data types for workflow insights."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime) -> str:
    return value.isoformat()


def _parse_iso(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _freeze(value: Any) -> Any:
    """Read-only view of nested JSON-like data: dicts become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Category(str, Enum):
    ENDPOINT = "endpoint"


class InsightType(str, Enum):
    INCOMPATIBLE_ANTIVIRUS = "incompatible_antivirus"
    NOISY_PROCESS_TREE = "noisy_process_tree"


class SourceType(str, Enum):
    LLM_CONNECTOR = "llm-connector"


class TargetType(str, Enum):
    ENDPOINT = "endpoint"


class ActionType(str, Enum):
    REFRESHED = "refreshed"
    REMEDIATED = "remediated"
    SUPPRESSED = "suppressed"
    DISMISSED = "dismissed"


class OSType(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


# ---------------------------------------------------------------------------
# Findings (inference service output)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FindingEvent:
    value: str
    signer_id: str | None = None
    id: str | None = None
    endpoint_id: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FindingEvent:
        return cls(
            value=d.get("value") or "",
            signer_id=d.get("signerId", d.get("signature")),
            id=d.get("id"),
            endpoint_id=d.get("endpointId"),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"value": self.value}
        if self.signer_id is not None:
            d["signerId"] = self.signer_id
        if self.id is not None:
            d["id"] = self.id
        if self.endpoint_id is not None:
            d["endpointId"] = self.endpoint_id
        return d


@dataclass(frozen=True)
class Finding:
    group: str
    events: tuple[FindingEvent, ...] = ()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Finding:
        return cls(
            group=d["group"],
            events=tuple(FindingEvent.from_dict(e) for e in d.get("events") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"group": self.group, "events": [e.to_dict() for e in self.events]}


# ---------------------------------------------------------------------------
# OS partition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OSPartition:
    by_os: dict[OSType, tuple[str, ...]] = field(default_factory=dict)
    unresolved: tuple[str, ...] = ()

    @property
    def os_types(self) -> tuple[OSType, ...]:
        return tuple(self.by_os)

    def endpoints_for(self, os_type: OSType) -> tuple[str, ...]:
        return self.by_os.get(os_type, ())

    @property
    def resolved_count(self) -> int:
        return sum(len(ids) for ids in self.by_os.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "by_os": {os.value: list(ids) for os, ids in self.by_os.items()},
            "unresolved": list(self.unresolved),
        }


# ---------------------------------------------------------------------------
# Remediation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RemediationEntry:
    field: str
    value: str
    os_type: OSType
    operator: str = "included"
    type: str = "match"

    @property
    def os_types(self) -> list[str]:
        return [self.os_type.value]

    def to_dict(self) -> dict[str, Any]:
        """Match clause as stored on an exception list item."""
        return {
            "field": self.field,
            "operator": self.operator,
            "type": self.type,
            "value": self.value,
        }


@dataclass(frozen=True)
class ExceptionListItem:
    list_id: str
    name: str
    description: str
    entries: tuple[RemediationEntry, ...]
    tags: tuple[str, ...]
    os_types: tuple[OSType, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "list_id": self.list_id,
            "name": self.name,
            "description": self.description,
            "entries": [e.to_dict() for e in self.entries],
            "tags": list(self.tags),
            "os_types": [os.value for os in self.os_types],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ExceptionListItem:
        os_types = tuple(OSType(o) for o in d["os_types"])
        # Stored entries carry no OS of their own; each item is scoped to one OS.
        entry_os = os_types[0]
        return cls(
            list_id=d["list_id"],
            name=d["name"],
            description=d.get("description", ""),
            entries=tuple(
                RemediationEntry(
                    field=e["field"],
                    value=e["value"],
                    os_type=entry_os,
                    operator=e.get("operator", "included"),
                    type=e.get("type", "match"),
                )
                for e in d.get("entries", [])
            ),
            tags=tuple(d.get("tags", [])),
            os_types=os_types,
        )


# ---------------------------------------------------------------------------
# Insight record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceMeta:
    """Attribution for the inference run that produced the findings."""

    connector_id: str
    model: str = ""


@dataclass(frozen=True)
class InsightSource:
    type: SourceType
    id: str
    data_range_start: datetime
    data_range_end: datetime


@dataclass(frozen=True)
class InsightTarget:
    type: TargetType
    ids: tuple[str, ...]


@dataclass(frozen=True)
class InsightAction:
    type: ActionType
    timestamp: datetime


@dataclass(frozen=True)
class InsightRecord:
    timestamp: datetime
    message: str
    category: Category
    type: InsightType
    source: InsightSource
    target: InsightTarget
    action: InsightAction
    value: str
    metadata: Mapping[str, Any]
    exception_list_items: tuple[ExceptionListItem, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    def to_dict(self) -> dict[str, Any]:
        return {
            "@timestamp": _iso(self.timestamp),
            "message": self.message,
            "category": self.category.value,
            "type": self.type.value,
            "source": {
                "type": self.source.type.value,
                "id": self.source.id,
                "data_range_start": _iso(self.source.data_range_start),
                "data_range_end": _iso(self.source.data_range_end),
            },
            "target": {
                "type": self.target.type.value,
                "ids": list(self.target.ids),
            },
            "action": {
                "type": self.action.type.value,
                "timestamp": _iso(self.action.timestamp),
            },
            "value": self.value,
            "metadata": _thaw(self.metadata),
            "remediation": {
                "exception_list_items": [i.to_dict() for i in self.exception_list_items],
            },
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> InsightRecord:
        source = d["source"]
        target = d["target"]
        action = d["action"]
        return cls(
            timestamp=_parse_iso(d["@timestamp"]),
            message=d.get("message", ""),
            category=Category(d.get("category", "endpoint")),
            type=InsightType(d["type"]),
            source=InsightSource(
                type=SourceType(source.get("type", "llm-connector")),
                id=source.get("id", ""),
                data_range_start=_parse_iso(source["data_range_start"]),
                data_range_end=_parse_iso(source["data_range_end"]),
            ),
            target=InsightTarget(
                type=TargetType(target.get("type", "endpoint")),
                ids=tuple(target.get("ids", [])),
            ),
            action=InsightAction(
                type=ActionType(action.get("type", "refreshed")),
                timestamp=_parse_iso(action["timestamp"]),
            ),
            value=d.get("value", ""),
            metadata=d.get("metadata", {}),
            exception_list_items=tuple(
                ExceptionListItem.from_dict(i)
                for i in d.get("remediation", {}).get("exception_list_items", [])
            ),
        )
