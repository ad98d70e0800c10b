"""Pydantic request/response models for strict input validation."""

from __future__ import annotations

from pydantic import BaseModel, Field

from workflow_insights.models import Finding, FindingEvent, SourceMeta


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------

class FindingEventBody(BaseModel):
    value: str = ""
    signerId: str | None = None
    signature: str | None = None
    id: str | None = None
    endpointId: str | None = None

    model_config = {"extra": "allow"}

    def to_event(self) -> FindingEvent:
        return FindingEvent(
            value=self.value,
            signer_id=self.signerId if self.signerId is not None else self.signature,
            id=self.id,
            endpoint_id=self.endpointId,
        )


class FindingBody(BaseModel):
    group: str = Field(..., min_length=1, description="Issue label, e.g. an AV product")
    events: list[FindingEventBody] = Field(default_factory=list)

    def to_finding(self) -> Finding:
        return Finding(group=self.group, events=tuple(e.to_event() for e in self.events))


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class GenerateInsightsBody(BaseModel):
    insight_type: str = Field(..., min_length=1)
    endpoint_ids: list[str] = Field(..., min_length=1)
    connector_id: str = Field(..., min_length=1)
    model: str = ""
    findings: list[FindingBody] = Field(default_factory=list)

    def source(self) -> SourceMeta:
        return SourceMeta(connector_id=self.connector_id, model=self.model)

    def to_findings(self) -> list[Finding]:
        return [f.to_finding() for f in self.findings]
