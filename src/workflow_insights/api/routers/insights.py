"""Insight generation and listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from workflow_insights import engine
from workflow_insights.api.schemas import GenerateInsightsBody
from workflow_insights.defaults import QUERY_LIMIT_MAX, QUERY_LIMIT_SMALL

router = APIRouter(tags=["insights"])


@router.post("/insights/generate")
def generate_insights(request: Request, body: GenerateInsightsBody):
    state = request.app.state
    result = engine.generate(
        body.insight_type,
        body.to_findings(),
        body.endpoint_ids,
        directory=state.directory,
        source=body.source(),
        registry=state.registry,
        settings=state.settings,
        store=state.store,
    )
    return {
        **result.summary(),
        "insights": [r.to_dict() for r in result.records],
    }


@router.get("/insights")
def list_insights(
    request: Request,
    type: str | None = None,
    target_id: str | None = None,
    limit: int = Query(QUERY_LIMIT_SMALL, ge=1, le=QUERY_LIMIT_MAX),
):
    store = request.app.state.store
    return store.list_insights(insight_type=type, target_id=target_id, limit=limit)


@router.get("/insights/categories")
def list_categories(request: Request):
    return {"categories": request.app.state.registry.categories()}
