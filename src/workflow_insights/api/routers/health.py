"""Health and metrics endpoints (no version prefix)."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from workflow_insights.observability import generate_metrics

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    return {
        "status": "ok",
        "categories": request.app.state.registry.categories(),
        "stored_insights": request.app.state.store.count_insights(),
    }


@router.get("/metrics", response_class=PlainTextResponse)
def metrics():
    return generate_metrics()
