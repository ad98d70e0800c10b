"""Observability: structured logging, Prometheus-style counters, HTTP middleware."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import defaultdict
from typing import Any

from fastapi import FastAPI, Request, Response

_HTTP_ERROR_THRESHOLD = 500
_MS_PER_SECOND = 1000

_EXTRA_FIELDS = (
    "trace_id", "insight_type", "connector_id",
    "method", "path", "status_code", "duration_ms",
)


# ---------------------------------------------------------------------------
# Structured JSON logging
# ---------------------------------------------------------------------------

class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_dict["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_dict[key] = val
        return json.dumps(log_dict, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with JSON output."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Prometheus-compatible metrics (no external dependency)
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_request_count: dict[tuple[str, str, str], int] = defaultdict(int)
_request_latency_sum: dict[tuple[str, str], float] = defaultdict(float)
_request_latency_count: dict[tuple[str, str], int] = defaultdict(int)
_error_count: dict[tuple[str, str], int] = defaultdict(int)
_runs_total: dict[str, int] = defaultdict(int)
_records_total: dict[str, int] = defaultdict(int)
_unresolved_total: dict[str, int] = defaultdict(int)


def record_request(method: str, path: str, status: int, duration: float) -> None:
    with _lock:
        _request_count[(method, path, str(status))] += 1
        _request_latency_sum[(method, path)] += duration
        _request_latency_count[(method, path)] += 1
        if status >= _HTTP_ERROR_THRESHOLD:
            _error_count[(method, path)] += 1


def record_generation(insight_type: str, records: int, unresolved: int) -> None:
    with _lock:
        _runs_total[insight_type] += 1
        _records_total[insight_type] += records
        _unresolved_total[insight_type] += unresolved


def reset_metrics() -> None:
    """Clear all counters (for tests)."""
    with _lock:
        for counter in (
            _request_count, _request_latency_sum, _request_latency_count,
            _error_count, _runs_total, _records_total, _unresolved_total,
        ):
            counter.clear()


def generate_metrics() -> str:
    """Render metrics in Prometheus text exposition format."""
    lines: list[str] = []
    with _lock:
        lines.append("# HELP insights_generation_runs_total Generation runs by insight type.")
        lines.append("# TYPE insights_generation_runs_total counter")
        for insight_type, count in sorted(_runs_total.items()):
            lines.append(f'insights_generation_runs_total{{type="{insight_type}"}} {count}')

        lines.append("# HELP insights_records_generated_total Insight records generated by type.")
        lines.append("# TYPE insights_records_generated_total counter")
        for insight_type, count in sorted(_records_total.items()):
            lines.append(f'insights_records_generated_total{{type="{insight_type}"}} {count}')

        lines.append("# HELP insights_unresolved_endpoints_total Endpoints excluded for unresolved OS.")
        lines.append("# TYPE insights_unresolved_endpoints_total counter")
        for insight_type, count in sorted(_unresolved_total.items()):
            lines.append(f'insights_unresolved_endpoints_total{{type="{insight_type}"}} {count}')

        lines.append("# HELP insights_http_requests_total Total HTTP requests by method, path, status.")
        lines.append("# TYPE insights_http_requests_total counter")
        for (method, path, status), count in sorted(_request_count.items()):
            lines.append(f'insights_http_requests_total{{method="{method}",path="{path}",status="{status}"}} {count}')

        lines.append("# HELP insights_http_request_duration_seconds Total request duration by method and path.")
        lines.append("# TYPE insights_http_request_duration_seconds summary")
        for (method, path), total in sorted(_request_latency_sum.items()):
            cnt = _request_latency_count[(method, path)]
            lines.append(f'insights_http_request_duration_seconds_sum{{method="{method}",path="{path}"}} {total:.6f}')
            lines.append(f'insights_http_request_duration_seconds_count{{method="{method}",path="{path}"}} {cnt}')

        lines.append("# HELP insights_http_errors_total Total 5xx errors.")
        lines.append("# TYPE insights_http_errors_total counter")
        for (method, path), count in sorted(_error_count.items()):
            lines.append(f'insights_http_errors_total{{method="{method}",path="{path}"}} {count}')

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# FastAPI middleware
# ---------------------------------------------------------------------------

def add_observability_middleware(app: FastAPI) -> None:
    """Add request logging and metrics collection middleware."""

    @app.middleware("http")
    async def observe_request(request: Request, call_next) -> Response:
        start = time.time()
        response: Response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        method = request.method
        status = response.status_code

        record_request(method, path, status, duration)

        logger = logging.getLogger("workflow_insights.access")
        logger.info(
            "%s %s %d %.0fms",
            method, path, status, duration * _MS_PER_SECOND,
            extra={
                "method": method,
                "path": path,
                "status_code": status,
                "duration_ms": round(duration * _MS_PER_SECOND, 1),
                "trace_id": request.headers.get("x-trace-id", ""),
            },
        )
        return response
