"""Argparse parser definition for the workflow insights CLI."""

from __future__ import annotations

import argparse

from workflow_insights.cli._helpers import _default_db
from workflow_insights.defaults import QUERY_LIMIT_SMALL
from workflow_insights.models import InsightType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-insights",
        description="Generate exception-list remediation insights from defend insight findings",
    )
    parser.add_argument("--db", default=_default_db(), help="SQLite database path")
    parser.add_argument("--config", help="JSON generation settings file")
    parser.add_argument("--log-level", default="WARNING", help="Root log level")
    sub = parser.add_subparsers(dest="command")

    _register_generate_command(sub)
    _register_query_commands(sub)
    _register_server_commands(sub)

    return parser


def _register_generate_command(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("generate", help="Build insights from a findings file")
    p.add_argument("--findings", required=True, help="JSON file with findings")
    p.add_argument("--endpoints", required=True, help="Comma-separated endpoint ids")
    p.add_argument("--directory", required=True,
                   help="Endpoint directory: JSON file (id -> OS) or metadata service URL")
    p.add_argument("--insight-type", default=InsightType.INCOMPATIBLE_ANTIVIRUS.value,
                   help="Insight category to build")
    p.add_argument("--connector-id", required=True, help="Inference connector id")
    p.add_argument("--model", default="", help="Model name recorded in metadata")
    p.add_argument("--no-persist", action="store_true", help="Print records without storing them")
    p.add_argument("--show-records", action="store_true", help="Include records in the output")


def _register_query_commands(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("list", help="List stored insights")
    p.add_argument("--type", dest="insight_type", help="Filter by insight type")
    p.add_argument("--target-id", help="Filter by targeted endpoint id")
    p.add_argument("--limit", type=int, default=QUERY_LIMIT_SMALL)

    sub.add_parser("categories", help="List registered insight categories")


def _register_server_commands(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("serve", help="Start HTTP API server")
    p.add_argument("--directory", required=True,
                   help="Endpoint directory: JSON file (id -> OS) or metadata service URL")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=9876)
