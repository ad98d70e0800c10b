"""CLI command handlers: each takes parsed args and returns an exit code."""

from __future__ import annotations

import argparse
import logging

from workflow_insights import engine
from workflow_insights.adapters.store_factory import create_store
from workflow_insights.builders import default_registry
from workflow_insights.cli._helpers import _load_findings, _open_directory, _out, _split_ids
from workflow_insights.config import load_settings
from workflow_insights.errors import InsightGenerationError
from workflow_insights.models import SourceMeta

log = logging.getLogger("workflow_insights.cli")


def cmd_generate(args: argparse.Namespace) -> int:
    try:
        findings = _load_findings(args.findings)
        directory = _open_directory(args.directory)
        settings = load_settings(args.config)
    except (OSError, ValueError, KeyError) as e:
        return _out({"error": f"invalid input: {e}"})

    store = None if args.no_persist else create_store(db_path=args.db)
    try:
        result = engine.generate(
            args.insight_type,
            findings,
            _split_ids(args.endpoints),
            directory=directory,
            source=SourceMeta(connector_id=args.connector_id, model=args.model),
            settings=settings,
            store=store,
        )
    except InsightGenerationError as e:
        return _out({"error": str(e), "records_generated": 0})
    finally:
        if store is not None:
            store.close()

    summary = result.summary()
    summary["persisted"] = store is not None
    if args.show_records or args.no_persist:
        summary["insights"] = [r.to_dict() for r in result.records]
    return _out(summary)


def cmd_list(args: argparse.Namespace) -> int:
    store = create_store(db_path=args.db)
    try:
        docs = store.list_insights(
            insight_type=args.insight_type,
            target_id=args.target_id,
            limit=args.limit,
        )
    finally:
        store.close()
    return _out(docs)


def cmd_categories(args: argparse.Namespace) -> int:
    return _out({"categories": default_registry().categories()})


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from workflow_insights.api import create_app

    app = create_app(
        directory=_open_directory(args.directory),
        store=create_store(db_path=args.db),
        settings=load_settings(args.config),
    )
    log.info("Serving workflow insights API on %s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0
