"""CLI for workflow insights.

Commands:
  workflow-insights generate
  workflow-insights list
  workflow-insights categories
  workflow-insights serve
"""

from __future__ import annotations

import sys

from workflow_insights.cli._helpers import _out  # noqa: F401
from workflow_insights.cli._parser import build_parser
from workflow_insights.cli.commands import cmd_categories, cmd_generate, cmd_list, cmd_serve
from workflow_insights.observability import setup_logging

_DISPATCH = {
    "generate": cmd_generate,
    "list": cmd_list,
    "categories": cmd_categories,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level)
    return _DISPATCH[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
