"""CLI entry point — compile conditions and run ad-hoc searches."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from searchrecord.config.settings import Settings
    from searchrecord.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    try:
        if args.command == "compile":
            return _compile(args, settings)
        return _search(args, settings)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON condition: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchrecord",
        description="searchrecord — ActiveRecord-style queries over full-text search engines",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"searchrecord {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    compile_cmd = commands.add_parser("compile", help="Print the query string for a JSON condition")
    compile_cmd.add_argument("condition", type=str, help='JSON condition, e.g. \'{"city": "NY"}\'')
    compile_cmd.add_argument(
        "--group-hash-fields",
        action="store_true",
        default=None,
        help="AND all hash entries, OR-grouping multi-valued ones (overrides config)",
    )

    search_cmd = commands.add_parser("search", help="Run a query against the configured adapter")
    search_cmd.add_argument("--index", "-i", type=str, default=None, help="Index/collection to search")
    search_cmd.add_argument("--where", "-w", type=str, default=None, help="JSON condition")
    search_cmd.add_argument("--order-by", type=str, default=None, help='Sort columns, e.g. "year DESC, title"')
    search_cmd.add_argument("--limit", "-l", type=int, default=None, help="Maximum number of documents")
    search_cmd.add_argument("--offset", type=int, default=None, help="Number of documents to skip")
    search_cmd.add_argument("--fuzzy", action="store_true", help="Match any term instead of all terms")
    search_cmd.add_argument("--count", action="store_true", help="Print the number of matches only")
    return parser


def _compile(args: argparse.Namespace, settings: Any) -> int:
    from searchrecord.core.compiler import ConditionCompiler

    group = settings.compiler.group_hash_fields if args.group_hash_fields is None else args.group_hash_fields
    compiler = ConditionCompiler(group_hash_fields=group)
    print(compiler.compile(json.loads(args.condition)))
    return 0


def _search(args: argparse.Namespace, settings: Any) -> int:
    from searchrecord.core.compiler import ConditionCompiler
    from searchrecord.core.connection import Connection

    compiler = ConditionCompiler(group_hash_fields=settings.compiler.group_hash_fields)
    with Connection(settings.search) as conn:
        query = _index_query(args.index, conn, compiler)
        if args.where:
            query.where(json.loads(args.where))
        query.order_by(args.order_by).limit(args.limit).offset(args.offset).fuzzy(args.fuzzy).as_array()

        if args.count:
            print(query.count())
        else:
            print(json.dumps(query.all(), ensure_ascii=False, indent=2, default=str))
        print(f"query: {query.query!r}", file=sys.stderr)
    return 0


def _index_query(index: str | None, connection: Any, compiler: Any) -> Any:
    """Build an ``ActiveQuery`` over a named index instead of a record class."""
    from searchrecord.core.query import ActiveQuery
    from searchrecord.models.record import Record

    model_class = None
    if index:
        model_class = type("IndexRecord", (Record,), {"__index_name__": index})
    return ActiveQuery(model_class, connection, compiler)


def _get_version() -> str:
    """Get the package version."""
    try:
        from searchrecord import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
