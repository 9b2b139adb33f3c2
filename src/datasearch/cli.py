"""CLI entry point for datasearch."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from datasearch import __version__
from datasearch.adapters.base.adapter import Modifiable, SearchEngine
from datasearch.adapters.base.exceptions import SearchEngineError
from datasearch.config.settings import Settings
from datasearch.models.item import Item
from datasearch.models.query import Query


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``datasearch`` command."""
    parser = argparse.ArgumentParser(
        prog="datasearch",
        description="datasearch: search and index documents in Elasticsearch-compatible engines",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--servers",
        "-s",
        type=str,
        nargs="+",
        default=None,
        help="Engine node addresses (overrides config)",
    )
    parser.add_argument(
        "--backend",
        "-b",
        choices=["elasticsearch", "opensearch"],
        default=None,
        help="Search backend (overrides config)",
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
        version=f"datasearch {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Run a query and print the results as JSON")
    search.add_argument("index", help="Index to search")
    search.add_argument("--query", "-q", default=None, help="Query text")
    search.add_argument("--type", "-t", default=None, help="Query operator (default from config)")
    search.add_argument("--page", "-p", type=int, default=1, help="Page number")
    search.add_argument("--count", "-n", type=int, default=None, help="Results per page")
    search.add_argument(
        "--facet",
        action="append",
        default=[],
        metavar="NAME=FIELD",
        help="Count terms of FIELD as facet NAME (repeatable)",
    )
    search.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="NAME=JSON",
        help="Filter clause as JSON (repeatable, combined with AND)",
    )
    search.add_argument("--sort", default=None, metavar="JSON", help="Sort specification as JSON")
    search.add_argument("--debug", action="store_true", help="Include score explanations and the raw response")

    present = commands.add_parser("present", help="Check whether a document exists")
    present.add_argument("index")
    present.add_argument("id")

    remove = commands.add_parser("remove", help="Delete a document by id")
    remove.add_argument("index")
    remove.add_argument("id")

    add = commands.add_parser("add", help='Bulk-index a JSON file of [{"id": ..., "values": {...}}]')
    add.add_argument("file", type=Path)

    commands.add_parser("health", help="Print engine health")

    return parser


def _split_pair(raw: str, option: str) -> tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name or not value:
        raise ValueError(f"{option} expects NAME=VALUE, got {raw!r}")
    return name, value


def build_query(args: argparse.Namespace, settings: Settings) -> Query:
    """Build a :class:`Query` from ``search`` arguments.

    Raises:
        ValueError: If a facet, filter or sort option cannot be parsed.
    """
    facets: dict[str, dict[str, Any]] = {}
    for raw in args.facet:
        name, field = _split_pair(raw, "--facet")
        facets[name] = {"terms": {"field": field}}

    filters: dict[str, dict[str, Any]] = {}
    for raw in args.filter:
        name, clause = _split_pair(raw, "--filter")
        filters[name] = json.loads(clause)

    payload = None
    query_type = args.type
    if args.query is not None:
        payload = {"query": args.query}
        query_type = query_type or settings.search.query_type

    return Query(
        index=args.index,
        query=payload,
        type=query_type,
        filters=filters,
        facets=facets,
        order=json.loads(args.sort) if args.sort else None,
        page=args.page,
        count=args.count or settings.search.count,
        debug=args.debug,
        original_query=args.query,
    )


def _load_items(path: Path) -> list[Item]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of items")
    return [Item.model_validate(entry) for entry in data]


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


async def run(args: argparse.Namespace, settings: Settings, engine: SearchEngine) -> int:
    """Execute a parsed command against ``engine`` and return the exit status."""
    if args.command == "search":
        results = await engine.search(build_query(args, settings))
        exclude = {"query"} if results.raw is not None else {"query", "raw"}
        _print_json(results.model_dump(mode="json", exclude=exclude))
        return 0

    if args.command == "health":
        health = await engine.health_check()
        _print_json(health.model_dump())
        return 0 if health.status != "unhealthy" else 1

    if not isinstance(engine, Modifiable):
        print(f"Error: {engine.name} does not support '{args.command}'", file=sys.stderr)
        return 2

    if args.command == "add":
        report = await engine.add(_load_items(args.file))
        _print_json(report.model_dump())
        return 0 if report.ok else 1

    item = Item(id=args.id, values={"index": args.index})
    if args.command == "present":
        found = await engine.present(item)
    else:
        found = await engine.remove_by_id(item)
    _print_json(found)
    return 0 if found else 1


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    from datasearch.factory import create_engine

    engine = create_engine(settings)
    try:
        return await run(args, settings, engine)
    finally:
        await engine.shutdown()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.servers:
        settings.engine.servers = args.servers
    if args.backend:
        settings.engine.backend = args.backend
    if args.log_level:
        settings.observability.log_level = args.log_level

    from datasearch.observability.logging import setup_logging

    setup_logging(settings.observability)

    try:
        status = asyncio.run(_main(args, settings))
    except (ValueError, SearchEngineError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
