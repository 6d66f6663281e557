"""CLI entry point for esfacade — Index and alias administration."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from esfacade.client.base import ElasticsearchClient
    from esfacade.config.settings import Settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ES_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="esfacade",
        description="esfacade — Elasticsearch index and alias administration",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        action="append",
        default=None,
        help="Elasticsearch node URL (repeatable, overrides config)",
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
        version=f"esfacade {_get_version()}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Print the cluster health colour; exit 1 when unhealthy")

    indices = sub.add_parser("indices", help="List indices, optionally matching a glob pattern")
    indices.add_argument("pattern", nargs="?", default=None, help="Glob pattern, e.g. 'logs-*'")

    sub.add_parser("aliases", help="Print every alias with the indices it points at")

    create = sub.add_parser("create-index", help="Create an index if it does not exist")
    create.add_argument("index")

    delete = sub.add_parser("delete-index", help="Delete an index if it exists")
    delete.add_argument("index")

    update = sub.add_parser("update-alias", help="Atomically repoint an alias")
    update.add_argument("alias")
    update.add_argument("--add", nargs="+", default=[], metavar="INDEX", help="Indices to add the alias to")
    update.add_argument("--remove", nargs="+", default=[], metavar="INDEX", help="Indices to remove the alias from")

    return parser


async def run_command(args: argparse.Namespace, client: ElasticsearchClient) -> int:
    """Execute one parsed command against an initialized client."""
    if args.command == "health":
        color = await client.cluster_health_color()
        print(color)
        return EXIT_OK if await client.is_cluster_healthy() else EXIT_FAILED

    if args.command == "indices":
        names = await client.get_matching_indices(args.pattern) if args.pattern else await client.get_all_indices()
        for name in names:
            print(name)
        return EXIT_OK

    if args.command == "aliases":
        print(json.dumps(await client.get_indices_by_alias(), indent=2, sort_keys=True))
        return EXIT_OK

    if args.command == "create-index":
        created = await client.create_index(args.index)
        print(f"created {args.index}" if created else f"{args.index} already exists")
        return EXIT_OK

    if args.command == "delete-index":
        deleted = await client.delete_index(args.index)
        print(f"deleted {args.index}" if deleted else f"{args.index} does not exist")
        return EXIT_OK

    if args.command == "update-alias":
        acknowledged = await client.update_alias(args.alias, args.add, args.remove)
        print(f"alias {args.alias} updated" if acknowledged else f"alias {args.alias} update not acknowledged")
        return EXIT_OK if acknowledged else EXIT_FAILED

    raise ValueError(f"Unknown command: {args.command}")


def load_settings(args: argparse.Namespace) -> Settings:
    """Load settings from ``--config`` (or the environment) and apply CLI overrides."""
    from esfacade.config.settings import Settings

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.host:
        settings.elasticsearch.hosts = args.host
    if args.log_level:
        settings.observability.log_level = args.log_level
    return settings


async def _main_async(args: argparse.Namespace, settings: Settings) -> int:
    from esfacade.client.elasticsearch import AsyncElasticsearchClient
    from esfacade.client.exceptions import ESException

    try:
        async with AsyncElasticsearchClient.from_settings(settings.elasticsearch) as client:
            return await run_command(args, client)
    except ESException as e:
        first_line = e.message.splitlines()[0] if e.message else type(e).__name__
        print(f"Error: {first_line}", file=sys.stderr)
        return EXIT_ES_ERROR


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings(args)

    from esfacade.observability.logging import setup_logging

    setup_logging(settings.observability)
    sys.exit(asyncio.run(_main_async(args, settings)))


def _get_version() -> str:
    """Get the package version."""
    try:
        from esfacade import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
