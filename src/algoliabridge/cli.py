"""CLI entry point for algoliabridge.

Administers Algolia indexes from the command line::

    algoliabridge index products.json --type product
    algoliabridge search --type product --keywords shoe --sort price:desc
    algoliabridge delete-index --type product

Document files hold a JSON array of ``IndexDocument`` objects.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from algoliabridge.adapters.algolia import AlgoliaClient, AlgoliaSearchProvider
from algoliabridge.adapters.base.exceptions import AdapterError
from algoliabridge.config.settings import Settings
from algoliabridge.models.document import IndexDocument
from algoliabridge.models.query import SearchRequest, SortingField
from algoliabridge.observability.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algoliabridge",
        description="algoliabridge — Algolia indexing and search for schema-agnostic documents",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--scope",
        type=str,
        default=None,
        help="Index scope (overrides config)",
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
        version=f"algoliabridge {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("index", "Index documents from a JSON file"), ("remove", "Remove documents listed in a JSON file")):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("file", type=Path, help="JSON array of documents")
        command.add_argument("--type", "-t", required=True, dest="document_type", help="Document type")

    search = commands.add_parser("search", help="Search a document type")
    search.add_argument("--type", "-t", required=True, dest="document_type", help="Document type")
    search.add_argument("--keywords", "-k", default=None, help="Full-text query")
    search.add_argument("--sort", type=_parse_sort, action="append", default=[], help="FIELD[:asc|desc], repeatable")
    search.add_argument("--skip", type=int, default=0, help="Documents to skip")
    search.add_argument("--take", type=int, default=20, help="Documents to return")

    delete = commands.add_parser("delete-index", help="Delete the index of a document type")
    delete.add_argument("--type", "-t", required=True, dest="document_type", help="Document type")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.scope:
        settings.search.scope = args.scope
    setup_logging(settings.observability, level=args.log_level)

    try:
        output = asyncio.run(_run(args, settings))
    except (AdapterError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if output is not None:
        print(json.dumps(output, indent=2, ensure_ascii=False))


async def _run(args: argparse.Namespace, settings: Settings) -> dict[str, Any] | None:
    async with AlgoliaClient.from_settings(settings.algolia) as client:
        provider = AlgoliaSearchProvider(client, settings)

        if args.command == "index":
            result = await provider.index_documents(args.document_type, _load_documents(args.file))
            return result.model_dump()

        if args.command == "remove":
            result = await provider.remove_documents(args.document_type, _load_documents(args.file))
            return result.model_dump()

        if args.command == "search":
            request = SearchRequest(
                search_keywords=args.keywords,
                sorting=args.sort,
                skip=args.skip,
                take=args.take,
            )
            response = await provider.search(args.document_type, request)
            return response.model_dump()

        await provider.delete_index(args.document_type)
        return None


def _load_documents(path: Path) -> list[IndexDocument]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of documents")
    return [IndexDocument.model_validate(item) for item in data]


def _parse_sort(value: str) -> SortingField:
    field_name, _, direction = value.partition(":")
    direction = direction.lower() or "asc"
    if not field_name or direction not in ("asc", "desc"):
        raise argparse.ArgumentTypeError(f"invalid sort {value!r}, expected FIELD[:asc|desc]")
    return SortingField(field_name=field_name, is_descending=direction == "desc")


def _get_version() -> str:
    """Get the package version."""
    try:
        from algoliabridge import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
