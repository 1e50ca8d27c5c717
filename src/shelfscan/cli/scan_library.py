"""CLI command that scans Steam libraries and emits the inventory as JSON."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from shelfscan.config import ShelfSettings
from shelfscan.library.files import find_library_index
from shelfscan.library.scanner import LibraryScanError, scan
from shelfscan.search.matching import match_title

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scan Steam library folders and list installed apps")
    parser.add_argument("--index-path", help="Path to libraryfolders.vdf (auto-detected when omitted)")
    parser.add_argument("--workers", type=int, help="Threads used to read and parse manifests")
    parser.add_argument("--strict", action="store_true", help="Treat any malformed document as unreadable")
    parser.add_argument("--match", help="Only list apps whose title matches this query")
    parser.add_argument(
        "--fail-on-warnings",
        action="store_true",
        help="Exit with status 1 when the scan recorded warnings",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = ShelfSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    index_path = Path(args.index_path) if args.index_path else settings.library_index or find_library_index()
    if index_path is None:
        LOGGER.error("No libraryfolders.vdf found; pass --index-path or set SHELFSCAN_LIBRARY_INDEX")
        return 2

    workers = args.workers if args.workers is not None else settings.scan_workers
    if workers < 1:
        LOGGER.error("--workers must be >= 1")
        return 2

    try:
        result = scan(
            index_path,
            pattern=settings.manifest_pattern,
            strict=args.strict or settings.strict_parse,
            max_workers=workers,
        )
    except LibraryScanError as exc:
        print(json.dumps({"index_path": str(index_path), "error": str(exc)}, ensure_ascii=True, indent=2))
        return 2

    payload = result.to_dict()
    if args.match:
        matches = match_title(args.match, result.inventory.values())
        payload["query"] = args.match
        payload["items"] = [record.to_dict() for record in matches]

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    if args.fail_on_warnings and result.warnings:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
