"""CLI entrypoint printing search keys for titles."""

from __future__ import annotations

import argparse
import json

from shelfscan.search.normalize import normalize_title


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the search key for each title")
    parser.add_argument("titles", nargs="+", help="Titles to normalize")
    args = parser.parse_args(argv)

    payload = [{"title": title, "search_key": normalize_title(title)} for title in args.titles]
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
