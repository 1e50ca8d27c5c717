"""CLI command for listing, saving and deleting DXVK profiles."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from shelfscan.config import ShelfSettings
from shelfscan.profiles.models import LOG_LEVELS, Profile
from shelfscan.profiles.store import BuiltinProfileError, ProfileStore

LOGGER = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage DXVK profiles")
    parser.add_argument("--profiles-path", help="Path to the user profiles JSON file")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List builtin and user profiles")

    save = commands.add_parser("save", help="Create or update a user profile")
    save.add_argument("--id", default="", help="Existing profile id to update")
    save.add_argument("--name", required=True)
    save.add_argument("--description", default="")
    save.add_argument("--async", dest="enable_async", action=argparse.BooleanOptionalAction, default=None)
    save.add_argument("--compiler-threads", dest="num_compiler_threads", type=int)
    save.add_argument("--max-frame-latency", type=int)
    save.add_argument("--sync-interval", type=int)
    save.add_argument("--log-level", choices=LOG_LEVELS)
    save.add_argument("--hdr", dest="enable_hdr", action=argparse.BooleanOptionalAction, default=None)
    save.add_argument("--hud", action="append", default=[], help="HUD element; repeat for several")

    delete = commands.add_parser("delete", help="Delete a user profile")
    delete.add_argument("profile_id")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    args = _parse_args(argv)

    try:
        settings = ShelfSettings.from_env()
    except ValueError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2
    store = ProfileStore(args.profiles_path or settings.profiles_path)

    if args.command == "list":
        payload: object = [profile.to_json() for profile in store.all_profiles()]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    try:
        if args.command == "save":
            saved = store.save(
                Profile(
                    id=args.id,
                    name=args.name,
                    description=args.description,
                    enable_async=args.enable_async,
                    num_compiler_threads=args.num_compiler_threads,
                    max_frame_latency=args.max_frame_latency,
                    sync_interval=args.sync_interval,
                    log_level=args.log_level,
                    enable_hdr=args.enable_hdr,
                    hud=tuple(args.hud),
                )
            )
            print(json.dumps(saved.to_json(), ensure_ascii=False, indent=2))
            return 0

        deleted = store.delete(args.profile_id)
    except BuiltinProfileError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=False, indent=2))
        return 1

    print(json.dumps({"id": args.profile_id, "deleted": deleted}, ensure_ascii=False, indent=2))
    return 0 if deleted else 1


if __name__ == "__main__":
    raise SystemExit(main())
