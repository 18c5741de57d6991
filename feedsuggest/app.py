import argparse
import json
from pathlib import Path

from . import __version__
from .cache import SuggestionCache
from .config import Settings
from .env import load_env
from .logger import get_logger
from .normalize import format_address
from .ranking import RankingEngine, mutual_followers, suggestion_reason
from .reputation import LedgerProbe
from .schema import validate_snapshot
from .snapshot import Snapshot, SnapshotError, read_snapshot_data


def _read_snapshot(path_arg: str) -> dict:
    try:
        return read_snapshot_data(Path(path_arg))
    except SnapshotError as e:
        raise SystemExit(str(e))


def cmd_suggest(args: argparse.Namespace, settings: Settings) -> None:
    data = _read_snapshot(args.snapshot)
    errors = validate_snapshot(data)
    if errors:
        get_logger().warning("Snapshot has invalid records", count=len(errors))
    snapshot = Snapshot.from_dict(data)

    probe = None
    if args.probe:
        rpc_url = args.rpc_url or settings.ledger_rpc_url
        probe = LedgerProbe(rpc_url, timeout=settings.rpc_timeout)

    if args.json:
        # Keep stdout parseable.
        get_logger().set_level("WARNING")

    limit = args.limit if args.limit is not None else settings.default_limit
    engine = RankingEngine(cache=SuggestionCache(ttl=settings.cache_ttl))
    suggestions = engine.rank(
        args.viewer,
        snapshot.users,
        snapshot.follows,
        snapshot.posts,
        reputation_probe=probe,
        limit=limit,
    )

    if args.json:
        print(json.dumps([s.to_dict() for s in suggestions], indent=2, ensure_ascii=False))
        return
    if not suggestions:
        print("No suggestions right now. Try again later.")
        return
    print(f"Suggested for {format_address(args.viewer)}:\n")
    for i, s in enumerate(suggestions, 1):
        print(f"{i}. {s.display_name} ({format_address(s.address)})")
        print(f"   Score: {s.score:.3f}  Posts: {s.post_count}")
        print(f"   {suggestion_reason(s)}")


def cmd_validate(args: argparse.Namespace, settings: Settings) -> None:
    data = _read_snapshot(args.snapshot)
    errors = validate_snapshot(data)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_mutuals(args: argparse.Namespace, settings: Settings) -> None:
    snapshot = Snapshot.from_dict(_read_snapshot(args.snapshot))
    mutuals = mutual_followers(args.a, args.b, snapshot.follows)
    if not mutuals:
        print("No mutual followers.")
        return
    print(f"{len(mutuals)} mutual follower(s):")
    for addr in mutuals:
        print(f" - {addr}")


def main(argv=None):
    load_env()
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(str(e))
    get_logger().set_level(settings.log_level)

    parser = argparse.ArgumentParser(prog="feedsuggest", description="Who-to-follow suggestions for a social feed snapshot")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    sug = subparsers.add_parser("suggest", help="Rank suggested users for a viewer")
    sug.add_argument("--snapshot", required=True, help="Path to snapshot JSON {users, follows, posts}")
    sug.add_argument("--viewer", required=True, help="Viewer address")
    sug.add_argument("--limit", type=int, help=f"Number of suggestions (default: FEEDSUGGEST_LIMIT or {settings.default_limit})")
    sug.add_argument("--probe", action="store_true", help="Add the on-ledger reputation bonus")
    sug.add_argument("--rpc-url", help="Ledger JSON-RPC URL (or set FEEDSUGGEST_LEDGER_RPC_URL)")
    sug.add_argument("--json", action="store_true", help="Print suggestions as JSON")
    sug.set_defaults(func=cmd_suggest)

    val = subparsers.add_parser("validate", help="Validate a snapshot JSON")
    val.add_argument("--snapshot", required=True, help="Path to snapshot JSON")
    val.set_defaults(func=cmd_validate)

    mut = subparsers.add_parser("mutuals", help="List accounts following both a and b")
    mut.add_argument("--snapshot", required=True, help="Path to snapshot JSON")
    mut.add_argument("--a", required=True, help="First address")
    mut.add_argument("--b", required=True, help="Second address")
    mut.set_defaults(func=cmd_mutuals)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args, settings)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
