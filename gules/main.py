"""Command line entry point: filtered activity listing and cache management."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from . import config
from .activity_cache import ActivityCacheStore, CacheConfig, SessionCache
from .activity_types import ActivityTypeFilter
from .display import OutputFormat, render_activities, render_cache_stats
from .errors import ActivityCacheError, JulesAPIError
from .jules_client import JulesClient
from .services import ActivityService

LOGGER = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def _activity_type(value: str) -> ActivityTypeFilter:
    try:
        return ActivityTypeFilter.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gules", description="Jules session activities with a local cache"
    )
    parser.add_argument("--api-key", help="Jules API key (defaults to JULES_API_KEY)")
    parser.add_argument(
        "--cache-dir", help="Cache directory (defaults to ACTIVITY_CACHE_DIR)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    activities = commands.add_parser(
        "activities", help="List a session's activities with optional filters"
    )
    activities.add_argument("session_id")
    activities.add_argument(
        "--last", type=_positive_int, help="Only the N most recent activities"
    )
    activities.add_argument(
        "--type",
        dest="types",
        action="append",
        type=_activity_type,
        default=[],
        help="Activity type (repeatable): agent, user, plan, plan-approved, "
        "progress, completed, failed",
    )
    activities.add_argument(
        "--has-bash-output",
        action="store_true",
        help="Only activities carrying a bash command output",
    )
    activities.add_argument(
        "--no-cache", action="store_true", help="Bypass the cache and fetch live"
    )
    activities.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.TABLE.value,
    )

    activity = commands.add_parser(
        "activity", help="Show a single activity fetched live from the API"
    )
    activity.add_argument("session_id")
    activity.add_argument("activity_id")
    activity.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.FULL.value,
    )

    cache = commands.add_parser("cache", help="Inspect or manage the activity cache")
    cache_commands = cache.add_subparsers(dest="cache_command", required=True)
    cache_commands.add_parser("stats", help="Show cache statistics")
    cache_commands.add_parser("list", help="List cached session ids, oldest first")
    cache_commands.add_parser("clear", help="Remove every cached session")
    delete = cache_commands.add_parser("delete", help="Remove one cached session")
    delete.add_argument("session_id")
    return parser.parse_args(argv)


def build_store(
    cache_dir: Optional[str] = None, source: Optional[JulesClient] = None
) -> ActivityCacheStore:
    return ActivityCacheStore.from_directory(
        cache_dir or config.ACTIVITY_CACHE_DIR,
        source,
        config=CacheConfig(
            enabled=config.ACTIVITY_CACHE_ENABLED,
            max_sessions=config.ACTIVITY_CACHE_MAX_SESSIONS,
        ),
    )


def _run_activities(args: argparse.Namespace) -> None:
    client = JulesClient(args.api_key)
    service = ActivityService(
        client,
        build_store(args.cache_dir, client),
        cache_enabled=config.ACTIVITY_CACHE_ENABLED,
    )
    selected = service.filter(
        args.session_id,
        types=args.types,
        bash_output_only=args.has_bash_output,
        last_n=args.last,
        use_cache=not args.no_cache,
    )
    print(render_activities(selected, OutputFormat(args.format)))


def _run_activity(args: argparse.Namespace) -> None:
    client = JulesClient(args.api_key)
    activity = client.get_activity(args.session_id, args.activity_id)
    print(render_activities([activity], OutputFormat(args.format)))


def _readable_sessions(store: ActivityCacheStore) -> List[SessionCache]:
    sessions: List[SessionCache] = []
    for session_id in store.list_cached_session_ids():
        try:
            cache = store.load_session(session_id)
        except (ValueError, ActivityCacheError) as exc:
            LOGGER.warning("Failed to load cache for session %s: %s", session_id, exc)
            continue
        if cache is not None:
            sessions.append(cache)
    return sessions


def _run_cache(args: argparse.Namespace) -> None:
    store = build_store(args.cache_dir)
    if args.cache_command == "stats":
        stats = store.stats()
        sessions = _readable_sessions(store) if stats.total_sessions else []
        print(render_cache_stats(stats, sessions))
    elif args.cache_command == "list":
        for session_id in store.list_cached_session_ids():
            print(session_id)
    elif args.cache_command == "clear":
        stats = store.stats()
        if stats.total_sessions == 0:
            print("Cache is already empty.")
            return
        store.clear_all()
        print(
            f"Cleared cache ({stats.total_sessions} sessions, "
            f"{stats.total_activities} activities)"
        )
    elif args.cache_command == "delete":
        if store.delete(args.session_id):
            print(f"Deleted cache for session: {args.session_id}")
        else:
            print(f"No cache found for session: {args.session_id}")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)
    try:
        if args.command == "activities":
            _run_activities(args)
        elif args.command == "activity":
            _run_activity(args)
        else:
            _run_cache(args)
    except (JulesAPIError, ActivityCacheError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0
