"""
CLI entry point for the post classifier.

Commands:
    analyze {complete,categorize,sentiment,title} [--file PATH]
    dedupe
    seed {posts,groups,clear,verify} [--dry-run] [--limit N] [--file PATH]
    groups {refresh,schedule}
    serve [--host HOST] [--port PORT]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .analysis.categorize import categorize_post
from .analysis.complete import analyze_multiple_complete_posts, extract_post_contents
from .analysis.post_groups import refresh_post_groups
from .analysis.sentiment import analyze_multiple_posts
from .analysis.title import generate_title_for_post, generate_titles_for_posts
from .errors import ClassifierError
from .infra.logging_config import setup_logging
from .infra.settings import Settings, load_settings
from .scheduler.periodic import PeriodicScheduler
from .services import build_services, run_deduplication_reactor
from .store.seed import (
    DEFAULT_SAMPLE_POSTS_PATH,
    clear_post_groups,
    seed_post_groups,
    seed_posts,
    verify_post_groups,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

SAMPLE_CATEGORIZE_POST = (
    "How to maximize yield farming returns safely in DeFi protocols while managing risk exposure. "
    "The key is to diversify across multiple platforms and always do thorough research on the smart "
    "contracts. Never put all your funds into a single protocol, and always keep some reserves for "
    "unexpected market movements."
)

SAMPLE_SENTIMENT_POSTS = [
    "Bitcoin is looking bullish today! 🚀",
    "Market crash incoming, sell everything now!",
    "Just reading about DeFi protocols, interesting stuff.",
]

SAMPLE_TITLE_POSTS = [
    "Benchmarking tiny on-device ML models for edge inference: latency down 40% with the new "
    "quantization pipeline.",
    "Q2 fintech update: payments startup doubled TPV and improved take rate; unit economics are "
    "trending positive.",
    "Reading a new whitepaper on Web3 compliance and institutional custody. Regulatory clarity is "
    "the next catalyst for adoption.",
]


def load_posts_file(path: Path) -> List[str]:
    """
    Read post contents from a JSON array of post records or plain strings.

    Raises:
        ValueError: File is not a JSON array
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")
    return [item for item in data if isinstance(item, str) and item] + extract_post_contents(data)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def _run_analyze(settings: Settings, mode: str, posts: List[str]) -> int:
    services = await build_services(settings, with_store=False)
    caller = services.caller
    try:
        if mode == "complete":
            results = await analyze_multiple_complete_posts(caller, posts, settings.analysis_concurrency)
            _print_json([r.to_dict() for r in results])
            failed = sum(1 for r in results if r.errors)
            print(f"\nAnalysis completed for {len(results)} posts ({failed} with errors)")
        elif mode == "categorize":
            for post in posts:
                title = await generate_title_for_post(caller, post)
                categorization = await categorize_post(caller, post)
                print(f"Post: {post}")
                print(f"Title: {title}")
                _print_json(categorization.model_dump())
        elif mode == "sentiment":
            _print_json(await analyze_multiple_posts(caller, posts))
        elif mode == "title":
            _print_json(await generate_titles_for_posts(caller, posts))
    finally:
        await services.close()
    return EXIT_SUCCESS


def cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    """Run one of the analysis modes over sample posts or --file."""
    if args.file:
        posts = load_posts_file(Path(args.file))
    elif args.mode == "complete":
        posts = load_posts_file(DEFAULT_SAMPLE_POSTS_PATH)
    elif args.mode == "categorize":
        posts = [SAMPLE_CATEGORIZE_POST]
    elif args.mode == "sentiment":
        posts = list(SAMPLE_SENTIMENT_POSTS)
    else:
        posts = list(SAMPLE_TITLE_POSTS)

    if not posts:
        print("No posts to analyse")
        return EXIT_SUCCESS

    print(f"Running {args.mode} analysis on {len(posts)} post(s)...")
    return asyncio.run(_run_analyze(settings, args.mode, posts))


def cmd_dedupe(args: argparse.Namespace, settings: Settings) -> int:
    """Run the dedup reactor until interrupted."""
    try:
        asyncio.run(run_deduplication_reactor(settings))
    except KeyboardInterrupt:
        logger.info("[CLI] Dedup reactor stopped")
    return EXIT_SUCCESS


async def _run_seed(settings: Settings, args: argparse.Namespace) -> int:
    services = await build_services(settings, with_client=False)
    store = services.store
    try:
        if args.target == "posts":
            path = Path(args.file) if args.file else DEFAULT_SAMPLE_POSTS_PATH
            if args.dry_run:
                print(f"[DRY-RUN] Would seed '{settings.posts_key}' from {path}")
            else:
                count = await seed_posts(store, path, settings.posts_key)
                print(f"Seeded {count} posts")
        elif args.target == "groups":
            groups = await seed_post_groups(store, settings.post_groups_key, args.dry_run, args.limit)
            print(f"{'Would seed' if args.dry_run else 'Seeded'} {len(groups)} post group(s)")
        elif args.target == "clear":
            await clear_post_groups(store, settings.post_groups_key, args.dry_run)
        elif args.target == "verify":
            count = await verify_post_groups(store, settings.post_groups_key)
            print(f"Found {count} post group(s)")
            if count == 0:
                return EXIT_FAILURE
    finally:
        await services.close()
    return EXIT_SUCCESS


def cmd_seed(args: argparse.Namespace, settings: Settings) -> int:
    return asyncio.run(_run_seed(settings, args))


async def _run_groups(settings: Settings, action: str) -> int:
    services = await build_services(settings)
    try:
        if action == "refresh":
            groups = await refresh_post_groups(services.store, services.caller, settings.post_groups_key)
            print(f"Refreshed {len(groups)} post group(s)")
        else:
            async def job():
                await refresh_post_groups(
                    services.store, services.caller, settings.post_groups_key, context="CRON"
                )

            scheduler = PeriodicScheduler(job, hours=settings.post_group_refresh_hours, name="post-groups")
            await scheduler.run()
    finally:
        await services.close()
    return EXIT_SUCCESS


def cmd_groups(args: argparse.Namespace, settings: Settings) -> int:
    """Refresh post groups once, or on the wall-clock schedule."""
    try:
        return asyncio.run(_run_groups(settings, args.action))
    except KeyboardInterrupt:
        logger.info("[CLI] Post-group scheduler stopped")
        return EXIT_SUCCESS


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run("post_classifier.api.main:app", host=args.host, port=args.port)
    return EXIT_SUCCESS


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="post-classifier",
        description="Crypto post classifier - LLM analysis, dedup and post-group summaries",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyse posts with the model")
    analyze_parser.add_argument(
        "mode",
        nargs="?",
        default="complete",
        choices=["complete", "categorize", "sentiment", "title"],
        help="Analysis to run (default: complete)"
    )
    analyze_parser.add_argument(
        "-f", "--file",
        help=f"JSON array of posts (default for complete: {DEFAULT_SAMPLE_POSTS_PATH})"
    )

    # dedupe command
    subparsers.add_parser("dedupe", help="Watch the posts collection and remove duplicates")

    # seed command
    seed_parser = subparsers.add_parser("seed", help="Seed or inspect stored collections")
    seed_parser.add_argument(
        "target",
        choices=["posts", "groups", "clear", "verify"],
        help="posts: seed posts; groups: seed post groups; clear: delete post groups; verify: show post groups"
    )
    seed_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing"
    )
    seed_parser.add_argument(
        "-n", "--limit",
        type=int,
        help="Only seed the first N post groups"
    )
    seed_parser.add_argument(
        "-f", "--file",
        help=f"Posts file for 'seed posts' (default: {DEFAULT_SAMPLE_POSTS_PATH})"
    )

    # groups command
    groups_parser = subparsers.add_parser("groups", help="Regenerate post-group titles and summaries")
    groups_parser.add_argument(
        "action",
        choices=["refresh", "schedule"],
        help="refresh: run once; schedule: run every POST_GROUP_REFRESH_HOURS hours"
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")

    return parser


COMMANDS = {
    "analyze": cmd_analyze,
    "dedupe": cmd_dedupe,
    "seed": cmd_seed,
    "groups": cmd_groups,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    load_dotenv()
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level, settings.log_dir)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_SUCCESS

    try:
        return handler(args, settings)
    except (ClassifierError, OSError, ValueError) as e:
        logger.error(f"[CLI] {args.command} failed: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
