#!/usr/bin/env python
"""Command-line interface for disaster-intel.

This module exposes the resolution services for operators: resolve a
location, verify an image, inspect social feeds and maintain the cache.

Example: disaster-intel locate "Flooding reported in Lower Manhattan" --geocode
"""

import argparse
import asyncio
import sys
from typing import Any

from rich.console import Console
from rich.panel import Panel

from disaster_intel import __version__
from disaster_intel.config import get_settings
from disaster_intel.services.factory import ServiceFactory, Services
from disaster_intel.utils.cache.backends import SupabaseCacheBackend
from disaster_intel.utils.cache.cache import run_periodic_cleanup
from disaster_intel.utils.logging.logger import configure_from_settings, request_context

console = Console()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="disaster-intel",
        description="disaster-intel - location, image and social feed resolution for disaster reports",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    locate_parser = subparsers.add_parser("locate", help="Extract a location from a description")
    locate_parser.add_argument("description", help="Free-text disaster description")
    locate_parser.add_argument(
        "--geocode", action="store_true", help="Also geocode the extracted location"
    )

    geocode_parser = subparsers.add_parser("geocode", help="Geocode a location name")
    geocode_parser.add_argument("location_name", help="Place name to geocode")

    verify_parser = subparsers.add_parser("verify-image", help="Verify a disaster image")
    verify_parser.add_argument("image_url", help="URL of the image")

    social_parser = subparsers.add_parser("social", help="Show social media reports")
    social_parser.add_argument("disaster_id", help="Disaster identifier")
    social_parser.add_argument(
        "-k", "--keyword", action="append", default=[], help="Keyword filter (repeatable)"
    )
    social_group = social_parser.add_mutually_exclusive_group()
    social_group.add_argument(
        "--alerts", action="store_true", help="Only critical and high priority posts"
    )
    social_group.add_argument(
        "--mock", action="store_true", help="Show the raw mock feed without classification"
    )

    cache_parser = subparsers.add_parser("cache", help="Cache maintenance")
    cache_parser.add_argument("action", choices=["cleanup", "clear", "sweep", "init"])
    cache_parser.add_argument(
        "--interval", type=float, default=None, help="Sweep interval in seconds (sweep only)"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser.parse_args(argv)


def print_result(title: str, data: Any) -> None:
    console.print(Panel(title, style="bold cyan"))
    console.print_json(data=data)


async def run_command(args: argparse.Namespace, services: Services) -> int:
    """Dispatch one parsed command. Returns the process exit code."""
    if args.command == "locate":
        if args.geocode:
            resolved = await services.locations.resolve(description=args.description)
            print_result("Location", resolved.model_dump(mode="json"))
        else:
            name = await services.locations.extract_location(args.description)
            print_result("Location", {"location_name": name})
        return 0

    if args.command == "geocode":
        result = await services.locations.geocode(args.location_name)
        print_result("Geocoding", result.model_dump(mode="json"))
        return 0

    if args.command == "verify-image":
        record = await services.media.verify_image(args.image_url)
        print_result("Verification", record.model_dump(mode="json"))
        return 0

    if args.command == "social":
        if args.mock:
            reports = services.social.get_mock_social_media_reports(args.disaster_id, args.keyword)
            print_result("Mock reports", reports)
            return 0
        if args.alerts:
            posts = await services.social.get_priority_alerts(args.disaster_id)
        else:
            posts = await services.social.get_social_media_reports(args.disaster_id, args.keyword)
        print_result(f"{len(posts)} reports", [post.model_dump(mode="json") for post in posts])
        return 0

    if args.command == "cache":
        return await run_cache_command(args, services)

    console.print("[red]No command given. Use --help for usage.[/red]")
    return 2


async def run_cache_command(args: argparse.Namespace, services: Services) -> int:
    cache = services.cache
    if args.action == "cleanup":
        ok = await cache.cleanup()
    elif args.action == "clear":
        ok = await cache.clear()
    elif args.action == "init":
        if not isinstance(cache.backend, SupabaseCacheBackend):
            console.print("[yellow]No durable cache store configured.[/yellow]")
            return 1
        ok = await cache.backend.ensure_table()
    else:
        interval = args.interval or get_settings().cache.cleanup_interval_seconds
        await run_periodic_cleanup(cache, interval)
        return 0

    console.print("[green]done[/green]" if ok else "[red]failed[/red]")
    return 0 if ok else 1


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if args.command == "version":
        console.print(f"disaster-intel {__version__}")
        return 0

    settings = get_settings()
    configure_from_settings(settings)
    services = ServiceFactory.create_all(settings)

    with request_context(command=args.command):
        return await run_command(args, services)


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    run()
