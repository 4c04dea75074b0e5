#!/usr/bin/env python3
# cli.py: command-line entry point for Squall

import argparse
import asyncio
import logging
import sys

from squall.core import LoadProfiler
from squall.errors import SquallError
from squall.executor import execute_request
from squall.logging_config import setup_logging
from squall.models import TargetSpec
from squall.rendering import (
    build_timeline,
    render_latency_histogram,
    render_report,
    render_timeline,
)
from squall.transport import resolve_address
from squall.url import decompose_url

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be a positive integer")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="squall",
        description="🌬️ Squall: concurrent HTTP load-testing client",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-u",
        "--url",
        required=True,
        help="Target URL (http:// or https://; no scheme means http)",
    )
    parser.add_argument(
        "-p",
        "--profile",
        type=positive_int,
        default=None,
        metavar="COUNT",
        help="Send COUNT concurrent requests and print statistics instead of the response",
    )

    # Report extras
    parser.add_argument(
        "--histogram",
        action="store_true",
        help="Print a latency histogram after the report",
    )
    parser.add_argument(
        "--histogram-bins",
        type=positive_int,
        default=20,
        help="Number of histogram buckets",
    )
    parser.add_argument(
        "--timeline",
        action="store_true",
        help="Print a request timeline after the report",
    )
    parser.add_argument(
        "--timeline-width",
        type=positive_int,
        default=80,
        help="Width of the timeline in characters",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar in profiling mode",
    )

    # Logging & Debugging
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., squall.log)",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


async def run_single(target: TargetSpec) -> int:
    outcome = await execute_request(target, keep_body=True)
    if not outcome.ok:
        print(f"error: {outcome.error.value}: {outcome.detail}", file=sys.stderr)
        return EXIT_FAILURE

    sys.stdout.write((outcome.body or b"").decode("utf-8", errors="replace"))
    sys.stdout.flush()
    logger.info(
        f"Received {outcome.byte_count} bytes (status={outcome.status_code}) "
        f"in {outcome.elapsed * 1000:.2f}ms"
    )
    return EXIT_OK


async def run_profile(target: TargetSpec, args: argparse.Namespace) -> int:
    profiler = LoadProfiler(
        target,
        args.profile,
        use_progress_bar=not args.no_progress,
    )
    report = await profiler.run()

    print(render_report(report))
    if args.histogram:
        print()
        print(render_latency_histogram(report.latencies_sorted, args.histogram_bins))
    if args.timeline:
        print()
        timeline = build_timeline(profiler.outcomes, profiler.t0)
        print(render_timeline(timeline, args.timeline_width))
    return EXIT_OK


async def run(args: argparse.Namespace) -> int:
    try:
        target = decompose_url(args.url)
        # Fail fast on an unknown host before any fan-out.
        await resolve_address(target)
    except SquallError as e:
        print(f"error: {e.kind.value}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.profile is None:
        return await run_single(target)
    return await run_profile(target, args)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
