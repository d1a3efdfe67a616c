"""
Command Line Interface for the RPC latency tester.
"""

import argparse
import asyncio
import signal
import sys

from . import __version__
from .config import (
    ClientKind,
    DEFAULT_CONNECTION_TIMEOUT_MS,
    DEFAULT_DURATION_MS,
    DEFAULT_PROBE_INTERVAL_MS,
    DEFAULT_RPC_URLS,
    TesterConfig,
    endpoints_from_env,
)
from .report import render_json, render_text
from .tester import LatencyTester
from .utils.logger import get_logger, setup_logging

logger = get_logger("cli")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rpc-latency",
        description="Sequential latency comparison of JSON-RPC endpoints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run
  %(prog)s run --url https://rpc.example.org --duration 5000
  %(prog)s run --client requests --json
  %(prog)s endpoints
        """,
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Test every endpoint and print the comparison")
    run_parser.add_argument(
        "--url", "-u",
        dest="urls",
        action="append",
        default=None,
        help="RPC endpoint to test; repeat for several (default: built-in list or $RPC_LATENCY_URLS)",
    )
    run_parser.add_argument(
        "--duration", "-d",
        type=int,
        default=DEFAULT_DURATION_MS,
        help=f"Test duration per endpoint in milliseconds (default: {DEFAULT_DURATION_MS})",
    )
    run_parser.add_argument(
        "--timeout", "-t",
        type=int,
        default=DEFAULT_CONNECTION_TIMEOUT_MS,
        help=f"Connection/probe timeout in milliseconds (default: {DEFAULT_CONNECTION_TIMEOUT_MS})",
    )
    run_parser.add_argument(
        "--interval", "-i",
        type=int,
        default=DEFAULT_PROBE_INTERVAL_MS,
        help=f"Delay between requests in milliseconds (default: {DEFAULT_PROBE_INTERVAL_MS})",
    )
    run_parser.add_argument(
        "--client", "-c",
        choices=[kind.value for kind in ClientKind],
        default=ClientKind.AIOHTTP.value,
        help="HTTP client used for probes (default: aiohttp)",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    run_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every request latency",
    )
    run_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors",
    )

    subparsers.add_parser("endpoints", help="List the default endpoints")

    return parser


def build_config(args) -> TesterConfig:
    """Build a TesterConfig from parsed arguments."""
    endpoints = tuple(args.urls) if args.urls else (endpoints_from_env() or DEFAULT_RPC_URLS)
    return TesterConfig(
        endpoints=endpoints,
        duration_ms=args.duration,
        connection_timeout_ms=args.timeout,
        probe_interval_ms=args.interval,
        client=ClientKind(args.client),
        verbose=args.verbose,
    )


async def run_tests(args, config: TesterConfig) -> int:
    """Run the tester and print the report."""
    tester = LatencyTester(config)

    def handle_signal(signum, frame):
        logger.warning(f"Received signal {signum}, finishing current endpoint...")
        tester.cancel()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    report = await tester.run()

    if args.json:
        print(render_json(report, tester.last_run))
    else:
        print(render_text(report))

    return EXIT_OK


def show_endpoints(args) -> int:
    """Print the endpoints a bare ``run`` would test."""
    for url in endpoints_from_env() or DEFAULT_RPC_URLS:
        print(url)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        # Default to run if no command specified
        args = parser.parse_args(["run"])

    if args.command == "endpoints":
        return show_endpoints(args)

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE

    try:
        return asyncio.run(run_tests(args, config))
    except Exception as e:
        logger.critical(f"Fatal error: {e}", extra={"error_type": type(e).__name__})
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
