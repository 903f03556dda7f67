"""
Command-line interface for urchin-timeseries.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
import webbrowser
from pathlib import Path

from urchin_timeseries import __version__
from urchin_timeseries.config import get_settings
from urchin_timeseries.datasources import edi
from urchin_timeseries.exceptions import UrchinTimeseriesError
from urchin_timeseries.flows.plot import plot_urchin_biomass
from urchin_timeseries.logging_setup import configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="urchin-timeseries",
        description="Plot SBC LTER red and purple urchin biomass through time",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'run' command - fetch, normalize and plot
    run_parser = subparsers.add_parser("run", help="Download the data and write the chart")
    run_parser.add_argument("--url", type=str, default=None, help="Source CSV URL")
    run_parser.add_argument("--year-min", type=int, default=None, help="First year (inclusive)")
    run_parser.add_argument("--year-max", type=int, default=None, help="Last year (inclusive)")
    run_parser.add_argument(
        "--species",
        nargs="+",
        default=None,
        metavar="NAME",
        help='Common names to keep (default: "red urchin" "purple urchin")',
    )
    run_parser.add_argument("--site", type=str, default=None, help="Site code (default: napl)")
    run_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output HTML path (default: output_path from settings)",
    )
    run_parser.add_argument(
        "--open",
        action="store_true",
        help="Open the chart in a web browser when done",
    )

    # 'glimpse' command - first look at the raw table
    glimpse_parser = subparsers.add_parser("glimpse", help="Download and summarize the raw table")
    glimpse_parser.add_argument("--url", type=str, default=None, help="Source CSV URL")

    # 'info' command
    subparsers.add_parser("info", help="Show application info")

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command."""
    try:
        result = plot_urchin_biomass(
            url=args.url,
            year_min=args.year_min,
            year_max=args.year_max,
            species=args.species,
            site=args.site,
            output_path=str(args.output) if args.output else None,
        )
    except (UrchinTimeseriesError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Plotted {result['rows']} rows to {result['output']}")
    if args.open:
        webbrowser.open(Path(result["output"]).resolve().as_uri())
    return 0


def cmd_glimpse(args: argparse.Namespace) -> int:
    """Handle the 'glimpse' command."""
    settings = get_settings()
    url = args.url or settings.source_url
    try:
        path = edi.fetch(url, user_agent=settings.user_agent, timeout=settings.request_timeout)
        raw = edi.load(path)
    except UrchinTimeseriesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(edi.format_summary(edi.glimpse(raw)))
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Source: {settings.source_url}")
    print(f"Years: {settings.year_min}-{settings.year_max}")
    print(f"Species: {', '.join(settings.species)}")
    print(f"Site: {settings.site}")
    print(f"Output: {settings.output_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    configure_logging("DEBUG" if args.debug or settings.debug else settings.log_level)

    commands = {
        "run": cmd_run,
        "glimpse": cmd_glimpse,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
