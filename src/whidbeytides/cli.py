"""
Command line interface: load the tide chart/table and weather forecast.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .client import CoopsClient
from .config import DATUM_CHOICES, DEFAULT_DATUM, DEFAULT_UNITS, SANDY_POINT, UNIT_CHOICES
from .dashboard import TextRenderer, TideDashboard
from .models import QueryOptions
from .weather import NWSClient


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="whidbeytides",
        description=(
            f"Tide predictions and weather for {SANDY_POINT.name} "
            f"(NOAA station {SANDY_POINT.station_id})"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Last 7 / next 7 days, feet above MLLW
  whidbeytides

  # Metres above mean sea level, refresh every 10 minutes
  whidbeytides --datum MSL --units metric --watch 600
        """,
    )
    parser.add_argument(
        "--datum",
        default=DEFAULT_DATUM,
        help=f"Vertical datum (e.g. {', '.join(DATUM_CHOICES)}). Default: {DEFAULT_DATUM}",
    )
    parser.add_argument(
        "--units",
        choices=UNIT_CHOICES,
        default=DEFAULT_UNITS,
        help=f"Unit system. Default: {DEFAULT_UNITS}",
    )
    parser.add_argument(
        "--no-weather",
        action="store_true",
        help="Skip the 7-day weather forecast",
    )
    parser.add_argument(
        "--watch",
        type=float,
        metavar="SECONDS",
        help="Refresh the tide data every SECONDS until interrupted",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Default: WARNING",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Run the dashboard; returns the process exit code."""
    renderer = TextRenderer()
    options = QueryOptions(datum=args.datum, units=args.units)

    async with CoopsClient() as client, NWSClient() as weather_client:
        dashboard = TideDashboard(
            renderer, client=client, weather_client=weather_client, options=options
        )
        try:
            if args.no_weather:
                result = await dashboard.refresh()
            else:
                result, _ = await dashboard.initial_load()

            while args.watch:
                await asyncio.sleep(args.watch)
                renderer.separator()
                result = await dashboard.refresh()
        finally:
            dashboard.close()

    return 0 if result is not None else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\n  Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
