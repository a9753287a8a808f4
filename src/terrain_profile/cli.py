import argparse
import logging
import re
import sys

from geopy.point import Point

from terrain_profile.config import get_settings
from terrain_profile.elevation_api import ELEVATION_APIS, make_lookup
from terrain_profile.errors import LookupFailure
from terrain_profile.formatters import format_distance, format_elevation
from terrain_profile.geocoding import search_places
from terrain_profile.models import GeoPoint
from terrain_profile.session import LookupRunner, ProfileSession, Status, StatusKind


def parse_point(text: str) -> GeoPoint:
    """Parse a coordinate string such as "10.0, 20.0" or "41 30m N 81 W"."""
    try:
        point = Point(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid coordinate {text!r}: {e}") from e
    return GeoPoint(lat=point.latitude, lon=point.longitude)


def build_parser(settings: dict | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if settings is None:
        settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Show the terrain elevation profile between two points."
    )
    # Treat "-33.9,18.4" as a point rather than an unknown option. Python 3.13
    # argparse already does this; older versions only accept bare numbers.
    parser._negative_number_matcher = re.compile(r"^-\.?\d")
    parser.add_argument(
        "points",
        nargs="*",
        type=parse_point,
        metavar="POINT",
        help='Start and end coordinates, e.g. "21.0285, 105.8542" "-33.92, 18.42"',
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        help="Search for a place by name and list matching coordinates",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=settings["sample_count"],
        help=f"Number of steps between the two points (default: {settings['sample_count']})",
    )
    parser.add_argument(
        "--api",
        choices=ELEVATION_APIS,
        default=settings["elevation_api"],
        help=f"Elevation service to query (default: {settings['elevation_api']})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings["request_timeout"],
        help=f"Request timeout in seconds (default: {settings['request_timeout']})",
    )
    parser.add_argument("--chart", type=str, default=None, help="Write the profile chart to this PNG file")
    parser.add_argument("--gpx", type=str, default=None, help="Write the profile to this GPX file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run_search(query: str, settings: dict) -> int:
    try:
        places = search_places(
            query,
            limit=settings["search_limit"],
            min_chars=settings["search_min_chars"],
            url=settings["nominatim_url"],
            user_agent=settings["user_agent"],
        )
    except LookupFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not places:
        print("No matching places found.")
        return 0
    for place in places:
        print(f"{place.lat:.5f}, {place.lon:.5f}  {place.display_name}")
    return 0


def print_status(status: Status) -> None:
    if status.kind is StatusKind.COMPUTING:
        print(status.message)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.search:
        sys.exit(run_search(args.search, settings))

    if len(args.points) != 2:
        parser.error("exactly two points are required (or use --search)")
    if args.samples <= 0:
        parser.error("--samples must be a positive integer")

    runner = LookupRunner(make_lookup(args.api, args.timeout))
    session = ProfileSession(dispatch=runner.submit, sample_count=args.samples)
    session.subscribe(print_status)
    try:
        for point in args.points:
            session.click(point)
        runner.wait(session, timeout=args.timeout + 5)
    except TimeoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        runner.shutdown()

    if session.status.kind is StatusKind.FAILURE:
        print(f"Error: {session.status.message}", file=sys.stderr)
        sys.exit(1)

    summary = session.summary
    a, b = args.points
    print("=== Terrain Profile ===")
    print(f"From:           {a.lat:.5f}, {a.lon:.5f}")
    print(f"To:             {b.lat:.5f}, {b.lon:.5f}")
    print(f"Distance:       {format_distance(summary.total_distance)} ({summary.total_distance:.0f} m)")
    print(f"Samples:        {len(session.profile)}")
    print(f"Start:          {format_elevation(summary.start_elevation)}")
    print(f"End:            {format_elevation(summary.end_elevation)}")
    print(f"Highest:        {format_elevation(summary.max_elevation)}")
    print(f"Lowest:         {format_elevation(summary.min_elevation)}")

    if args.chart:
        from terrain_profile.charts import render_profile_png

        with open(args.chart, "wb") as f:
            f.write(render_profile_png(session.profile, session.distance))
        print(f"Chart written to {args.chart}")

    if args.gpx:
        from terrain_profile.export import profile_to_gpx

        with open(args.gpx, "w") as f:
            f.write(profile_to_gpx(session.profile))
        print(f"GPX written to {args.gpx}")
