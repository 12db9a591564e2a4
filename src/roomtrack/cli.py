#!/usr/bin/env python3
"""
Location log analysis tool.
This script processes a GPS location log, drops duplicate samples, and writes
an absolute report (distance to the base point and containment in a base circle
or a room polygon) and a relative report (distance, time and speed between
consecutive samples with data quality flags).

Requirements:
    pip install gpxpy folium shapely pyproj

"""

from typing import List, Optional
import webbrowser
import argparse
import logging
import sys
import os

from . import __version__
from . import visualization
from .config import DEFAULT_INPUT_FILENAME, TrackConfig
from .file_utils import generate_output_filename
from .geometry import Position
from .gpx_export import write_gpx
from .metrics import collect_metrics, log_metrics
from .region import CircularRegion, Region, RoomFileError, load_room_file
from .report import absolute_report_lines, relative_report_lines, write_report
from .series import LogFormatError, load_series
from .track import Track

# Configure logging
logger = logging.getLogger("roomtrack")


def parse_position(value: str) -> Position:
    """argparse type for "LAT,LON"."""
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected LAT,LON, got {value!r}")
    try:
        return Position(float(parts[0]), float(parts[1]))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LAT,LON, got {value!r}")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    defaults = TrackConfig()
    parser = argparse.ArgumentParser(
        description="GPS location log analysis: containment and relative movement reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input_file",
        type=str,
        nargs="?",
        default=DEFAULT_INPUT_FILENAME,
        help=f"Location log to process (default: {DEFAULT_INPUT_FILENAME})",
    )
    parser.add_argument(
        "room_file",
        type=str,
        nargs="?",
        default=None,
        help="Room polygon file, one LAT,LON vertex per line (default: base circle)",
    )
    parser.add_argument(
        "--base",
        type=parse_position,
        default=None,
        metavar="LAT,LON",
        help="Base point for distances (default: first sample)",
    )
    parser.add_argument(
        "--base-radius",
        type=float,
        default=defaults.base_radius,
        help=f"Base circle radius in meters when no room is given (default: {defaults.base_radius})",
    )
    parser.add_argument(
        "--max-speed",
        type=float,
        default=defaults.max_walking_speed,
        help=f"Speed in m/s above which a movement is flagged (default: {defaults.max_walking_speed})",
    )
    parser.add_argument(
        "--long-gap",
        type=float,
        default=defaults.long_gap_seconds,
        help=f"Gap in seconds above which a movement is flagged (default: {defaults.long_gap_seconds})",
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="Write an interactive HTML map of the track",
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML map in browser",
    )
    parser.add_argument(
        "--gpx",
        action="store_true",
        help="Write the deduplicated track as a GPX file",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=defaults.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Set logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"roomtrack {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> TrackConfig:
    return TrackConfig(
        base_radius=args.base_radius,
        max_walking_speed=args.max_speed,
        long_gap_seconds=args.long_gap,
        log_level=args.log_level,
        metrics=args.metrics,
    )


def setup_logging(level_name: str) -> None:
    """Setup logging configuration."""
    level = getattr(logging, level_name)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def open_file_in_browser(filename: str) -> None:
    """
    Open the specified file in the default browser.

    Args:
        filename: Path to the file to open
    """
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except Exception as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def select_region(
    room_file: Optional[str], base: Position, config: TrackConfig
) -> Region:
    """
    Choose the containment region.

    A valid room file selects polygonal containment. A missing, unreadable or
    malformed room file is reported and the base circle is used instead.
    """
    if room_file is not None:
        try:
            room = load_room_file(room_file)
            logger.info(f"Using {room.describe()} from {room_file}")
            return room
        except OSError as e:
            logger.warning(f"Cannot read room file {room_file}: {e}")
        except RoomFileError as e:
            logger.warning(f"Invalid room file: {e}")
        logger.warning("Falling back to base circle containment")

    region = CircularRegion(base, config.base_radius)
    logger.info(f"Using {region.describe()}")
    return region


def main(argv: Optional[List[str]] = None) -> None:
    """
    Parses command-line arguments, processes the location log,
    and writes the absolute and relative reports.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    config = config_from_args(args)

    setup_logging(config.log_level)

    if not os.path.isfile(args.input_file):
        logger.error(f"Input file not found: {args.input_file}")
        sys.exit(1)

    # Load and parse the whole log before writing anything
    try:
        records, raw_count = load_series(args.input_file)
    except PermissionError:
        logger.error(f"Cannot read input file (permission denied): {args.input_file}")
        sys.exit(1)
    except LogFormatError as e:
        logger.error(f"Malformed record in {args.input_file}: {e}")
        sys.exit(1)

    if not records:
        logger.error(f"No records found in {args.input_file}")
        sys.exit(1)

    track = Track(records, base=args.base)
    region = select_region(args.room_file, track.base, config)

    annotated = track.annotate(region)
    relatives = track.relative_movements(config)

    try:
        absolute_filename = generate_output_filename(args.input_file, "absolute", ".txt")
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate output filename: {e}")
        sys.exit(1)
    try:
        relative_filename = generate_output_filename(args.input_file, "relative", ".txt")
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate output filename: {e}")
        # Release the empty reservation for the absolute report
        os.remove(absolute_filename)
        sys.exit(1)

    write_report(absolute_report_lines(annotated, track.base), absolute_filename)
    logger.info(f"Absolute records written to {absolute_filename}")
    write_report(relative_report_lines(relatives), relative_filename)
    logger.info(f"Relative movements written to {relative_filename}")

    metrics = collect_metrics(raw_count, annotated, relatives)

    if args.gpx:
        try:
            gpx_filename = generate_output_filename(args.input_file, "clean", ".gpx")
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to generate output filename: {e}")
            sys.exit(1)
        write_gpx(track, gpx_filename, name=os.path.basename(args.input_file))
        logger.info(f"GPX track written to {gpx_filename}")

    if args.map:
        try:
            map_filename = generate_output_filename(args.input_file, "map", ".html")
            visualization.create_track_map(
                track, region, relatives, metrics, map_filename, config
            )
        except Exception as e:
            logger.error(f"Failed to create map: {e}")
            sys.exit(1)
        logger.info(f"Map written to {map_filename}")
        if not args.no_open:
            open_file_in_browser(map_filename)

    log_metrics(metrics, config)


if __name__ == "__main__":
    main()
