#!/usr/bin/env python3
"""
Text report formatting for absolute records and relative movements.
"""

from datetime import datetime
from typing import Iterable, List
import logging

from .geometry import Position
from .records import AnnotatedRecord, QualityFlag, RecordRelative

logger = logging.getLogger(__name__)


def format_time(timestamp: datetime) -> str:
    return timestamp.isoformat(sep=" ")


def format_absolute_line(annotated: AnnotatedRecord, base: Position) -> str:
    """
    Format one line of the absolute records report.

    The adjusted coordinates are the record's offsets from the base point
    in decimal degrees.
    """
    record = annotated.record
    adjusted_lat = record.latitude - base.latitude
    adjusted_lon = record.longitude - base.longitude
    return (
        f"{format_time(record.timestamp)}: @{adjusted_lat:+.7f}/{adjusted_lon:+.7f}"
        f" -- {annotated.distance_to_base:.4f} {annotated.tag}"
    )


def format_flags(relative: RecordRelative) -> str:
    """Concatenate the flags in declaration order: LONG before SPEED."""
    return "".join(str(flag) for flag in QualityFlag if flag in relative.flags)


def format_relative_line(relative: RecordRelative) -> str:
    """Format one line of the relative movement report."""
    return (
        f"{format_time(relative.timestamp)}: moved {relative.distance_to_last:.4f} m"
        f"\tin {relative.time_to_last.total_seconds():.2f} sec"
        f"\tat the speed of {relative.speed:.4f} m/s {format_flags(relative)}"
    )


def absolute_report_lines(
    annotated: Iterable[AnnotatedRecord], base: Position
) -> List[str]:
    return [format_absolute_line(a, base) for a in annotated]


def relative_report_lines(relatives: Iterable[RecordRelative]) -> List[str]:
    return [format_relative_line(r) for r in relatives]


def write_report(lines: Iterable[str], output_filename: str) -> None:
    """
    Write report lines to a file, one per line.

    Args:
        lines: Report lines without trailing newlines
        output_filename: Path of the report file
    """
    count = 0
    with open(output_filename, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
            count += 1
    logger.debug(f"Wrote {count} lines to {output_filename}")
