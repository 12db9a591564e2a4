#!/usr/bin/env python3
"""
Log parsing and deduplication into an ordered series of records.

Each log line is comma separated with fixed field positions:
field 3 holds "<label>:<latitude>", field 4 the longitude and
field 9 the timestamp. All other fields are ignored.
"""

from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Set, Tuple
import logging

from .records import Record, sample_key

logger = logging.getLogger(__name__)

LATITUDE_FIELD = 3
LONGITUDE_FIELD = 4
TIMESTAMP_FIELD = 9

RawTuple = Tuple[datetime, float, float]


class LogFormatError(ValueError):
    """Raised when a log line has a missing or unparseable required field."""

    pass


def _location(line_number: Optional[int]) -> str:
    return f"line {line_number}: " if line_number is not None else ""


def parse_latitude_field(value: str) -> float:
    """
    Extract the latitude from a "<label>:<value>" field.

    Raises:
        LogFormatError: If the colon is missing or the value is not a number
    """
    label, sep, number = value.partition(":")
    if not sep:
        raise LogFormatError(f"Latitude field {value!r} has no ':' separator")
    try:
        return float(number)
    except ValueError as e:
        raise LogFormatError(f"Latitude field {value!r} is not numeric") from e


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 date-time string.

    Raises:
        LogFormatError: If the string is not a valid date-time
    """
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise LogFormatError(f"Unparseable timestamp {value!r}") from e


def parse_log_line(line: str, line_number: Optional[int] = None) -> RawTuple:
    """
    Parse one log line into a (timestamp, latitude, longitude) tuple.

    Args:
        line: Raw comma separated log line
        line_number: Optional 1-based line number for error messages

    Returns:
        Tuple of (timestamp, latitude, longitude)

    Raises:
        LogFormatError: If a required field is missing or malformed
    """
    fields = line.rstrip("\r\n").split(",")
    if len(fields) <= TIMESTAMP_FIELD:
        raise LogFormatError(
            f"{_location(line_number)}expected at least {TIMESTAMP_FIELD + 1} fields, got {len(fields)}"
        )

    try:
        latitude = parse_latitude_field(fields[LATITUDE_FIELD].strip())
        try:
            longitude = float(fields[LONGITUDE_FIELD])
        except ValueError as e:
            raise LogFormatError(
                f"Longitude field {fields[LONGITUDE_FIELD]!r} is not numeric"
            ) from e
        timestamp = parse_timestamp(fields[TIMESTAMP_FIELD])
    except LogFormatError as e:
        if line_number is None:
            raise
        raise LogFormatError(f"{_location(line_number)}{e}") from e

    return (timestamp, latitude, longitude)


def iter_raw_tuples(lines: Iterable[str]) -> Iterator[RawTuple]:
    """
    Lazily parse log lines, skipping blank ones.

    Every timestamp must carry a UTC offset exactly when the first one does.
    """
    aware: Optional[bool] = None
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        raw = parse_log_line(line, line_number)
        has_offset = raw[0].tzinfo is not None
        if aware is None:
            aware = has_offset
        elif has_offset != aware:
            expected = "with" if aware else "without"
            raise LogFormatError(
                f"{_location(line_number)}timestamp {raw[0].isoformat()} mixes time zones; "
                f"earlier records are {expected} a UTC offset"
            )
        yield raw


def build_series(tuples: Iterable[RawTuple]) -> List[Record]:
    """
    Build the ordered list of unique records.

    A record identical in timestamp and coordinates to one already seen is
    dropped. The order of first occurrence is kept; nothing is sorted.

    Args:
        tuples: (timestamp, latitude, longitude) tuples in input order

    Returns:
        Unique records in input order
    """
    seen: Set[RawTuple] = set()
    records: List[Record] = []

    for timestamp, latitude, longitude in tuples:
        record = Record(timestamp=timestamp, latitude=latitude, longitude=longitude)
        key = sample_key(record)
        if key in seen:
            logger.debug(f"Dropping duplicate sample at {timestamp.isoformat()}")
            continue
        seen.add(key)
        records.append(record)

    return records


def load_series(filename: str) -> Tuple[List[Record], int]:
    """
    Load a location log into a deduplicated series.

    Args:
        filename: Path to the log file

    Returns:
        Tuple of (unique records, number of parsed samples before deduplication)

    Raises:
        OSError: If the file cannot be read
        LogFormatError: If any record is malformed or the file is not UTF-8 text
    """
    raw_count = 0

    def counted(tuples: Iterable[RawTuple]) -> Iterator[RawTuple]:
        nonlocal raw_count
        for item in tuples:
            raw_count += 1
            yield item

    try:
        with open(filename, "r", encoding="utf-8") as f:
            records = build_series(counted(iter_raw_tuples(f)))
    except UnicodeDecodeError as e:
        raise LogFormatError(
            f"not valid UTF-8 text after {raw_count} records: {e.reason}"
        ) from e

    logger.info(
        f"Loaded {len(records)} unique records from {filename} "
        f"({raw_count - len(records)} duplicates dropped)"
    )
    return records, raw_count
