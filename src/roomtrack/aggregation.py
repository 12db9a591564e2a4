#!/usr/bin/env python3
"""
Pairwise aggregation of an ordered series into relative movements.

One RecordRelative is produced for every consecutive (earlier, later) pair.
Only the previous record is remembered, so any iterable can be streamed.
"""

from dataclasses import replace
from datetime import timedelta
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple
import logging

from .config import TrackConfig
from .geometry import haversine_distance
from .records import QualityFlag, Record, RecordRelative

logger = logging.getLogger(__name__)


def iter_pairs(records: Iterable[Record]) -> Iterator[Tuple[Record, Record]]:
    """Yield consecutive (earlier, later) pairs in input order."""
    previous: Optional[Record] = None
    for record in records:
        if previous is not None:
            yield previous, record
        previous = record


def quality_flags(
    time_to_last: timedelta, speed: float, config: TrackConfig
) -> FrozenSet[QualityFlag]:
    """
    Determine the data quality flags for a movement.

    LONG is set when the gap exceeds config.long_gap_seconds and SPEED when
    the speed exceeds config.max_walking_speed. The flags are independent.
    """
    flags = set()
    if time_to_last.total_seconds() > config.long_gap_seconds:
        flags.add(QualityFlag.LONG)
    # nan compares False, so an unmoving zero-length gap is never flagged
    if speed > config.max_walking_speed:
        flags.add(QualityFlag.SPEED)
    return frozenset(flags)


def relative_movement(
    earlier: Record, later: Record, config: TrackConfig
) -> RecordRelative:
    """
    Build the movement from `earlier` to `later`.

    Elapsed time is passed through unchanged, including zero or negative
    values from out of order input.
    """
    distance = haversine_distance(
        later.latitude, later.longitude, earlier.latitude, earlier.longitude
    )
    unflagged = RecordRelative(
        timestamp=later.timestamp,
        time_to_last=later.timestamp - earlier.timestamp,
        distance_to_last=distance,
    )
    return replace(
        unflagged,
        flags=quality_flags(unflagged.time_to_last, unflagged.speed, config),
    )


def iter_relative_movements(
    records: Iterable[Record], config: Optional[TrackConfig] = None
) -> Iterator[RecordRelative]:
    """Stream one RecordRelative per consecutive pair of records."""
    config = config or TrackConfig()
    for earlier, later in iter_pairs(records):
        yield relative_movement(earlier, later, config)


def calculate_relative_movements(
    records: Iterable[Record], config: Optional[TrackConfig] = None
) -> List[RecordRelative]:
    """
    Calculate the relative movement series.

    Args:
        records: Ordered, deduplicated records
        config: Thresholds for quality flags (defaults if None)

    Returns:
        List with one entry fewer than the number of records
    """
    relatives = list(iter_relative_movements(records, config))

    long_gaps = sum(1 for r in relatives if r.has_flag(QualityFlag.LONG))
    fast = sum(1 for r in relatives if r.has_flag(QualityFlag.SPEED))
    logger.debug(
        f"Calculated {len(relatives)} relative movements ({long_gaps} long gaps, {fast} speed warnings)"
    )
    return relatives
