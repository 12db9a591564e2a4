#!/usr/bin/env python3
"""Data structures for location samples and the movement between them."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import FrozenSet, NamedTuple, Tuple
import math

from .geometry import Position


class QualityFlag(Enum):
    """Enumeration for data quality warnings on a relative movement."""

    LONG = "INFO:LONG"
    SPEED = "WARN:SPEED"

    def __str__(self) -> str:
        return f"[{self.value}]"


@dataclass(frozen=True)
class Record:
    """A single location sample from the log."""

    timestamp: datetime
    latitude: float
    longitude: float

    @property
    def position(self) -> Position:
        return Position(self.latitude, self.longitude)


def sample_key(record: Record) -> Tuple[datetime, float, float]:
    """The fields that identify a sample: timestamp, latitude and longitude."""
    return (record.timestamp, record.latitude, record.longitude)


@dataclass(frozen=True)
class RecordRelative:
    """Movement between two consecutive records, stamped with the later one's time."""

    timestamp: datetime
    time_to_last: timedelta
    distance_to_last: float  # meters
    flags: FrozenSet[QualityFlag] = field(default_factory=frozenset)

    @property
    def speed(self) -> float:
        """
        Speed in meters per second.

        Zero elapsed time gives +inf for a non-zero distance and nan otherwise;
        a negative elapsed time gives a negative speed.
        """
        seconds = self.time_to_last.total_seconds()
        if seconds == 0:
            return math.inf if self.distance_to_last > 0 else math.nan
        return self.distance_to_last / seconds

    def has_flag(self, flag: QualityFlag) -> bool:
        return flag in self.flags


class AnnotatedRecord(NamedTuple):
    """A record with its distance to the base point and containment result."""

    record: Record
    distance_to_base: float  # meters
    inside: bool
    tag: str  # empty unless inside
