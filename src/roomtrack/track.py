#!/usr/bin/env python3
"""
Track data model for location log analysis.
"""

from typing import Iterator, List, Optional, Tuple
import logging
from math import cos, radians

from .aggregation import calculate_relative_movements
from .config import TrackConfig
from .geometry import Position, calculate_bbox, position_distance
from .records import AnnotatedRecord, Record, RecordRelative
from .region import Region

logger = logging.getLogger(__name__)


class Track:
    """An ordered, deduplicated series of records and its base point."""

    def __init__(self, records: List[Record], base: Optional[Position] = None):
        """Initializes a Track object.

        Args:
            records: Unique records in input order.
            base: Reference point for distances. Defaults to the first record.

        Raises:
            ValueError: If records is empty.
        """
        if not records:
            raise ValueError("Track records cannot be empty")

        self.records = records
        self.base = base if base is not None else records[0].position
        self.bbox = calculate_bbox(self.positions)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def positions(self) -> List[Position]:
        return [record.position for record in self.records]

    def annotate(self, region: Region) -> List[AnnotatedRecord]:
        """
        Measure every record against the base point and the region.

        Args:
            region: Circle or room that decides containment

        Returns:
            One AnnotatedRecord per record, in order
        """
        annotated = []
        for record in self.records:
            position = record.position
            inside = region.contains(position)
            annotated.append(
                AnnotatedRecord(
                    record=record,
                    distance_to_base=position_distance(position, self.base),
                    inside=inside,
                    tag=region.tag if inside else "",
                )
            )

        inside_count = sum(1 for a in annotated if a.inside)
        logger.debug(
            f"{inside_count}/{len(annotated)} records inside {region.describe()}"
        )
        return annotated

    def relative_movements(
        self, config: Optional[TrackConfig] = None
    ) -> List[RecordRelative]:
        """Movement between each pair of consecutive records."""
        return calculate_relative_movements(self.records, config)

    def total_distance(self) -> float:
        """Sum of the distances between consecutive records, in meters."""
        positions = self.positions
        return sum(
            position_distance(a, b) for a, b in zip(positions, positions[1:])
        )

    def get_bbox(self, buffer: float = 0.0) -> Tuple[float, float, float, float]:
        """
        Get bounding box for this track, optionally with a buffer.

        Args:
            buffer: Buffer distance in meters (default: 0.0)

        Returns:
            Tuple of (south, west, north, east) in decimal degrees
        """
        if buffer == 0.0:
            return self.bbox

        min_lat, min_lon, max_lat, max_lon = self.bbox

        # 1 degree latitude ≈ 111 km; longitude scaled by the average latitude
        avg_lat = (min_lat + max_lat) / 2
        lat_buffer = buffer / 111000.0
        lon_buffer = buffer / (111000.0 * abs(cos(radians(avg_lat))))

        buffered_south = max(-90.0, min_lat - lat_buffer)
        buffered_north = min(90.0, max_lat + lat_buffer)
        buffered_west = max(-180.0, min_lon - lon_buffer)
        buffered_east = min(180.0, max_lon + lon_buffer)

        logger.debug(
            f"Returning buffered bounding box: ({buffered_south:.4f}, {buffered_west:.4f}, {buffered_north:.4f}, {buffered_east:.4f}) with {buffer}m buffer"
        )
        return (buffered_south, buffered_west, buffered_north, buffered_east)
