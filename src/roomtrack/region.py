#!/usr/bin/env python3
"""Reference regions for containment checks: a base circle or a room polygon."""

from abc import ABC, abstractmethod
from typing import List, Sequence
import logging
import math

from .geometry import (
    Position,
    calculate_bbox,
    coords_to_polygon,
    create_transverse_mercator_projection,
    position_distance,
)

logger = logging.getLogger(__name__)

BASE_TAG = "[INSIDE:BASE]"
ROOM_TAG = "[INSIDE:ROOM]"


class RoomFileError(Exception):
    """Raised when a room file does not describe a usable polygon."""

    pass


def is_within_radius(point: Position, center: Position, radius: float) -> bool:
    """
    Check whether a point lies strictly within a radius of a center point.

    Points exactly on the boundary are outside.
    """
    return position_distance(point, center) < radius


def is_within_polygon(point: Position, vertices: Sequence[Position]) -> bool:
    """
    Same-side test for a convex, consistently wound polygon.

    For every edge the sign of the cross product between the edge and the
    vector to the point is examined. The point is inside when no two edges
    put it on opposite sides. Points on an edge or on a vertex are inside.

    Args:
        point: Position to test (x = latitude, y = longitude)
        vertices: Polygon vertices in winding order

    Returns:
        True if the point is inside or on the boundary
    """
    px, py = point.latitude, point.longitude
    positive = negative = 0
    n = len(vertices)

    for i in range(n):
        xi, yi = vertices[i].latitude, vertices[i].longitude
        if px == xi and py == yi:
            return True

        xj, yj = vertices[(i + 1) % n].latitude, vertices[(i + 1) % n].longitude
        d = (px - xi) * (yj - yi) - (py - yi) * (xj - xi)

        if d > 0:
            positive += 1
        elif d < 0:
            negative += 1

        if positive > 0 and negative > 0:
            return False

    return True


def is_within_polygon_even_odd(point: Position, vertices: Sequence[Position]) -> bool:
    """
    Ray casting test that also handles concave polygons.

    A ray is cast along increasing longitude and edge crossings are counted;
    an odd count means inside. Vertices count as inside.
    """
    px, py = point.latitude, point.longitude
    inside = False
    n = len(vertices)

    j = n - 1
    for i in range(n):
        xi, yi = vertices[i].latitude, vertices[i].longitude
        xj, yj = vertices[j].latitude, vertices[j].longitude
        if px == xi and py == yi:
            return True
        if (xi > px) != (xj > px):
            crossing_y = yi + (px - xi) * (yj - yi) / (xj - xi)
            if py < crossing_y:
                inside = not inside
        j = i

    return inside


class Region(ABC):
    """A reference area that positions are tested against."""

    tag: str = ""

    @abstractmethod
    def contains(self, position: Position) -> bool:
        """Return True if the position lies within this region."""

    @abstractmethod
    def describe(self) -> str:
        """Short human readable description for logs."""


class CircularRegion(Region):
    """All positions closer than `radius` meters to `center`."""

    tag = BASE_TAG

    def __init__(self, center: Position, radius: float):
        self.center = center
        self.radius = radius

    def contains(self, position: Position) -> bool:
        return is_within_radius(position, self.center, self.radius)

    def describe(self) -> str:
        return (
            f"base circle of {self.radius:.2f} m around "
            f"{self.center.latitude:.7f}, {self.center.longitude:.7f}"
        )


class PolygonRegion(Region):
    """A room outline given as an ordered list of vertices."""

    tag = ROOM_TAG

    def __init__(self, vertices: List[Position]):
        """Initializes a PolygonRegion.

        Args:
            vertices: Room corners in consistent winding order.

        Raises:
            ValueError: If fewer than three vertices are given.
        """
        if len(vertices) < 3:
            raise ValueError(
                f"A room needs at least 3 vertices, got {len(vertices)}"
            )
        self.vertices = list(vertices)

        # Local metric frame keeps room-sized areas well conditioned
        projection = create_transverse_mercator_projection(
            calculate_bbox(self.vertices)
        )
        self.polygon = coords_to_polygon(self.vertices, projection)
        self.convex = self._is_convex()
        if not self.convex:
            logger.warning(
                "Room polygon is not convex; using even-odd containment instead of the same-side test"
            )

    def _is_convex(self) -> bool:
        area = self.polygon.area
        hull_area = self.polygon.convex_hull.area
        return area > 0 and math.isclose(area, hull_area, rel_tol=1e-7)

    def contains(self, position: Position) -> bool:
        if self.convex:
            return is_within_polygon(position, self.vertices)
        return is_within_polygon_even_odd(position, self.vertices)

    def area_m2(self) -> float:
        """Room area in square meters in a local transverse mercator projection."""
        return self.polygon.area

    def describe(self) -> str:
        return f"room with {len(self.vertices)} vertices ({self.area_m2():.1f} m²)"


def parse_room_lines(lines) -> List[Position]:
    """
    Parse room vertices from "<latitude>,<longitude>" lines.

    Blank lines are ignored.

    Raises:
        RoomFileError: If a line cannot be parsed
    """
    vertices = []
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        parts = line.split(",")
        if len(parts) != 2:
            raise RoomFileError(
                f"Line {line_number}: expected '<latitude>,<longitude>', got {line!r}"
            )
        try:
            vertices.append(Position(float(parts[0]), float(parts[1])))
        except ValueError as e:
            raise RoomFileError(f"Line {line_number}: {e}") from e
    return vertices


def load_room_file(filename: str) -> PolygonRegion:
    """
    Load a room polygon from a file.

    Args:
        filename: Path to the room file

    Returns:
        PolygonRegion for the room

    Raises:
        OSError: If the file cannot be opened
        RoomFileError: If the file is not UTF-8 text, has a bad line or fewer than 3 vertices
    """
    try:
        with open(filename, "r", encoding="utf-8") as f:
            vertices = parse_room_lines(f)
    except UnicodeDecodeError as e:
        raise RoomFileError(f"Room file {filename} is not valid UTF-8 text: {e.reason}") from e

    if len(vertices) < 3:
        raise RoomFileError(
            f"Room file {filename} has {len(vertices)} vertices; at least 3 are required"
        )

    logger.debug(f"Parsed {len(vertices)} room vertices from {filename}")
    return PolygonRegion(vertices)
