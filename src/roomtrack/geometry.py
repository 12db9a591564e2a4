"""
Distance model and projection helpers for location tracks.

This module provides the haversine distance used throughout the package,
the Position value type, and helpers for building a custom transverse
mercator projection and converting coordinate lists to Shapely polygons.
"""

from typing import List, Optional, Tuple, NamedTuple
import math
from shapely.geometry import Polygon
import pyproj

from .config import EARTH_RADIUS_M


class Position(NamedTuple):
    """Represents a geographic position with latitude and longitude."""

    latitude: float
    longitude: float


def haversine_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    earth_radius: float = EARTH_RADIUS_M,
) -> float:
    """
    Calculate the great circle distance between two coordinates.

    Uses the haversine formula on a sphere. The default radius is the WGS84
    equatorial radius, so results carry a small systematic error compared to
    an ellipsoidal geodesic.

    Args:
        lat1: Latitude of the first point in decimal degrees
        lng1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lng2: Longitude of the second point in decimal degrees
        earth_radius: Sphere radius in meters

    Returns:
        Distance in meters
    """
    phi1, lambda1 = math.radians(lat1), math.radians(lng1)
    phi2, lambda2 = math.radians(lat2), math.radians(lng2)

    dlat = phi2 - phi1
    dlon = lambda2 - lambda1

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2) ** 2
    )

    # Rounding can push a just past 1 for near antipodal points
    return 2 * earth_radius * math.asin(min(1.0, math.sqrt(a)))


def position_distance(pos1: Position, pos2: Position) -> float:
    """Haversine distance in meters between two Position objects."""
    return haversine_distance(
        pos1.latitude, pos1.longitude, pos2.latitude, pos2.longitude
    )


def calculate_bbox(positions: List[Position]) -> Tuple[float, float, float, float]:
    """
    Calculate the bounding box of a list of positions.

    Args:
        positions: Non-empty list of positions

    Returns:
        Tuple of (south, west, north, east) in decimal degrees

    Raises:
        ValueError: If positions is empty
    """
    if not positions:
        raise ValueError("Cannot calculate bounding box without positions")

    latitudes = [pos.latitude for pos in positions]
    longitudes = [pos.longitude for pos in positions]
    return (min(latitudes), min(longitudes), max(latitudes), max(longitudes))


def create_transverse_mercator_projection(
    bbox: Tuple[float, float, float, float],
) -> pyproj.Proj:
    """
    Create a custom transverse mercator projection centered on the given bounding box.

    Args:
        bbox: Tuple of (south, west, north, east) in decimal degrees

    Returns:
        pyproj.Proj object for the custom projection
    """
    south, west, north, east = bbox

    center_lat = (south + north) / 2.0
    center_lon = (west + east) / 2.0

    proj_string = f"+proj=tmerc +lat_0={center_lat} +lon_0={center_lon} +k=1 +x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
    return pyproj.Proj(proj_string)


def coords_to_polygon(
    positions: List[Position], projection: Optional[pyproj.Proj] = None
) -> Polygon:
    """
    Convert a list of positions to a Shapely Polygon.

    Args:
        positions: Polygon vertices in order; the ring is closed implicitly
        projection: Optional pyproj.Proj object for coordinate transformation.
                   If None, uses (longitude, latitude) coordinates directly.

    Returns:
        Polygon in projected coordinates if projection is provided,
        otherwise in geographic coordinates

    Raises:
        ValueError: If fewer than three positions are given
    """
    if len(positions) < 3:
        raise ValueError("At least three positions are required to create a Polygon.")

    lons = [pos.longitude for pos in positions]
    lats = [pos.latitude for pos in positions]

    if projection is not None:
        x_coords, y_coords = projection(lons, lats)
        return Polygon(list(zip(x_coords, y_coords)))

    return Polygon(list(zip(lons, lats)))
