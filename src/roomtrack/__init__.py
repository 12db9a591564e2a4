#!/usr/bin/env python3
"""
Roomtrack - A GPS location log analysis tool.

This package cleans a location log of duplicate samples and reports, for each
sample, its distance to a base point and whether it lies inside a base circle
or a room polygon, together with the movement between consecutive samples.
"""
import importlib.metadata

__version__ = importlib.metadata.version("roomtrack")

# Import main classes for public API
from .geometry import Position, haversine_distance
from .records import QualityFlag, Record, RecordRelative
from .region import CircularRegion, PolygonRegion
from .series import build_series
from .aggregation import calculate_relative_movements
from .track import Track

__all__ = [
    "Position",
    "haversine_distance",
    "QualityFlag",
    "Record",
    "RecordRelative",
    "CircularRegion",
    "PolygonRegion",
    "build_series",
    "calculate_relative_movements",
    "Track",
]
