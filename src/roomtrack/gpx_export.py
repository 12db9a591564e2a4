#!/usr/bin/env python3
"""
GPX export of a cleaned track.
"""

from typing import Optional
import logging
import gpxpy
import gpxpy.gpx

from .track import Track

logger = logging.getLogger(__name__)


def track_to_gpx(track: Track, name: Optional[str] = None) -> gpxpy.gpx.GPX:
    """
    Convert a track into a GPX document with one track and one segment.

    Args:
        track: Deduplicated track
        name: Optional track name

    Returns:
        gpxpy.gpx.GPX object with one point per record
    """
    gpx = gpxpy.gpx.GPX()
    gpx_track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(gpx_track)

    segment = gpxpy.gpx.GPXTrackSegment()
    gpx_track.segments.append(segment)

    for record in track:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(
                latitude=record.latitude,
                longitude=record.longitude,
                time=record.timestamp,
            )
        )

    return gpx


def write_gpx(track: Track, output_filename: str, name: Optional[str] = None) -> None:
    """Write the track to a GPX file."""
    gpx = track_to_gpx(track, name)
    with open(output_filename, "w", encoding="utf-8") as f:
        f.write(gpx.to_xml())
    logger.debug(f"Wrote {len(track)} track points to {output_filename}")
