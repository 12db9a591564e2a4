#!/usr/bin/env python3
"""
Track visualization using folium maps.
"""

from typing import List
import logging
import folium
from folium.template import Template

from .config import TrackConfig
from .metrics import TrackMetrics
from .records import QualityFlag, RecordRelative
from .region import CircularRegion, PolygonRegion, Region
from .report import format_time
from .track import Track

logger = logging.getLogger(__name__)

TRACK_COLOR = "#2E86AB"
REGION_COLOR = "#3B9C4B"
SPEED_COLOR = "#D23C4C"


class TrackLegend(folium.MacroElement):
    """Custom legend for track visualization with dynamic counts."""

    def __init__(self, metrics: TrackMetrics, region_label: str):
        super().__init__()
        self.records_unique = metrics.records_unique
        self.inside_count = metrics.inside_count
        self.speed_warnings = metrics.speed_warnings
        self.region_label = region_label

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="track-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 230px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
        ">
            <b>Legend</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #2E86AB; font-size: 18px;">—</span>
                Track ({{ this.records_unique }} samples)
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #3B9C4B; font-weight: bold; font-size: 18px;">—</span>
                {{ this.region_label }} ({{ this.inside_count }} inside)
            </div>
            {% if this.speed_warnings > 0 %}
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #D23C4C; font-weight: bold; font-size: 18px;">●</span>
                Speed warnings ({{ this.speed_warnings }})
            </div>
            {% endif %}
        </div>
        {% endmacro %}
        """
        )


def add_region(route_map: folium.Map, region: Region) -> str:
    """
    Draw the containment region on the map.

    Returns:
        Legend label for the region
    """
    if isinstance(region, CircularRegion):
        folium.Circle(
            location=[region.center.latitude, region.center.longitude],
            radius=region.radius,
            color=REGION_COLOR,
            weight=2,
            fill=True,
            fill_opacity=0.15,
            popup=f"Base ({region.radius:.1f} m)",
        ).add_to(route_map)
        return "Base radius"

    if isinstance(region, PolygonRegion):
        folium.Polygon(
            locations=[[v.latitude, v.longitude] for v in region.vertices],
            color=REGION_COLOR,
            weight=2,
            fill=True,
            fill_opacity=0.15,
            popup=region.describe(),
        ).add_to(route_map)
        return "Room"

    raise TypeError(f"Unsupported region type: {type(region).__name__}")


def create_track_map(
    track: Track,
    region: Region,
    relatives: List[RecordRelative],
    metrics: TrackMetrics,
    output_filename: str,
    config: TrackConfig,
) -> None:
    """
    Create an interactive map showing the track and the containment region, save as HTML.

    Args:
        track: Track to draw
        region: Active containment region
        relatives: Relative movements; SPEED flagged ones are highlighted
        metrics: TrackMetrics for the legend
        output_filename: Path where HTML map file should be saved
        config: TrackConfig providing the bounding box buffer

    Raises:
        ValueError: If track is empty
    """
    if not track:
        raise ValueError("Cannot create map for empty track")

    south, west, north, east = track.get_bbox(config.bbox_buffer)

    center_lat = (south + north) / 2
    center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.6f}, {center_lon:.6f})")

    route_map = folium.Map(
        location=[center_lat, center_lon],
        tiles=None,
    )

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(route_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(route_map)

    folium.LayerControl().add_to(route_map)

    region_label = add_region(route_map, region)

    coordinates = [[record.latitude, record.longitude] for record in track]
    folium.PolyLine(
        coordinates,
        color=TRACK_COLOR,
        weight=2,
        opacity=0.7,
        popup="Track",
        z_index=1,
    ).add_to(route_map)

    folium.Marker(
        [track[0].latitude, track[0].longitude],
        popup=f"Start {format_time(track[0].timestamp)}",
        icon=folium.Icon(color="green", icon="play"),
    ).add_to(route_map)

    folium.Marker(
        [track[-1].latitude, track[-1].longitude],
        popup=f"End {format_time(track[-1].timestamp)}",
        icon=folium.Icon(color="red", icon="stop"),
    ).add_to(route_map)

    # relatives[i] ends at track[i + 1]
    for i, relative in enumerate(relatives):
        if not relative.has_flag(QualityFlag.SPEED):
            continue
        record = track[i + 1]
        folium.CircleMarker(
            [record.latitude, record.longitude],
            radius=4,
            color=SPEED_COLOR,
            fill=True,
            popup=f"{format_time(relative.timestamp)}: {relative.speed:.2f} m/s",
        ).add_to(route_map)

    route_map.add_child(TrackLegend(metrics, region_label))

    bounds = [[south, west], [north, east]]
    route_map.fit_bounds(bounds)

    route_map.save(output_filename)

    logger.debug(
        f"Map saved to {output_filename} with {metrics.speed_warnings} speed warnings highlighted"
    )
