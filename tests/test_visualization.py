import unittest
from datetime import datetime, timedelta
from unittest.mock import patch, MagicMock

from roomtrack.config import TrackConfig
from roomtrack.geometry import Position
from roomtrack.metrics import collect_metrics
from roomtrack.records import Record
from roomtrack.region import CircularRegion, PolygonRegion
from roomtrack.track import Track
from roomtrack.visualization import create_track_map

T0 = datetime(2024, 5, 1, 10, 0, 0)


def make_track():
    return Track(
        [
            Record(T0, 0.0, 0.0),
            Record(T0 + timedelta(seconds=5), 0.0, 0.00001),
            Record(T0 + timedelta(seconds=10), 0.0, 0.0005),  # fast hop
            Record(T0 + timedelta(seconds=20), 0.0, 0.00051),
        ]
    )


@patch("roomtrack.visualization.TrackLegend")
@patch("roomtrack.visualization.folium.Icon")
@patch("roomtrack.visualization.folium.CircleMarker")
@patch("roomtrack.visualization.folium.Polygon")
@patch("roomtrack.visualization.folium.Circle")
@patch("roomtrack.visualization.folium.Marker")
@patch("roomtrack.visualization.folium.PolyLine")
@patch("roomtrack.visualization.folium.LayerControl")
@patch("roomtrack.visualization.folium.TileLayer")
@patch("roomtrack.visualization.folium.Map")
class TestCreateTrackMap(unittest.TestCase):

    def _render(self, region):
        track = make_track()
        relatives = track.relative_movements()
        metrics = collect_metrics(len(track), track.annotate(region), relatives)
        create_track_map(
            track=track,
            region=region,
            relatives=relatives,
            metrics=metrics,
            output_filename="test_map.html",
            config=TrackConfig(),
        )
        return track

    def test_base_circle_map(
        self,
        mock_map,
        mock_tilelayer,
        mock_layercontrol,
        mock_polyline,
        mock_marker,
        mock_circle,
        mock_polygon,
        mock_circlemarker,
        mock_icon,
        mock_legend,
    ):
        map_instance = MagicMock(name="map_instance")
        mock_map.return_value = map_instance

        self._render(CircularRegion(Position(0.0, 0.0), 5.0))

        _, map_kwargs = mock_map.call_args
        self.assertIsNone(map_kwargs.get("tiles"))
        self.assertEqual(mock_tilelayer.call_count, 2)
        standard_kwargs = mock_tilelayer.call_args_list[0][1]
        self.assertEqual(standard_kwargs.get("tiles"), "CartoDB positron")
        self.assertEqual(standard_kwargs.get("name"), "Standard")
        mock_layercontrol.assert_called_once_with()

        mock_circle.assert_called_once()
        _, circle_kwargs = mock_circle.call_args
        self.assertEqual(circle_kwargs["radius"], 5.0)
        self.assertEqual(circle_kwargs["location"], [0.0, 0.0])
        mock_polygon.assert_not_called()

        mock_polyline.assert_called_once()
        self.assertEqual(mock_marker.call_count, 2)

        # Only the 0.0005 degree hop in 5 s is above walking speed
        mock_circlemarker.assert_called_once()
        self.assertEqual(mock_circlemarker.call_args[0][0], [0.0, 0.0005])

        mock_legend.assert_called_once()
        self.assertEqual(mock_legend.call_args[0][1], "Base radius")
        map_instance.fit_bounds.assert_called_once()
        map_instance.save.assert_called_once_with("test_map.html")

    def test_room_map(
        self,
        mock_map,
        mock_tilelayer,
        mock_layercontrol,
        mock_polyline,
        mock_marker,
        mock_circle,
        mock_polygon,
        mock_circlemarker,
        mock_icon,
        mock_legend,
    ):
        room = PolygonRegion(
            [
                Position(-0.0001, -0.0001),
                Position(-0.0001, 0.0001),
                Position(0.0001, 0.0001),
                Position(0.0001, -0.0001),
            ]
        )
        self._render(room)

        mock_circle.assert_not_called()
        mock_polygon.assert_called_once()
        _, polygon_kwargs = mock_polygon.call_args
        self.assertEqual(len(polygon_kwargs["locations"]), 4)
        self.assertEqual(mock_legend.call_args[0][1], "Room")


if __name__ == "__main__":
    unittest.main()
