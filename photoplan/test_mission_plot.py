"""Tests for the mission plot helper."""

from photoplan.core.planning_params import GeodeticPoint, Waypoint
from photoplan.utils.mission_plot import plot_mission


def test_plot_writes_image(tmp_path):
    waypoints = [Waypoint(47.0, 8.0, 120.0), Waypoint(47.001, 8.0, 120.0), Waypoint(47.001, 8.001, 120.0)]
    area = [GeodeticPoint(47.0, 8.0), GeodeticPoint(47.001, 8.0), GeodeticPoint(47.001, 8.001)]
    path = tmp_path / "mission.png"
    assert plot_mission(waypoints, str(path), area=area) is True
    assert path.stat().st_size > 0


def test_plot_polyline_area(tmp_path):
    waypoints = [Waypoint(47.0, 8.0, 120.0), Waypoint(47.001, 8.0, 120.0)]
    path = tmp_path / "strip.png"
    assert plot_mission(waypoints, str(path), area=[GeodeticPoint(47.0, 8.0), GeodeticPoint(47.001, 8.0)])
    assert path.exists()


def test_plot_without_waypoints(tmp_path):
    path = tmp_path / "empty.png"
    assert plot_mission([], str(path)) is False
    assert not path.exists()
