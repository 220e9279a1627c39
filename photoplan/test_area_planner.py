"""Tests for the boustrophedon area planner."""

import pytest

from photoplan.core.area_planner import (boustrophedon_path, group_by_scanline, plan_area_mission, scan_segments,
                                         scanline_intersections, snake_order)
from photoplan.core.camera_model import CameraModel, overlap_spacing, resolve_altitude_and_gsd
from photoplan.core.geo_projection import to_geodetic, to_planar
from photoplan.core.planning_params import AreaParameters

LAT0, LON0 = 47.0, 8.0
SQUARE_XY = [(0.0, 0.0), (0.0, 100.0), (100.0, 100.0), (100.0, 0.0)]


def assert_points(actual, expected):
    assert len(actual) == len(expected)
    for point, wanted in zip(actual, expected):
        assert point == pytest.approx(wanted, abs=1e-6)


def geodetic_square(side, altitudes=None):
    corners = [(0.0, 0.0), (side, 0.0), (side, side), (0.0, side)]
    polygon = []
    for i, (x, y) in enumerate(corners):
        lat, lon = to_geodetic(LAT0, LON0, x, y)
        vertex = {'latitude': lat, 'longitude': lon}
        if altitudes is not None:
            vertex['altitude'] = altitudes[i]
        polygon.append(vertex)
    return polygon


def test_scanline_vertex_counted_once():
    assert scanline_intersections(SQUARE_XY, 0.0) == [0.0, 100.0]
    assert scanline_intersections(SQUARE_XY, 100.0) == []
    triangle = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]
    assert scanline_intersections(triangle, 5.0) == pytest.approx([5.0, 15.0])


def test_square_example_has_ten_lines():
    lines = scan_segments(SQUARE_XY, 10.0)
    assert len(lines) == 10
    assert [y for y, _ in lines] == pytest.approx([10.0 * i for i in range(10)])
    for _, segments in lines:
        assert segments == [(0.0, 100.0)]


def test_square_example_snake_path():
    path = boustrophedon_path(SQUARE_XY, 0.0, 10.0)
    assert len(path) == 20
    assert path[0] == pytest.approx((0.0, 0.0))
    assert path[1] == pytest.approx((100.0, 0.0))
    assert path[2] == pytest.approx((100.0, 10.0))
    assert path[3] == pytest.approx((0.0, 10.0))
    assert path[-1] == pytest.approx((0.0, 90.0))


def test_dense_path_subdivides_segments():
    coarse = boustrophedon_path(SQUARE_XY, 0.0, 10.0)
    dense = boustrophedon_path(SQUARE_XY, 0.0, 10.0, along_spacing=25.0)
    # 5 samples per line, 10 lines
    assert len(dense) == 50
    assert len(dense) > len(coarse)
    assert_points(dense[:5], [(0.0, 0.0), (25.0, 0.0), (50.0, 0.0), (75.0, 0.0), (100.0, 0.0)])
    assert dense[5] == pytest.approx((100.0, 10.0))


def test_snake_order_and_grouping():
    lines = [[(0, 0), (1, 0)], [(0, 1), (1, 1)], [(0, 2), (1, 2)]]
    assert snake_order(lines) == [(0, 0), (1, 0), (1, 1), (0, 1), (0, 2), (1, 2)]

    groups = group_by_scanline([(5.0, 0.0), (1.0, 0.00001), (3.0, 10.0)], tolerance=0.001)
    assert groups == [[(1.0, 0.00001), (5.0, 0.0)], [(3.0, 10.0)]]


def test_waypoints_stay_within_bounds_plus_spacing():
    camera = CameraModel()
    params = AreaParameters.from_dict({'polygon': geodetic_square(500.0), 'heading': 30.0})
    waypoints = plan_area_mission(params, camera)
    assert waypoints

    _, gsd = resolve_altitude_and_gsd(camera)
    spacing = overlap_spacing(gsd * camera.image_width_px, params.side_overlap / 100.0)

    first = params.polygon[0]
    for wp in waypoints:
        x, y = to_planar(first.latitude, first.longitude, wp.latitude, wp.longitude)
        assert -spacing <= x <= 500.0 + spacing
        assert -spacing <= y <= 500.0 + spacing


def test_altitude_without_vertex_altitudes():
    waypoints = plan_area_mission(AreaParameters.from_dict({'polygon': geodetic_square(300.0)}), CameraModel())
    assert waypoints
    assert all(wp.altitude == pytest.approx(120.0) for wp in waypoints)


def test_coarse_adds_ground_offset_dense_does_not():
    polygon = geodetic_square(300.0, altitudes=[100.0, 100.0, 100.0, 0.0])
    coarse = plan_area_mission(AreaParameters.from_dict({'polygon': polygon, 'altitude_m': 50.0}), CameraModel())
    dense = plan_area_mission(AreaParameters.from_dict(
        {'polygon': polygon, 'altitude_m': 50.0, 'along_track_sampling': True}), CameraModel())

    assert all(wp.altitude == pytest.approx(150.0) for wp in coarse)
    assert all(wp.altitude == pytest.approx(50.0) for wp in dense)
    assert len(dense) > len(coarse)


def test_gsd_drives_line_spacing():
    polygon = geodetic_square(300.0)
    fine = plan_area_mission(AreaParameters.from_dict({'polygon': polygon, 'gsd_m': 0.01}), CameraModel())
    coarse = plan_area_mission(AreaParameters.from_dict({'polygon': polygon, 'gsd_m': 0.05}), CameraModel())
    assert len(fine) > len(coarse)


@pytest.mark.parametrize("data", [
    {},
    {'polygon': []},
    {'polygon': [{'lat': 47.0, 'lon': 8.0}, {'lat': 47.001, 'lon': 8.0}]},
])
def test_insufficient_polygon_returns_empty(data):
    assert plan_area_mission(AreaParameters.from_dict(data), CameraModel()) == []


def test_planning_is_deterministic():
    params = AreaParameters.from_dict({'polygon': geodetic_square(400.0), 'heading': 45.0})
    assert plan_area_mission(params, CameraModel()) == plan_area_mission(params, CameraModel())
