"""Tests for point-of-interest orbit planning."""

import math

import pytest

from photoplan.core.camera_model import CameraModel
from photoplan.core.geo_projection import to_planar
from photoplan.core.planning_params import PoiParameters
from photoplan.core.poi_planner import plan_poi_mission, ring_radii, ring_step_count

POI = {'latitude': 47.397742, 'longitude': 8.545594, 'altitude': 10.0}


def test_ring_radii():
    assert ring_radii(100.0, 37.0) == pytest.approx([37.0, 74.0])
    assert ring_radii(30.0, 40.0) == [30.0]
    assert ring_radii(80.0, 40.0) == pytest.approx([40.0, 80.0])


def test_ring_step_count_is_clamped():
    assert ring_step_count(30.0, 40.0) == 6
    assert ring_step_count(37.0, 37.0) == 7
    assert ring_step_count(74.0, 37.0) == 12
    assert ring_step_count(10.0, 0.0) == 12


def test_single_ring_example():
    # swath = 36/35 * altitude = 80 m, lateral and along step = 40 m
    params = PoiParameters.from_dict({
        'poi': POI,
        'radius': 30.0,
        'side_overlap': 50.0,
        'front_overlap': 50.0,
        'altitude_m': 80.0 * 35.0 / 36.0,
    })
    waypoints = plan_poi_mission(params, CameraModel())
    assert len(waypoints) == 6

    for i, wp in enumerate(waypoints):
        x, y = to_planar(POI['latitude'], POI['longitude'], wp.latitude, wp.longitude)
        assert math.hypot(x, y) == pytest.approx(30.0, abs=1e-6)
        assert wp.altitude == pytest.approx(10.0 + 80.0 * 35.0 / 36.0)
        angle = math.atan2(y, x) % (2 * math.pi)
        assert angle == pytest.approx(i * math.pi / 3, abs=1e-9)


def test_small_radius_gives_one_ring():
    waypoints = plan_poi_mission(PoiParameters.from_dict({'poi': POI, 'radius': 5.0}), CameraModel())
    assert 6 <= len(waypoints) <= 12
    for wp in waypoints:
        x, y = to_planar(POI['latitude'], POI['longitude'], wp.latitude, wp.longitude)
        assert math.hypot(x, y) == pytest.approx(5.0, abs=1e-6)


def test_rings_emitted_smallest_first():
    waypoints = plan_poi_mission(PoiParameters.from_dict({'poi': POI, 'radius': 100.0}), CameraModel())
    radii = [math.hypot(*to_planar(POI['latitude'], POI['longitude'], wp.latitude, wp.longitude))
             for wp in waypoints]
    rounded = [round(r, 1) for r in radii]
    assert rounded == sorted(rounded)
    assert len(set(rounded)) == 2


def test_full_front_overlap_uses_max_steps():
    params = PoiParameters.from_dict({'poi': POI, 'radius': 5.0, 'front_overlap': 100.0})
    assert len(plan_poi_mission(params, CameraModel())) == 12


@pytest.mark.parametrize("data", [
    {'radius': 50.0},
    {'poi': POI},
    {'poi': POI, 'radius': 0.0},
    {'poi': POI, 'radius': -5.0},
])
def test_invalid_poi_returns_empty(data):
    assert plan_poi_mission(PoiParameters.from_dict(data), CameraModel()) == []


def test_non_positive_ring_spacing_returns_empty():
    assert ring_radii(30.0, 0.0) == []
    assert ring_radii(30.0, -5.0) == []

    params = PoiParameters.from_dict({'poi': {'lat': 47.0, 'lon': 8.0}, 'radius': 30.0, 'default_altitude_m': 0.0})
    assert plan_poi_mission(params, CameraModel()) == []


def test_poi_planning_is_deterministic():
    params = PoiParameters.from_dict({'poi': POI, 'radius': 120.0, 'front_overlap': 60.0})
    assert plan_poi_mission(params, CameraModel()) == plan_poi_mission(params, CameraModel())
