# core/strip_planner.py

import logging
import math
from typing import List, Sequence, Tuple

from photoplan.core.camera_model import CameraModel, resolve_altitude_and_gsd
from photoplan.core.geo_projection import to_planar
from photoplan.core.planning_params import GeodeticPoint, StripParameters, Waypoint

logger = logging.getLogger("PHOTOPLAN.StripPlanner")

DUPLICATE_EPS_DEG = 1e-7


def segment_heading(points_xy: Sequence[Tuple[float, float]], idx: int) -> float:
    """Heading (radians, [-pi, pi]) of the segment idx -> idx+1."""
    if idx < 0 or idx + 1 >= len(points_xy):
        return 0.0
    dx = points_xy[idx + 1][0] - points_xy[idx][0]
    dy = points_xy[idx + 1][1] - points_xy[idx][1]
    return math.atan2(dy, dx)


def turn_angle(heading_in: float, heading_out: float) -> float:
    """Absolute heading change normalized into [0, pi]."""
    diff = abs(heading_out - heading_in)
    while diff > math.pi:
        diff = abs(diff - 2.0 * math.pi)
    return diff


def significant_turn_indices(points_xy: Sequence[Tuple[float, float]], threshold_rad: float) -> List[int]:
    """Indices of the first vertex, every interior vertex that turns by more
    than threshold_rad, and the last vertex."""
    n = len(points_xy)
    keep = [0]
    for i in range(1, n - 1):
        if turn_angle(segment_heading(points_xy, i - 1), segment_heading(points_xy, i)) > threshold_rad:
            keep.append(i)
    if n > 1:
        keep.append(n - 1)
    return keep


def _drop_consecutive_duplicates(points: Sequence[GeodeticPoint]) -> List[GeodeticPoint]:
    cleaned: List[GeodeticPoint] = []
    for p in points:
        if cleaned:
            prev = cleaned[-1]
            if (abs(prev.latitude - p.latitude) < DUPLICATE_EPS_DEG and
                    abs(prev.longitude - p.longitude) < DUPLICATE_EPS_DEG):
                continue
        cleaned.append(p)
    return cleaned


def plan_strip_mission(params: StripParameters, camera: CameraModel) -> List[Waypoint]:
    """Reduce a corridor polyline to its start, end and significant turn points."""
    reason = params.validation_error()
    if reason:
        logger.warning(f"plan_strip_mission: {reason}")
        return []

    polyline = params.polyline
    provided = [p.altitude for p in polyline if p.has_altitude]
    avg_ground_alt = sum(provided) / len(provided) if provided else 0.0

    lat0, lon0 = polyline[0].latitude, polyline[0].longitude
    polyline_xy = [to_planar(lat0, lon0, p.latitude, p.longitude) for p in polyline]

    altitude_m, _ = resolve_altitude_and_gsd(
        camera, params.altitude_m, params.gsd_m, params.default_altitude_m)
    final_alt = altitude_m + avg_ground_alt

    threshold_rad = math.radians(params.turn_threshold_deg)
    kept = [polyline[i] for i in significant_turn_indices(polyline_xy, threshold_rad)]
    kept = _drop_consecutive_duplicates(kept)

    waypoints = [Waypoint(p.latitude, p.longitude, final_alt) for p in kept]
    logger.info(f"Strip mission planned: {len(waypoints)} of {len(polyline)} vertices kept")
    return waypoints
