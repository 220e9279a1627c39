# core/poi_planner.py
"""
Point-of-interest orbit planning.

Concentric circular rings around the POI, spaced by the lateral camera step.
Rings are emitted smallest first, each in increasing angle starting east of
the POI. Rings are independent point sets: no transition waypoint is inserted
between them.
"""

import logging
import math
from typing import List, Tuple

from photoplan.core.camera_model import CameraModel, resolve_altitude_and_gsd, ring_spacing, swath_width
from photoplan.core.geo_projection import to_geodetic
from photoplan.core.planning_params import PoiParameters, Waypoint

logger = logging.getLogger("PHOTOPLAN.PoiPlanner")

MIN_RING_STEPS = 6
MAX_RING_STEPS = 12


def ring_radii(max_radius: float, lateral_step: float) -> List[float]:
    """Radii lateral_step, 2*lateral_step, ... up to max_radius.

    A single ring at max_radius when even the first step does not fit, no
    rings at all for a non-positive step.
    """
    if lateral_step <= 0.0:
        return []
    if max_radius < lateral_step:
        return [max_radius]
    radii = []
    k = 1
    while k * lateral_step <= max_radius + 1e-6:
        radii.append(k * lateral_step)
        k += 1
    return radii


def ring_step_count(radius: float, along_step: float) -> int:
    """Number of points on a ring, clamped to [6, 12]."""
    if along_step <= 0.0:
        return MAX_RING_STEPS
    steps = int(math.ceil(2.0 * math.pi * radius / along_step))
    return min(MAX_RING_STEPS, max(MIN_RING_STEPS, steps))


def ring_points(radius: float, steps: int) -> List[Tuple[float, float]]:
    ang_step = (2.0 * math.pi) / float(steps)
    return [(radius * math.cos(s * ang_step), radius * math.sin(s * ang_step)) for s in range(steps)]


def plan_poi_mission(params: PoiParameters, camera: CameraModel) -> List[Waypoint]:
    reason = params.validation_error()
    if reason:
        logger.warning(f"plan_poi_mission: {reason}")
        return []

    center = params.poi
    ground_alt = center.altitude or 0.0

    front_overlap = params.front_overlap / 100.0
    side_overlap = params.side_overlap / 100.0

    altitude_m, gsd_m = resolve_altitude_and_gsd(
        camera, params.altitude_m, params.gsd_m, params.default_altitude_m)

    swath = swath_width(camera, altitude_m, gsd_m)
    lateral_step = ring_spacing(swath, side_overlap)
    along_step = swath * (1.0 - front_overlap)
    if lateral_step <= 0.0:
        logger.warning(f"plan_poi_mission: non-positive ring spacing {lateral_step} (altitude {altitude_m} m)")
        return []

    radii = ring_radii(params.radius, lateral_step)
    logger.debug(f"POI: swath={swath:.2f} m, lateral step={lateral_step:.2f} m, rings={len(radii)}")

    waypoints = []
    for r in radii:
        for x, y in ring_points(r, ring_step_count(r, along_step)):
            lat, lon = to_geodetic(center.latitude, center.longitude, x, y)
            waypoints.append(Waypoint(lat, lon, ground_alt + altitude_m))

    logger.info(f"POI mission planned: {len(waypoints)} waypoints on {len(radii)} rings")
    return waypoints
