# core/area_planner.py
"""
Boustrophedon (lawnmower) area coverage.

The polygon is rotated by -heading so that flight lines become horizontal,
swept with scan lines spaced by the camera footprint (adjusted for side
overlap), and rotated back. Consecutive lines are flown in opposite
directions so each strip starts near where the previous one ended.
"""

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from photoplan.core.camera_model import CameraModel, overlap_spacing, resolve_altitude_and_gsd
from photoplan.core.geo_projection import to_geodetic, to_planar
from photoplan.core.planning_params import AreaParameters, Waypoint, mean_altitude

logger = logging.getLogger("PHOTOPLAN.AreaPlanner")

PointXY = Tuple[float, float]

SCANLINE_TOLERANCE = 1e-6


def rotate_points(points: Sequence[PointXY], angle_rad: float) -> List[PointXY]:
    """Rotate points about the origin by angle_rad (counter-clockwise)."""
    if not points:
        return []
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    pts = np.asarray(points, dtype=float)
    xs = pts[:, 0] * c - pts[:, 1] * s
    ys = pts[:, 0] * s + pts[:, 1] * c
    return list(zip(xs.tolist(), ys.tolist()))


def get_polygon_bounds(polygon: Sequence[PointXY]) -> Tuple[float, float, float, float]:
    """Get bounding box of polygon as (min_x, max_x, min_y, max_y)."""
    poly_array = np.asarray(polygon, dtype=float)
    min_x, min_y = poly_array.min(axis=0)
    max_x, max_y = poly_array.max(axis=0)
    return float(min_x), float(max_x), float(min_y), float(max_y)


def scanline_intersections(polygon: Sequence[PointXY], y: float) -> List[float]:
    """X coordinates where the horizontal line at y crosses the polygon edges.

    Half-open rule on the edge's y range so a vertex lying on the line is
    counted once.
    """
    xs = []
    n = len(polygon)
    for i in range(n):
        ax, ay = polygon[i]
        bx, by = polygon[(i + 1) % n]
        if (ay <= y < by) or (by <= y < ay):
            t = (y - ay) / (by - ay)
            xs.append(ax + t * (bx - ax))
    xs.sort()
    return xs


def scan_segments(polygon: Sequence[PointXY], spacing: float) -> List[Tuple[float, List[Tuple[float, float]]]]:
    """Sweep a (rotated) polygon with horizontal lines.

    Returns: [(y, [(x_start, x_end), ...]), ...] for every line that crossed
    the polygon, bottom line first. An odd crossing count means a tangency;
    the trailing unpaired crossing is dropped.
    """
    _, _, min_y, max_y = get_polygon_bounds(polygon)
    lines = []
    i = 0
    y = min_y
    while y <= max_y + SCANLINE_TOLERANCE:
        xs = scanline_intersections(polygon, y)
        segments = [(xs[j], xs[j + 1]) for j in range(0, len(xs) - 1, 2)]
        if segments:
            lines.append((y, segments))
        i += 1
        y = min_y + i * spacing
    return lines


def sample_segment(x0: float, x1: float, y: float, spacing: float) -> List[PointXY]:
    """Uniform samples from x0 to x1 (both included), at most `spacing` apart."""
    length = x1 - x0
    steps = max(1, int(math.ceil(length / spacing - 1e-9)))
    return [(x0 + length * k / steps, y) for k in range(steps + 1)]


def group_by_scanline(points: Sequence[PointXY], tolerance: float) -> List[List[PointXY]]:
    """Cluster points onto the nearest unique y line, in order of first appearance."""
    line_ys: List[float] = []
    groups: List[List[PointXY]] = []
    for x, y in points:
        best = -1
        best_dist = tolerance
        for idx, ly in enumerate(line_ys):
            d = abs(ly - y)
            if d <= best_dist:
                best, best_dist = idx, d
        if best < 0:
            line_ys.append(y)
            groups.append([(x, y)])
        else:
            groups[best].append((x, y))
    for group in groups:
        group.sort(key=lambda p: p[0])
    return groups


def snake_order(lines: Sequence[Sequence[PointXY]]) -> List[PointXY]:
    """Flatten lines, reversing every second one (boustrophedon)."""
    path: List[PointXY] = []
    for i, line in enumerate(lines):
        if i % 2 == 1:
            path.extend(reversed(line))
        else:
            path.extend(line)
    return path


def boustrophedon_path(polygon_xy: Sequence[PointXY], heading_deg: float, strip_spacing: float,
                       along_spacing: float = 0.0) -> List[PointXY]:
    """Planar lawnmower path over polygon_xy.

    With along_spacing > 0 every segment is subdivided (dense variant),
    otherwise only segment endpoints are emitted (coarse variant).
    """
    heading_rad = math.radians(heading_deg)
    rotated = rotate_points(polygon_xy, -heading_rad)
    lines = scan_segments(rotated, strip_spacing)

    if along_spacing > 0.0:
        samples: List[PointXY] = []
        for y, segments in lines:
            for x0, x1 in segments:
                samples.extend(sample_segment(x0, x1, y, along_spacing))
        tolerance = strip_spacing * 0.001 + 0.0001
        ordered_lines = group_by_scanline(samples, tolerance)
    else:
        ordered_lines = []
        for y, segments in lines:
            line_points = []
            for x0, x1 in segments:
                line_points.append((x0, y))
                line_points.append((x1, y))
            ordered_lines.append(line_points)

    logger.debug(f"Generated {len(ordered_lines)} survey lines")
    return rotate_points(snake_order(ordered_lines), heading_rad)


def plan_area_mission(params: AreaParameters, camera: CameraModel) -> List[Waypoint]:
    """Generate survey grid waypoints for a polygon.

    Returns an empty list when the polygon is missing or has fewer than 3 vertices.
    """
    reason = params.validation_error()
    if reason:
        logger.warning(f"plan_area_mission: {reason}")
        return []

    polygon = params.polygon
    avg_ground_alt = mean_altitude(polygon)

    lat0, lon0 = polygon[0].latitude, polygon[0].longitude
    polygon_xy = [to_planar(lat0, lon0, p.latitude, p.longitude) for p in polygon]

    altitude_m, gsd_m = resolve_altitude_and_gsd(
        camera, params.altitude_m, params.gsd_m, params.default_altitude_m)

    front_overlap = params.front_overlap / 100.0
    side_overlap = params.side_overlap / 100.0

    image_ground_width = gsd_m * float(camera.image_width_px)
    strip_spacing = overlap_spacing(image_ground_width, side_overlap)
    if strip_spacing <= 0.0:
        logger.warning(f"plan_area_mission: non-positive strip spacing {strip_spacing}")
        return []

    along_spacing = 0.0
    if params.along_track_sampling:
        image_ground_height = gsd_m * float(camera.image_height_px)
        along_spacing = overlap_spacing(image_ground_height, front_overlap)

    logger.debug(f"Area: altitude={altitude_m:.2f} m, gsd={gsd_m:.4f} m/px, "
                 f"strip spacing={strip_spacing:.2f} m, along spacing={along_spacing:.2f} m")

    path_xy = boustrophedon_path(polygon_xy, params.heading, strip_spacing, along_spacing)

    if params.along_track_sampling:
        final_alt = altitude_m
    else:
        final_alt = altitude_m + avg_ground_alt

    waypoints = []
    for x, y in path_xy:
        lat, lon = to_geodetic(lat0, lon0, x, y)
        waypoints.append(Waypoint(lat, lon, final_alt))

    logger.info(f"Area mission planned: {len(waypoints)} waypoints")
    return waypoints
