# core/spiral_planner.py
"""
Concentric ring (spiral) coverage of a polygon.

Rings are produced by repeatedly insetting the polygon by the ring spacing.
The inset is an edge-offset heuristic, not a straight skeleton:

  1. every edge is shifted along its unit normal, signed toward the centroid
  2. new vertices are intersections of consecutive shifted edges
  3. parallel / nearly collinear neighbours fall back to the angle bisector,
     and a degenerate bisector falls back to a single edge normal

Stitching policy: each ring is reduced to 5 key points, every second ring is
flown in reverse (snake), and each ring starts at the key point nearest to the
previous ring's end. A near-closure point is appended when a ring's start and
end are far apart.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from photoplan.core.camera_model import (CameraModel, overlap_spacing, resolve_altitude_and_gsd,
                                         ring_spacing, swath_width)
from photoplan.core.geo_projection import to_geodetic, to_planar
from photoplan.core.planning_params import SpiralDirection, SpiralParameters, Waypoint, mean_altitude

logger = logging.getLogger("PHOTOPLAN.SpiralPlanner")

PointXY = Tuple[float, float]

MAX_RINGS = 300
POINTS_PER_RING = 5
PARALLEL_EPS = 1e-12
COLLINEAR_EPS = 1e-6
DEGENERATE_LEN = 1e-6
DUPLICATE_EPS = 1e-6


def _sub(a: PointXY, b: PointXY) -> PointXY:
    return a[0] - b[0], a[1] - b[1]


def _norm(v: PointXY) -> float:
    return math.hypot(v[0], v[1])


def _centroid(polygon: Sequence[PointXY]) -> PointXY:
    pts = np.asarray(polygon, dtype=float)
    cx, cy = pts.mean(axis=0)
    return float(cx), float(cy)


def signed_area(polygon: Sequence[PointXY]) -> float:
    """Shoelace area; positive for counter-clockwise vertex order."""
    n = len(polygon)
    total = 0.0
    for i in range(n):
        x1, y1 = polygon[i]
        x2, y2 = polygon[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total * 0.5


def bounding_box_area(polygon: Sequence[PointXY]) -> float:
    pts = np.asarray(polygon, dtype=float)
    width, height = pts.max(axis=0) - pts.min(axis=0)
    return abs(float(width) * float(height))


def intersect_lines(p1: PointXY, p2: PointXY, p3: PointXY, p4: PointXY) -> Optional[PointXY]:
    """Intersection of the infinite lines p1->p2 and p3->p4, None when parallel."""
    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPS:
        return None

    a = x1 * y2 - y1 * x2
    b = x3 * y4 - y3 * x4
    xi = (a * (x3 - x4) - (x1 - x2) * b) / denom
    yi = (a * (y3 - y4) - (y1 - y2) * b) / denom
    return xi, yi


def _inward_normal(a: PointXY, b: PointXY, centroid: PointXY) -> Optional[PointXY]:
    """Unit normal of edge a->b, signed to point toward the centroid."""
    dx, dy = _sub(b, a)
    length = math.hypot(dx, dy)
    if length <= 1e-9:
        return None
    nx, ny = -dy / length, dx / length
    mid = ((a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5)
    dot = (centroid[0] - mid[0]) * nx + (centroid[1] - mid[1]) * ny
    sign = 1.0 if dot > 0 else -1.0
    return nx * sign, ny * sign


def _bisector_vertex(prev: PointXY, cur: PointXY, nxt: PointXY, offset: float,
                     centroid: PointXY) -> PointXY:
    """Move a vertex along its angle bisector, or along an edge normal when the
    bisector itself is degenerate."""
    v1 = _sub(prev, cur)
    v2 = _sub(nxt, cur)
    l1, l2 = _norm(v1), _norm(v2)
    if l1 < DEGENERATE_LEN or l2 < DEGENERATE_LEN:
        return cur

    nv1 = (v1[0] / l1, v1[1] / l1)
    nv2 = (v2[0] / l2, v2[1] / l2)
    bis = (nv1[0] + nv2[0], nv1[1] + nv2[1])
    lb = _norm(bis)
    if lb < DEGENERATE_LEN:
        # straight vertex: shift along the outgoing edge normal
        normal = _inward_normal(cur, nxt, centroid)
        if normal is None:
            return cur
        return cur[0] + normal[0] * offset, cur[1] + normal[1] * offset

    bis = (bis[0] / lb, bis[1] / lb)
    cos_half = nv1[0] * bis[0] + nv1[1] * bis[1]
    move = offset / max(1e-6, cos_half)
    return cur[0] + bis[0] * move, cur[1] + bis[1] * move


def offset_polygon_inward(polygon: Sequence[PointXY], offset: float) -> List[PointXY]:
    """Inset a polygon by `offset` meters.

    Returns an empty list when fewer than 3 distinct vertices survive.
    """
    n = len(polygon)
    if n < 3:
        return []

    centroid = _centroid(polygon)

    shifted: List[Tuple[PointXY, PointXY]] = []
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        normal = _inward_normal(a, b, centroid)
        if normal is None:
            shifted.append((a, b))
            continue
        sx, sy = normal[0] * offset, normal[1] * offset
        shifted.append(((a[0] + sx, a[1] + sy), (b[0] + sx, b[1] + sy)))

    out: List[PointXY] = []
    for i in range(n):
        prev = polygon[(i + n - 1) % n]
        cur = polygon[i]
        nxt = polygon[(i + 1) % n]

        e1 = _sub(cur, prev)
        e2 = _sub(nxt, cur)
        l1, l2 = _norm(e1), _norm(e2)
        point = None
        if l1 > DEGENERATE_LEN and l2 > DEGENERATE_LEN:
            cross = (e1[0] * e2[1] - e1[1] * e2[0]) / (l1 * l2)
            if abs(cross) >= COLLINEAR_EPS:
                l_prev = shifted[(i + n - 1) % n]
                l_cur = shifted[i]
                point = intersect_lines(l_prev[0], l_prev[1], l_cur[0], l_cur[1])
        if point is None:
            point = _bisector_vertex(prev, cur, nxt, offset, centroid)
        out.append(point)

    clean: List[PointXY] = []
    for p in out:
        if not clean or abs(clean[-1][0] - p[0]) > DUPLICATE_EPS or abs(clean[-1][1] - p[1]) > DUPLICATE_EPS:
            clean.append(p)
    if len(clean) >= 3:
        return clean
    return []


def build_rings(polygon_xy: Sequence[PointXY], spacing: float, max_rings: int = MAX_RINGS) -> List[List[PointXY]]:
    """Concentric rings, outermost (the polygon itself) first."""
    min_area = max(1.0, spacing * spacing)
    if len(polygon_xy) < 3 or bounding_box_area(polygon_xy) < min_area:
        return []

    rings: List[List[PointXY]] = []
    current = list(polygon_xy)
    while len(current) >= 3 and len(rings) < max_rings:
        rings.append(current)
        nxt = offset_polygon_inward(current, spacing)
        if len(nxt) < 3:
            break

        area_current = bounding_box_area(current)
        area_next = bounding_box_area(nxt)
        if area_next < min_area:
            break
        if area_next >= area_current or math.isclose(area_next, area_current):
            break
        # an inset that turned inside out has reversed its winding
        if signed_area(current) * signed_area(nxt) <= 0.0:
            break
        current = nxt
    return rings


def ring_key_points(ring: Sequence[PointXY]) -> List[PointXY]:
    """Reduce a ring to 5 representative points; small rings keep every vertex."""
    pts = list(ring)
    if len(pts) > 1 and abs(pts[0][0] - pts[-1][0]) + abs(pts[0][1] - pts[-1][1]) < DUPLICATE_EPS:
        pts.pop()
    total = len(pts)
    if total < POINTS_PER_RING:
        return pts
    indices = [0, total // 5, 2 * total // 5, 3 * total // 5, total - 1]
    return [pts[i] for i in indices]


def _rotate_to_nearest(points: List[PointXY], target: PointXY) -> List[PointXY]:
    best_idx = 0
    best_dist2 = float('inf')
    for i, (x, y) in enumerate(points):
        d2 = (x - target[0]) ** 2 + (y - target[1]) ** 2
        if d2 < best_dist2:
            best_dist2, best_idx = d2, i
    return points[best_idx:] + points[:best_idx]


def closure_point(start: PointXY, end: PointXY, along_spacing: float) -> PointXY:
    """Point on start->end at along_spacing from start, or the midpoint when closer."""
    dx, dy = _sub(end, start)
    dist = math.hypot(dx, dy)
    if dist <= along_spacing:
        return start[0] + dx * 0.5, start[1] + dy * 0.5
    return start[0] + dx / dist * along_spacing, start[1] + dy / dist * along_spacing


def stitch_rings(rings: Sequence[Sequence[PointXY]], spacing: float, along_spacing: float) -> List[PointXY]:
    """Join ordered rings into one continuous planar path."""
    path: List[PointXY] = []
    for ri, ring in enumerate(rings):
        pts = ring_key_points(ring)
        if not pts:
            continue
        if ri % 2 == 1:
            pts.reverse()
        if path:
            pts = _rotate_to_nearest(pts, path[-1])

        path.extend(pts)
        start, end = pts[0], pts[-1]
        if len(pts) > 1 and math.hypot(end[0] - start[0], end[1] - start[1]) > spacing * 0.5:
            path.append(closure_point(start, end, along_spacing))
    return path


def plan_spiral_mission(params: SpiralParameters, camera: CameraModel) -> List[Waypoint]:
    reason = params.validation_error()
    if reason:
        logger.warning(f"plan_spiral_mission: {reason}")
        return []

    polygon = params.polygon
    avg_ground_alt = mean_altitude(polygon)
    lat0, lon0 = polygon[0].latitude, polygon[0].longitude
    polygon_xy = [to_planar(lat0, lon0, p.latitude, p.longitude) for p in polygon]

    altitude_m, gsd_m = resolve_altitude_and_gsd(
        camera, params.altitude_m, params.gsd_m, params.default_altitude_m)

    swath = swath_width(camera, altitude_m, gsd_m)
    spacing = ring_spacing(swath, params.side_overlap / 100.0)
    along_spacing = overlap_spacing(gsd_m * float(camera.image_height_px), params.front_overlap / 100.0)
    logger.debug(f"Spiral: ring spacing={spacing:.2f} m, along spacing={along_spacing:.2f} m")

    rings = build_rings(polygon_xy, spacing)
    if not rings:
        logger.warning("plan_spiral_mission: no rings generated")
        return []

    if params.direction == SpiralDirection.OUTWARD:
        rings = list(reversed(rings))

    path_xy = stitch_rings(rings, spacing, along_spacing)
    logger.debug(f"Spiral: {len(rings)} rings, {len(path_xy)} waypoints")

    final_alt = avg_ground_alt + altitude_m
    waypoints = []
    for x, y in path_xy:
        lat, lon = to_geodetic(lat0, lon0, x, y)
        waypoints.append(Waypoint(lat, lon, final_alt))

    logger.info(f"Spiral mission planned ({params.direction.value}): {len(waypoints)} waypoints")
    return waypoints
