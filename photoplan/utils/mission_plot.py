# utils/mission_plot.py
"""
Render a planned mission to an image file.

Waypoints are drawn in local meters relative to the first waypoint, with the
optional input area (polygon or polyline) as an outline.
"""

import logging
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon

from photoplan.core.geo_projection import to_planar
from photoplan.core.planning_params import GeodeticPoint, Waypoint

logger = logging.getLogger("PHOTOPLAN.MissionPlot")


def plot_mission(waypoints: Sequence[Waypoint], filename: str,
                 area: Optional[Sequence[GeodeticPoint]] = None, title: str = "Planned Mission") -> bool:
    """Save a top-down plot of the flight path. Returns False when there is nothing to draw."""
    if not waypoints:
        logger.warning("plot_mission: no waypoints to plot")
        return False

    ref_lat, ref_lon = waypoints[0].latitude, waypoints[0].longitude
    path_m = [to_planar(ref_lat, ref_lon, wp.latitude, wp.longitude) for wp in waypoints]

    fig, ax = plt.subplots(figsize=(12, 10))
    try:
        if area:
            area_m = [to_planar(ref_lat, ref_lon, p.latitude, p.longitude) for p in area]
            if len(area_m) >= 3:
                ax.add_patch(MplPolygon(area_m, alpha=0.3, facecolor='lightblue',
                                        edgecolor='blue', linewidth=2))
            else:
                xs, ys = zip(*area_m)
                ax.plot(xs, ys, 'b--', linewidth=2)

        xs, ys = zip(*path_m)
        ax.plot(xs, ys, 'r-', linewidth=1.5, alpha=0.7, label='Flight Path')
        ax.plot(xs, ys, 'ro', markersize=4)
        ax.plot(xs[0], ys[0], 'go', markersize=8, label='Start')

        for i, (x, y) in enumerate(path_m):
            if i % 2 == 0:  # every other label
                ax.annotate(str(i + 1), (x, y), fontsize=8, ha='right')

        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('East (m)', fontsize=10)
        ax.set_ylabel('North (m)', fontsize=10)
        ax.legend()
        fig.tight_layout()
        fig.savefig(filename)
    finally:
        plt.close(fig)

    logger.info(f"Mission plot saved to {filename}")
    return True
