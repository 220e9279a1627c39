# core/mission_export.py

import json
import logging
from typing import Dict, List, Optional, Sequence

from pymavlink import mavutil

from photoplan.core.planning_params import Waypoint

logger = logging.getLogger("PHOTOPLAN.MissionExport")

WPL_HEADER = "QGC WPL 110"


def save_waypoints_file(waypoints: Sequence[Waypoint], filename: str) -> int:
    """
    Save waypoints in Mission Planner .waypoints format.

    Format: QGC WPL 110
    index current_wp coord_frame command p1 p2 p3 p4 lat lon alt autocontinue

    Returns: number of waypoint rows written
    """
    frame = mavutil.mavlink.MAV_FRAME_GLOBAL
    command = mavutil.mavlink.MAV_CMD_NAV_WAYPOINT

    with open(filename, 'w') as f:
        f.write(WPL_HEADER + "\n")
        for i, wp in enumerate(waypoints):
            current = 1 if i == 0 else 0
            f.write(f"{i}\t{current}\t{frame}\t{command}\t0\t0\t0\t0\t"
                    f"{wp.latitude:.8f}\t{wp.longitude:.8f}\t{wp.altitude:.2f}\t1\n")

    logger.info(f"Waypoints saved to: {filename} ({len(waypoints)} waypoints)")
    return len(waypoints)


def load_waypoints_file(filename: str) -> List[Waypoint]:
    """Parse a QGC WPL 110 file back into waypoints. Malformed rows are skipped."""
    with open(filename, 'r') as f:
        lines = f.readlines()

    if not lines or not lines[0].strip().startswith("QGC WPL"):
        raise ValueError(f"Not a QGC WPL waypoint file: {filename}")

    waypoints = []
    for line in lines[1:]:
        line = line.strip()
        if not line:
            continue
        parts = line.split('\t')
        if len(parts) < 12:
            logger.warning(f"Skipping malformed waypoint row: {line}")
            continue
        try:
            waypoints.append(Waypoint(float(parts[8]), float(parts[9]), float(parts[10])))
        except ValueError:
            logger.warning(f"Skipping malformed waypoint row: {line}")
            continue
    return waypoints


def save_mission_json(filepath: str, pattern: str, waypoints: Sequence[Waypoint],
                      summary: Optional[Dict] = None) -> None:
    """Save a planned mission (pattern, waypoints, summary) as JSON."""
    mission_dict = {
        'pattern': pattern,
        'waypoints': [wp.to_dict() for wp in waypoints],
        'summary': summary or {},
    }
    with open(filepath, 'w') as f:
        json.dump(mission_dict, f, indent=2)
    logger.info(f"Mission saved to {filepath}")


def load_mission_json(filepath: str) -> Dict:
    """Load a mission saved by save_mission_json(); waypoints come back as Waypoint objects."""
    with open(filepath, 'r') as f:
        mission_dict = json.load(f)

    return {
        'pattern': mission_dict.get('pattern'),
        'waypoints': [Waypoint.from_dict(wp) for wp in mission_dict.get('waypoints', [])],
        'summary': mission_dict.get('summary', {}),
    }
