# core/mission_pattern_controller.py

import logging
from typing import Dict, List, Optional

from PySide6.QtCore import QObject, Signal, Property

from photoplan.core.area_planner import plan_area_mission
from photoplan.core.camera_model import CameraConfigError, CameraModel
from photoplan.core.geo_projection import path_length
from photoplan.core.mission_export import save_mission_json, save_waypoints_file
from photoplan.core.planning_params import PARAMETER_TYPES, PatternType, Waypoint, waypoints_to_dicts
from photoplan.core.poi_planner import plan_poi_mission
from photoplan.core.spiral_planner import plan_spiral_mission
from photoplan.core.strip_planner import plan_strip_mission

PLANNERS = {
    PatternType.AREA: plan_area_mission,
    PatternType.STRIP: plan_strip_mission,
    PatternType.POI: plan_poi_mission,
    PatternType.SPIRAL: plan_spiral_mission,
}


class MissionPatternController(QObject):
    """Runs one of the pattern planners and publishes the result over Qt signals."""

    mission_generated = Signal(str, list, dict)   # pattern, waypoints, summary
    mission_failed = Signal(str, str)             # pattern, reason
    path_positions_changed = Signal()

    def __init__(self, config: Optional[dict] = None):
        super().__init__()
        self.config = config or {}
        self.logger = logging.getLogger("PHOTOPLAN.Controller")
        self._pattern = ""
        self._waypoints: List[Waypoint] = []
        self._summary: Dict = {}
        self.logger.info("Mission pattern controller initialized")

    def _get_path_positions(self) -> list:
        return waypoints_to_dicts(self._waypoints)

    path_positions = Property('QVariantList', _get_path_positions, notify=path_positions_changed)

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._waypoints)

    @property
    def summary(self) -> Dict:
        return dict(self._summary)

    def resolve_camera(self, params: Dict) -> CameraModel:
        """Camera from the request, then from config, then default intrinsics."""
        sources = [
            ("camera_file", params.get("camera_file")),
            ("camera", params.get("camera")),
            ("config camera_file", self.config.get("camera_file")),
            ("config camera", self.config.get("camera")),
        ]
        for label, source in sources:
            if not source:
                continue
            try:
                if isinstance(source, dict):
                    camera = CameraModel.from_config(source)
                else:
                    camera = CameraModel.from_file(str(source))
                self.logger.debug(f"Camera loaded from {label}: {camera}")
                return camera
            except CameraConfigError as e:
                self.logger.warning(f"Invalid camera from {label}, using default intrinsics: {e}")
                return CameraModel()
        return CameraModel()

    def _apply_config_defaults(self, params: Dict) -> Dict:
        merged = dict(params)
        default_alt = (self.config.get("planning") or {}).get("default_altitude_m")
        if default_alt is not None and "default_altitude_m" not in merged:
            merged["default_altitude_m"] = default_alt
        return merged

    def generate_mission(self, pattern: str, params: Optional[Dict] = None) -> List[Waypoint]:
        """Plan a mission for `pattern` (area, strip, poi or spiral).

        Returns the waypoints, an empty list when nothing could be planned.
        """
        params = params or {}
        try:
            pattern_type = PatternType(str(pattern).strip().lower())
        except ValueError:
            return self._fail(str(pattern), f"unknown pattern type: {pattern}")

        self.logger.info(f"Generating {pattern_type.value} mission")
        camera = self.resolve_camera(params)

        try:
            bundle = PARAMETER_TYPES[pattern_type].from_dict(self._apply_config_defaults(params))
        except (TypeError, ValueError) as e:
            return self._fail(pattern_type.value, f"invalid parameters: {e}")

        reason = bundle.validation_error()
        if reason:
            return self._fail(pattern_type.value, reason)

        waypoints = PLANNERS[pattern_type](bundle, camera)
        if not waypoints:
            return self._fail(pattern_type.value, "planner produced no waypoints")

        summary = {
            'pattern': pattern_type.value,
            'waypoints_count': len(waypoints),
            'total_distance_m': path_length((wp.latitude, wp.longitude) for wp in waypoints),
            'camera': camera.to_config(),
        }
        if getattr(bundle, 'altitude_m', 0.0) > 0.0:
            summary['altitude_m'] = bundle.altitude_m

        self._pattern = pattern_type.value
        self._waypoints = list(waypoints)
        self._summary = summary
        self.path_positions_changed.emit()
        self.mission_generated.emit(self._pattern, waypoints_to_dicts(self._waypoints), summary)
        self.logger.info(f"{self._pattern} mission generated: {len(waypoints)} waypoints, "
                         f"{summary['total_distance_m']:.1f} m")
        return list(waypoints)

    def _fail(self, pattern: str, reason: str) -> List[Waypoint]:
        self.logger.warning(f"Mission generation failed ({pattern}): {reason}")
        self.mission_failed.emit(pattern, reason)
        return []

    def clear(self):
        self._pattern = ""
        self._waypoints = []
        self._summary = {}
        self.path_positions_changed.emit()

    def export_waypoints(self, filepath: str) -> bool:
        """Write the last mission as a .waypoints file."""
        if not self._waypoints:
            self.logger.warning("No mission to export")
            return False
        try:
            save_waypoints_file(self._waypoints, filepath)
            return True
        except OSError as e:
            self.logger.error(f"Failed to export waypoints to {filepath}: {e}")
            return False

    def save_mission(self, filepath: str) -> bool:
        """Write the last mission (waypoints and summary) as JSON."""
        if not self._waypoints:
            self.logger.warning("No mission to save")
            return False
        try:
            save_mission_json(filepath, self._pattern, self._waypoints, self._summary)
            return True
        except OSError as e:
            self.logger.error(f"Failed to save mission to {filepath}: {e}")
            return False
