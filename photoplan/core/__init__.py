from photoplan.core.area_planner import plan_area_mission
from photoplan.core.camera_model import CameraConfigError, CameraModel
from photoplan.core.mission_pattern_controller import MissionPatternController
from photoplan.core.planning_params import (AreaParameters, GeodeticPoint, PatternType, PoiParameters,
                                            SpiralDirection, SpiralParameters, StripParameters, Waypoint)
from photoplan.core.poi_planner import plan_poi_mission
from photoplan.core.spiral_planner import plan_spiral_mission
from photoplan.core.strip_planner import plan_strip_mission

__all__ = [
    'AreaParameters',
    'CameraConfigError',
    'CameraModel',
    'GeodeticPoint',
    'MissionPatternController',
    'PatternType',
    'PoiParameters',
    'SpiralDirection',
    'SpiralParameters',
    'StripParameters',
    'Waypoint',
    'plan_area_mission',
    'plan_poi_mission',
    'plan_spiral_mission',
    'plan_strip_mission',
]
