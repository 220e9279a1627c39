# core/planning_params.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple


class PatternType(Enum):
    AREA = "area"
    STRIP = "strip"
    POI = "poi"
    SPIRAL = "spiral"


class SpiralDirection(Enum):
    INWARD = "inward"
    OUTWARD = "outward"

    @classmethod
    def parse(cls, value) -> 'SpiralDirection':
        """Accept inward/outward as well as contraction/expansion."""
        if isinstance(value, cls):
            return value
        name = str(value or "inward").strip().lower()
        if name in ("outward", "expansion"):
            return cls.OUTWARD
        if name in ("inward", "contraction"):
            return cls.INWARD
        raise ValueError(f"Unknown spiral direction: {value!r}")


@dataclass(frozen=True)
class GeodeticPoint:
    """Input vertex. altitude is None when the caller did not provide one."""
    latitude: float
    longitude: float
    altitude: Optional[float] = None

    @classmethod
    def from_dict(cls, data) -> 'GeodeticPoint':
        """Normalize {latitude|lat, longitude|lon, altitude|alt} mappings or (lat, lon[, alt]) tuples."""
        if isinstance(data, GeodeticPoint):
            return data
        if isinstance(data, dict):
            lat = data.get('latitude', data.get('lat', 0.0))
            lon = data.get('longitude', data.get('lon', 0.0))
            alt = data.get('altitude', data.get('alt'))
        else:
            values = list(data)
            if len(values) < 2:
                raise ValueError(f"Geodetic point needs latitude and longitude: {data!r}")
            lat, lon = values[0], values[1]
            alt = values[2] if len(values) > 2 else None
        return cls(float(lat), float(lon), None if alt is None else float(alt))

    @property
    def has_altitude(self) -> bool:
        return self.altitude is not None


@dataclass(frozen=True)
class Waypoint:
    """Single output waypoint. Position in the mission list is the flight order."""
    latitude: float
    longitude: float
    altitude: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'latitude': self.latitude,
            'longitude': self.longitude,
            'altitude': self.altitude,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Waypoint':
        point = GeodeticPoint.from_dict(data)
        return cls(point.latitude, point.longitude, point.altitude or 0.0)


def _points(raw) -> Optional[Tuple[GeodeticPoint, ...]]:
    if raw is None:
        return None
    return tuple(GeodeticPoint.from_dict(p) for p in raw)


def _float(data: Dict, key: str, default: float) -> float:
    value = data.get(key)
    if value is None:
        return default
    return float(value)


def mean_altitude(points: Sequence[GeodeticPoint], include_zero: bool = False) -> float:
    """Mean of the provided vertex altitudes.

    Zero altitudes are treated as "not set" unless include_zero is True.
    """
    altitudes = [p.altitude for p in points
                 if p.altitude is not None and (include_zero or p.altitude != 0.0)]
    if not altitudes:
        return 0.0
    return sum(altitudes) / len(altitudes)


@dataclass(frozen=True)
class AreaParameters:
    polygon: Optional[Tuple[GeodeticPoint, ...]] = None
    front_overlap: float = 70.0   # %
    side_overlap: float = 60.0    # %
    heading: float = 0.0          # degrees
    altitude_m: float = 0.0
    gsd_m: float = 0.0
    default_altitude_m: float = 120.0
    along_track_sampling: bool = False

    @classmethod
    def from_dict(cls, data: Dict) -> 'AreaParameters':
        return cls(
            polygon=_points(data.get('polygon')),
            front_overlap=_float(data, 'front_overlap', 70.0),
            side_overlap=_float(data, 'side_overlap', 60.0),
            heading=_float(data, 'heading', 0.0),
            altitude_m=_float(data, 'altitude_m', 0.0),
            gsd_m=_float(data, 'gsd_m', 0.0),
            default_altitude_m=_float(data, 'default_altitude_m', 120.0),
            along_track_sampling=bool(data.get('along_track_sampling', False)),
        )

    def validation_error(self) -> Optional[str]:
        if not self.polygon:
            return "missing polygon parameter"
        if len(self.polygon) < 3:
            return f"polygon has too few points ({len(self.polygon)} < 3)"
        return None


@dataclass(frozen=True)
class StripParameters:
    polyline: Optional[Tuple[GeodeticPoint, ...]] = None
    front_overlap: float = 70.0   # % (corridor waypoints are vertex-driven)
    turn_threshold_deg: float = 5.0
    altitude_m: float = 0.0
    gsd_m: float = 0.0
    default_altitude_m: float = 120.0

    @classmethod
    def from_dict(cls, data: Dict) -> 'StripParameters':
        return cls(
            polyline=_points(data.get('polyline')),
            front_overlap=_float(data, 'front_overlap', 70.0),
            turn_threshold_deg=_float(data, 'turn_threshold_deg', 5.0),
            altitude_m=_float(data, 'altitude_m', 0.0),
            gsd_m=_float(data, 'gsd_m', 0.0),
            default_altitude_m=_float(data, 'default_altitude_m', 120.0),
        )

    def validation_error(self) -> Optional[str]:
        if not self.polyline:
            return "missing polyline parameter"
        if len(self.polyline) < 2:
            return f"polyline has too few points ({len(self.polyline)} < 2)"
        return None


@dataclass(frozen=True)
class PoiParameters:
    poi: Optional[GeodeticPoint] = None
    radius: Optional[float] = None
    front_overlap: float = 70.0
    side_overlap: float = 70.0
    altitude_m: float = 0.0
    gsd_m: float = 0.0
    default_altitude_m: float = 120.0

    @classmethod
    def from_dict(cls, data: Dict) -> 'PoiParameters':
        poi = data.get('poi')
        radius = data.get('radius')
        return cls(
            poi=None if poi is None else GeodeticPoint.from_dict(poi),
            radius=None if radius is None else float(radius),
            front_overlap=_float(data, 'front_overlap', 70.0),
            side_overlap=_float(data, 'side_overlap', 70.0),
            altitude_m=_float(data, 'altitude_m', 0.0),
            gsd_m=_float(data, 'gsd_m', 0.0),
            default_altitude_m=_float(data, 'default_altitude_m', 120.0),
        )

    def validation_error(self) -> Optional[str]:
        if self.poi is None:
            return "missing poi parameter"
        if self.radius is None or self.radius <= 0.0:
            return f"radius must be positive, got {self.radius}"
        return None


@dataclass(frozen=True)
class SpiralParameters:
    polygon: Optional[Tuple[GeodeticPoint, ...]] = None
    gsd_m: float = 0.05
    side_overlap: float = 70.0
    front_overlap: float = 70.0
    direction: SpiralDirection = SpiralDirection.INWARD
    altitude_m: float = 0.0
    default_altitude_m: float = 120.0

    @classmethod
    def from_dict(cls, data: Dict) -> 'SpiralParameters':
        direction = data.get('spiral_direction', data.get('spiral_type', 'inward'))
        return cls(
            polygon=_points(data.get('polygon')),
            gsd_m=_float(data, 'gsd_m', 0.05),
            side_overlap=_float(data, 'side_overlap', 70.0),
            front_overlap=_float(data, 'front_overlap', 70.0),
            direction=SpiralDirection.parse(direction),
            altitude_m=_float(data, 'altitude_m', 0.0),
            default_altitude_m=_float(data, 'default_altitude_m', 120.0),
        )

    def validation_error(self) -> Optional[str]:
        if not self.polygon:
            return "missing polygon parameter"
        if len(self.polygon) < 3:
            return f"polygon has too few points ({len(self.polygon)} < 3)"
        return None


PARAMETER_TYPES = {
    PatternType.AREA: AreaParameters,
    PatternType.STRIP: StripParameters,
    PatternType.POI: PoiParameters,
    PatternType.SPIRAL: SpiralParameters,
}


def waypoints_to_dicts(waypoints: List[Waypoint]) -> List[Dict[str, float]]:
    return [wp.to_dict() for wp in waypoints]
