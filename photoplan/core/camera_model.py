# core/camera_model.py

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple

import yaml

logger = logging.getLogger("PHOTOPLAN.CameraModel")

CAMERA_FIELDS = (
    'focal_length_mm',
    'sensor_width_mm',
    'sensor_height_mm',
    'image_width_px',
    'image_height_px',
)

# Documented fallback multipliers for degenerate spacing
MIN_SPACING_M = 0.1
SPACING_FALLBACK_RATIO = 0.2
SWATH_FALLBACK_RATIO = 0.5


class CameraConfigError(ValueError):
    """Raised when a camera record cannot be turned into a CameraModel."""


@dataclass(frozen=True)
class CameraModel:
    """Pinhole camera intrinsics used to derive ground footprint and GSD."""
    focal_length_mm: float = 35.0
    sensor_width_mm: float = 36.0
    sensor_height_mm: float = 24.0
    image_width_px: int = 4000
    image_height_px: int = 3000

    def __post_init__(self):
        for name in CAMERA_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise CameraConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise CameraConfigError(f"{name} must be positive, got {value!r}")

    def ground_resolution_at_altitude(self, altitude_m: float) -> Tuple[float, float]:
        """Ground resolution (m/pixel) along x and y at flight altitude H.

        GSD_x = (H * sensor_width_mm) / (focal_length_mm * image_width_px)
        """
        res_x = (altitude_m * self.sensor_width_mm) / (self.focal_length_mm * float(self.image_width_px))
        res_y = (altitude_m * self.sensor_height_mm) / (self.focal_length_mm * float(self.image_height_px))
        return res_x, res_y

    def altitude_for_gsd(self, gsd_m: float) -> float:
        """Flight altitude that yields the given GSD along the image width."""
        return gsd_m * self.focal_length_mm * float(self.image_width_px) / self.sensor_width_mm

    def to_config(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_config(cls, config: Optional[Dict]) -> 'CameraModel':
        """Build a camera from a config record; missing keys keep their defaults.

        The model is built in one step, so a bad record never yields a
        partially-populated camera. Raises CameraConfigError instead.
        """
        if config is None:
            return cls()
        if not isinstance(config, dict):
            raise CameraConfigError(f"Camera config must be a mapping, got {type(config).__name__}")

        values = {}
        for name in CAMERA_FIELDS:
            if name not in config:
                continue
            raw = config[name]
            try:
                if name.endswith('_px'):
                    values[name] = int(raw)
                else:
                    values[name] = float(raw)
            except (TypeError, ValueError) as e:
                raise CameraConfigError(f"Invalid value for {name}: {raw!r}") from e
        return cls(**values)

    @classmethod
    def from_file(cls, filepath: str) -> 'CameraModel':
        """Load a camera record from a JSON or YAML file."""
        try:
            with open(filepath, 'r') as f:
                config = yaml.safe_load(f)
        except OSError as e:
            raise CameraConfigError(f"Camera file not readable: {filepath}: {e}") from e
        except yaml.YAMLError as e:
            raise CameraConfigError(f"Camera file not parseable: {filepath}: {e}") from e

        camera = cls.from_config(config)
        logger.info(f"Loaded camera from file: {filepath}")
        return camera


def resolve_altitude_and_gsd(camera: CameraModel, altitude_m: float = 0.0, gsd_m: float = 0.0,
                             default_altitude_m: float = 120.0) -> Tuple[float, float]:
    """Resolve flight altitude and GSD with the shared precedence rules.

    1. explicit altitude_m > 0
    2. altitude derived from gsd_m > 0
    3. default_altitude_m

    If no GSD was given it is derived from the resolved altitude (x axis).

    Returns: (altitude_m, gsd_m)
    """
    if altitude_m is None or altitude_m <= 0.0:
        if gsd_m is not None and gsd_m > 0.0:
            altitude_m = camera.altitude_for_gsd(gsd_m)
        else:
            altitude_m = default_altitude_m

    if gsd_m is None or gsd_m <= 0.0:
        gsd_m, _ = camera.ground_resolution_at_altitude(altitude_m)

    return altitude_m, gsd_m


def overlap_spacing(image_ground_length: float, overlap: float) -> float:
    """Spacing between exposures/lines for a fractional overlap.

    spacing = footprint × (1 - overlap); falls back to footprint × 0.2 when the
    overlap leaves less than 0.1 m.
    """
    spacing = image_ground_length * (1.0 - overlap)
    if spacing <= MIN_SPACING_M:
        spacing = image_ground_length * SPACING_FALLBACK_RATIO
    return spacing


def swath_width(camera: CameraModel, altitude_m: float, gsd_m: float) -> float:
    """Ground footprint width of one frame: (sensor_width / focal_length) × altitude."""
    width = (camera.sensor_width_mm / camera.focal_length_mm) * altitude_m
    if width <= 0.0:
        width = gsd_m * camera.image_width_px
    return width


def ring_spacing(swath: float, overlap: float) -> float:
    """Lateral step between orbit/spiral rings; half a swath when overlap leaves nothing."""
    step = swath * (1.0 - overlap)
    if step <= 0.0:
        step = swath * SWATH_FALLBACK_RATIO
    return step
