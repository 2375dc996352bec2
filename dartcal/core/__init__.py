"""
Core module - shared data types, errors, and configuration.
"""
from .types import (
    Point,
    SECTOR_SEQUENCE,
    CalibrationRole,
    LabeledPoint,
    PhysicalSpec,
    RenderSpec,
    BoardConfig,
    RingRadii,
    CalibrationData,
    Hit,
    CircleSpec,
    LineSegment,
    OverlayGeometry,
)
from .errors import (
    CalibrationError,
    DegenerateConfiguration,
    IncompleteCalibration,
)
from .config_loader import Config, load_yaml

__all__ = [
    # Types
    "Point",
    "SECTOR_SEQUENCE",
    "CalibrationRole",
    "LabeledPoint",
    "PhysicalSpec",
    "RenderSpec",
    "BoardConfig",
    "RingRadii",
    "CalibrationData",
    "Hit",
    "CircleSpec",
    "LineSegment",
    "OverlayGeometry",
    # Errors
    "CalibrationError",
    "DegenerateConfiguration",
    "IncompleteCalibration",
    # Config
    "Config",
    "load_yaml",
]
