"""
dartcal - four-point dartboard calibration, rectification and scoring.
"""
from .core import BoardConfig, Config, PhysicalSpec, RenderSpec
from .calibration import CalibrationSession

__all__ = [
    "BoardConfig",
    "Config",
    "PhysicalSpec",
    "RenderSpec",
    "CalibrationSession",
]
