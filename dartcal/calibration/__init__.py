"""
Calibration module - point collection, homography, and rectification.
"""
from .collector import CalibrationCollector, ROLE_ORDER, display_to_image
from .homography import HomographyEstimator, solve_homography
from .rectifier import Rectifier
from .session import (
    CalibrationSession,
    SessionState,
    Empty,
    Collecting,
    Calibrated,
)

__all__ = [
    "CalibrationCollector",
    "ROLE_ORDER",
    "display_to_image",
    "HomographyEstimator",
    "solve_homography",
    "Rectifier",
    "CalibrationSession",
    "SessionState",
    "Empty",
    "Collecting",
    "Calibrated",
]
