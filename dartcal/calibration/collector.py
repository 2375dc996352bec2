"""
Collection of the four calibration points.
"""
from typing import List, Optional, Tuple
import logging

import numpy as np

from dartcal.core import CalibrationRole, IncompleteCalibration, LabeledPoint

logger = logging.getLogger(__name__)

ROLE_ORDER: Tuple[CalibrationRole, ...] = (
    CalibrationRole.TOP,
    CalibrationRole.RIGHT,
    CalibrationRole.BOTTOM,
    CalibrationRole.LEFT,
)


def display_to_image(
        x: float,
        y: float,
        display_size: Tuple[float, float],
        image_size: Tuple[int, int]
) -> Tuple[float, float]:
    """
    Convert a click position on a scaled display into image pixels.

    Args:
        x, y: Position in display coordinates
        display_size: (width, height) of the display surface
        image_size: (width, height) of the image in pixels

    Returns:
        (x, y) in image pixel coordinates
    """
    display_w, display_h = display_size
    if display_w <= 0 or display_h <= 0:
        raise ValueError("Display size must be positive")

    return (x * image_size[0] / display_w, y * image_size[1] / display_h)


class CalibrationCollector:
    """
    Accumulates the four outer double ring points.

    Points must be marked in order:
    - Top (12 o'clock)
    - Right (3 o'clock)
    - Bottom (6 o'clock)
    - Left (9 o'clock)

    No geometric plausibility checks happen here.
    """

    def __init__(self):
        self._points: List[LabeledPoint] = []

    def reset(self) -> None:
        """Discard all collected points."""
        self._points = []

    def add_point(self, x: float, y: float) -> Tuple[int, bool]:
        """
        Record the next calibration point.

        Ignored once four points are present.

        Returns:
            (count, ready) after the call
        """
        if self.is_ready:
            logger.debug(f"Ignoring point ({x}, {y}): calibration points complete")
            return self.count, True

        role = ROLE_ORDER[len(self._points)]
        self._points.append(LabeledPoint(role=role, x=float(x), y=float(y)))
        logger.debug(f"Point {self.count} ({role.value}) selected: ({x}, {y})")

        return self.count, self.is_ready

    @property
    def count(self) -> int:
        return len(self._points)

    @property
    def is_ready(self) -> bool:
        return len(self._points) == len(ROLE_ORDER)

    @property
    def next_role(self) -> Optional[CalibrationRole]:
        """Role expected from the next click, None when complete."""
        if self.is_ready:
            return None
        return ROLE_ORDER[len(self._points)]

    @property
    def points(self) -> Tuple[LabeledPoint, ...]:
        return tuple(self._points)

    def as_array(self) -> np.ndarray:
        """
        Collected points as a (4, 2) float64 array ordered by role.

        Raises:
            IncompleteCalibration: If fewer than 4 points were collected
        """
        if not self.is_ready:
            raise IncompleteCalibration(
                f"Need 4 calibration points, have {self.count}"
            )

        by_role = {p.role: p.xy for p in self._points}
        return np.array([by_role[role] for role in ROLE_ORDER], dtype=np.float64)
