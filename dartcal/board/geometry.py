"""
Dartboard geometry constants in canonical pixel space.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging

import numpy as np

from dartcal.core import (
    BoardConfig,
    CalibrationRole,
    PhysicalSpec,
    Point,
    RingRadii,
)

logger = logging.getLogger(__name__)


def compute_ring_radii(physical: PhysicalSpec, pixels_per_mm: float) -> RingRadii:
    """
    Convert physical ring radii to whole pixels.

    Values are truncated toward zero, so a boundary never grows past the
    physical ring it represents.

    Args:
        physical: Board dimensions in millimeters
        pixels_per_mm: Scale factor of the canonical image

    Returns:
        RingRadii in pixels
    """
    if pixels_per_mm <= 0:
        raise ValueError("pixels_per_mm must be positive")

    return RingRadii(*(int(r * pixels_per_mm) for r in physical.radii()))


def canonical_anchors(center: Point, radius: float) -> Tuple[Point, ...]:
    """
    Destination points for the four calibration roles.

    Points sit on the outer double ring at 270°, 0°, 90° and 180°
    (image convention, y grows downward).

    Args:
        center: Board center (x, y)
        radius: Outer double ring radius in pixels

    Returns:
        Points ordered Top, Right, Bottom, Left
    """
    cx, cy = center
    return (
        (cx, cy - radius),  # Top (12 o'clock)
        (cx + radius, cy),  # Right (3 o'clock)
        (cx, cy + radius),  # Bottom (6 o'clock)
        (cx - radius, cy),  # Left (9 o'clock)
    )


@dataclass(frozen=True)
class BoardLayout:
    """
    Derived, read-only geometry of the canonical board.

    Build with BoardLayout.from_config(); any change to the render size
    needs a new layout.
    """
    config: BoardConfig
    pixels_per_mm: float
    radii: RingRadii
    center: Point
    anchors: Tuple[Point, ...] = field(repr=False)

    @classmethod
    def from_config(cls, config: Optional[BoardConfig] = None) -> "BoardLayout":
        config = config or BoardConfig()
        render = config.render

        pixels_per_mm = render.pixels_per_mm(config.physical)
        radii = compute_ring_radii(config.physical, pixels_per_mm)
        center = (render.width // 2, render.height // 2)
        anchors = canonical_anchors(center, radii.double_outer)

        logger.info(
            f"Board layout: {render.width}x{render.height}, "
            f"scale={pixels_per_mm:.4f} px/mm, center={center}, "
            f"board radius={radii.double_outer}px"
        )

        return cls(
            config=config,
            pixels_per_mm=pixels_per_mm,
            radii=radii,
            center=center,
            anchors=anchors,
        )

    def anchor_for(self, role: CalibrationRole) -> Point:
        """Canonical destination of a calibration role."""
        return self.anchors[list(CalibrationRole).index(role)]

    def anchor_array(self) -> np.ndarray:
        """Anchors as a (4, 2) float64 array, Top, Right, Bottom, Left."""
        return np.array([self.anchor_for(role) for role in CalibrationRole], dtype=np.float64)
