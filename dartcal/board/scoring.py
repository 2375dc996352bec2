"""
Score calculation from rectified image coordinates.
"""
import math
from typing import Tuple
import logging

from dartcal.core import Hit
from .geometry import BoardLayout

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


class ScoreCalculator:
    """
    Maps rectified pixel coordinates to dartboard scores.

    Angles follow image convention: 0 along +x, increasing clockwise on
    screen (y points down). Ring boundaries belong to the inner region.
    """

    def __init__(self, layout: BoardLayout):
        """
        Initialize score calculator.

        Args:
            layout: Canonical board geometry
        """
        self.layout = layout
        self.radii = layout.radii
        self.center = layout.center
        self.sector_sequence = layout.config.sector_sequence
        self.num_sectors = layout.config.num_sectors
        self.sector_offset = math.radians(layout.config.sector_offset_deg % 360)

    def pixel_to_polar(self, x: float, y: float) -> Tuple[float, float]:
        """
        Convert pixel coordinates to polar coordinates.

        Returns:
            (distance, angle) with angle in radians, normalized to [0, 2π]
        """
        dx = x - self.center[0]
        dy = y - self.center[1]

        distance = math.sqrt(dx * dx + dy * dy)
        angle = math.atan2(dy, dx)
        if angle < 0:
            angle += TWO_PI

        return distance, angle

    def angle_to_sector_index(self, angle: float) -> int:
        """
        Index into the sector sequence for an angle in radians.

        Sector i covers the half-open band [i, i+1) * 18° past the offset.
        """
        adjusted = angle - self.sector_offset
        if adjusted < 0:
            adjusted %= TWO_PI
        # An angle of exactly 2π clamps into the last sector
        index = int(adjusted / TWO_PI * self.num_sectors)
        return min(max(index, 0), self.num_sectors - 1)

    def radius_to_ring(self, distance: float) -> Tuple[str, int]:
        """
        Classify a distance from the center.

        Returns:
            (ring_name, value) where value is the fixed bull score (50, 25),
            the sector multiplier (3, 2, 1) or 0 for a miss
        """
        r = self.radii

        if distance <= r.bullseye:
            return "double_bull", 50
        elif distance <= r.outer_bull:
            return "single_bull", 25
        elif r.triple_inner < distance <= r.triple_outer:
            return "triple", 3
        elif r.double_inner < distance <= r.double_outer:
            return "double", 2
        elif distance <= r.double_outer:
            return "single", 1
        else:
            return "miss", 0

    def classify(self, x: float, y: float) -> Hit:
        """
        Full classification of a rectified-image coordinate.

        Non-finite coordinates are treated as a miss.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            logger.debug(f"Non-finite coordinate ({x}, {y}) scored as miss")
            return Hit(x_px=x, y_px=y, radius=math.inf, angle=0.0, ring="miss")

        distance, angle = self.pixel_to_polar(x, y)
        ring, value = self.radius_to_ring(distance)

        if ring in ("double_bull", "single_bull"):
            sector, multiplier, score = None, 0, value
        elif ring == "miss":
            sector, multiplier, score = None, 0, 0
        else:
            sector = self.sector_sequence[self.angle_to_sector_index(angle)]
            multiplier = value
            score = sector * multiplier

        logger.debug(
            f"Score: ({x:.1f}, {y:.1f}) -> r={distance:.1f}px, "
            f"θ={math.degrees(angle):.1f}° -> {ring} {sector or ''} = {score}"
        )

        return Hit(
            x_px=x,
            y_px=y,
            radius=distance,
            angle=math.degrees(angle),
            ring=ring,
            sector=sector,
            multiplier=multiplier,
            score=score,
        )

    def score(self, x: float, y: float) -> int:
        """Integer score at a rectified-image coordinate."""
        return self.classify(x, y).score

    def is_on_board(self, x: float, y: float) -> bool:
        """True if the coordinate lies within the outer double ring."""
        distance, _ = self.pixel_to_polar(x, y)
        return distance <= self.radii.double_outer
