"""
Verification overlay geometry: ring circles and sector spokes.
No drawing happens here; see BoardVisualizer for rendering.
"""
import math
from typing import List, Tuple

from dartcal.core import CircleSpec, LineSegment, OverlayGeometry
from .geometry import BoardLayout


class OverlayGenerator:
    """
    Produces the "spider" geometry for a board layout.

    Spoke i lies on the boundary between sector indices i-1 and i, using
    the same angle convention and offset as ScoreCalculator.
    """

    def __init__(self, layout: BoardLayout):
        self.layout = layout
        self.num_sectors = layout.config.num_sectors
        self.sector_angle = 360.0 / self.num_sectors

    def circles(self) -> List[CircleSpec]:
        """Six concentric ring boundaries, outermost first."""
        center = self.layout.center
        return [
            CircleSpec(name=name, center=center, radius=radius)
            for name, radius in reversed(list(self.layout.radii.as_dict().items()))
        ]

    def spoke_angle(self, index: int) -> float:
        """Angle of spoke `index` in degrees (image convention)."""
        return self.layout.config.sector_offset_deg + index * self.sector_angle

    def spokes(self) -> List[LineSegment]:
        """Radial lines from the outer bull to the outer double ring."""
        cx, cy = self.layout.center
        inner = self.layout.radii.outer_bull
        outer = self.layout.radii.double_outer

        segments = []
        for i in range(self.num_sectors):
            theta = math.radians(self.spoke_angle(i))
            cos_t, sin_t = math.cos(theta), math.sin(theta)
            segments.append(LineSegment(
                index=i,
                start=(cx + cos_t * inner, cy + sin_t * inner),
                end=(cx + cos_t * outer, cy + sin_t * outer),
            ))
        return segments

    def sector_boundaries(self) -> List[Tuple[int, float, float]]:
        """
        Get sector boundary angles.

        Returns:
            List of (sector_number, start_angle, end_angle) in degrees
        """
        return [
            (
                sector,
                self.spoke_angle(i) % 360,
                self.spoke_angle(i + 1) % 360,
            )
            for i, sector in enumerate(self.layout.config.sector_sequence)
        ]

    def generate(self) -> OverlayGeometry:
        return OverlayGeometry(circles=self.circles(), spokes=self.spokes())
