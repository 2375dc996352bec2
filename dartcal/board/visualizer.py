"""
Board visualization and overlay rendering.
"""
import math
from typing import Optional, Sequence, Tuple
import logging

import cv2
import numpy as np

from dartcal.core import Hit, LabeledPoint, OverlayGeometry
from .overlay import OverlayGenerator

logger = logging.getLogger(__name__)


def _to_pixel(point: Tuple[float, float]) -> Tuple[int, int]:
    return (int(round(point[0])), int(round(point[1])))


class BoardVisualizer:
    """
    Renders overlay geometry, calibration marks and scored hits.

    Every draw method works on a copy; input images are never modified.
    """

    # Color scheme (BGR)
    COLORS = {
        "rings": (0, 0, 0),  # Black
        "sectors": (0, 0, 0),  # Black
        "labels": (255, 255, 255),  # White
        "calibration": (0, 255, 0),  # Green
        "hit": (0, 0, 255),  # Red
    }

    def __init__(
            self,
            overlay: OverlayGenerator,
            opacity: float = 1.0,
            thickness: int = 2
    ):
        """
        Initialize visualizer.

        Args:
            overlay: Geometry source for rings and spokes
            opacity: Overlay opacity (0.0-1.0)
            thickness: Line thickness in pixels
        """
        self.overlay = overlay
        self.opacity = max(0.0, min(1.0, opacity))
        self.thickness = thickness

    def draw_board_overlay(
            self,
            image: np.ndarray,
            geometry: Optional[OverlayGeometry] = None,
            draw_labels: bool = False
    ) -> np.ndarray:
        """
        Draw ring circles and sector spokes.

        Args:
            image: Rectified image
            geometry: Precomputed geometry (default: generated from overlay)
            draw_labels: Write sector values in the outer single band

        Returns:
            Image with overlay
        """
        geometry = geometry or self.overlay.generate()
        overlay = image.copy()

        for circle in geometry.circles:
            cv2.circle(
                overlay,
                _to_pixel(circle.center),
                int(circle.radius),
                self.COLORS["rings"],
                self.thickness
            )

        for spoke in geometry.spokes:
            cv2.line(
                overlay,
                _to_pixel(spoke.start),
                _to_pixel(spoke.end),
                self.COLORS["sectors"],
                self.thickness
            )

        if draw_labels:
            self._draw_sector_labels(overlay)

        if self.opacity >= 1.0:
            return overlay
        return cv2.addWeighted(image, 1 - self.opacity, overlay, self.opacity, 0)

    def _draw_sector_labels(self, image: np.ndarray) -> None:
        layout = self.overlay.layout
        cx, cy = layout.center
        text_radius = (layout.radii.triple_outer + layout.radii.double_inner) / 2
        half_sector = self.overlay.sector_angle / 2

        for sector, start_angle, _ in self.overlay.sector_boundaries():
            theta = math.radians(start_angle + half_sector)
            text_x = int(cx + text_radius * math.cos(theta))
            text_y = int(cy + text_radius * math.sin(theta))
            cv2.putText(
                image,
                str(sector),
                (text_x - 10, text_y + 5),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                self.COLORS["labels"],
                1
            )

    def draw_calibration_points(
            self,
            image: np.ndarray,
            points: Sequence[LabeledPoint]
    ) -> np.ndarray:
        """
        Mark calibration points with their role.

        Args:
            image: Source image
            points: Collected points

        Returns:
            Image with markers
        """
        result = image.copy()

        for point in points:
            pos = _to_pixel(point.xy)
            cv2.circle(result, pos, 5, self.COLORS["calibration"], -1)
            cv2.putText(
                result,
                point.role.value.upper(),
                (pos[0] + 10, pos[1] - 10),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.6,
                self.COLORS["calibration"],
                2
            )

        return result

    def draw_hit(
            self,
            image: np.ndarray,
            hit: Hit,
            show_score: bool = True
    ) -> np.ndarray:
        """
        Draw hit marker and score text.

        Args:
            image: Rectified image
            hit: Scored position
            show_score: Write the score next to the marker

        Returns:
            Image with hit marker
        """
        result = image.copy()
        pos = _to_pixel((hit.x_px, hit.y_px))

        cv2.circle(result, pos, 5, self.COLORS["hit"], -1)

        if show_score:
            cv2.putText(
                result,
                str(hit.score),
                (pos[0] + 10, pos[1] - 10),
                cv2.FONT_HERSHEY_SIMPLEX,
                1.0,
                self.COLORS["hit"],
                2
            )

        return result
