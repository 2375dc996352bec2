"""
Perspective rectification into the canonical board view.
"""
from typing import Optional
import logging

import cv2
import numpy as np

from dartcal.core import CalibrationData, RenderSpec

logger = logging.getLogger(__name__)

INTERPOLATION_FLAGS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
}


def _check_image(image: Optional[np.ndarray]) -> None:
    if image is None or image.size == 0:
        raise ValueError("Image is empty")


class Rectifier:
    """
    Warps source images through a calibration homography.

    Output pixels that map outside the source are filled with
    `border_value` (black by default).
    """

    def __init__(
            self,
            render: RenderSpec,
            interpolation: str = "linear",
            border_value: int = 0
    ):
        """
        Args:
            render: Canonical output size
            interpolation: "nearest", "linear" or "cubic"
            border_value: Fill value for out-of-bounds samples
        """
        if interpolation not in INTERPOLATION_FLAGS:
            raise ValueError(
                f"Unknown interpolation '{interpolation}', "
                f"expected one of {sorted(INTERPOLATION_FLAGS)}"
            )

        self.render = render
        self.interpolation = interpolation
        self.border_value = border_value

    def prepare_source(self, image: np.ndarray) -> np.ndarray:
        """
        Resize a loaded image to the canonical size.

        Calibration clicks are then taken in the same pixel grid the
        rectified view uses. Always returns a new array.
        """
        _check_image(image)

        height, width = image.shape[:2]
        if (width, height) == self.render.size:
            return image.copy()

        logger.debug(f"Resizing source {width}x{height} -> {self.render.width}x{self.render.height}")
        return cv2.resize(image, self.render.size, interpolation=cv2.INTER_AREA)

    def rectify(self, image: np.ndarray, calibration: CalibrationData) -> np.ndarray:
        """
        Produce the canonical top-down view.

        Each output pixel (x, y) is sampled from the source at H⁻¹(x, y).
        The input image is not modified.

        Args:
            image: Source image (H, W) or (H, W, C)
            calibration: Calibration holding the homography

        Returns:
            Image of size RenderSpec with the source's channel layout
        """
        _check_image(image)

        return cv2.warpPerspective(
            image,
            calibration.homography_matrix,
            self.render.size,
            flags=INTERPOLATION_FLAGS[self.interpolation],
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(self.border_value,) * 4,
        )
