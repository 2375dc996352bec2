"""
Calibration session state machine.

State flow:
- Empty: no points marked
- Collecting(n): 1-4 points marked, no transform yet
- Calibrated: transform computed, rectification and scoring available

A four-point Collecting state only persists when the points were
rejected as degenerate; reset() is the way out.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union
import logging

import numpy as np

from dartcal.core import (
    BoardConfig,
    CalibrationData,
    Hit,
    IncompleteCalibration,
    LabeledPoint,
    OverlayGeometry,
)
from dartcal.board import BoardLayout, OverlayGenerator, ScoreCalculator
from .collector import CalibrationCollector
from .homography import HomographyEstimator
from .rectifier import Rectifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Empty:
    """No calibration points collected."""


@dataclass(frozen=True)
class Collecting:
    """Some calibration points collected."""
    count: int


@dataclass(frozen=True, eq=False)
class Calibrated:
    """Transform available."""
    calibration: CalibrationData


SessionState = Union[Empty, Collecting, Calibrated]


class CalibrationSession:
    """
    One calibration attempt on one source image.

    Usage:
        session = CalibrationSession()
        session.load_image(image)
        for x, y in clicks:  # Top, Right, Bottom, Left
            session.add_calibration_point(x, y)
        warped = session.rectify()
        score = session.score_at(x, y)
    """

    def __init__(
            self,
            config: Optional[BoardConfig] = None,
            interpolation: str = "linear",
            border_value: int = 0
    ):
        """
        Initialize session.

        Args:
            config: Board and render configuration (default: BoardConfig())
            interpolation: Rectification interpolation mode
            border_value: Fill value outside the source image
        """
        self.layout = BoardLayout.from_config(config)
        self.scorer = ScoreCalculator(self.layout)
        self.overlay = OverlayGenerator(self.layout)
        self.estimator = HomographyEstimator(self.layout.anchor_array())
        self.rectifier = Rectifier(
            self.layout.config.render,
            interpolation=interpolation,
            border_value=border_value,
        )

        self.collector = CalibrationCollector()
        self._state: SessionState = Empty()
        self._source_image: Optional[np.ndarray] = None
        self._rectified_image: Optional[np.ndarray] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def points(self) -> Tuple[LabeledPoint, ...]:
        return self.collector.points

    @property
    def source_image(self) -> Optional[np.ndarray]:
        return self._source_image

    def load_image(self, image: np.ndarray) -> np.ndarray:
        """
        Start over with a new source image, resized to the canonical size.

        Returns:
            The prepared source image (click coordinates refer to it)
        """
        prepared = self.rectifier.prepare_source(image)
        self.reset()
        self._source_image = prepared
        logger.info(f"Source image loaded: {prepared.shape[1]}x{prepared.shape[0]}")
        return prepared

    def reset(self) -> None:
        """Drop points, transform and rectified image. The source image stays."""
        self.collector.reset()
        self._state = Empty()
        self._rectified_image = None
        logger.info("Calibration reset")

    def add_calibration_point(self, x: float, y: float) -> Tuple[int, bool]:
        """
        Add the next calibration point (Top, Right, Bottom, Left).

        The transform is computed when the fourth point arrives. Further
        points are ignored until reset().

        Returns:
            (count, ready)

        Raises:
            DegenerateConfiguration: If the four points cannot define a
                transform; the session stays uncalibrated
        """
        if isinstance(self._state, Calibrated):
            logger.debug("Already calibrated, point ignored")
            return self.collector.count, True

        was_ready = self.collector.is_ready
        count, ready = self.collector.add_point(x, y)
        self._state = Collecting(count)

        if ready and not was_ready:
            calibration = self.estimator.estimate(self.collector.as_array())
            self._state = Calibrated(calibration)
            logger.info("Calibration complete")

        return count, ready

    def is_calibration_complete(self) -> bool:
        return isinstance(self._state, Calibrated)

    @property
    def calibration(self) -> CalibrationData:
        """
        Raises:
            IncompleteCalibration: If no transform is available
        """
        return self._require_calibration()

    @property
    def transform(self) -> np.ndarray:
        """
        3x3 homography from source to rectified coordinates.

        Raises:
            IncompleteCalibration: If no transform is available
        """
        return self._require_calibration().homography_matrix

    def _require_calibration(self) -> CalibrationData:
        if not isinstance(self._state, Calibrated):
            raise IncompleteCalibration(
                f"Calibration not complete ({self.collector.count}/4 points)"
            )
        return self._state.calibration

    def rectify(self, image: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Warp an image into the canonical view.

        Args:
            image: Image in source coordinates (default: loaded image)

        Returns:
            Rectified image of the configured render size

        Raises:
            IncompleteCalibration: If not calibrated
            ValueError: If no image is given and none was loaded
        """
        calibration = self.calibration

        if image is None:
            if self._source_image is None:
                raise ValueError("No source image loaded")
            self._rectified_image = self.rectifier.rectify(self._source_image, calibration)
            return self._rectified_image

        return self.rectifier.rectify(image, calibration)

    @property
    def rectified_image(self) -> Optional[np.ndarray]:
        """Last rectification of the loaded image, None after reset()."""
        return self._rectified_image

    def classify_at(self, x: float, y: float) -> Hit:
        """
        Raises:
            IncompleteCalibration: If not calibrated
        """
        self._require_calibration()
        return self.scorer.classify(x, y)

    def score_at(self, x: float, y: float) -> int:
        """
        Score a coordinate in the rectified view.

        Raises:
            IncompleteCalibration: If not calibrated
        """
        return self.classify_at(x, y).score

    def overlay_geometry(self) -> OverlayGeometry:
        """Ring circles and sector spokes in rectified coordinates."""
        return self.overlay.generate()
