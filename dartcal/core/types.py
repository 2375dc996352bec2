"""
Core data types for the dartboard calibration engine.
Defines contracts between modules to ensure stable interfaces.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List
import numpy as np
from numpy.typing import NDArray

Point = Tuple[float, float]

# Clockwise sector values, index 0 starts at the +x axis (3 o'clock)
SECTOR_SEQUENCE: Tuple[int, ...] = (10, 15, 2, 17, 3, 19, 7, 16, 8, 11,
                                    14, 9, 12, 5, 20, 1, 18, 4, 13, 6)


class CalibrationRole(Enum):
    """Semantic position of a calibration point on the outer double ring."""
    TOP = "top"  # 12 o'clock
    RIGHT = "right"  # 3 o'clock
    BOTTOM = "bottom"  # 6 o'clock
    LEFT = "left"  # 9 o'clock


@dataclass(frozen=True)
class LabeledPoint:
    """A source-image point tagged with the board position it marks."""
    role: CalibrationRole
    x: float
    y: float

    @property
    def xy(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class PhysicalSpec:
    """
    Physical dartboard dimensions.
    All measurements in millimeters, radii measured from the center.
    """
    diameter: float = 451.0  # Overall board diameter (including number ring)
    bullseye_radius: float = 6.35  # Double bull (50 points)
    outer_bull_radius: float = 15.9  # Single bull (25 points)
    triple_inner_radius: float = 99.0
    triple_outer_radius: float = 107.0
    double_inner_radius: float = 162.0
    double_outer_radius: float = 170.0

    def __post_init__(self):
        if self.diameter <= 0:
            raise ValueError("Board diameter must be positive")
        radii = self.radii()
        if radii[0] <= 0:
            raise ValueError("Ring radii must be positive")
        if any(a >= b for a, b in zip(radii, radii[1:])):
            raise ValueError(f"Ring radii must be strictly increasing: {radii}")

    def radii(self) -> Tuple[float, ...]:
        """Ring radii ordered from the bullseye outward."""
        return (
            self.bullseye_radius,
            self.outer_bull_radius,
            self.triple_inner_radius,
            self.triple_outer_radius,
            self.double_inner_radius,
            self.double_outer_radius,
        )


@dataclass(frozen=True)
class RenderSpec:
    """Size of the canonical (rectified) output image in pixels."""
    width: int = 1280
    height: int = 720

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Render dimensions must be positive")

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height), the order cv2 expects."""
        return (self.width, self.height)

    def pixels_per_mm(self, physical: PhysicalSpec) -> float:
        """Scale factor: the full board diameter spans the image height."""
        return self.height / physical.diameter


@dataclass(frozen=True)
class BoardConfig:
    """
    Immutable configuration shared by every component of a session.
    """
    physical: PhysicalSpec = field(default_factory=PhysicalSpec)
    render: RenderSpec = field(default_factory=RenderSpec)
    sector_sequence: Tuple[int, ...] = SECTOR_SEQUENCE
    sector_offset_deg: float = 0.0  # Rotation of sector index 0 away from +x, clockwise

    def __post_init__(self):
        if sorted(self.sector_sequence) != list(range(1, 21)):
            raise ValueError("Sector sequence must contain each of 1..20 exactly once")

    @property
    def num_sectors(self) -> int:
        return len(self.sector_sequence)


@dataclass(frozen=True)
class RingRadii:
    """Ring radii in whole pixels, innermost first."""
    bullseye: int
    outer_bull: int
    triple_inner: int
    triple_outer: int
    double_inner: int
    double_outer: int

    def __post_init__(self):
        values = self.as_tuple()
        if values[0] <= 0 or any(a >= b for a, b in zip(values, values[1:])):
            raise ValueError(
                f"Pixel radii must be positive and strictly increasing: {values}. "
                "Increase the render height."
            )

    def as_tuple(self) -> Tuple[int, ...]:
        return (
            self.bullseye,
            self.outer_bull,
            self.triple_inner,
            self.triple_outer,
            self.double_inner,
            self.double_outer,
        )

    def as_dict(self) -> dict:
        return {
            "bullseye": self.bullseye,
            "outer_bull": self.outer_bull,
            "triple_inner": self.triple_inner,
            "triple_outer": self.triple_outer,
            "double_inner": self.double_inner,
            "double_outer": self.double_outer,
        }


@dataclass
class CalibrationData:
    """
    Result of a four-point calibration: the homography from source image
    space into canonical (rectified) space.
    """
    homography_matrix: NDArray[np.float64]  # 3x3, bottom-right entry is 1
    source_points: NDArray[np.float64]  # (4, 2) Top, Right, Bottom, Left
    destination_points: NDArray[np.float64]  # (4, 2) canonical anchors
    timestamp: Optional[float] = None  # When calibration was performed

    def __post_init__(self):
        if self.homography_matrix.shape != (3, 3):
            raise ValueError("Homography must be 3x3 matrix")
        if self.source_points.shape != (4, 2) or self.destination_points.shape != (4, 2):
            raise ValueError("Calibration needs exactly 4 point correspondences")

    def project(self, points) -> NDArray[np.float64]:
        """
        Map source-image points into canonical space.

        Args:
            points: Array-like of shape (N, 2)

        Returns:
            Array of shape (N, 2)
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
        mapped = homogeneous @ self.homography_matrix.T
        return mapped[:, :2] / mapped[:, 2:3]

    def inverse_matrix(self) -> NDArray[np.float64]:
        """Homography from canonical space back into the source image."""
        H_inv = np.linalg.inv(self.homography_matrix)
        return H_inv / H_inv[2, 2]


@dataclass
class Hit:
    """
    A scored position in rectified image coordinates.
    """
    # Image coordinates
    x_px: float
    y_px: float

    # Polar coordinates (relative to board center)
    radius: float  # Distance from center in pixels
    angle: float  # Degrees, 0° = +x axis, increasing clockwise on screen

    # Scoring
    ring: str  # "double_bull", "single_bull", "triple", "double", "single", "miss"
    sector: Optional[int] = None  # Sector value (1-20), None for bulls and misses
    multiplier: int = 0  # 1, 2, 3 for sector rings, 0 otherwise
    score: int = 0


@dataclass(frozen=True)
class CircleSpec:
    """A ring boundary to be drawn: center and radius in pixels."""
    name: str
    center: Point
    radius: int


@dataclass(frozen=True)
class LineSegment:
    """A radial spoke drawn along a sector boundary."""
    index: int
    start: Point
    end: Point


@dataclass
class OverlayGeometry:
    """Everything needed to render the verification overlay."""
    circles: List[CircleSpec] = field(default_factory=list)
    spokes: List[LineSegment] = field(default_factory=list)
