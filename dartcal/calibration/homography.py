"""
Four-point homography estimation.
"""
from itertools import combinations
import time
import logging

import numpy as np

from dartcal.core import CalibrationData, DegenerateConfiguration

logger = logging.getLogger(__name__)

# Relative area below which three points count as collinear
COLLINEAR_TOLERANCE = 1e-6

# Condition number above which the 8x8 system counts as singular
MAX_CONDITION = 1e12


def _check_points(points: np.ndarray, label: str) -> None:
    """Reject point sets where any three points are (nearly) collinear."""
    if points.shape != (4, 2):
        raise DegenerateConfiguration(
            f"{label} points must have shape (4, 2), got {points.shape}"
        )
    if not np.all(np.isfinite(points)):
        raise DegenerateConfiguration(f"{label} points must be finite")

    extent = max(
        np.linalg.norm(a - b) for a, b in combinations(points, 2)
    )
    if extent == 0:
        raise DegenerateConfiguration(f"{label} points coincide")

    for a, b, c in combinations(points, 3):
        ab, ac = b - a, c - a
        area = abs(ab[0] * ac[1] - ab[1] * ac[0])
        if area <= COLLINEAR_TOLERANCE * extent ** 2:
            raise DegenerateConfiguration(
                f"{label} points {a.tolist()}, {b.tolist()}, {c.tolist()} are collinear"
            )


def _normalization(points: np.ndarray) -> np.ndarray:
    """Similarity moving the centroid to the origin, mean distance √2."""
    centroid = points.mean(axis=0)
    mean_dist = np.linalg.norm(points - centroid, axis=1).mean()
    s = np.sqrt(2) / mean_dist
    return np.array([
        [s, 0, -s * centroid[0]],
        [0, s, -s * centroid[1]],
        [0, 0, 1],
    ], dtype=np.float64)


def _apply(T: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Apply an affine 3x3 matrix to (N, 2) points."""
    return points @ T[:2, :2].T + T[:2, 2]


def solve_homography(src_points, dst_points) -> np.ndarray:
    """
    Solve for H with H @ [x, y, 1] ∝ [u, v, 1] for four correspondences.

    Stacks two equations per point into an 8x8 system with h33 fixed to 1.

    Args:
        src_points: (4, 2) source image points
        dst_points: (4, 2) canonical points

    Returns:
        3x3 float64 homography

    Raises:
        DegenerateConfiguration: If the points do not determine a
            unique, invertible transform
    """
    src = np.asarray(src_points, dtype=np.float64)
    dst = np.asarray(dst_points, dtype=np.float64)

    _check_points(src, "Source")
    _check_points(dst, "Destination")

    # Solve in normalized coordinates to keep the system well conditioned
    T_src = _normalization(src)
    T_dst = _normalization(dst)
    src_n = _apply(T_src, src)
    dst_n = _apply(T_dst, dst)

    A = np.zeros((8, 8), dtype=np.float64)
    b = np.zeros(8, dtype=np.float64)

    for i, ((x, y), (u, v)) in enumerate(zip(src_n, dst_n)):
        A[2 * i] = [x, y, 1, 0, 0, 0, -u * x, -u * y]
        A[2 * i + 1] = [0, 0, 0, x, y, 1, -v * x, -v * y]
        b[2 * i] = u
        b[2 * i + 1] = v

    if np.linalg.cond(A) > MAX_CONDITION:
        raise DegenerateConfiguration("Point correspondences give a singular system")

    try:
        h = np.linalg.solve(A, b)
    except np.linalg.LinAlgError as e:
        raise DegenerateConfiguration(f"Homography solve failed: {e}") from e

    H_n = np.append(h, 1.0).reshape(3, 3)
    H = np.linalg.inv(T_dst) @ H_n @ T_src

    if not np.all(np.isfinite(H)) or abs(H[2, 2]) < np.finfo(np.float64).eps:
        raise DegenerateConfiguration("Degenerate homography matrix")
    H = H / H[2, 2]

    if abs(np.linalg.det(H)) < np.finfo(np.float64).eps:
        raise DegenerateConfiguration("Degenerate homography matrix")

    return H


class HomographyEstimator:
    """
    Computes the calibration transform onto fixed canonical anchors.
    """

    def __init__(self, anchors: np.ndarray):
        """
        Args:
            anchors: (4, 2) destination points, Top, Right, Bottom, Left
        """
        self.anchors = np.asarray(anchors, dtype=np.float64)

    def estimate(self, src_points: np.ndarray) -> CalibrationData:
        """
        Estimate the transform for four source points.

        Raises:
            DegenerateConfiguration: If the points cannot define a transform
        """
        try:
            H = solve_homography(src_points, self.anchors)
        except DegenerateConfiguration as e:
            logger.error(f"Calibration rejected: {e}")
            raise

        calibration = CalibrationData(
            homography_matrix=H,
            source_points=np.asarray(src_points, dtype=np.float64).copy(),
            destination_points=self.anchors.copy(),
            timestamp=time.time(),
        )

        error = np.abs(calibration.project(src_points) - self.anchors).max()
        logger.info(f"Homography computed (max anchor error: {error:.2e}px)")

        return calibration
