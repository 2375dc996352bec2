"""
Board module - canonical geometry, scoring, and overlay rendering.
"""
from .geometry import BoardLayout, compute_ring_radii, canonical_anchors
from .scoring import ScoreCalculator
from .overlay import OverlayGenerator
from .visualizer import BoardVisualizer

__all__ = [
    "BoardLayout",
    "compute_ring_radii",
    "canonical_anchors",
    "ScoreCalculator",
    "OverlayGenerator",
    "BoardVisualizer",
]
