"""
Unit tests for board module.
"""
import math
import numpy as np
import pytest

from dartcal.core import (
    BoardConfig, PhysicalSpec, RenderSpec, CalibrationRole, Hit, LabeledPoint,
)
from dartcal.board import (
    BoardLayout, ScoreCalculator, OverlayGenerator, BoardVisualizer,
    compute_ring_radii, canonical_anchors,
)

VALID_SCORES = (
    {0, 25, 50}
    | set(range(1, 21))
    | {2 * s for s in range(1, 21)}
    | {3 * s for s in range(1, 21)}
)


@pytest.fixture
def layout():
    return BoardLayout.from_config(BoardConfig())


@pytest.fixture
def scorer(layout):
    return ScoreCalculator(layout)


def at(scorer, distance, angle_deg):
    """Score at a polar position around the canonical center."""
    cx, cy = scorer.center
    theta = math.radians(angle_deg)
    return scorer.score(cx + distance * math.cos(theta), cy + distance * math.sin(theta))


def test_compute_ring_radii(layout):
    """Test pixel radii for 720px height and a 451mm board."""
    assert layout.pixels_per_mm == pytest.approx(720 / 451)
    assert layout.radii.as_tuple() == (10, 25, 158, 170, 258, 271)


def test_compute_ring_radii_invalid_scale():
    """Test non-positive scale is rejected."""
    with pytest.raises(ValueError):
        compute_ring_radii(PhysicalSpec(), 0.0)


def test_layout_center_and_anchors(layout):
    """Test center and Top/Right/Bottom/Left anchors."""
    assert layout.center == (640, 360)
    assert layout.anchors == ((640, 89), (911, 360), (640, 631), (369, 360))
    assert layout.anchor_for(CalibrationRole.RIGHT) == (911, 360)
    assert layout.anchor_array().shape == (4, 2)


def test_canonical_anchors_distance():
    """Test anchors sit on the given radius."""
    center = (400.0, 300.0)
    for point in canonical_anchors(center, 120.0):
        assert math.dist(point, center) == pytest.approx(120.0)


def test_layout_follows_render_spec():
    """Test a different render size yields different geometry."""
    config = BoardConfig(render=RenderSpec(width=800, height=800))
    layout = BoardLayout.from_config(config)

    assert layout.center == (400, 400)
    assert layout.radii.double_outer == int(170 * 800 / 451)


def test_layout_too_small_render():
    """Test a render too small to separate the rings."""
    with pytest.raises(ValueError):
        BoardLayout.from_config(BoardConfig(render=RenderSpec(width=20, height=20)))


def test_pixel_to_polar(scorer):
    """Test polar conversion in image convention (clockwise)."""
    distance, angle = scorer.pixel_to_polar(740, 360)
    assert distance == pytest.approx(100.0)
    assert angle == pytest.approx(0.0)

    # +y is down, so straight down is 90°
    _, angle = scorer.pixel_to_polar(640, 460)
    assert angle == pytest.approx(math.pi / 2)

    # Up is normalized to 270° instead of -90°
    _, angle = scorer.pixel_to_polar(640, 260)
    assert angle == pytest.approx(3 * math.pi / 2)


def test_angle_to_sector_index(scorer):
    """Test sector index bands of 18°."""
    assert scorer.angle_to_sector_index(0.0) == 0
    assert scorer.angle_to_sector_index(math.radians(17.9)) == 0
    assert scorer.angle_to_sector_index(math.radians(18.1)) == 1
    assert scorer.angle_to_sector_index(math.radians(359.9)) == 19
    # Values at or just below 2π stay in range
    assert scorer.angle_to_sector_index(2 * math.pi) == 19
    assert scorer.angle_to_sector_index(math.nextafter(2 * math.pi, 0)) == 19


def test_angle_rounding_to_two_pi_scores_last_sector(scorer):
    """Test a click just above +x whose angle rounds up to exactly 2π."""
    y = math.nextafter(360.0, 0.0)
    _, angle = scorer.pixel_to_polar(840.0, y)

    assert angle == 2 * math.pi
    assert scorer.score(840.0, y) == 6
    assert scorer.classify(840.0, y).sector == 6


def test_negative_sector_offset_matches_positive():
    """Test offsets are taken modulo 360°."""
    standard = ScoreCalculator(BoardLayout.from_config(BoardConfig(sector_offset_deg=9.0)))
    negative = ScoreCalculator(BoardLayout.from_config(BoardConfig(sector_offset_deg=-351.0)))

    for angle in range(0, 360, 3):
        theta = math.radians(angle + 0.5)
        assert negative.angle_to_sector_index(theta) == standard.angle_to_sector_index(theta)
    assert negative.score(640, 360 - 200) == 20


def test_center_is_bullseye(scorer):
    """Test the exact center scores 50."""
    assert scorer.score(640, 360) == 50


def test_bull_boundaries(scorer):
    """Test ring boundaries belong to the inner region."""
    assert at(scorer, 10, 0) == 50  # Exactly bullseye radius
    assert at(scorer, 10.001, 0) == 25
    assert at(scorer, 25, 0) == 25
    assert at(scorer, 24.99, 123) == 25
    assert at(scorer, 25.001, 0) == 10


def test_triple_ring_boundaries(scorer):
    """Test triple band is (158, 170]."""
    assert scorer.score(640 + 158, 360) == 10
    assert scorer.score(640 + 159, 360) == 30
    assert scorer.score(640 + 170, 360) == 30
    assert scorer.score(640 + 171, 360) == 10


def test_double_ring_boundaries(scorer):
    """Test double band is (258, 271]."""
    assert scorer.score(640 + 258, 360) == 10
    assert scorer.score(640 + 259, 360) == 20
    assert scorer.score(640 + 271, 360) == 20


def test_outside_board_is_miss(scorer):
    """Test anything past the outer double ring scores 0."""
    assert scorer.score(640 + 271 + 1, 360) == 0
    for angle in range(0, 360, 7):
        assert at(scorer, 272, angle) == 0
        assert at(scorer, 5000, angle) == 0


def test_sector_lookup(scorer):
    """Test single sector values in image convention."""
    # Straight down (90°) falls in index 5
    assert scorer.score(640, 360 + 200) == 19
    # Straight up (270°) falls in index 15
    assert scorer.score(640, 360 - 200) == 1
    # Mid-band of index 14
    assert at(scorer, 200, 14 * 18 + 9) == 20
    assert at(scorer, 165, 14 * 18 + 9) == 60


def test_sector_offset_centers_twenty_at_top():
    """Test a 9° offset gives the standard board orientation."""
    scorer = ScoreCalculator(BoardLayout.from_config(BoardConfig(sector_offset_deg=9.0)))

    assert scorer.score(640, 360 - 200) == 20
    assert scorer.score(640, 360 - 165) == 60
    assert scorer.score(640 + 200, 360) == 6
    assert scorer.score(640, 360 + 200) == 3
    assert scorer.score(640 - 200, 360) == 11


def test_score_is_total(scorer):
    """Test every score is a legal dartboard value."""
    rng = np.random.default_rng(42)
    for x, y in rng.uniform(-200, 1500, size=(2000, 2)):
        assert scorer.score(float(x), float(y)) in VALID_SCORES

    for x in range(0, 1280, 9):
        for y in range(0, 720, 9):
            assert scorer.score(x, y) in VALID_SCORES


def test_non_finite_is_miss(scorer):
    """Test NaN and infinity score as a miss."""
    assert scorer.score(float("nan"), 360) == 0
    assert scorer.score(640, float("inf")) == 0


def test_classify(scorer):
    """Test full classification."""
    hit = scorer.classify(640 + 165, 360)
    assert hit.ring == "triple"
    assert hit.sector == 10
    assert hit.multiplier == 3
    assert hit.score == 30
    assert hit.radius == pytest.approx(165.0)
    assert hit.angle == pytest.approx(0.0)

    bull = scorer.classify(640, 360)
    assert bull.ring == "double_bull"
    assert bull.sector is None
    assert bull.score == 50

    miss = scorer.classify(0, 0)
    assert miss.ring == "miss"
    assert miss.score == 0


def test_is_on_board(scorer):
    """Test board boundary check."""
    assert scorer.is_on_board(640, 360)
    assert scorer.is_on_board(911, 360)
    assert not scorer.is_on_board(912, 360)


def test_overlay_circles(layout):
    """Test six ring circles around the center."""
    circles = OverlayGenerator(layout).circles()

    assert len(circles) == 6
    assert sorted(c.radius for c in circles) == list(layout.radii.as_tuple())
    assert all(c.center == (640, 360) for c in circles)


def test_overlay_spokes(layout):
    """Test 20 spokes from outer bull to outer double ring."""
    spokes = OverlayGenerator(layout).spokes()

    assert len(spokes) == 20
    assert spokes[0].start == pytest.approx((640 + 25, 360))
    assert spokes[0].end == pytest.approx((640 + 271, 360))

    for spoke in spokes:
        assert math.dist(spoke.start, layout.center) == pytest.approx(25)
        assert math.dist(spoke.end, layout.center) == pytest.approx(271)


@pytest.mark.parametrize("offset", [0.0, 9.0])
def test_spokes_align_with_sector_boundaries(offset):
    """Test each spoke separates consecutive sector indices."""
    layout = BoardLayout.from_config(BoardConfig(sector_offset_deg=offset))
    scorer = ScoreCalculator(layout)
    overlay = OverlayGenerator(layout)

    for spoke in overlay.spokes():
        boundary = overlay.spoke_angle(spoke.index)
        after = scorer.angle_to_sector_index(math.radians((boundary + 0.5) % 360))
        before = scorer.angle_to_sector_index(math.radians((boundary - 0.5) % 360))
        assert after == spoke.index
        assert before == (spoke.index - 1) % 20


def test_sector_boundaries(layout):
    """Test sector boundary list."""
    boundaries = OverlayGenerator(layout).sector_boundaries()

    assert len(boundaries) == 20
    assert boundaries[0] == (10, 0.0, 18.0)
    assert boundaries[14][0] == 20


def test_generate(layout):
    """Test combined overlay geometry."""
    geometry = OverlayGenerator(layout).generate()
    assert len(geometry.circles) == 6
    assert len(geometry.spokes) == 20


def test_draw_board_overlay(layout):
    """Test overlay drawing leaves the input untouched."""
    viz = BoardVisualizer(OverlayGenerator(layout))
    image = np.full((720, 1280, 3), 255, dtype=np.uint8)

    result = viz.draw_board_overlay(image, draw_labels=True)

    assert result.shape == image.shape
    assert not np.array_equal(result, image)
    assert (image == 255).all()
    # Spoke 0 runs along +x from the outer bull
    assert tuple(result[360, 640 + 100]) == (0, 0, 0)


def test_draw_board_overlay_blended(layout):
    """Test partial opacity blends with the input."""
    viz = BoardVisualizer(OverlayGenerator(layout), opacity=0.5)
    image = np.full((720, 1280, 3), 200, dtype=np.uint8)

    result = viz.draw_board_overlay(image)

    assert tuple(result[360, 640 + 100]) == (100, 100, 100)


def test_draw_hit(layout):
    """Test hit marker drawing."""
    viz = BoardVisualizer(OverlayGenerator(layout))
    image = np.zeros((720, 1280, 3), dtype=np.uint8)
    hit = Hit(x_px=700, y_px=300, radius=0, angle=0, ring="triple",
              sector=20, multiplier=3, score=60)

    result = viz.draw_hit(image, hit)

    assert result.shape == image.shape
    assert tuple(result[300, 700]) == BoardVisualizer.COLORS["hit"]
    assert not image.any()


def test_draw_calibration_points(layout):
    """Test calibration markers."""
    viz = BoardVisualizer(OverlayGenerator(layout))
    image = np.zeros((720, 1280, 3), dtype=np.uint8)
    points = [LabeledPoint(CalibrationRole.TOP, 640, 100)]

    result = viz.draw_calibration_points(image, points)

    assert tuple(result[100, 640]) == BoardVisualizer.COLORS["calibration"]


if __name__ == "__main__":
    print("Running board module tests...")
    _layout = BoardLayout.from_config(BoardConfig())
    _scorer = ScoreCalculator(_layout)
    test_compute_ring_radii(_layout)
    test_layout_center_and_anchors(_layout)
    print("✓ Layout tests passed")
    test_center_is_bullseye(_scorer)
    test_bull_boundaries(_scorer)
    test_triple_ring_boundaries(_scorer)
    test_double_ring_boundaries(_scorer)
    test_outside_board_is_miss(_scorer)
    print("✓ Scoring tests passed")
    test_overlay_spokes(_layout)
    print("✓ Overlay tests passed")
    print("\n✓ All board tests passed!")
