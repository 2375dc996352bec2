"""
Interactive calibration and scoring tool.

Load a dartboard photo, click the outer double ring at Top, Right,
Bottom and Left, then click the rectified board to read scores.

Usage:
    python scripts/score_board.py photos/board.jpg
    python scripts/score_board.py photos/board.jpg --config config/board.yaml
"""
import cv2
import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dartcal.core import Config, DegenerateConfiguration
from dartcal.calibration import CalibrationSession
from dartcal.board import BoardVisualizer
import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ScoreBoardApp:
    """Two-mode click handler: calibration points first, then scoring."""

    def __init__(self, session: CalibrationSession, image):
        self.session = session
        self.visualizer = BoardVisualizer(session.overlay)
        self.source = session.load_image(image)
        self.board_view = None
        self.display_image = self.source.copy()

        self.window_name = "Dartboard - click Top, Right, Bottom, Left"
        cv2.namedWindow(self.window_name)
        cv2.setMouseCallback(self.window_name, self._mouse_callback)

    def _mouse_callback(self, event, x, y, flags, param):
        """Handle mouse clicks."""
        if event != cv2.EVENT_LBUTTONDOWN:
            return

        if self.session.is_calibration_complete():
            self._score_click(x, y)
        else:
            self._calibration_click(x, y)

    def _calibration_click(self, x, y):
        role = self.session.collector.next_role
        if role is None:
            logger.warning("Points rejected earlier, press 'r' to start over")
            return

        try:
            count, ready = self.session.add_calibration_point(float(x), float(y))
        except DegenerateConfiguration as e:
            logger.error(f"{e}. Press 'r' and select the points again")
            return
        finally:
            self.display_image = self.visualizer.draw_calibration_points(
                self.source, self.session.points
            )

        anchor = self.session.layout.anchor_for(role)
        logger.info(f"{role.value} point at ({x}, {y}) -> {anchor} [{count}/4]")

        if ready:
            warped = self.session.rectify()
            self.board_view = self.visualizer.draw_board_overlay(
                warped, self.session.overlay_geometry(), draw_labels=True
            )
            self.display_image = self.board_view.copy()
            logger.info("Board rectified, click to score")

    def _score_click(self, x, y):
        if not self.session.scorer.is_on_board(x, y):
            logger.info(f"Clicked at ({x}, {y}) outside the board, score 0")
            return

        hit = self.session.classify_at(float(x), float(y))
        self.display_image = self.visualizer.draw_hit(self.board_view, hit)
        logger.info(f"Clicked at ({x}, {y}) -> {hit.ring} {hit.sector or ''} Score: {hit.score}")

    def reset(self):
        self.session.reset()
        self.board_view = None
        self.display_image = self.source.copy()

    def run(self):
        """Run interactive loop."""
        print("\n" + "=" * 60)
        print("Dartboard Scoring")
        print("=" * 60)
        print("Click 4 points on the OUTER DOUBLE RING:")
        print("  1. Top    (12 o'clock)")
        print("  2. Right  ( 3 o'clock)")
        print("  3. Bottom ( 6 o'clock)")
        print("  4. Left   ( 9 o'clock)")
        print("Then click on the rectified board to score.")
        print("\nPress 'r' to reset, 'q' to quit")
        print("=" * 60 + "\n")

        while True:
            cv2.imshow(self.window_name, self.display_image)
            key = cv2.waitKey(20) & 0xFF

            if key == ord('q'):
                break
            elif key == ord('r'):
                self.reset()

        cv2.destroyAllWindows()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Calibrate a dartboard photo and score clicks"
    )

    parser.add_argument(
        "image",
        type=str,
        help="Dartboard image (jpg/png)"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Board configuration YAML (default: built-in standard board)"
    )

    return parser.parse_args()


def main():
    """Run scoring tool."""
    args = parse_args()

    image = cv2.imread(args.image, cv2.IMREAD_COLOR)
    if image is None:
        logger.error(f"Could not read image: {args.image}")
        return 1

    config = Config(Path(args.config) if args.config else None)
    try:
        board_config = config.build_board_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    session = CalibrationSession(board_config, **config.rectify_options())
    ScoreBoardApp(session, image).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
