"""
Configuration loader with validation and defaults.
"""
import copy
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import yaml

from .types import BoardConfig, PhysicalSpec, RenderSpec, SECTOR_SEQUENCE

logger = logging.getLogger(__name__)


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        filepath: Path to YAML file

    Returns:
        Parsed configuration dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If file does not exist
        yaml.YAMLError: If file is malformed
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse {filepath}: {e}")
        raise

    logger.debug(f"Loaded {filepath}")
    return data if data is not None else {}


class Config:
    """
    Configuration container. Defaults reproduce a standard board rendered
    at 1280x720.
    """

    DEFAULTS = {
        # Physical board (millimeters)
        "board": {
            "diameter_mm": 451.0,
            "bullseye_radius_mm": 6.35,
            "outer_bull_radius_mm": 15.9,
            "triple_inner_radius_mm": 99.0,
            "triple_outer_radius_mm": 107.0,
            "double_inner_radius_mm": 162.0,
            "double_outer_radius_mm": 170.0,
        },

        # Canonical output image
        "render": {
            "width": 1280,
            "height": 720,
        },

        "scoring": {
            "sector_sequence": list(SECTOR_SEQUENCE),
            "sector_offset_deg": 0.0,  # 9.0 centers sector 20 at 12 o'clock
        },

        "rectify": {
            "interpolation": "linear",  # "nearest", "linear", "cubic"
            "border_value": 0,  # Fill for pixels outside the source image
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Load configuration from file or use defaults.

        Args:
            config_path: Path to config YAML (None = use defaults)
        """
        self.data = copy.deepcopy(self.DEFAULTS)

        if config_path and Path(config_path).exists():
            try:
                user_config = load_yaml(config_path)
                self._merge_config(user_config)
                logger.info(f"Configuration loaded from {config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        else:
            if config_path:
                logger.warning(f"Config file {config_path} not found, using defaults")
            logger.info("Using default configuration")

    def _merge_config(self, user_config: Dict[str, Any]) -> None:
        """Merge user config with defaults."""
        if not isinstance(user_config, dict):
            logger.warning("Ignoring config that is not a mapping")
            return

        for section, values in user_config.items():
            if section in self.data and isinstance(values, dict):
                self.data[section].update(values)
            else:
                self.data[section] = values

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get config value."""
        return self.data.get(section, {}).get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire config section."""
        return self.data.get(section, {})

    def build_board_config(self) -> BoardConfig:
        """
        Build the immutable board configuration.

        Raises:
            ValueError: If the configured dimensions are inconsistent
        """
        board = self.get_section("board")
        render = self.get_section("render")
        scoring = self.get_section("scoring")

        physical = PhysicalSpec(
            diameter=float(board["diameter_mm"]),
            bullseye_radius=float(board["bullseye_radius_mm"]),
            outer_bull_radius=float(board["outer_bull_radius_mm"]),
            triple_inner_radius=float(board["triple_inner_radius_mm"]),
            triple_outer_radius=float(board["triple_outer_radius_mm"]),
            double_inner_radius=float(board["double_inner_radius_mm"]),
            double_outer_radius=float(board["double_outer_radius_mm"]),
        )

        return BoardConfig(
            physical=physical,
            render=RenderSpec(width=int(render["width"]), height=int(render["height"])),
            sector_sequence=tuple(int(s) for s in scoring["sector_sequence"]),
            sector_offset_deg=float(scoring.get("sector_offset_deg", 0.0)),
        )

    def rectify_options(self) -> Dict[str, Any]:
        """Keyword arguments for Rectifier."""
        section = self.get_section("rectify")
        return {
            "interpolation": section.get("interpolation", "linear"),
            "border_value": int(section.get("border_value", 0)),
        }
