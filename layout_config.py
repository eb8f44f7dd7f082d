"""
Layout tuning values and config.json loading.

Every pixel constant the composer and the label policy use lives on
LayoutConfig so a deployment can retune them from config.json without
touching code.
"""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dampening import dampening_params, DampeningParams

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.json")


@dataclass(frozen=True)
class LayoutConfig:
    # label bars
    sector_label_height: float = 15
    sub_sector_label_height: float = 12
    sub_label_min_height: float = 16
    sub_label_min_width: float = 20

    # padding
    sector_gap: float = 2
    sector_gap_mobile: float = 1
    sub_sector_inset: float = 1
    tile_gap: float = 1.5
    tile_gap_mobile: float = 0.75

    # visibility thresholds
    min_sector_inner: float = 4
    min_sub_sector_inner: float = 2
    nesting_min_area: float = 8000
    nesting_min_area_mobile: float = 2000

    # small viewports
    mobile_breakpoint: float = 640
    mobile_min_floor: float = 0.05

    # dampening overrides; None follows the count-based schedule
    dampening_exponent: Optional[float] = None
    min_area_ratio: Optional[float] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("dampening_exponent", "min_area_ratio") and value is None:
                continue
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ValueError(f"{f.name} must be a number, got {value!r}")
            if value < 0:
                raise ValueError(f"{f.name} must be >= 0, got {value}")
        if self.dampening_exponent is not None and not 0 < self.dampening_exponent <= 1:
            raise ValueError(f"dampening_exponent must be in (0, 1], got {self.dampening_exponent}")
        if self.min_area_ratio is not None and not 0 <= self.min_area_ratio < 1:
            raise ValueError(f"min_area_ratio must be in [0, 1), got {self.min_area_ratio}")

    def is_mobile(self, width):
        return 0 < width < self.mobile_breakpoint

    def sector_gap_for(self, width):
        return self.sector_gap_mobile if self.is_mobile(width) else self.sector_gap

    def nesting_area_for(self, width):
        return self.nesting_min_area_mobile if self.is_mobile(width) else self.nesting_min_area

    def dampening_for(self, count, width):
        """Schedule values for ``count`` items, with config overrides applied."""
        min_floor = self.mobile_min_floor if self.is_mobile(width) else 0.0
        params = dampening_params(count, min_floor)
        return DampeningParams(
            self.dampening_exponent if self.dampening_exponent is not None else params.exponent,
            self.min_area_ratio if self.min_area_ratio is not None else params.min_area_ratio,
        )


def load_config(path=CONFIG_FILE):
    """
    Read LayoutConfig from a JSON file.

    Uses the "layout" section when present, otherwise the whole object.
    A missing or unreadable file gives the defaults; bad values raise
    ValueError from LayoutConfig.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        logger.debug("[CONFIG] %s not found, using defaults", path)
        return LayoutConfig()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("[CONFIG] could not read %s: %s", path, e)
        return LayoutConfig()

    if not isinstance(raw, dict):
        logger.warning("[CONFIG] %s is not a JSON object, using defaults", path)
        return LayoutConfig()

    section = raw.get("layout", raw)
    if not isinstance(section, dict):
        logger.warning("[CONFIG] 'layout' in %s is not an object, using defaults", path)
        return LayoutConfig()

    known = {f.name for f in fields(LayoutConfig)}
    unknown = sorted(set(section) - known)
    if unknown and section is not raw:
        logger.warning("[CONFIG] ignoring unknown layout keys: %s", ", ".join(unknown))

    return LayoutConfig(**{k: v for k, v in section.items() if k in known})


def viewport_height(width, window_height=None, config=None):
    """
    Heatmap height for a container ``width`` wide.

    Roughly 2:1 on desktop, taller on phones, and never taller than the
    window minus the page chrome.
    """
    config = config or LayoutConfig()
    if config.is_mobile(width):
        natural = max(320, round(width * 0.85))
    else:
        natural = max(500, round(width * 0.52))
    if window_height is None:
        return natural
    return min(natural, max(400, window_height - 180))
