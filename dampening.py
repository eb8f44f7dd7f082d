"""
Market-cap dampening.

Raw caps span several orders of magnitude: one mega-cap can outweigh dozens
of peers and squeeze everything else into slivers. Weights are compressed
with a power law and then lifted to a floor relative to the largest one, so
the smallest name still gets ``min_area_ratio`` of the largest name's area.
"""

import math
from collections import namedtuple

MIN_WEIGHT = 0.1
DEFAULT_EXPONENT = 0.45
DEFAULT_UNIVERSE = 500

DampeningParams = namedtuple("DampeningParams", ["exponent", "min_area_ratio"])

# (max item count, exponent, floor); fewer names need harsher compression
DAMPENING_SCHEDULE = (
    (35, 0.35, 0.12),
    (105, 0.40, 0.06),
    (None, 0.45, 0.03),
)


def dampen(weight, exponent=DEFAULT_EXPONENT):
    # clamp first so zero/negative caps never reach the power function
    return math.pow(max(weight, MIN_WEIGHT), exponent)


def dampen_weights(weights, exponent, min_area_ratio):
    """Power-compress ``weights`` and raise each to ``max * min_area_ratio``."""
    if not weights:
        return []
    dampened = [dampen(w, exponent) for w in weights]
    floor = max(dampened) * min_area_ratio
    return [max(d, floor) for d in dampened]


def dampening_params(count=None, min_floor=0.0):
    """
    Pick (exponent, floor) for a universe of ``count`` items.

    A DOW-sized set (30) gets 0.35/0.12, a NASDAQ-100 sized one 0.40/0.06 and
    anything bigger 0.45/0.03. ``min_floor`` lifts the floor further, e.g. on
    narrow viewports where the pixel budget per name is tighter.
    """
    if count is None:
        count = DEFAULT_UNIVERSE
    for limit, exponent, floor in DAMPENING_SCHEDULE:
        if limit is None or count <= limit:
            return DampeningParams(exponent, max(floor, min_floor))
