"""
Which text fits on which rectangle.

Pure presentation policy on top of the layout tree: glyph widths are
estimated from font size, and names are abbreviated or cut when the full
string would overflow. Nothing here changes geometry.
"""

import math
from dataclasses import dataclass
from typing import Optional

from layout_config import LayoutConfig

# average glyph width as a fraction of font size (system-ui, bold)
GLYPH_WIDTH_RATIO = 0.58
LABEL_SIDE_PADDING = 6

# (min tile w, min tile h, font size), first match wins
TILE_FONT_LADDER = (
    (110, 65, 15),
    (80, 50, 13),
    (55, 35, 11),
    (35, 22, 9),
    (20, 14, 7.5),
    (14, 9, 5.5),
    (9, 6, 4.5),
)
TILE_MIN_FONT = 3.5

# (min tile w, min tile h, ticker chars kept)
TICKER_CUTS = (
    (26, 14, None),
    (18, 10, 3),
    (10, 7, 2),
)


@dataclass(frozen=True)
class Label:
    text: str
    font_size: float


@dataclass(frozen=True)
class TileLabel:
    ticker: str
    font_size: float
    change: Optional[str] = None
    change_font_size: Optional[float] = None


def format_change(value):
    return f"{value:+.2f}%"


def abbreviate(name):
    """'Machinery & Equipment' -> 'M & E'"""
    words = name.split()
    if len(words) <= 1:
        return name
    return " ".join(w if w == "&" else w[0] for w in words)


def sector_label(rect) -> Optional[Label]:
    if rect.w <= 10:
        return None
    w = rect.w
    if w > 200:
        font_size = 9.5
    elif w > 100:
        font_size = 8
    elif w > 60:
        font_size = 6.5
    elif w > 30:
        font_size = 5
    else:
        font_size = 4

    name = rect.sector.name
    if w < 30:
        name = name[:3]
    elif w < 60:
        name = name[:7]
    return Label(name, font_size)


def sub_sector_label(rect, sibling_count) -> Optional[Label]:
    """
    Label for a nested sub-sector box, or None when it should stay blank.

    Full name if it fits, then the initials, then a hard cut to whatever
    number of glyphs the box can hold (never fewer than 3).
    """
    if sibling_count <= 1 or rect.h <= 16 or rect.w <= 20:
        return None

    if rect.w > 120:
        font_size = 7.5
    elif rect.w > 60:
        font_size = 6
    else:
        font_size = 4.5

    char_w = font_size * GLYPH_WIDTH_RATIO
    room = rect.w - LABEL_SIDE_PADDING
    name = rect.sub_sector.name

    if len(name) * char_w < room:
        return Label(name, font_size)
    abbr = abbreviate(name)
    if len(abbr) * char_w < room:
        return Label(abbr, font_size)
    max_chars = max(3, math.floor(room / char_w))
    return Label(name[:max_chars], font_size)


def tile_font_size(tile_w, tile_h):
    for min_w, min_h, size in TILE_FONT_LADDER:
        if tile_w > min_w and tile_h > min_h:
            return size
    return TILE_MIN_FONT


def tile_label(tile, gap=None, mobile=False, config=None) -> Optional[TileLabel]:
    """
    Ticker (and change, when there is room) for a leaf tile.

    gap: pixels the renderer trims off each tile; defaults to the
        config's tile_gap (tile_gap_mobile when ``mobile``)
    """
    if gap is None:
        config = config or LayoutConfig()
        gap = config.tile_gap_mobile if mobile else config.tile_gap
    tile_w = max(0, tile.w - gap)
    tile_h = max(0, tile.h - gap)
    if tile_w <= 6 or tile_h <= 5:
        return None

    ticker = tile.instrument.id
    for min_w, min_h, keep in TICKER_CUTS:
        if tile_w > min_w and tile_h > min_h:
            ticker = ticker if keep is None else ticker[:keep]
            break
    else:
        ticker = ticker[:1]

    font_size = tile_font_size(tile_w, tile_h)
    if mobile:
        show_change = tile_w > 34 and tile_h > 22
    else:
        show_change = tile_w > 24 and tile_h > 20
    if not show_change:
        return TileLabel(ticker, font_size)
    return TileLabel(
        ticker,
        font_size,
        format_change(tile.instrument.change_value),
        max(font_size - 1.5, 6),
    )
