"""
Three-level heatmap layout: sector → sub-sector → instrument.

compose_layout runs squarify once over the viewport for sectors, once per
sector for its sub-sectors and once per sub-sector for its instruments, with
label bars and padding carved out between levels. Weights are dampened at
every level with the same parameters.

The result is rebuilt from scratch on every call (data refresh, resize);
nothing is cached between calls.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import pandas as pd

from dampening import dampen_weights
from hierarchy import Instrument, Sector, SubSector
from layout_config import LayoutConfig
from treemap_layout import WeightedItem, squarify

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["id", "name", "sector", "sub_sector", "x", "y", "w", "h", "weight", "change_value"]


@dataclass(frozen=True)
class InstrumentTile:
    x: float
    y: float
    w: float
    h: float
    instrument: Instrument
    sector_name: str
    sub_sector_name: str


@dataclass(frozen=True)
class SubSectorRect:
    x: float
    y: float
    w: float
    h: float
    sub_sector: SubSector
    sector_name: str
    label_height: float = 0
    tiles: Tuple[InstrumentTile, ...] = ()


@dataclass(frozen=True)
class SectorRect:
    x: float
    y: float
    w: float
    h: float
    sector: Sector
    label_height: float = 0
    nested: bool = False
    sub_sectors: Tuple[SubSectorRect, ...] = ()


def _dampened_layout(entries, weight_of, params, x, y, w, h):
    """Dampen the weights of ``entries`` and squarify them into (x, y, w, h)."""
    if not entries:
        return []
    weights = dampen_weights([weight_of(e) for e in entries], params.exponent, params.min_area_ratio)
    items = [WeightedItem(weight, entry) for weight, entry in zip(weights, entries)]
    return squarify(items, x, y, w, h)


def _layout_tiles(pairs, sector_name, params, x, y, w, h):
    """pairs: [(sub_sector_name, instrument)] already filtered to positive weight."""
    placed = _dampened_layout(pairs, lambda pair: pair[1].weight, params, x, y, w, h)
    return tuple(
        InstrumentTile(r.x, r.y, r.w, r.h, r.payload[1], sector_name, r.payload[0])
        for r in placed
    )


def _layout_sub_sector(placed, sector_name, params, config):
    sub = placed.payload
    label_h = (
        config.sub_sector_label_height
        if placed.h > config.sub_label_min_height and placed.w > config.sub_label_min_width
        else 0
    )
    inset = config.sub_sector_inset
    tx, ty = placed.x + inset, placed.y + label_h + inset
    tw, th = placed.w - inset * 2, placed.h - label_h - inset * 2

    tiles = ()
    if tw >= config.min_sub_sector_inner and th >= config.min_sub_sector_inner:
        pairs = [(sub.name, i) for i in sub.instruments if i.weight > 0]
        tiles = _layout_tiles(pairs, sector_name, params, tx, ty, tw, th)
    return SubSectorRect(placed.x, placed.y, placed.w, placed.h, sub, sector_name, label_h, tiles)


def _flat_sub_sector(sector, subs):
    # a lone sub-sector stands for itself; otherwise the sector stands in
    if len(subs) == 1:
        return subs[0]
    instruments = tuple(i for _, i in sector.iter_instruments())
    return SubSector(sector.name, sector.total_weight, instruments)


def _layout_sector(placed, params, config, gap, nesting_area):
    sector = placed.payload
    label_h = config.sector_label_height
    ix, iy = placed.x + gap, placed.y + label_h + gap
    iw, ih = placed.w - gap * 2, placed.h - label_h - gap * 2

    if iw < config.min_sector_inner or ih < config.min_sector_inner:
        logger.debug("[LAYOUT] sector %r too small (%.1fx%.1f), drawn as a block", sector.name, placed.w, placed.h)
        return SectorRect(placed.x, placed.y, placed.w, placed.h, sector)

    subs = [s for s in sector.sub_sectors if s.total_weight > 0]

    if len(subs) > 1 and iw * ih > nesting_area:
        sub_layout = _dampened_layout(subs, lambda s: s.total_weight, params, ix, iy, iw, ih)
        sub_rects = tuple(_layout_sub_sector(p, sector.name, params, config) for p in sub_layout)
        return SectorRect(placed.x, placed.y, placed.w, placed.h, sector, label_h, True, sub_rects)

    # [FLAT] nesting would be invisible: every instrument shares the inner area
    pairs = [(sub_name, i) for sub_name, i in sector.iter_instruments() if i.weight > 0]
    tiles = _layout_tiles(pairs, sector.name, params, ix, iy, iw, ih)
    flat = SubSectorRect(ix, iy, iw, ih, _flat_sub_sector(sector, subs), sector.name, 0, tiles)
    return SectorRect(placed.x, placed.y, placed.w, placed.h, sector, label_h, False, (flat,))


def compose_layout(sectors, viewport_w, viewport_h, config=None, instrument_count=None) -> List[SectorRect]:
    """
    Lay out the full sector → sub-sector → instrument tree.

    sectors: Sector list; non-positive weights are dropped at every level
    instrument_count: universe size used to pick dampening strength
        (defaults to the number of positive-weight instruments given)

    Returns [] when the viewport has no area or no sector has weight.
    Degenerate sectors come back as childless blocks, never as errors.
    """
    config = config or LayoutConfig()
    if viewport_w <= 0 or viewport_h <= 0:
        return []

    visible = [s for s in sectors if s.total_weight > 0]
    if not visible:
        return []

    if instrument_count is None:
        instrument_count = sum(1 for s in visible for _, i in s.iter_instruments() if i.weight > 0)
    params = config.dampening_for(instrument_count, viewport_w)
    gap = config.sector_gap_for(viewport_w)
    nesting_area = config.nesting_area_for(viewport_w)

    logger.debug(
        "[LAYOUT] %d sectors / %d instruments into %.0fx%.0f (exponent=%.2f, floor=%.2f)",
        len(visible), instrument_count, viewport_w, viewport_h, params.exponent, params.min_area_ratio,
    )

    sector_layout = _dampened_layout(visible, lambda s: s.total_weight, params, 0, 0, viewport_w, viewport_h)
    return [_layout_sector(p, params, config, gap, nesting_area) for p in sector_layout]


def iter_tiles(sector_rects):
    for sector_rect in sector_rects:
        for sub_rect in sector_rect.sub_sectors:
            yield from sub_rect.tiles


def layout_to_frame(sector_rects):
    """One row per leaf tile, in layout order."""
    rows = [
        {
            "id": t.instrument.id,
            "name": t.instrument.name,
            "sector": t.sector_name,
            "sub_sector": t.sub_sector_name,
            "x": t.x,
            "y": t.y,
            "w": t.w,
            "h": t.h,
            "weight": t.instrument.weight,
            "change_value": t.instrument.change_value,
        }
        for t in iter_tiles(sector_rects)
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
