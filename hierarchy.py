"""
Sector → sub-sector → instrument input model.

The layout composer only reads these. Builders turn the flat stock records
the data layer produces (one dict or DataFrame row per ticker) into the
nested shape.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import pandas as pd

logger = logging.getLogger(__name__)

UNKNOWN_SECTOR = "Unknown"


def _number(value):
    """Coerce a record field to a finite float; missing, NaN, inf and junk give 0."""
    if value is None:
        return 0.0
    value = pd.to_numeric(value, errors="coerce")
    if pd.isna(value) or not math.isfinite(value):
        return 0.0
    return float(value)


def _weighted_change(instruments):
    valid = [i for i in instruments if i.weight > 0]
    total_w = sum(i.weight for i in valid)
    if total_w <= 0:
        return 0.0
    return sum(i.change_value * i.weight for i in valid) / total_w


@dataclass(frozen=True)
class Instrument:
    id: str
    weight: float
    change_value: float = 0.0
    name: str = ""
    sub_sector: str = ""


@dataclass(frozen=True)
class SubSector:
    name: str
    total_weight: float
    instruments: Tuple[Instrument, ...] = ()

    @property
    def avg_change(self):
        return _weighted_change(self.instruments)


@dataclass(frozen=True)
class Sector:
    name: str
    total_weight: float
    sub_sectors: Tuple[SubSector, ...] = ()

    def iter_instruments(self):
        """Yield (sub_sector_name, instrument) for every instrument."""
        for sub in self.sub_sectors:
            for instrument in sub.instruments:
                yield sub.name, instrument

    @property
    def instruments(self):
        return [instrument for _, instrument in self.iter_instruments()]

    @property
    def instrument_count(self):
        return sum(len(sub.instruments) for sub in self.sub_sectors)

    @property
    def avg_change(self):
        return _weighted_change(self.instruments)


def build_hierarchy(records, value_key="weight", change_key="change"):
    """
    Group flat stock records into sectors and sub-sectors.

    records: [{'ticker': 'AAPL', 'name': ..., 'sector': 'Tech',
               'sub_sector': 'Hardware', 'weight': 3400, 'change': 1.2}, ...]

    Totals are the children's sums. Sectors come back heaviest first; ties
    are broken by name so the order never depends on dict iteration.
    """
    grouped = {}
    for record in records:
        sector = record.get("sector") or UNKNOWN_SECTOR
        sub = record.get("sub_sector") or sector
        instrument = Instrument(
            id=str(record.get("ticker", record.get("id", ""))),
            weight=_number(record.get(value_key)),
            change_value=_number(record.get(change_key)),
            name=record.get("name", ""),
            sub_sector=sub,
        )
        grouped.setdefault(sector, {}).setdefault(sub, []).append(instrument)

    sectors = []
    for sector_name, subs in grouped.items():
        sub_sectors = tuple(
            SubSector(sub_name, sum(i.weight for i in instruments), tuple(instruments))
            for sub_name, instruments in subs.items()
        )
        sectors.append(Sector(sector_name, sum(s.total_weight for s in sub_sectors), sub_sectors))

    # [DETERMINISTIC]
    sectors.sort(key=lambda s: (s.total_weight, s.name), reverse=True)
    logger.debug("[DATA] %d records grouped into %d sectors", len(records), len(sectors))
    return sectors


def hierarchy_from_frame(
    frame,
    id_col="ticker",
    sector_col="sector",
    sub_sector_col="sub_sector",
    weight_col="weight",
    change_col="change",
    name_col="name",
):
    """build_hierarchy for a DataFrame with one row per instrument."""
    if frame.empty:
        return []

    df = pd.DataFrame(
        {
            "ticker": frame[id_col].astype(str),
            "weight": pd.to_numeric(frame[weight_col], errors="coerce").fillna(0.0),
            "change": (
                pd.to_numeric(frame[change_col], errors="coerce").fillna(0.0)
                if change_col in frame.columns
                else 0.0
            ),
            "name": frame[name_col].fillna("").astype(str) if name_col in frame.columns else "",
        },
        index=frame.index,
    )

    sector = frame[sector_col] if sector_col in frame.columns else pd.Series(None, index=frame.index)
    sector = sector.where(sector.notna() & (sector.astype(str).str.strip() != ""), UNKNOWN_SECTOR)
    df["sector"] = sector.astype(str)

    if sub_sector_col in frame.columns:
        sub = frame[sub_sector_col]
        blank = sub.isna() | (sub.astype(str).str.strip() == "")
        df["sub_sector"] = sub.astype(str).where(~blank, df["sector"])
    else:
        df["sub_sector"] = df["sector"]

    return build_hierarchy(df.to_dict("records"))
