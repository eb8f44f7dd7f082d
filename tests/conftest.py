"""Pytest configuration and fixtures."""

import pytest

from hierarchy import Instrument, Sector, SubSector


def make_sub(name, *pairs):
    """pairs: (ticker, weight, change)"""
    instruments = tuple(Instrument(t, w, c, sub_sector=name) for t, w, c in pairs)
    return SubSector(name, sum(i.weight for i in instruments), instruments)


def make_sector(name, *subs):
    return Sector(name, sum(s.total_weight for s in subs), tuple(subs))


@pytest.fixture
def sample_sectors():
    """Three sectors with a mega-cap skew, mixed nesting and a zero-cap name."""
    tech = make_sector(
        "Tech",
        make_sub("Semiconductors", ("NVDA", 3300, 2.1), ("AVGO", 800, -0.4), ("AMD", 250, 1.0), ("INTC", 90, -3.2)),
        make_sub("Software", ("MSFT", 3100, 0.3), ("ORCL", 400, 0.9), ("CRM", 260, -1.1)),
        make_sub("Hardware", ("AAPL", 3400, -0.2), ("DELL", 80, 0.0)),
    )
    finance = make_sector(
        "Finance",
        make_sub("Banks", ("JPM", 600, 0.5), ("BAC", 300, -0.7), ("WFC", 200, 0.2)),
        make_sub("Insurance", ("BRK.B", 900, 0.1), ("PGR", 150, 1.4), ("DEAD", 0, 0.0)),
    )
    energy = make_sector(
        "Energy",
        make_sub("Oil & Gas", ("XOM", 450, -1.5), ("CVX", 280, -1.0), ("COP", 130, -0.6)),
    )
    return [tech, finance, energy]


@pytest.fixture
def sample_records():
    return [
        {"ticker": "AAPL", "name": "Apple", "sector": "Tech", "sub_sector": "Hardware", "weight": 3400, "change": -0.2},
        {"ticker": "MSFT", "name": "Microsoft", "sector": "Tech", "sub_sector": "Software", "weight": 3100, "change": 0.3},
        {"ticker": "NVDA", "name": "NVIDIA", "sector": "Tech", "sub_sector": "Semiconductors", "weight": 3300, "change": 2.1},
        {"ticker": "ORCL", "name": "Oracle", "sector": "Tech", "sub_sector": "Software", "weight": 400, "change": 0.9},
        {"ticker": "JPM", "name": "JPMorgan", "sector": "Finance", "weight": 600, "change": 0.5},
        {"ticker": "XOM", "name": "Exxon", "sector": "Energy", "sub_sector": "Oil & Gas", "weight": 450, "change": -1.5},
        {"ticker": "ZZZ", "name": "No Sector", "weight": 5, "change": 0.0},
    ]


@pytest.fixture(name="make_sub")
def make_sub_fixture():
    return make_sub


@pytest.fixture(name="make_sector")
def make_sector_fixture():
    return make_sector
