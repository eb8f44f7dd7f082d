"""Tests for market-cap dampening and the count-based schedule."""

import math

import pytest

from dampening import DampeningParams, dampen, dampen_weights, dampening_params


class TestDampen:
    def test_power_compression(self) -> None:
        assert dampen(100, 0.5) == pytest.approx(10.0)

    def test_default_exponent(self) -> None:
        assert dampen(100) == pytest.approx(100 ** 0.45)

    @pytest.mark.parametrize("weight", [0, -5, 0.01])
    def test_clamps_small_and_negative(self, weight) -> None:
        assert dampen(weight, 0.5) == pytest.approx(math.sqrt(0.1))


class TestDampenWeights:
    def test_empty(self) -> None:
        assert dampen_weights([], 0.45, 0.03) == []

    def test_preserves_length_and_order(self) -> None:
        out = dampen_weights([1, 10000, 100], 0.5, 0.0)
        assert out == pytest.approx([1.0, 100.0, 10.0])

    @pytest.mark.parametrize("ratio", [0.03, 0.06, 0.12, 0.5])
    def test_floor_guarantee(self, ratio) -> None:
        out = dampen_weights([3_000_000, 1200, 40, 1, 0, -7], 0.45, ratio)
        floor = max(out) * ratio
        assert all(v >= floor - 1e-12 for v in out)

    def test_floor_lifts_small_values(self) -> None:
        out = dampen_weights([10000, 1], 0.5, 0.2)
        # 100 and 1 -> the 1 is lifted to 20
        assert out == pytest.approx([100.0, 20.0])

    def test_ordering_preserved(self) -> None:
        weights = [1000, 500, 100, 50, 10]
        out = dampen_weights(weights, 0.45, 0.0)
        assert out == sorted(out, reverse=True)
        assert len(set(out)) == len(out)

    def test_compresses_dynamic_range(self) -> None:
        out = dampen_weights([3000, 3], 0.45, 0.0)
        assert out[0] / out[1] < 3000 / 3


class TestDampeningParams:
    @pytest.mark.parametrize(
        "count, expected",
        [
            (30, (0.35, 0.12)),
            (35, (0.35, 0.12)),
            (36, (0.40, 0.06)),
            (105, (0.40, 0.06)),
            (106, (0.45, 0.03)),
            (500, (0.45, 0.03)),
            (None, (0.45, 0.03)),
        ],
    )
    def test_schedule(self, count, expected) -> None:
        assert dampening_params(count) == DampeningParams(*expected)

    def test_min_floor_raises_floor(self) -> None:
        assert dampening_params(500, min_floor=0.05) == DampeningParams(0.45, 0.05)

    def test_min_floor_never_lowers(self) -> None:
        assert dampening_params(30, min_floor=0.05).min_area_ratio == 0.12
