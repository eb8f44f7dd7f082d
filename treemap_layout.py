"""
Squarified treemap layout.

Partitions a rectangle among weighted items so every tile stays as close to
square as the greedy strip heuristic allows. The engine knows nothing about
sectors or stocks: it lays out ``(weight, payload)`` pairs and hands the
payload back on each rectangle.
"""

from dataclasses import dataclass
from typing import Any, Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def area(self):
        return self.w * self.h


@dataclass(frozen=True)
class WeightedItem(Generic[T]):
    weight: float
    payload: T


@dataclass(frozen=True)
class LayoutItem(Rect, Generic[T]):
    """One rectangle bound to the payload it was laid out for."""

    payload: Any = None

    @property
    def rect(self):
        return Rect(self.x, self.y, self.w, self.h)


def worst_ratio(largest, smallest, strip_weight, thickness, breadth):
    """
    Worst aspect ratio a strip would produce if laid out now.

    thickness: strip size across the strip (grows as items are added)
    breadth: strip length, shared by the items in proportion to their weight

    max(a/b, b/a) only peaks at the extremes, so the largest and smallest
    positive weights are enough to find the worst tile in the strip.
    """
    worst = 0.0
    if strip_weight <= 0 or thickness <= 0:
        return worst
    for weight in (largest, smallest):
        if weight is None:
            continue
        item_dim = breadth * (weight / strip_weight)
        if item_dim > 0:
            worst = max(worst, thickness / item_dim, item_dim / thickness)
    return worst


def _size(item):
    # negative weights would push tiles outside the rectangle; they count as 0
    return max(item.weight, 0)


def _choose_strip(queue, start, total, length, breadth):
    """Return the end index of the strip starting at ``start``."""
    strip_weight = 0.0
    best = float("inf")
    split = start + 1
    largest = _size(queue[start])
    smallest = None

    for i in range(start, len(queue)):
        weight = _size(queue[i])
        strip_weight += weight
        # sorted descending: the last positive weight seen is the smallest
        if weight > 0:
            smallest = weight
        thickness = length * (strip_weight / total)
        worst = worst_ratio(largest, smallest, strip_weight, thickness, breadth)
        if worst <= best:
            best = worst
            split = i + 1
        else:
            break
    return split


def squarify(items: Sequence[WeightedItem[T]], x: float, y: float, w: float, h: float) -> List[LayoutItem[T]]:
    """
    Squarified treemap layout.

    Returns one LayoutItem per placed item, in descending weight order.
    An empty list means there is nothing to draw: no items, no area or no
    positive total weight.
    """
    if not items or w <= 0 or h <= 0:
        return []

    total = sum(_size(item) for item in items)
    if total <= 0:
        return []

    # [DETERMINISTIC] stable sort: equal weights keep their input order
    queue = sorted(items, key=lambda item: item.weight, reverse=True)
    rects = []
    start = 0

    while start < len(queue) and w > 0 and h > 0:
        if len(queue) - start == 1:
            rects.append(LayoutItem(x, y, w, h, queue[start].payload))
            break

        is_wide = w >= h
        if is_wide:
            split = _choose_strip(queue, start, total, w, h)
        else:
            split = _choose_strip(queue, start, total, h, w)

        strip = queue[start:split]
        strip_weight = sum(_size(item) for item in strip)
        strip_frac = strip_weight / total

        if is_wide:
            # column on the left, items stacked top to bottom
            strip_w = w * strip_frac
            current_y = y
            for item in strip:
                item_h = h * (_size(item) / strip_weight)
                rects.append(LayoutItem(x, current_y, strip_w, item_h, item.payload))
                current_y += item_h
            x += strip_w
            w -= strip_w
        else:
            # row on top, items side by side
            strip_h = h * strip_frac
            current_x = x
            for item in strip:
                item_w = w * (_size(item) / strip_weight)
                rects.append(LayoutItem(current_x, y, item_w, strip_h, item.payload))
                current_x += item_w
            y += strip_h
            h -= strip_h

        start = split
        # re-summed rather than subtracted so an all-zero tail is exactly 0
        total = sum(_size(item) for item in queue[start:])
        if total <= 0:
            break

    return rects


def calculate_treemap(data_list, x, y, width, height, value_key="weight"):
    """
    Record-friendly wrapper around squarify.

    data_list: [{'weight': 100, 'ticker': ...}, ...]
    returns: [{'x':, 'y':, 'w':, 'h':, 'data': original_item}, ...]
    """
    # [DETERMINISTIC] equal weights are ordered by ticker/sector name
    ordered = sorted(
        data_list,
        key=lambda item: (
            item.get(value_key, 0),
            item.get("ticker", item.get("sector", item.get("name", ""))),
        ),
        reverse=True,
    )
    # non-positive values still get a sliver
    items = [WeightedItem(max(item.get(value_key, 0), 0.0001), item) for item in ordered]

    return [
        {"x": r.x, "y": r.y, "w": r.w, "h": r.h, "data": r.payload}
        for r in squarify(items, x, y, width, height)
    ]


def snap_rect(rect, bound_w, bound_h, min_size=0):
    """
    Snap a float rectangle to whole pixels without opening gaps.

    [SMART-ROUNDING] w = round(x + w) - round(x), so neighbours share edges.
    [HARD-SNAP] edges within 1px of the boundary are pulled onto it.
    """
    ix, iy = round(rect.x), round(rect.y)
    iw = round(rect.x + rect.w) - ix
    ih = round(rect.y + rect.h) - iy

    if ix + iw >= bound_w - 1:
        iw = max(iw, round(bound_w) - ix)
    if iy + ih >= bound_h - 1:
        ih = max(ih, round(bound_h) - iy)

    # [DOT-GUARD]
    if min_size:
        iw, ih = max(iw, min_size), max(ih, min_size)
    return Rect(ix, iy, iw, ih)
