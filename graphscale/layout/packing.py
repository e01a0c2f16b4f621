"""Arrange connected components next to each other."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Region = Tuple[float, float, float, float]


def snake_regions(sizes: Sequence[int]) -> List[Region]:
    """Square regions ``(x0, y0, x1, y1)`` for components ordered largest first.

    The largest component takes the unit square; the others spiral around it
    going down, left, right and up, each with a side proportional to its
    size relative to the largest (never below 0.01).
    """

    regions: List[Region] = []
    if not sizes:
        return regions
    largest = max(int(sizes[0]), 1)
    x_min, y_min, x_max, y_max = 1.0, 0.0, 1.0, 1.0
    direction = 0
    regions.append((0.0, 0.0, 1.0, 1.0))
    for count in sizes[1:]:
        size = max(float(count) / largest, 0.01)
        x0, y0 = x_min, y_min
        x1, y1 = x0 + size, y0 + size
        x_max = max(x_max, x1)
        y_max = max(y_max, y1)
        if direction == 0:
            y_min += size
            if y_min >= y_max:
                direction = 1
        elif direction == 1:
            x_min -= size
            if x_min <= 0.0:
                direction = 2
                y_min = y_max
        elif direction == 2:
            x_min += size
            if x_min >= x_max:
                direction = 3
        else:
            y_min -= size
            if y_min <= 0.0:
                direction = 0
                x_min = x_max
        regions.append((x0, y0, x1, y1))
    return regions


def fit_into(pos: np.ndarray, members: Sequence[int], region: Region, margin: float) -> None:
    """Rescale the bounding box of ``members`` into ``region`` shrunk by ``margin`` of its side."""

    rows = np.asarray(members, dtype=int)
    if rows.size == 0:
        return
    x0, y0, x1, y1 = region
    inset = (x1 - x0) * margin
    x0, y0, x1, y1 = x0 + inset, y0 + inset, x1 - inset, y1 - inset
    pts = pos[rows]
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    span = hi - lo
    span[span == 0.0] = 1.0
    scaled = (pts - lo) / span
    pos[rows, 0] = x0 + (x1 - x0) * scaled[:, 0]
    pos[rows, 1] = y0 + (y1 - y0) * scaled[:, 1]


def pack_components(pos: np.ndarray, components: Sequence[Sequence[int]], margin: float = 1.0 / 6.0) -> List[Region]:
    """Move every component into its own snake region; returns the regions used."""

    ordered = sorted((list(c) for c in components if len(c)), key=len, reverse=True)
    regions = snake_regions([len(c) for c in ordered])
    for members, region in zip(ordered, regions):
        fit_into(pos, members, region, margin)
    logger.info("Packed %d components", len(ordered))
    return regions


def pack_components_minimal(pos: np.ndarray, components: Sequence[Sequence[int]]) -> None:
    """Collapse each component onto one point of a square grid, largest first."""

    ordered = sorted((list(c) for c in components if len(c)), key=len, reverse=True)
    edge = int(1 + math.sqrt(len(ordered)))
    for slot, members in enumerate(ordered):
        gx, gy = divmod(slot, edge)
        pos[np.asarray(members, dtype=int)] = (float(gx), float(gy))
    logger.info("Collapsed %d components onto a %dx%d grid", len(ordered), edge, edge)


__all__ = ["fit_into", "pack_components", "pack_components_minimal", "snake_regions"]
