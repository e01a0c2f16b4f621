"""Post-processing passes over a coordinate array."""

from __future__ import annotations

import logging
import math
from typing import List, Optional

import numpy as np

from ..graph.model import GraphView

logger = logging.getLogger(__name__)

BUCKETS = 45
MIN_OPENINGS = 10
ANGLE_STEP = 7.0


def _bucket(angle_rad: float) -> int:
    return int((angle_rad % (2.0 * math.pi)) / (2.0 * math.pi) * BUCKETS) % BUCKETS


def reattach_pendants(graph: GraphView, pos: np.ndarray, rng: np.random.Generator) -> int:
    """Spiral degree-one nodes around their neighbor, away from its other edges.

    Returns the number of nodes moved. Two-node components are left alone.
    """

    placed = 0
    for i in range(graph.entity_count()):
        if graph.neighbor_count(i) <= 1:
            continue
        closed = np.zeros(BUCKETS, dtype=bool)
        pendants: List[int] = []
        nearest = math.inf
        for slot in range(graph.neighbor_count(i)):
            j = graph.neighbor(i, slot)
            if graph.neighbor_count(j) == 1:
                pendants.append(j)
                continue
            dx, dy = pos[j] - pos[i]
            nearest = min(nearest, math.hypot(dx, dy))
            b = _bucket(math.atan2(dy, dx))
            closed[[b, (b + 1) % BUCKETS, (b - 1) % BUCKETS]] = True
        if not pendants:
            continue

        outer = 2.0 if math.isinf(nearest) else 0.32 * nearest
        inner = 0.28 * outer
        if (~closed).sum() < MIN_OPENINGS:
            closed[rng.integers(BUCKETS, size=MIN_OPENINGS)] = False

        angle = 0.0
        for index, j in enumerate(pendants):
            while closed[int(angle / 360.0 * BUCKETS) % BUCKETS]:
                angle += ANGLE_STEP
            radius = (outer - inner) * index / len(pendants) + inner
            theta = math.radians(angle)
            pos[j] = pos[i] + radius * np.array([math.cos(theta), math.sin(theta)])
            placed += 1
            angle += ANGLE_STEP
    logger.info("Reattached %d pendant nodes", placed)
    return placed


def scrub_non_finite(
    pos: np.ndarray,
    rng: np.random.Generator,
    *,
    rows: Optional[np.ndarray] = None,
    span: float = 1.0,
) -> np.ndarray:
    """Replace rows holding NaN or infinite values with random ones; returns the fixed row indices."""

    candidates = np.arange(pos.shape[0]) if rows is None else np.asarray(rows, dtype=int)
    bad = candidates[~np.isfinite(pos[candidates]).all(axis=1)]
    if bad.size:
        pos[bad] = rng.uniform(0.0, span, size=(bad.size, 2))
    return bad


def randomize_missing(pos: np.ndarray, known: np.ndarray, rng: np.random.Generator) -> int:
    """Give every row not flagged in ``known`` a uniform position in the unit square."""

    missing = np.flatnonzero(~known)
    if missing.size:
        pos[missing] = rng.random((missing.size, 2))
    return int(missing.size)


__all__ = ["randomize_missing", "reattach_pendants", "scrub_non_finite"]
