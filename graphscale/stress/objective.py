"""Stress objective and per-node error."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..config import StressWeighting
from ..distance.oracle import DistanceOracle
from ..logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)


def _check_weighting(k: int) -> int:
    k = int(k)
    if k not in (0, 1, 2):
        raise ValueError(f"stress weighting exponent must be 0, 1 or 2, got {k}")
    return k


def stress(
    pos: np.ndarray,
    oracle: DistanceOracle,
    k: int = StressWeighting.ABSOLUTE,
    subset: Optional[Sequence[int]] = None,
    *,
    weight_floor: float = 0.001,
) -> float:
    """Normalized stress of ``pos`` against ``oracle`` over the pairs of ``subset``.

    ``Σ (‖x_i − x_j‖ − t_ij)² / t_ij^k`` divided by ``Σ t_ij^(2−k)``, summed
    over ``i < j``. Pairs with no finite target distance are ignored.
    """

    k = _check_weighting(k)
    nodes = np.arange(pos.shape[0]) if subset is None else np.asarray(subset, dtype=int)
    if nodes.size < 2:
        return 0.0
    target = oracle.submatrix(nodes)
    delta = pos[nodes][:, None, :] - pos[nodes][None, :, :]
    actual = np.sqrt((delta**2).sum(axis=2))
    upper = np.triu(np.ones_like(target, dtype=bool), k=1) & np.isfinite(target) & (target > 0.0)
    t = target[upper]
    if t.size == 0:
        return 0.0
    numerator = ((actual[upper] - t) ** 2 / np.maximum(t**k, weight_floor)).sum()
    denominator = (t ** (2 - k)).sum()
    return float(numerator / denominator) if denominator > 0 else 0.0


def node_stress(
    pos: np.ndarray,
    oracle: DistanceOracle,
    node: int,
    compare: Sequence[int],
) -> float:
    """Root mean squared error between ``node``'s layout and oracle distances to ``compare``."""

    others = np.asarray([j for j in compare if j != node], dtype=int)
    if others.size == 0:
        return 0.0
    target = oracle.submatrix([node], others)[0]
    finite = np.isfinite(target)
    if not finite.any():
        return 0.0
    actual = np.linalg.norm(pos[others[finite]] - pos[node], axis=1)
    return float(np.sqrt(np.mean((target[finite] - actual) ** 2)))


apply_debug_logging(globals(), logger=logger, skip={"node_stress"})

__all__ = ["node_stress", "stress"]
