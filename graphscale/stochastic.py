"""Sampled force-directed MDS.

Each movable node compares itself against a few near, random and fixed
nodes per iteration instead of all ``n`` of them. The near sample improves
over time: after every iteration it keeps the closest (by oracle distance)
of the nodes that were just compared.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, Optional, Sequence

import numpy as np

from .cancellation import CancellationToken, check_cancelled
from .config import StochasticConfig
from .distance.oracle import DistanceOracle
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)


class StochasticMode(enum.Enum):
    EXHAUSTIVE = "exhaustive"
    EXHAUSTIVE_VELOCITY = "exhaustive_velocity"
    STOCHASTIC_VELOCITY = "stochastic_velocity"
    STOCHASTIC_VELOCITY_ANNEALING = "stochastic_velocity_annealing"

    @property
    def sampled(self) -> bool:
        return self in (StochasticMode.STOCHASTIC_VELOCITY, StochasticMode.STOCHASTIC_VELOCITY_ANNEALING)

    @property
    def uses_velocity(self) -> bool:
        return self is not StochasticMode.EXHAUSTIVE


class StochasticEmbedder:
    """Runs one of the four :class:`StochasticMode` variants over a node set."""

    def __init__(
        self,
        mode: StochasticMode,
        oracle: DistanceOracle,
        config: Optional[StochasticConfig] = None,
        rng: Optional[np.random.Generator] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> None:
        self.mode = mode
        self.oracle = oracle
        self.config = config or StochasticConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cancel = cancel

    def _sample_others(self, nodes: np.ndarray, pool: np.ndarray, count: int) -> np.ndarray:
        """``count`` draws from ``pool`` per node, avoiding the node itself where possible."""

        picks = pool[self.rng.integers(pool.size, size=(nodes.size, count))]
        if pool.size > 1:
            clash = picks == nodes[:, None]
            while clash.any():
                picks[clash] = pool[self.rng.integers(pool.size, size=int(clash.sum()))]
                clash = picks == nodes[:, None]
        return picks

    def _corrections(
        self,
        snapshot: np.ndarray,
        movable: np.ndarray,
        others: np.ndarray,
        target: np.ndarray,
        contributors: int,
    ) -> np.ndarray:
        vec = snapshot[others] - snapshot[movable][:, None, :]
        length_sq = (vec**2).sum(axis=2)
        length = np.sqrt(np.where(length_sq < 1e-4, 1.0, length_sq))
        hi = target.copy()
        infinite = ~np.isfinite(hi)
        rep = self.config.repulsion_distance
        active = ~(infinite & (length >= rep))
        hi[infinite] = rep
        scale = np.where(active, self.config.weight / contributors * (length - hi) / length, 0.0)
        scale[others == movable[:, None]] = 0.0
        return (vec * scale[:, :, None]).sum(axis=1)

    def run(
        self,
        pos: np.ndarray,
        members: Sequence[int],
        pinned: Optional[Iterable[int]] = None,
        *,
        iterations: Optional[int] = None,
    ) -> int:
        """Update ``pos`` rows of ``members`` in place; returns the iteration count.

        Rows of ``pinned`` nodes are read but never written.
        """

        nodes = np.asarray(members, dtype=int)
        n = nodes.size
        if n == 0:
            return 0
        pinned_set = set(int(p) for p in (pinned or ()))
        fixed = np.asarray(sorted(pinned_set & set(nodes.tolist())), dtype=int)
        movable = np.asarray([i for i in nodes if int(i) not in pinned_set], dtype=int)
        if iterations is None:
            iterations = self.config.iterations if self.config.iterations is not None else n
        iterations = max(1, int(iterations))
        if movable.size == 0:
            return 0

        k = self.config.neighbors
        velocity = np.zeros((movable.size, 2))
        if self.mode.sampled:
            near = self._sample_others(movable, nodes, k)
            contributors = 3 * k
        else:
            exhaustive_targets = self.oracle.submatrix(movable, nodes)
            contributors = n

        for step in range(iterations):
            check_cancelled(self.cancel)
            broken = ~np.isfinite(pos[movable]).all(axis=1)
            if broken.any():
                pos[movable[broken]] = self.rng.random((int(broken.sum()), 2))

            snapshot = pos.copy()
            if self.mode.sampled:
                rand = self._sample_others(movable, nodes, k)
                fixd = self._sample_others(movable, fixed if fixed.size else nodes, k)
                others = np.concatenate([near, rand, fixd], axis=1)
                target = self.oracle.pair_distances(np.broadcast_to(movable[:, None], others.shape), others)
                order = np.argsort(target, axis=1, kind="stable")[:, :k]
                near = np.take_along_axis(others, order, axis=1)
            else:
                others = np.broadcast_to(nodes, (movable.size, n))
                target = exhaustive_targets
            vec = self._corrections(snapshot, movable, others, target, contributors)

            if self.mode.uses_velocity:
                anneal = np.ones((movable.size, 1))
                if self.mode is StochasticMode.STOCHASTIC_VELOCITY_ANNEALING:
                    anneal = self.rng.uniform(0.8, 1.2, size=(movable.size, 1))
                pos[movable] = snapshot[movable] + anneal * vec + velocity
                velocity = 0.2 * vec + 0.8 * velocity
            else:
                pos[movable] = snapshot[movable] + vec

        logger.info(
            "%s embedding moved %d of %d nodes over %d iterations",
            self.mode.value,
            movable.size,
            n,
            iterations,
        )
        return iterations


apply_debug_logging(globals(), logger=logger)

__all__ = ["StochasticEmbedder", "StochasticMode"]
