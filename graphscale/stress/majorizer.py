"""Stress majorization by gradient steps, single- and multi-threaded."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..cancellation import CancellationToken, check_cancelled
from ..config import StressConfig
from ..distance.oracle import DistanceOracle
from ..logging_utils import apply_debug_logging
from .objective import node_stress, stress

logger = logging.getLogger(__name__)


@dataclass
class MajorizationResult:
    iterations: int
    velocity: float
    stress: float
    threaded: bool = False
    rescues: int = 0


class StressMajorizer:
    """Moves a set of nodes to reduce stress against a distance oracle.

    Each iteration computes every moved node's gradient from one snapshot of
    the coordinates and only then applies the steps, so the outcome does not
    depend on evaluation order. Large moved sets are split across a thread
    pool with the same compute-then-apply barrier.
    """

    def __init__(
        self,
        oracle: DistanceOracle,
        config: Optional[StressConfig] = None,
        rng: Optional[np.random.Generator] = None,
        cancel: Optional[CancellationToken] = None,
        *,
        reset_span: float = 1000.0,
    ) -> None:
        self.oracle = oracle
        self.config = config or StressConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cancel = cancel
        self.reset_span = reset_span

    # -- numerics -----------------------------------------------------
    def _targets(self, moved: np.ndarray, compare: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        target = self.oracle.submatrix(moved, compare)
        target[~np.isfinite(target)] = self.config.repulsion_distance
        floored = np.maximum(target, self.config.distance_floor)
        weight = np.maximum(floored ** int(self.config.weighting), self.config.weight_floor)
        return target, weight

    def _gradients(
        self,
        snapshot: np.ndarray,
        moved: np.ndarray,
        compare: np.ndarray,
        target: np.ndarray,
        weight: np.ndarray,
    ) -> np.ndarray:
        delta = snapshot[moved][:, None, :] - snapshot[compare][None, :, :]
        dist = np.maximum(np.sqrt((delta**2).sum(axis=2)), self.config.distance_floor)
        factor = 2.0 * (1.0 - target / dist) / weight
        factor[moved[:, None] == compare[None, :]] = 0.0
        return (delta * factor[:, :, None]).sum(axis=1)

    def _apply(self, pos: np.ndarray, rows: np.ndarray, steps: np.ndarray, seed: Optional[int]) -> None:
        updated = pos[rows] + steps
        bad = ~np.isfinite(updated)
        if bad.any():
            rng = self.rng if seed is None else np.random.default_rng(seed)
            updated[bad] = rng.uniform(-self.reset_span, self.reset_span, size=int(bad.sum()))
        pos[rows] = updated

    # -- iterations ---------------------------------------------------
    def _step_direct(self, pos, moved, compare, target, weight, mu) -> float:
        snapshot = pos.copy()
        grads = self._gradients(snapshot, moved, compare, target, weight)
        self._apply(pos, moved, -mu * grads, seed=None)
        return float(np.linalg.norm(grads, axis=1).mean())

    def _step_threaded(self, executor, pos, chunks, compare, targets, mu) -> float:
        snapshot = pos.copy()
        compute = [
            executor.submit(self._gradients, snapshot, rows, compare, target, weight)
            for rows, (target, weight) in zip(chunks, targets)
        ]
        grads = [future.result() for future in compute]
        seeds = self.rng.integers(0, 2**32, size=len(chunks))
        applies = [
            executor.submit(self._apply, pos, rows, -mu * g, int(seed))
            for rows, g, seed in zip(chunks, grads, seeds)
        ]
        for future in applies:
            future.result()
        norms = np.concatenate([np.linalg.norm(g, axis=1) for g in grads])
        return float(norms.mean())

    def _rescue(self, pos: np.ndarray, moved: np.ndarray, compare: np.ndarray) -> bool:
        """Move the worst-placed node between its two closest comparison nodes."""

        if compare.size < 3:
            return False
        errors = [node_stress(pos, self.oracle, int(i), compare) for i in moved]
        worst = int(moved[int(np.argmax(errors))])
        others = compare[compare != worst]
        target = self.oracle.submatrix([worst], others)[0]
        order = np.argsort(target, kind="stable")[:2]
        if order.size < 2:
            return False
        d0, d1 = float(target[order[0]]), float(target[order[1]])
        if d0 == 0.0 or d1 == 0.0 or not np.isfinite(d0 + d1):
            return False
        p0, p1 = pos[others[order[0]]], pos[others[order[1]]]
        if p0[0] == p1[0] or p0[1] == p1[1]:
            return False
        pos[worst] = p0 + d0 / (d0 + d1) * (p1 - p0)
        return True

    def run(
        self,
        pos: np.ndarray,
        moved: Sequence[int],
        compare: Optional[Sequence[int]] = None,
        *,
        max_iterations: Optional[int] = None,
    ) -> MajorizationResult:
        """Iterate until the mean gradient norm drops below ``velocity_min``.

        ``pos`` is an ``(n, 2)`` array over graph indices and is updated in
        place. ``compare`` defaults to ``moved``.
        """

        moved_arr = np.asarray(moved, dtype=int)
        compare_arr = moved_arr if compare is None else np.asarray(compare, dtype=int)
        budget = self.config.iteration_budget(moved_arr.size) if max_iterations is None else max_iterations
        if moved_arr.size == 0 or budget <= 0:
            return MajorizationResult(0, 0.0, stress(pos, self.oracle, self.config.weighting, compare_arr))

        mu = 1.0 / (2.0 * moved_arr.size)
        threaded = moved_arr.size > self.config.threaded_threshold
        rescues = 0
        velocity = float("inf")
        iterations = 0
        if threaded:
            chunks: List[np.ndarray] = [c for c in np.array_split(moved_arr, self.config.workers) if c.size]
            targets = [self._targets(rows, compare_arr) for rows in chunks]
            with ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix="stress") as executor:
                while iterations < budget and velocity > self.config.velocity_min:
                    check_cancelled(self.cancel)
                    velocity = self._step_threaded(executor, pos, chunks, compare_arr, targets, mu)
                    iterations += 1
                    if self.rng.random() < self.config.rescue_probability:
                        rescues += int(self._rescue(pos, moved_arr, compare_arr))
        else:
            target, weight = self._targets(moved_arr, compare_arr)
            while iterations < budget and velocity > self.config.velocity_min:
                check_cancelled(self.cancel)
                velocity = self._step_direct(pos, moved_arr, compare_arr, target, weight, mu)
                iterations += 1
                if self.rng.random() < self.config.rescue_probability:
                    rescues += int(self._rescue(pos, moved_arr, compare_arr))

        final = stress(pos, self.oracle, self.config.weighting, compare_arr, weight_floor=self.config.weight_floor)
        logger.info(
            "Majorized %d nodes in %d iterations (velocity %.4g, stress %.6g, threaded=%s, rescues=%d)",
            moved_arr.size,
            iterations,
            velocity,
            final,
            threaded,
            rescues,
        )
        return MajorizationResult(iterations, velocity, final, threaded, rescues)


def run_direct(
    oracle: DistanceOracle,
    pos: np.ndarray,
    moved: Sequence[int],
    compare: Optional[Sequence[int]] = None,
    *,
    config: Optional[StressConfig] = None,
    rng: Optional[np.random.Generator] = None,
    cancel: Optional[CancellationToken] = None,
    reset_span: float = 1000.0,
) -> MajorizationResult:
    majorizer = StressMajorizer(oracle, config, rng, cancel, reset_span=reset_span)
    return majorizer.run(pos, moved, compare)


apply_debug_logging(globals(), logger=logger)

__all__ = ["MajorizationResult", "StressMajorizer", "run_direct"]
