"""Leveled incremental insertion on top of the stress majorizer.

A level policy splits a component into ordered levels. Each level is seeded
next to the nodes already placed, relaxed together with them and retried a
number of times; the lowest-stress attempt wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

import numpy as np

from ..cancellation import CancellationToken, check_cancelled
from ..config import StressConfig
from ..distance.oracle import DistanceOracle
from ..graph.model import GraphView
from ..logging_utils import apply_debug_logging
from .majorizer import StressMajorizer
from .objective import stress

logger = logging.getLogger(__name__)


@dataclass
class Level:
    nodes: List[int]
    trials: int


class LevelPolicy(Protocol):
    def levels(
        self,
        graph: GraphView,
        oracle: DistanceOracle,
        members: Sequence[int],
        rng: np.random.Generator,
    ) -> List[Level]: ...


def _even_trials(total: int, groups: List[List[int]]) -> List[Level]:
    return [Level(group, max(1, total // len(group))) for group in groups if group]


class PercentileLevels:
    """Random order cut at 5%, 20% and 40% of the component."""

    cuts = (0.05, 0.20, 0.40)
    trials = (30, 10, 5, 2)

    def levels(self, graph, oracle, members, rng) -> List[Level]:
        order = [int(members[i]) for i in rng.permutation(len(members))]
        n = len(order)
        bounds = [0] + [int(cut * n) for cut in self.cuts] + [n]
        out = []
        for idx in range(len(self.trials)):
            chunk = order[bounds[idx] : bounds[idx + 1]]
            if chunk:
                out.append(Level(chunk, self.trials[idx]))
        return out


class DepthFirstLevels:
    """Sparse levels drawn from a depth-first walk of the component."""

    def levels(self, graph, oracle, members, rng) -> List[Level]:
        member_set = set(int(m) for m in members)
        start = max(member_set, key=lambda i: (graph.neighbor_count(i), -i))
        visit: List[int] = []
        seen = set()
        stack = [start]
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            visit.append(node)
            for slot in range(graph.neighbor_count(node) - 1, -1, -1):
                nbor = graph.neighbor(node, slot)
                if nbor in member_set and nbor not in seen:
                    stack.append(nbor)
        n = len(visit)
        cap0 = max(4, int(0.05 * n))
        cap1 = max(10, int(0.15 * n))
        groups: List[List[int]] = [[], [], []]
        for pos, node in enumerate(visit):
            if len(groups[0]) < cap0 and pos % 20 == 0:
                groups[0].append(node)
            elif len(groups[1]) < cap1 and pos % 9 == 0:
                groups[1].append(node)
            else:
                groups[2].append(node)
        return _even_trials(n, groups)


class MaxMinLevels:
    """Farthest-point landmarks first, everything else last."""

    def levels(self, graph, oracle, members, rng) -> List[Level]:
        nodes = [int(m) for m in members]
        n = len(nodes)
        if n < 20:
            return _even_trials(n, [nodes[:2], nodes[2:4], nodes[4:]])

        dist = oracle.submatrix(nodes)
        count = max(1, int(0.15 * n))
        first = max(1, int(0.05 * n))
        pick = int(rng.integers(n))
        picks = [pick]
        nearest = dist[pick].copy()
        while len(picks) < count:
            nearest[picks] = -np.inf
            pick = int(np.argmax(nearest))
            picks.append(pick)
            nearest = np.minimum(nearest, dist[pick])
        chosen = set(picks)
        groups = [
            [nodes[p] for p in picks[:first]],
            [nodes[p] for p in picks[first:]],
            [nodes[i] for i in range(n) if i not in chosen],
        ]
        return _even_trials(n, groups)


def seed_position(
    pos: np.ndarray,
    oracle: DistanceOracle,
    node: int,
    placed: Sequence[int],
    rng: np.random.Generator,
) -> np.ndarray:
    """Starting point for ``node`` near its two closest placed nodes."""

    if len(placed) == 0:
        return rng.random(2)
    placed_arr = np.asarray(placed, dtype=int)
    target = oracle.submatrix([node], placed_arr)[0]
    order = np.argsort(target, kind="stable")
    j = int(placed_arr[order[0]])
    if placed_arr.size == 1:
        return pos[j] + rng.uniform(-0.5, 0.5, size=2)
    k = int(placed_arr[order[1]])
    t_ij, t_ik = float(target[order[0]]), float(target[order[1]])
    t_jk = oracle.d(j, k)
    y = 0.0
    if t_jk > 0.0 and np.isfinite(t_jk):
        y = min((t_ik**2 - t_ij**2 - t_jk**2) / (2.0 * t_jk**2), 0.5)
    spread = 0.5 * min(t_ij, t_ik)
    if not np.isfinite(spread):
        spread = 0.5
    return pos[j] + y * (pos[j] - pos[k]) + rng.uniform(-spread, spread, size=2)


def arrange_incrementally(
    oracle: DistanceOracle,
    pos: np.ndarray,
    levels: Sequence[Level],
    *,
    config: Optional[StressConfig] = None,
    rng: Optional[np.random.Generator] = None,
    cancel: Optional[CancellationToken] = None,
    reset_span: float = 1000.0,
) -> float:
    """Insert ``levels`` one after another and return the final stress."""

    config = config or StressConfig()
    rng = rng if rng is not None else np.random.default_rng()
    majorizer = StressMajorizer(oracle, config, rng, cancel, reset_span=reset_span)
    placed: List[int] = []
    best_stress = 0.0
    for depth, level in enumerate(levels):
        combined = placed + list(level.nodes)
        saved = pos.copy()
        best_stress = float("inf")
        best_pos = saved
        for trial in range(max(1, level.trials)):
            check_cancelled(cancel)
            pos[:] = saved
            for node in level.nodes:
                pos[node] = seed_position(pos, oracle, node, placed, rng)
            majorizer.run(pos, combined, combined, max_iterations=3 * len(level.nodes))
            value = stress(pos, oracle, config.weighting, combined, weight_floor=config.weight_floor)
            logger.debug("Level %d trial %d stress %.6g", depth, trial, value)
            if value < best_stress:
                best_stress = value
                best_pos = pos.copy()
        pos[:] = best_pos
        placed = combined
        logger.info(
            "Inserted level %d (%d nodes, %d trials), stress %.6g",
            depth,
            len(level.nodes),
            level.trials,
            best_stress,
        )
    return best_stress


apply_debug_logging(globals(), logger=logger, skip={"seed_position"})

__all__ = [
    "DepthFirstLevels",
    "Level",
    "LevelPolicy",
    "MaxMinLevels",
    "PercentileLevels",
    "arrange_incrementally",
    "seed_position",
]
