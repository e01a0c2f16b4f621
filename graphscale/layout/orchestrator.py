"""Entry point that runs one layout algorithm over a graph and coordinate map."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Callable, Dict, Iterable, List, Mapping, MutableMapping, Optional, Set

import numpy as np

from ..cancellation import CancellationToken, check_cancelled
from ..config import LayoutConfig, StressWeighting
from ..distance.hybrid import build_oracle
from ..distance.oracle import DistanceOracle
from ..graph.components import connected_components
from ..graph.model import GraphView
from ..graph.views import TwoPlusDegreeGraph, UndirectedGraph
from ..logging_utils import apply_debug_logging
from ..spectral.classical import classical_mds
from ..spectral.landmark import landmark_mds, pivot_mds
from ..stochastic import StochasticEmbedder, StochasticMode
from ..stress.incremental import DepthFirstLevels, LevelPolicy, MaxMinLevels, PercentileLevels, arrange_incrementally
from ..stress.majorizer import StressMajorizer
from ..stress.objective import stress
from ..types import Coord, Entity
from .algorithms import AlgorithmCategory, LayoutAlgorithm, algorithm_info
from .cleanup import randomize_missing, reattach_pendants, scrub_non_finite
from .packing import pack_components, pack_components_minimal
from .tree import tree_layout

logger = logging.getLogger(__name__)

_SCRUB_WARNING = "%s: replaced non-finite coordinates of %d entities"


@dataclass
class LayoutResult:
    coords: MutableMapping[Entity, Coord]
    algorithm: LayoutAlgorithm
    stress: Optional[float] = None
    warnings: List[str] = field(default_factory=list)
    components: int = 0


@dataclass
class _LayoutRun:
    graph: UndirectedGraph
    pos: np.ndarray
    selection: Set[int]
    config: LayoutConfig
    rng: np.random.Generator
    cancel: Optional[CancellationToken]
    components: List[List[int]]
    warnings: List[str] = field(default_factory=list)
    _oracle: Optional[DistanceOracle] = None

    @property
    def oracle(self) -> DistanceOracle:
        if self._oracle is None:
            self._oracle = build_oracle(self.graph, self.config.oracle)
        return self._oracle

    @property
    def has_oracle(self) -> bool:
        return self._oracle is not None

    def moved_in(self, members: List[int]) -> List[int]:
        if not self.selection:
            return members
        return [m for m in members if m in self.selection]


Stage = Callable[[_LayoutRun], Optional[StressWeighting]]


# -- spectral ---------------------------------------------------------
def _classical(run: _LayoutRun) -> Optional[StressWeighting]:
    oracle = run.oracle
    for comp in range(oracle.component_count):
        check_cancelled(run.cancel)
        run.pos[oracle.component_members(comp)] = classical_mds(oracle.component_matrix(comp))
    return run.config.stress.weighting


def _sampled(run: _LayoutRun, fraction: float, *, pivots: bool) -> Optional[StressWeighting]:
    embed = pivot_mds if pivots else landmark_mds
    for members in run.components:
        check_cancelled(run.cancel)
        run.pos[members] = embed(
            run.graph,
            members,
            fraction,
            config=run.config.spectral,
            rng=run.rng,
            reciprocal_weights=run.config.oracle.reciprocal_weights,
        )
    return None


# -- majorization -----------------------------------------------------
def _direct(
    run: _LayoutRun,
    weighting: StressWeighting,
    max_iterations: Optional[int] = None,
) -> Optional[StressWeighting]:
    config = replace(run.config.stress, weighting=weighting)
    if max_iterations is not None:
        config = replace(config, max_iterations=max_iterations)
    majorizer = StressMajorizer(
        run.oracle, config, run.rng, run.cancel, reset_span=run.config.random_reset_span
    )
    for members in run.components:
        check_cancelled(run.cancel)
        moved = run.moved_in(members)
        if not moved or len(members) == 1:
            continue
        if len(members) == 2:
            target = run.oracle.d(members[0], members[1])
            run.pos[members[0]] = (0.0, 0.0)
            run.pos[members[1]] = (target if np.isfinite(target) else 1.0, 0.0)
            continue
        majorizer.run(run.pos, moved, members)
    return weighting


def _stochastic(run: _LayoutRun, mode: StochasticMode) -> Optional[StressWeighting]:
    embedder = StochasticEmbedder(mode, run.oracle, run.config.stochastic, run.rng, run.cancel)
    for members in run.components:
        check_cancelled(run.cancel)
        pinned = [m for m in members if run.selection and m not in run.selection]
        embedder.run(run.pos, members, pinned)
    return run.config.stress.weighting


def _incremental(run: _LayoutRun, policy: LevelPolicy) -> Optional[StressWeighting]:
    for members in run.components:
        check_cancelled(run.cancel)
        if len(members) < 2:
            continue
        levels = policy.levels(run.graph, run.oracle, members, run.rng)
        arrange_incrementally(
            run.oracle,
            run.pos,
            levels,
            config=run.config.stress,
            rng=run.rng,
            cancel=run.cancel,
            reset_span=run.config.random_reset_span,
        )
    return run.config.stress.weighting


# -- trees and utilities ----------------------------------------------
def _tree(run: _LayoutRun, hyper: bool) -> Optional[StressWeighting]:
    tree_layout(run.graph, run.pos, run.selection, hyper=hyper)
    return None


def _tree_two_plus(run: _LayoutRun, hyper: bool) -> Optional[StressWeighting]:
    core = TwoPlusDegreeGraph(run.graph)
    if core.entity_count():
        rows = np.array([run.graph.index_of(core.entity(i)) for i in range(core.entity_count())], dtype=int)
        core_pos = run.pos[rows].copy()
        core_selection = {core.index_of(run.graph.entity(i)) for i in run.selection if core.has_entity(run.graph.entity(i))}
        tree_layout(core, core_pos, core_selection, hyper=hyper)
        run.pos[rows] = core_pos
    reattach_pendants(run.graph, run.pos, run.rng)
    return None


def _reattach(run: _LayoutRun) -> Optional[StressWeighting]:
    reattach_pendants(run.graph, run.pos, run.rng)
    return None


def _pack(run: _LayoutRun, minimal: bool) -> Optional[StressWeighting]:
    if minimal:
        pack_components_minimal(run.pos, run.components)
    else:
        pack_components(run.pos, run.components, run.config.packing_margin)
    return None


_DISPATCH: Dict[LayoutAlgorithm, Stage] = {
    LayoutAlgorithm.CLASSICAL_MDS: _classical,
    LayoutAlgorithm.PIVOT_MDS_1: partial(_sampled, fraction=0.01, pivots=True),
    LayoutAlgorithm.PIVOT_MDS_5: partial(_sampled, fraction=0.05, pivots=True),
    LayoutAlgorithm.PIVOT_MDS_20: partial(_sampled, fraction=0.20, pivots=True),
    LayoutAlgorithm.LANDMARK_MDS_10: partial(_sampled, fraction=0.10, pivots=False),
    LayoutAlgorithm.LANDMARK_MDS_20: partial(_sampled, fraction=0.20, pivots=False),
    LayoutAlgorithm.LANDMARK_MDS_30: partial(_sampled, fraction=0.30, pivots=False),
    LayoutAlgorithm.DIRECT_ABSOLUTE: partial(_direct, weighting=StressWeighting.ABSOLUTE),
    LayoutAlgorithm.DIRECT_ABSOLUTE_100: partial(
        _direct, weighting=StressWeighting.ABSOLUTE, max_iterations=100
    ),
    LayoutAlgorithm.DIRECT_SEMIPROPORTIONAL: partial(_direct, weighting=StressWeighting.SEMIPROPORTIONAL),
    LayoutAlgorithm.DIRECT_PROPORTIONAL: partial(_direct, weighting=StressWeighting.PROPORTIONAL),
    LayoutAlgorithm.STOCHASTIC_EXHAUSTIVE: partial(_stochastic, mode=StochasticMode.EXHAUSTIVE),
    LayoutAlgorithm.STOCHASTIC_EXHAUSTIVE_VELOCITY: partial(
        _stochastic, mode=StochasticMode.EXHAUSTIVE_VELOCITY
    ),
    LayoutAlgorithm.STOCHASTIC_VELOCITY: partial(_stochastic, mode=StochasticMode.STOCHASTIC_VELOCITY),
    LayoutAlgorithm.STOCHASTIC_VELOCITY_ANNEALING: partial(
        _stochastic, mode=StochasticMode.STOCHASTIC_VELOCITY_ANNEALING
    ),
    LayoutAlgorithm.INCREMENTAL_PERCENTILE: partial(_incremental, policy=PercentileLevels()),
    LayoutAlgorithm.INCREMENTAL_DEPTH_FIRST: partial(_incremental, policy=DepthFirstLevels()),
    LayoutAlgorithm.INCREMENTAL_MAXMIN: partial(_incremental, policy=MaxMinLevels()),
    LayoutAlgorithm.TREE: partial(_tree, hyper=False),
    LayoutAlgorithm.HYPERTREE: partial(_tree, hyper=True),
    LayoutAlgorithm.TREE_TWO_PLUS: partial(_tree_two_plus, hyper=False),
    LayoutAlgorithm.HYPERTREE_TWO_PLUS: partial(_tree_two_plus, hyper=True),
    LayoutAlgorithm.REATTACH_PENDANTS: _reattach,
    LayoutAlgorithm.PACK_COMPONENTS: partial(_pack, minimal=False),
    LayoutAlgorithm.PACK_COMPONENTS_MINIMAL: partial(_pack, minimal=True),
}

_PACKED_AFTERWARDS = {
    AlgorithmCategory.SPECTRAL,
    AlgorithmCategory.MAJORIZATION,
    AlgorithmCategory.STOCHASTIC,
    AlgorithmCategory.INCREMENTAL,
}


def execute_layout(
    algorithm: LayoutAlgorithm,
    graph: GraphView,
    coords: Optional[MutableMapping[Entity, Coord]] = None,
    selection: Optional[Iterable[Entity]] = None,
    config: Optional[LayoutConfig] = None,
    cancel: Optional[CancellationToken] = None,
) -> LayoutResult:
    """Run ``algorithm`` over ``graph`` and write the positions into ``coords``.

    Entities missing from ``coords`` start at random positions in the unit
    square. Every connected component is laid out on its own and, for the
    embedding algorithms, packed next to the others afterwards. The map is
    updated in place and always ends up finite, even when the run is
    cancelled or fails part way.
    """

    algorithm = LayoutAlgorithm(algorithm)
    config = config or LayoutConfig()
    info = algorithm_info(algorithm)
    rng = np.random.default_rng(config.random_seed)
    view = graph if isinstance(graph, UndirectedGraph) else UndirectedGraph(graph)
    coords = {} if coords is None else coords

    n = view.entity_count()
    pos = np.zeros((n, 2))
    known = np.zeros(n, dtype=bool)
    for i in range(n):
        point = coords.get(view.entity(i))
        if point is not None:
            pos[i] = (float(point[0]), float(point[1]))
            known[i] = True
    randomize_missing(pos, known, rng)
    selected = {view.index_of(e) for e in (selection or ()) if view.has_entity(e)}

    run = _LayoutRun(
        graph=view,
        pos=pos,
        selection=selected,
        config=config,
        rng=rng,
        cancel=cancel,
        components=connected_components(view),
    )
    result = LayoutResult(coords=coords, algorithm=algorithm, components=len(run.components))
    logger.info(
        "Running %s over %d entities in %d components",
        algorithm.value,
        n,
        len(run.components),
    )
    try:
        weighting = _DISPATCH[algorithm](run)
        if weighting is not None and run.has_oracle and n > 1:
            result.stress = stress(pos, run.oracle, weighting, weight_floor=config.stress.weight_floor)
        if info.category in _PACKED_AFTERWARDS and len(run.components) > 1:
            pack_components(pos, run.components, config.packing_margin)
    finally:
        fixed = scrub_non_finite(pos, rng)
        if fixed.size:
            args = (algorithm.value, int(fixed.size))
            logger.warning(_SCRUB_WARNING, *args)
            run.warnings.append(_SCRUB_WARNING % args)
        for i in range(n):
            coords[view.entity(i)] = (float(pos[i, 0]), float(pos[i, 1]))
        result.warnings.extend(run.warnings)

    if result.stress is not None:
        logger.info("%s finished with stress %.6g", algorithm.value, result.stress)
    return result


def layout_coordinates(
    algorithm: LayoutAlgorithm,
    graph: GraphView,
    coords: Optional[Mapping[Entity, Coord]] = None,
    **kwargs,
) -> Dict[Entity, Coord]:
    """Like :func:`execute_layout` but leaves ``coords`` alone and returns a new map."""

    working: Dict[Entity, Coord] = dict(coords or {})
    execute_layout(algorithm, graph, working, **kwargs)
    return working


apply_debug_logging(globals(), logger=logger)

__all__ = ["LayoutResult", "execute_layout", "layout_coordinates"]
