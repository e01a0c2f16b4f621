"""Reference graph generators used by demos, benchmarks and tests."""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, List, Mapping, Optional, Set, Tuple

import numpy as np

from .components import connected_components
from .views import UndirectedGraph

logger = logging.getLogger(__name__)


class GraphSize(enum.Enum):
    SMALL = 0
    MEDIUM = 1
    LARGE = 2


class GraphKind(enum.Enum):
    RING = "ring"
    CLUSTER = "cluster"
    BINARY_TREE = "binary_tree"
    QUAD_TREE = "quad_tree"
    BUNCHES = "bunches"
    MESH = "mesh"
    CONDUCTANCE_CLUSTER = "conductance_cluster"
    CROSS = "cross"
    GRID_CITY = "grid_city"


class GraphFactory:
    """Builds synthetic graphs whose default dimensions follow ``size``.

    ``params`` overrides individual dimensions by name (``ringsize``,
    ``depth``, ...); randomized generators draw from ``rng``.
    """

    def __init__(
        self,
        size: GraphSize = GraphSize.SMALL,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.size = size
        self.rng = rng if rng is not None else np.random.default_rng()

    def create(self, kind: GraphKind, params: Optional[Mapping[str, float]] = None) -> UndirectedGraph:
        builders: Dict[GraphKind, Callable[[Mapping[str, float]], UndirectedGraph]] = {
            GraphKind.RING: self.ring,
            GraphKind.CLUSTER: self.cluster,
            GraphKind.BINARY_TREE: self.binary_tree,
            GraphKind.QUAD_TREE: self.quad_tree,
            GraphKind.BUNCHES: self.bunches,
            GraphKind.MESH: self.mesh,
            GraphKind.CONDUCTANCE_CLUSTER: self.conductance_cluster,
            GraphKind.CROSS: self.cross,
            GraphKind.GRID_CITY: self.grid_city,
        }
        graph = builders[kind](params or {})
        logger.info(
            "Generated %s graph (%s) with %d entities and %d edges",
            kind.value,
            self.size.name.lower(),
            graph.entity_count(),
            graph.edge_count(),
        )
        return graph

    def _param(self, params: Mapping[str, float], name: str, small: int, medium: int, large: int) -> int:
        if name in params:
            return int(params[name])
        return (small, medium, large)[self.size.value]

    def ring(self, params: Mapping[str, float]) -> UndirectedGraph:
        ring_size = self._param(params, "ringsize", 16, 32, 64)
        edge_nbors = self._param(params, "edgenbors", 5, 8, 10)
        graph = UndirectedGraph()
        for i in range(ring_size):
            graph.add_edge(f"r{i}", f"r{(i + 1) % ring_size}")
        for i in range(0, ring_size, 2):
            r0, r1 = f"r{i}", f"r{(i + 1) % ring_size}"
            for j in range(edge_nbors):
                leaf = f"r{i}_n{j}"
                graph.add_edge(r0, leaf)
                graph.add_edge(r1, leaf)
        return graph

    def binary_tree(self, params: Mapping[str, float]) -> UndirectedGraph:
        fan = int(params.get("fan", 2))
        if fan == 2:
            depth = self._param(params, "depth", 5, 7, 8)
        else:
            depth = self._param(params, "depth", 2, 3, 4)
        graph = UndirectedGraph()
        graph.add_entity("r")
        frontier: List[Tuple[str, int]] = [("r", depth)]
        while frontier:
            parent, remaining = frontier.pop()
            if remaining <= 0:
                continue
            for i in range(fan):
                child = f"{parent}{i}"
                graph.add_edge(parent, child)
                frontier.append((child, remaining - 1))
        return graph

    def quad_tree(self, params: Mapping[str, float]) -> UndirectedGraph:
        merged = {"depth": (3, 4, 5)[self.size.value], **params, "fan": 4}
        return self.binary_tree(merged)

    def mesh(self, params: Mapping[str, float]) -> UndirectedGraph:
        size = self._param(params, "size", 10, 20, 25)
        graph = UndirectedGraph()
        for i in range(size):
            for j in range(size):
                graph.add_entity(f"node_{i}_{j}")
        for i in range(size):
            for j in range(size):
                for di, dj in ((1, -1), (1, 0), (1, 1), (0, 1)):
                    ni, nj = i + di, j + dj
                    if 0 <= ni < size and 0 <= nj < size:
                        graph.add_edge(f"node_{i}_{j}", f"node_{ni}_{nj}")
        return graph

    def cross(self, params: Mapping[str, float]) -> UndirectedGraph:
        size = self._param(params, "size", 10, 40, 400)
        arms = self._param(params, "arms", 4, 4, 4)
        graph = UndirectedGraph()
        for arm in range(arms):
            graph.add_edge("center", f"arm{arm}_0")
            for j in range(1, size):
                graph.add_edge(f"arm{arm}_{j}", f"arm{arm}_{j - 1}")
        return graph

    def grid_city(self, params: Mapping[str, float]) -> UndirectedGraph:
        gsize = self._param(params, "gsize", 3, 5, 7)
        grids = self._param(params, "grids", 4, 6, 8)
        armln = self._param(params, "armln", 10, 15, 20)
        graph = UndirectedGraph()
        for g in range(grids):
            for x in range(gsize):
                for y in range(gsize):
                    node = f"g{g}_{x}_{y}"
                    graph.add_entity(node)
                    if x > 0:
                        graph.add_edge(node, f"g{g}_{x - 1}_{y}")
                    if y > 0:
                        graph.add_edge(node, f"g{g}_{x}_{y - 1}")
        for g0 in range(grids):
            for g1 in range(grids):
                if g0 == g1:
                    continue
                for a in range(armln):
                    graph.add_edge(f"arm_{g0}_{g1}_{a}", f"arm_{g0}_{g1}_{a + 1}")
                graph.add_edge(self._grid_edge_node(g0, gsize), f"arm_{g0}_{g1}_0")
                graph.add_edge(self._grid_edge_node(g1, gsize), f"arm_{g0}_{g1}_{armln}")
        return graph

    def _grid_edge_node(self, g: int, gsize: int) -> str:
        side = self.rng.random()
        pos = int(self.rng.integers(gsize))
        last = gsize - 1
        if side < 0.25:
            return f"g{g}_0_{pos}"
        if side < 0.5:
            return f"g{g}_{last}_{pos}"
        if side < 0.75:
            return f"g{g}_{pos}_0"
        return f"g{g}_{pos}_{last}"

    def cluster(self, params: Mapping[str, float]) -> UndirectedGraph:
        size = self._param(params, "size", 50, 250, 500)
        cluster_size = self._param(params, "clustersize", 10, 25, 25)
        inter_p = float(params.get("interprob", 0.75))
        extern_p = float(params.get("externprob", 0.002))
        graph = UndirectedGraph()
        names = [f"c{i // cluster_size}_{i % cluster_size}" for i in range(size)]
        for name in names:
            graph.add_entity(name)
        for i in range(size):
            for j in range(size):
                if i == j:
                    continue
                same = i // cluster_size == j // cluster_size
                if self.rng.random() < (inter_p if same else extern_p):
                    graph.add_edge(names[i], names[j])
        _join_components(graph)
        return graph

    def bunches(self, params: Mapping[str, float]) -> UndirectedGraph:
        number = self._param(params, "number", 10, 30, 80)
        min_size = self._param(params, "minsize", 3, 5, 7)
        max_size = self._param(params, "maxsize", 5, 8, 15)
        density = float(params.get("density", 0.3))
        graph = UndirectedGraph()
        for i in range(number):
            count = int(min_size + self.rng.random() * (max_size - min_size))
            nodes = [f"g{i}_{j}" for j in range(count)]
            for node in nodes:
                graph.add_entity(node)
            for a, b in zip(nodes, nodes[1:]):
                graph.add_edge(a, b)
            for j in range(count):
                for k in range(count):
                    if abs(j - k) > 1 and self.rng.random() < density:
                        graph.add_edge(nodes[j], nodes[k])
        return graph

    def conductance_cluster(self, params: Mapping[str, float]) -> UndirectedGraph:
        """Four lattices (one L-shaped, one with holes) joined at their corners."""

        size = self._param(params, "size", 8, 16, 20)
        nodes: Set[str] = set()
        for i in range(size):
            for j in range(size):
                nodes.add(f"ul_{i}_{j}")
                nodes.add(f"lr_{i}_{j}")
                if not (i > size // 2 and j < size // 2):
                    nodes.add(f"ur_{i}_{j}")
                hole_a = size / 3 < i < 2 * size / 3 and j < 2 * size / 3
                hole_b = size / 4 < i < 3 * size / 4 and size / 4 < j < 2 * size / 3
                if not (hole_a or hole_b):
                    nodes.add(f"ll_{i}_{j}")
        graph = UndirectedGraph()
        for i in range(size):
            for j in range(size):
                for base in ("ul", "ll", "ur", "lr"):
                    node = f"{base}_{i}_{j}"
                    if node not in nodes:
                        continue
                    graph.add_entity(node)
                    for other in (f"{base}_{i}_{j + 1}", f"{base}_{i + 1}_{j}"):
                        if other in nodes:
                            graph.add_edge(node, other)
        last, mid = size - 1, size // 2
        bridges = [
            (f"ul_0_{last}", "ll_0_0"),
            (f"ul_{last}_{last}", f"ll_{last}_0"),
            (f"ul_{last}_0", "ur_0_0"),
            (f"ul_{last}_{last}", f"ur_0_{last}"),
            (f"ur_0_{last}", "lr_0_0"),
            (f"ur_{last}_{last}", f"lr_{last}_0"),
            (f"ll_{last}_0", "lr_0_0"),
            (f"ll_{last}_{last}", f"lr_0_{last}"),
            (f"ul_{last}_{mid}", "ulo"),
            (f"ll_{last}_{mid}", "llo"),
        ]
        for a, b in bridges:
            graph.add_edge(a, b)
        return graph


def _join_components(graph: UndirectedGraph) -> None:
    components = connected_components(graph)
    if len(components) <= 1:
        return
    heads = [graph.entity(comp[0]) for comp in components]
    for a in heads:
        for b in heads:
            if a != b:
                graph.add_edge(a, b)


__all__ = ["GraphFactory", "GraphKind", "GraphSize"]
