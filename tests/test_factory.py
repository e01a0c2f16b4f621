import numpy as np
import pytest

from graphscale.graph import GraphFactory, GraphKind, GraphSize, UndirectedGraph, connected_components


def _factory(seed: int = 0, size: GraphSize = GraphSize.SMALL) -> GraphFactory:
    return GraphFactory(size, np.random.default_rng(seed))


def test_ring_dimensions():
    graph = _factory().create(GraphKind.RING)
    assert graph.entity_count() == 16 + 8 * 5
    assert graph.edge_count() == 16 + 8 * 5 * 2
    assert len(connected_components(graph)) == 1


def test_ring_params_override_size_defaults():
    graph = _factory().create(GraphKind.RING, {"ringsize": 4, "edgenbors": 1})
    assert graph.entity_count() == 6
    leaf = graph.index_of("r0_n0")
    assert graph.degree(leaf) == 2


@pytest.mark.parametrize(
    "kind, expected",
    [
        (GraphKind.BINARY_TREE, 2**6 - 1),
        (GraphKind.QUAD_TREE, (4**4 - 1) // 3),
        (GraphKind.MESH, 100),
        (GraphKind.CROSS, 4 * 10 + 1),
    ],
)
def test_deterministic_generators(kind, expected):
    graph = _factory().create(kind)
    assert isinstance(graph, UndirectedGraph)
    assert graph.entity_count() == expected
    assert len(connected_components(graph)) == 1


@pytest.mark.parametrize(
    "size, depth",
    [(GraphSize.SMALL, 3), (GraphSize.MEDIUM, 4), (GraphSize.LARGE, 5)],
)
def test_quad_tree_depth_follows_size(size, depth):
    graph = _factory(size=size).create(GraphKind.QUAD_TREE)
    assert graph.entity_count() == (4 ** (depth + 1) - 1) // 3
    assert graph.degree(graph.index_of("r")) == 4


def test_mesh_uses_eight_neighbourhood():
    graph = _factory().create(GraphKind.MESH)
    assert graph.edge_count() == 90 + 90 + 81 + 81
    assert graph.degree(graph.index_of("node_5_5")) == 8


def test_cluster_is_connected_and_reproducible():
    first = _factory(3).create(GraphKind.CLUSTER)
    second = _factory(3).create(GraphKind.CLUSTER)
    assert len(connected_components(first)) == 1
    assert first.entity_count() == 50
    assert list(first.edges()) == list(second.edges())


def test_bunches_are_disjoint_chains():
    graph = _factory(5).create(GraphKind.BUNCHES)
    comps = connected_components(graph)
    assert len(comps) == 10
    assert all(3 <= len(c) <= 5 for c in comps)


@pytest.mark.parametrize("kind", [GraphKind.GRID_CITY, GraphKind.CONDUCTANCE_CLUSTER])
def test_composite_generators_build(kind):
    graph = _factory(11).create(kind)
    assert graph.entity_count() > 0
    assert graph.edge_count() > 0
