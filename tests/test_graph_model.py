import math

import numpy as np
import pytest

from graphscale.graph import (
    Graph,
    TwoPlusDegreeGraph,
    UndirectedGraph,
    adjacency_matrix,
    connected_components,
    degree,
    pendant_parent,
)
from graphscale.types import UnknownEntity


def _build_lollipop() -> UndirectedGraph:
    return UndirectedGraph.from_edges(
        [("x", "y"), ("y", "z"), ("z", "x"), ("z", "t1"), ("t1", "t2")]
    )


def test_counted_and_explicit_weights():
    graph = Graph()
    graph.add_edge("a", "b")
    graph.add_edge("a", "b")
    graph.add_edge("a", "c", 0.25)
    graph.add_edge("a", "c", 4.0)

    a, b, c = (graph.index_of(name) for name in "abc")
    assert graph.weight(a, b) == pytest.approx(2.0)
    assert graph.weight(a, c) == pytest.approx(4.0)
    assert math.isinf(graph.weight(b, a))
    assert graph.neighbors(a) == [b, c]
    assert graph.edge_count() == 2
    assert list(graph.entities()) == ["a", "b", "c"]


def test_unknown_entity_is_a_key_error():
    graph = Graph([("a", "b")])
    with pytest.raises(UnknownEntity):
        graph.index_of("missing")
    with pytest.raises(KeyError):
        graph.index_of("missing")
    assert "missing" not in graph
    assert graph.has_entity("a")


def test_undirected_view_merges_reciprocal_edges():
    directed = Graph()
    directed.add_edge("a", "b")
    directed.add_edge("b", "a", 2.0)
    directed.add_edge("a", "c", 1.5)
    directed.add_edge("c", "c")

    view = UndirectedGraph(directed)
    a, b, c = (view.index_of(name) for name in "abc")
    assert view.weight(a, b) == pytest.approx(3.0)
    assert view.weight(b, a) == pytest.approx(3.0)
    assert view.weight(c, a) == pytest.approx(1.5)
    assert math.isinf(view.weight(c, c))
    assert view.edge_count() == 2
    assert [view.entity(i) for i in range(view.entity_count())] == ["a", "b", "c"]


def test_undirected_add_edge_counts_both_directions():
    view = UndirectedGraph()
    view.add_edge("a", "b")
    view.add_edge("b", "a")
    view.add_edge("a", "a")
    assert view.weight(0, 1) == pytest.approx(2.0)
    assert view.weight(1, 0) == pytest.approx(2.0)
    assert view.degree(0) == 1


def test_two_plus_degree_view_strips_one_layer():
    core = TwoPlusDegreeGraph(_build_lollipop())
    assert core.removed == ["t2"]
    assert core.entity_count() == 4
    assert not core.has_entity("t2")
    t1 = core.index_of("t1")
    assert core.degree(t1) == 1


def test_connected_components_sorted_largest_first():
    graph = UndirectedGraph.from_edges([("p", "q"), ("a", "b"), ("b", "c")])
    graph.add_entity("solo")
    comps = connected_components(graph)
    assert [len(c) for c in comps] == [3, 2, 1]
    assert [graph.entity(i) for i in comps[0]] == ["a", "b", "c"]
    assert comps[2] == [graph.index_of("solo")]


def test_adjacency_matrix_and_degree_helpers():
    graph = _build_lollipop()
    matrix = adjacency_matrix(graph)
    assert matrix.shape == (5, 5)
    assert np.allclose(matrix, matrix.T)
    assert matrix[graph.index_of("x"), graph.index_of("t1")] == 0.0
    z = graph.index_of("z")
    assert degree(graph, z) == 3
    assert pendant_parent(graph, graph.index_of("t2")) == graph.index_of("t1")
    assert pendant_parent(graph, z) is None
