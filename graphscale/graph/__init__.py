"""Graph model, derived views and reference generators."""

from .components import adjacency_matrix, connected_components, degree, pendant_parent, sparse_adjacency
from .factory import GraphFactory, GraphKind, GraphSize
from .model import Graph, GraphView
from .views import TwoPlusDegreeGraph, UndirectedGraph

__all__ = [
    "Graph",
    "GraphFactory",
    "GraphKind",
    "GraphSize",
    "GraphView",
    "TwoPlusDegreeGraph",
    "UndirectedGraph",
    "adjacency_matrix",
    "connected_components",
    "degree",
    "pendant_parent",
    "sparse_adjacency",
]
