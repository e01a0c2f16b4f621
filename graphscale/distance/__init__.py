"""Distance oracles over graph views."""

from .dijkstra import ShortestPathTree, single_source_distances
from .floyd_warshall import ShortestPathOracle, edge_lengths, floyd_warshall, shortest_path_matrix
from .hybrid import HybridDistanceOracle, build_oracle, hybrid_component_matrix
from .oracle import DistanceOracle, MatrixOracle
from .resistive import (
    ResistiveDistance,
    ResistiveOracle,
    conductance_matrix,
    laplacian,
    pseudoinverse,
    resistive_distance_matrix,
)

__all__ = [
    "DistanceOracle",
    "HybridDistanceOracle",
    "MatrixOracle",
    "ResistiveDistance",
    "ResistiveOracle",
    "ShortestPathOracle",
    "ShortestPathTree",
    "build_oracle",
    "conductance_matrix",
    "edge_lengths",
    "floyd_warshall",
    "hybrid_component_matrix",
    "laplacian",
    "pseudoinverse",
    "resistive_distance_matrix",
    "shortest_path_matrix",
    "single_source_distances",
]
