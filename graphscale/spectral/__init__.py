"""Spectral embedders: classical, landmark and pivot MDS."""

from .classical import classical_mds, double_center, finite_distances
from .eigen import EigenPair, hotelling_deflate, power_iterate, top_eigenpairs
from .landmark import farthest_point_sampling, landmark_mds, pivot_mds

__all__ = [
    "EigenPair",
    "classical_mds",
    "double_center",
    "farthest_point_sampling",
    "finite_distances",
    "hotelling_deflate",
    "landmark_mds",
    "pivot_mds",
    "power_iterate",
    "top_eigenpairs",
]
