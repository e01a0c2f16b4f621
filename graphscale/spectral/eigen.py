"""Small eigen-decomposition helpers shared by the MDS embedders."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EigenPair:
    value: float
    vector: np.ndarray


def top_eigenpairs(matrix: np.ndarray, count: int = 2) -> List[EigenPair]:
    """Largest ``count`` eigenpairs of a symmetric matrix, descending by value."""

    matrix = np.asarray(matrix, dtype=float)
    evals, evecs = np.linalg.eigh(matrix)
    order = np.argsort(evals)[::-1][:count]
    return [EigenPair(float(evals[k]), evecs[:, k].copy()) for k in order]


def power_iterate(
    matrix: np.ndarray,
    rng: np.random.Generator,
    *,
    max_iterations: int = 1000,
    tolerance: float = 1e-12,
) -> EigenPair:
    """Dominant eigenpair by power iteration from a random start vector.

    The eigenvalue estimate is the Rayleigh quotient of the normalized
    iterate; iteration stops once it moves by less than ``tolerance`` after
    at least three steps.
    """

    matrix = np.asarray(matrix, dtype=float)
    n = matrix.shape[0]
    vec = rng.random(n) - 0.5
    norm = np.linalg.norm(vec)
    vec = vec / norm if norm > 0 else np.ones(n) / np.sqrt(max(n, 1))
    value = 0.0
    for step in range(max_iterations):
        nxt = matrix @ vec
        norm = float(np.linalg.norm(nxt))
        if norm == 0.0:
            return EigenPair(0.0, vec)
        nxt /= norm
        new_value = float(nxt @ matrix @ nxt)
        converged = step > 3 and abs(new_value - value) < tolerance
        vec, value = nxt, new_value
        if converged:
            break
    return EigenPair(value, vec)


def hotelling_deflate(matrix: np.ndarray, pair: EigenPair) -> np.ndarray:
    """Remove ``pair`` from ``matrix`` so the next power iteration finds the runner-up."""

    return np.asarray(matrix, dtype=float) - pair.value * np.outer(pair.vector, pair.vector)


__all__ = ["EigenPair", "hotelling_deflate", "power_iterate", "top_eigenpairs"]
