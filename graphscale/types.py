"""Shared aliases and error types for the layout engine."""

from __future__ import annotations

from typing import Dict, Hashable, Tuple

Entity = Hashable
Coord = Tuple[float, float]
CoordinateMap = Dict[Entity, Coord]


class GraphLayoutError(RuntimeError):
    """Base class for failures raised by the layout engine."""


class UnknownEntity(KeyError):
    """Raised when an entity is looked up in a graph that does not contain it."""

    def __init__(self, entity: object):
        super().__init__(entity)
        self.entity = entity

    def __str__(self) -> str:
        return f"unknown entity {self.entity!r}"


class DisconnectedGraphError(GraphLayoutError):
    """Raised when an operation that needs one connected component sees several."""

    def __init__(self, message: str, components: int):
        super().__init__(message)
        self.components = components


class LayoutCancelled(GraphLayoutError):
    """Raised when a cancellation token is triggered while a layout is running."""


__all__ = [
    "Coord",
    "CoordinateMap",
    "DisconnectedGraphError",
    "Entity",
    "GraphLayoutError",
    "LayoutCancelled",
    "UnknownEntity",
]
