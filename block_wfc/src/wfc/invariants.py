from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from .state import NodeState

if TYPE_CHECKING:
    from .solver import WFCSolver

"""Pluggable constraints that veto candidate states."""

VERTICAL_AXIS = 1


class Invariant(ABC):
    """A constraint consulted for every candidate state.

    Implementations may read the solver's graph and collapsed set but must
    not mutate them.
    """

    @abstractmethod
    def check(self, node: int, state: NodeState, solver: "WFCSolver") -> bool:
        """Return True if ``state`` is admissible at ``node``."""

    @abstractmethod
    def propagate(self, node: int, solver: "WFCSolver") -> List[int]:
        """Nodes whose candidates should be reconsidered after ``node`` collapsed."""


def vertical_neighbor(node: int, solver: "WFCSolver", step: int) -> Optional[int]:
    """Graph neighbour of ``node`` offset by ``step`` along y, compared by stored position."""
    graph = solver.graph
    x, y, z = graph.node_weight(node).position
    target = (x, y + step, z)
    for neighbor in graph.neighbors_undirected(node):
        if graph.node_weight(neighbor).position == target:
            return neighbor
    return None


class GravityInvariant(Invariant):
    """A block must rest on the floor (y == 0) or on a collapsed node below it."""

    def check(self, node: int, state: NodeState, solver: "WFCSolver") -> bool:
        if state.position[VERTICAL_AXIS] == 0:
            return True
        below = vertical_neighbor(node, solver, -1)
        # No node below in the graph means there is nothing to rest on
        return below is not None and below in solver.collapsed

    def propagate(self, node: int, solver: "WFCSolver") -> List[int]:
        above = vertical_neighbor(node, solver, 1)
        if above is None or above in solver.collapsed:
            return []
        return [above]


__all__ = ["Invariant", "GravityInvariant", "vertical_neighbor"]
