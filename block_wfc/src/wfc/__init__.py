"""Wave-Function-Collapse solver
================================

This package assigns a block, orientation and position to every cell of a
grid graph. It is responsible for:

1. Graph construction – one node per cell, directed +x/+y/+z adjacency.
2. Broad-phase collision – a uniform spatial grid over placed blocks.
3. Connectivity – connection points, bindings and pairwise compatibility rules.
4. Search – heuristics, invariants, observers and the backtracking solver.

The solved :class:`WFCGraph` is read by whatever renders or exports the layout.
"""

from .errors import (
    WFCError,
    NoValidStatesError,
    PropagationFailedError,
    IncompleteCollapseError,
    InvalidStateError,
    NoValidStatesAfterInvariantsError,
    HeuristicFailureError,
    MultipleStatesRemainError,
    NoSolutionError,
    NodeNotFoundError,
    NodeNotFoundAtPositionError,
)
from .state import ConnectionPoint, NodeState, EdgeState
from .graph import WFCGraph
from .spatial_grid import SpatialGrid
from .compatibility import CompatibilityRule, CompatibilityTable
from .heuristics import Heuristic, WeightedRandomHeuristic, FirstStateHeuristic
from .invariants import Invariant, GravityInvariant
from .observer import Observer, LoggingObserver, RecordingObserver, ProgressObserver
from .solver import WFCSolver, DepthFirstTraversal

__all__ = [
    # Solver
    "WFCSolver",
    "DepthFirstTraversal",

    # Data structures
    "WFCGraph",
    "NodeState",
    "ConnectionPoint",
    "EdgeState",
    "SpatialGrid",
    "CompatibilityRule",
    "CompatibilityTable",

    # Strategies
    "Heuristic",
    "WeightedRandomHeuristic",
    "FirstStateHeuristic",
    "Invariant",
    "GravityInvariant",
    "Observer",
    "LoggingObserver",
    "RecordingObserver",
    "ProgressObserver",

    # Errors
    "WFCError",
    "NoValidStatesError",
    "PropagationFailedError",
    "IncompleteCollapseError",
    "InvalidStateError",
    "NoValidStatesAfterInvariantsError",
    "HeuristicFailureError",
    "MultipleStatesRemainError",
    "NoSolutionError",
    "NodeNotFoundError",
    "NodeNotFoundAtPositionError",
]
