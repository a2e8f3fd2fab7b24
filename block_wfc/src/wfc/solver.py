"""Backtracking solver that assigns a block to every node of a WFC graph."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from block_wfc.src.common.constants import DEFAULT_CONFIG, SolverConfig
from block_wfc.src.common.diagnostics import SolverDiagnostics
from block_wfc.src.core.block import PlaceableBlock
from block_wfc.src.core.orientation import Orientation

from .compatibility import CompatibilityRule, CompatibilityTable
from .errors import (
    HeuristicFailureError,
    NodeNotFoundAtPositionError,
    NodeNotFoundError,
    IncompleteCollapseError,
    NoSolutionError,
    NoValidStatesAfterInvariantsError,
    WFCError,
)
from .graph import WFCGraph
from .heuristics import Heuristic, WeightedRandomHeuristic
from .invariants import Invariant
from .observer import Observer
from .spatial_grid import SpatialGrid
from .state import GridPosition, NodeState

Binding = Tuple[int, str]
SeedTarget = Union[None, int, GridPosition]

# Successor exploration order: +x first, then +z, then +y (floor before upper layers)
_AXIS_PRIORITY = {0: 0, 2: 1, 1: 2}


class DepthFirstTraversal:
    """Explicit-stack depth-first walk over the graph's directed edges.

    Nodes are marked discovered when popped. ``revisit`` un-discovers a node
    and schedules it again, which is how backtracking re-queues undone work.
    """

    def __init__(self, graph: WFCGraph, start: int):
        self.graph = graph
        self.stack: List[int] = [start]
        self.discovered: Set[int] = set()

    def next(self) -> Optional[int]:
        while self.stack:
            node = self.stack.pop()
            if node in self.discovered:
                continue
            self.discovered.add(node)
            for successor in reversed(self._ordered_successors(node)):
                if successor not in self.discovered:
                    self.stack.append(successor)
            return node
        return None

    def _ordered_successors(self, node: int) -> List[int]:
        origin = self.graph.node_weight(node).position

        def priority(successor: int) -> Tuple[int, int]:
            position = self.graph.node_weight(successor).position
            axes = [axis for axis in range(3) if position[axis] != origin[axis]]
            axis_rank = _AXIS_PRIORITY.get(axes[0], 3) if len(axes) == 1 else 3
            return axis_rank, successor

        return sorted(self.graph.successors(node), key=priority)

    def revisit(self, node: int) -> None:
        self.discovered.discard(node)
        self.stack.append(node)

    def restart(self, node: int) -> None:
        self.stack.append(node)


class WFCSolver:
    """Assigns a (block, orientation) to every graph node.

    A candidate survives when every invariant accepts it, it does not overlap
    an already placed block, and (once anything is placed) it can connect to
    at least one placed block. On failure the solver undoes the
    most recently committed node once and retries before giving up.

    Usage:
        graph = WFCGraph.grid_graph(3, 3, 1)
        solver = WFCSolver(graph, lego_palette(), [GravityInvariant()])
        solver.solve()
        print(solver.render_layers())
    """

    def __init__(
        self,
        graph: WFCGraph,
        block_set: Iterable[PlaceableBlock],
        invariants: Optional[Iterable[Invariant]] = None,
        heuristic: Optional[Heuristic] = None,
        observers: Optional[Iterable[Observer]] = None,
        *,
        diagnostics: Optional[SolverDiagnostics] = None,
        config: SolverConfig = DEFAULT_CONFIG,
    ):
        self.graph = graph
        # Candidate order: (symbol, repr)
        self.block_set: List[PlaceableBlock] = sorted(
            set(block_set), key=lambda block: (block.symbol(), repr(block))
        )
        self.invariants: List[Invariant] = list(invariants or [])
        self.heuristic: Heuristic = heuristic or WeightedRandomHeuristic()
        self.observers: List[Observer] = list(observers or [])
        self.config = config
        self.diagnostics = diagnostics or SolverDiagnostics()
        self.diagnostics.default_stage = "solve"

        self.collapsed: Set[int] = set()
        self.compatibility = CompatibilityTable()
        self.spatial_grid = SpatialGrid(config.cell_size)
        self.connections: Dict[int, Dict[str, Binding]] = {}
        self.history: List[Tuple[int, NodeState]] = []
        # Nodes whose failure already triggered a backtrack
        self._backtracked_from: Set[int] = set()

        self.backtrack_count = 0
        self.steps = 0

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def add_observer(self, observer: Observer) -> None:
        self.observers.append(observer)

    def add_compatibility_rule(self, rule: CompatibilityRule) -> None:
        self.compatibility.add_rule(rule)

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------

    def solve(self, seed: SeedTarget = None) -> None:
        """Collapse every node or raise a :class:`WFCError`.

        ``seed`` picks the traversal root as a handle or a grid position;
        by default the node at ``config.seed_position`` (or handle 0).
        """
        if self.graph.node_count() == 0:
            self.diagnostics.warning("Graph has no nodes, nothing to solve")
            return

        root = self._resolve_seed(seed)
        self.diagnostics.info(
            f"Solving {self.graph.node_count()} nodes with {len(self.block_set)} "
            f"block type(s) and {len(self.invariants)} invariant(s)",
            node=root,
        )

        traversal = DepthFirstTraversal(self.graph, root)
        while True:
            node = traversal.next()
            if node is None:
                pending = [n for n in self.graph.node_indices() if n not in traversal.discovered]
                if not pending:
                    break
                self.diagnostics.debug(f"Restarting traversal at node {pending[0]}")
                traversal.restart(pending[0])
                continue

            self._count_step()
            try:
                self.collapse_node(node)
            except (NoValidStatesAfterInvariantsError, HeuristicFailureError) as exc:
                self._backtrack(node, exc, traversal)

        remaining = [n for n in self.graph.node_indices() if n not in self.collapsed]
        if remaining:
            raise IncompleteCollapseError(remaining[0])

        self.diagnostics.info(
            f"Solved {len(self.collapsed)} nodes in {self.steps} step(s) "
            f"with {self.backtrack_count} backtrack(s)"
        )

    def _count_step(self) -> None:
        self.steps += 1
        if self.config.max_steps is not None and self.steps > self.config.max_steps:
            message = f"No solution found within {self.config.max_steps} traversal steps"
            self.diagnostics.error(message)
            raise NoSolutionError(message)

    def _resolve_seed(self, seed: SeedTarget) -> int:
        if seed is None:
            found = self.find_node_at_position(self.config.seed_position)
            return found if found is not None else 0
        if isinstance(seed, tuple):
            found = self.find_node_at_position(seed)
            if found is None:
                raise NodeNotFoundAtPositionError(seed)
            return found
        if not self.graph.contains(seed):
            raise NodeNotFoundError(seed)
        return seed

    def _backtrack(
        self, node: int, cause: WFCError, traversal: DepthFirstTraversal
    ) -> None:
        """Undo the most recent commit once and retry ``node``.

        Each node may trigger at most one backtrack per solve.
        """
        if not self.history:
            self.diagnostics.error(f"Backtracking impossible: {cause}", stage="backtrack", node=node)
            raise NoSolutionError() from cause
        if node in self._backtracked_from:
            self.diagnostics.error(
                f"Node failed again after backtracking: {cause}", stage="backtrack", node=node
            )
            raise NoSolutionError() from cause

        self._backtracked_from.add(node)
        prior_node, prior_state = self.history.pop()
        self._uncollapse(prior_node, prior_state)
        self.backtrack_count += 1
        self.diagnostics.info(
            f"Undid node {prior_node} to retry node {node} ({cause})",
            stage="backtrack",
            node=node,
        )

        try:
            self.collapse_node(node)
        except (NoValidStatesAfterInvariantsError, HeuristicFailureError) as exc:
            self.diagnostics.error(
                f"Retry failed after backtracking: {exc}", stage="backtrack", node=node
            )
            raise NoSolutionError() from exc

        traversal.revisit(prior_node)

    # ------------------------------------------------------------------
    # Collapse
    # ------------------------------------------------------------------

    def candidate_states(self, node: int) -> List[NodeState]:
        """Every palette block in every orientation, placed at the node's cell."""
        position = self.graph.node_weight(node).position
        return [
            NodeState.with_position(block, orientation, position)
            for block in self.block_set
            if block.can_place_at(position)
            for orientation in Orientation
        ]

    def valid_states(self, node: int) -> List[NodeState]:
        """Candidates surviving invariants, collision and connectivity filters."""
        first_placement = not self.collapsed
        return [
            state
            for state in self.candidate_states(node)
            if all(inv.check(node, state, self) for inv in self.invariants)
            and not self.would_collide(state, exclude=node)
            and (first_placement or self.can_connect_to_existing(state))
        ]

    def states_per_node(self) -> List[List[NodeState]]:
        """Candidate list for every node; collapsed nodes get an empty list."""
        return [
            [] if node in self.collapsed else self.valid_states(node)
            for node in self.graph.node_indices()
        ]

    def collapse_node(self, node: int) -> NodeState:
        """Commit a heuristic-chosen valid state to ``node``.

        Already collapsed nodes are returned unchanged.
        """
        current = self.graph.node_weight(node)
        if node in self.collapsed:
            return current

        valid = self.valid_states(node)
        if not valid:
            raise NoValidStatesAfterInvariantsError(node)

        selected = self.heuristic.select_state_for_node(node, valid)
        if selected is None:
            raise HeuristicFailureError(node)

        self.history.append((node, current.copy()))
        self.graph.set_node_weight(node, selected)
        self.spatial_grid.add_node(node, selected.world_position(), selected.world_size())
        self.establish_connections(node, selected)
        self.collapsed.add(node)
        self.diagnostics.debug(
            f"Collapsed to {selected.symbol()} ({selected.orientation.name}) at {selected.position}",
            node=node,
        )
        self._notify_collapse(node, selected)

        affected: List[int] = []
        for invariant in self.invariants:
            affected.extend(invariant.propagate(node, self))
        if affected:
            self._notify_propagate(affected)

        return selected

    def collapse_next(self) -> Optional[int]:
        """Collapse the node the heuristic ranks lowest-entropy; None if stuck or done."""
        node = self.heuristic.select_node_to_collapse(self.states_per_node(), self.collapsed)
        if node is None:
            return None
        self.collapse_node(node)
        return node

    def _uncollapse(self, node: int, snapshot: NodeState) -> None:
        self.spatial_grid.remove_node(node)
        for conn_id in list(self.connections.get(node, {})):
            self._release(node, conn_id)
        self.compatibility.invalidate(node)
        self.collapsed.discard(node)
        self.graph.set_node_weight(node, snapshot)

    # ------------------------------------------------------------------
    # Collision and connectivity
    # ------------------------------------------------------------------

    def would_collide(self, state: NodeState, exclude: Optional[int] = None) -> bool:
        for candidate in self.spatial_grid.potential_collisions(
            state.world_position(), state.world_size()
        ):
            if candidate == exclude:
                continue
            if state.collides_with(self.graph.node_weight(candidate)):
                return True
        return False

    def can_connect_to_existing(self, state: NodeState) -> bool:
        """True if any placed block offers a point compatible with ``state``."""
        if not self.collapsed:
            return True
        return any(
            state.can_connect_to(self.graph.node_weight(other)) is not None
            for other in sorted(self.collapsed)
        )

    def establish_connections(self, node: int, state: NodeState) -> Optional[Binding]:
        """Bind ``node`` to the first compatible placed block, in handle order.

        Free points are tried first; only when none is left does the first
        compatible pair get rebound, releasing its previous peer.
        Returns the (other node, other connection id) bound to, if any.
        """
        others = [other for other in sorted(self.collapsed) if other != node]
        for free_only in (True, False):
            for other in others:
                other_state = self.graph.node_weight(other)
                pair = state.can_connect_to(other_state, free_only=free_only)
                if pair is None:
                    continue
                if not self.compatibility.is_compatible(node, other, state, other_state):
                    continue
                self_conn_id, other_conn_id = pair
                self._bind(node, self_conn_id, other, other_conn_id)
                return other, other_conn_id
        return None

    def _bind(self, node: int, conn_id: str, other: int, other_conn_id: str) -> None:
        self._release(node, conn_id)
        self._release(other, other_conn_id)

        self.connections.setdefault(node, {})[conn_id] = (other, other_conn_id)
        self.connections.setdefault(other, {})[other_conn_id] = (node, conn_id)

        state = self.graph.node_weight(node)
        state.connections[conn_id].connected_to = (other, other_conn_id)
        state.is_connected = True

        other_state = self.graph.node_weight(other)
        other_state.connections[other_conn_id].connected_to = (node, conn_id)
        other_state.is_connected = True

    def _release(self, node: int, conn_id: str) -> None:
        """Drop the binding of one point on both sides."""
        peer = self._unlink(node, conn_id)
        if peer is not None:
            self._unlink(*peer)

    def _unlink(self, node: int, conn_id: str) -> Optional[Binding]:
        registry = self.connections.get(node)
        peer = registry.pop(conn_id, None) if registry is not None else None
        if registry is not None and not registry:
            del self.connections[node]

        state = self.graph.node_weight(node)
        point = state.connections.get(conn_id)
        if point is not None:
            point.connected_to = None
            state.refresh_connected_flag()
        return peer

    # ------------------------------------------------------------------
    # Position lookups
    # ------------------------------------------------------------------

    def find_node_at_position(self, position: GridPosition) -> Optional[int]:
        target = tuple(position)
        for node in self.graph.node_indices():
            if self.graph.node_weight(node).position == target:
                return node
        return None

    def collapse_node_at_position(self, position: GridPosition) -> NodeState:
        node = self.find_node_at_position(position)
        if node is None:
            raise NodeNotFoundAtPositionError(position)
        return self.collapse_node(node)

    def set_node_at_position(self, position: GridPosition, block: PlaceableBlock) -> None:
        """Overwrite the block stored at ``position``.

        Bindings of a collapsed node are released and its connection points
        re-derived from the new block.
        """
        node = self.find_node_at_position(position)
        if node is None:
            raise NodeNotFoundAtPositionError(position)

        for conn_id in list(self.connections.get(node, {})):
            self._release(node, conn_id)

        state = self.graph.node_weight(node)
        state.block = block
        state.initialize_connections()
        state.is_connected = False

        if node in self.collapsed:
            self.spatial_grid.remove_node(node)
            self.spatial_grid.add_node(node, state.world_position(), state.world_size())
            self.compatibility.invalidate(node)

    # ------------------------------------------------------------------
    # Observers and reporting
    # ------------------------------------------------------------------

    def _notify_collapse(self, node: int, state: NodeState) -> None:
        for observer in self.observers:
            observer.on_collapse(node, state)

    def _notify_propagate(self, affected: List[int]) -> None:
        for observer in self.observers:
            observer.on_propagate(affected)

    def is_solved(self) -> bool:
        return len(self.collapsed) == self.graph.node_count()

    def render_layers(self) -> str:
        """Text dump of block symbols per y layer; '.' marks uncollapsed cells."""
        width, height, depth = self.graph.dimensions()
        symbols: Dict[GridPosition, str] = {}
        for node in self.graph.node_indices():
            state = self.graph.node_weight(node)
            symbols[state.position] = state.symbol() if node in self.collapsed else "."

        lines: List[str] = []
        for y in range(height):
            lines.append(f"y={y}")
            for z in range(depth):
                lines.append("".join(symbols.get((x, y, z), " ") for x in range(width)))
        return "\n".join(lines)


__all__ = ["WFCSolver", "DepthFirstTraversal"]
