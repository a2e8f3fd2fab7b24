"""
Tests for wfc/solver.py - Traversal, collapse and connection bookkeeping.
"""

import pytest

from block_wfc.src.common.constants import SolverConfig
from block_wfc.src.common.diagnostics import SolverDiagnostics
from block_wfc.src.core.block import SimpleBlock
from block_wfc.src.core.connection import ConnectorInterface
from block_wfc.src.core.face import Face
from block_wfc.src.core.orientation import Orientation
from block_wfc.src.core.palettes import lego_palette
from block_wfc.src.wfc.compatibility import CompatibilityRule
from block_wfc.src.wfc.errors import (
    NodeNotFoundAtPositionError,
    NodeNotFoundError,
    NoSolutionError,
    NoValidStatesAfterInvariantsError,
)
from block_wfc.src.wfc.graph import WFCGraph
from block_wfc.src.wfc.heuristics import FirstStateHeuristic, WeightedRandomHeuristic
from block_wfc.src.wfc.invariants import GravityInvariant
from block_wfc.src.wfc.observer import RecordingObserver
from block_wfc.src.wfc.solver import DepthFirstTraversal, WFCSolver
from block_wfc.src.wfc.state import NodeState

BRICK = SimpleBlock(
    face_list=(Face.of(ConnectorInterface.STUD), Face.of(ConnectorInterface.TUBE)),
    label="B",
)


def make_solver(dims, palette=None, invariants=None, heuristic=None, observers=None, **kwargs):
    graph = WFCGraph.grid_graph(*dims, block_factory=SimpleBlock)
    return WFCSolver(
        graph,
        palette if palette is not None else lego_palette(),
        invariants,
        heuristic or FirstStateHeuristic(),
        observers,
        **kwargs,
    )


def assert_bindings_mirrored(solver):
    for node, registry in solver.connections.items():
        assert registry, "empty registries are pruned"
        for conn_id, (other, other_conn_id) in registry.items():
            assert solver.connections[other][other_conn_id] == (node, conn_id)
            point = solver.graph.node_weight(node).connections[conn_id]
            assert point.connected_to == (other, other_conn_id)

    for node in solver.graph.node_indices():
        state = solver.graph.node_weight(node)
        for conn_id, point in state.connections.items():
            if point.is_bound:
                assert solver.connections[node][conn_id] == point.connected_to
        assert state.is_connected == any(p.is_bound for p in state.connections.values())


class TestDepthFirstTraversal:
    """Tests for the explicit-stack traversal."""

    def test_floor_first_order(self):
        """+x is explored before +z, and +z before +y."""
        graph = WFCGraph.grid_graph(2, 2, 2, SimpleBlock)
        traversal = DepthFirstTraversal(graph, 0)
        assert list(iter(traversal.next, None)) == [0, 4, 5, 7, 6, 1, 3, 2]

    def test_visits_each_node_once(self):
        graph = WFCGraph.grid_graph(3, 2, 2, SimpleBlock)
        order = list(iter(DepthFirstTraversal(graph, 0).next, None))
        assert sorted(order) == list(graph.node_indices())

    def test_revisit_yields_node_again(self):
        graph = WFCGraph.grid_graph(2, 1, 1, SimpleBlock)
        traversal = DepthFirstTraversal(graph, 0)
        assert traversal.next() == 0
        assert traversal.next() == 1
        assert traversal.next() is None
        traversal.revisit(0)
        assert traversal.next() == 0
        assert traversal.next() is None

    def test_restart_reaches_unconnected_node(self):
        graph = WFCGraph()
        graph.add_node(NodeState.new(SimpleBlock(), Orientation.O0))
        graph.add_node(NodeState.new(SimpleBlock(), Orientation.O0))
        traversal = DepthFirstTraversal(graph, 0)
        assert traversal.next() == 0
        assert traversal.next() is None
        traversal.restart(1)
        assert traversal.next() == 1


class TestSolveScenarios:
    """Reference scenarios for complete solves."""

    def test_single_cell_single_block(self):
        """A 1x1x1 grid with a one-block palette solves without backtracking."""
        solver = make_solver((1, 1, 1), palette=[BRICK])
        solver.solve()
        assert solver.collapsed == {0}
        assert solver.backtrack_count == 0
        assert solver.graph.node_weight(0).block == BRICK
        assert solver.is_solved()

    def test_unconnectable_second_node(self):
        """The first node needs no neighbour; the second does."""
        solver = make_solver((2, 2, 1), palette=[SimpleBlock()])
        solver.collapse_node(0)
        assert solver.collapsed == {0}
        with pytest.raises(NoValidStatesAfterInvariantsError) as exc_info:
            solver.collapse_node(1)
        assert exc_info.value.node == 1
        assert solver.collapsed == {0}

    def test_collapse_at_missing_position(self):
        solver = make_solver((2, 2, 2))
        with pytest.raises(NodeNotFoundAtPositionError) as exc_info:
            solver.collapse_node_at_position((99, 99, 99))
        assert exc_info.value.position == (99, 99, 99)

    def test_every_node_collapsed_in_place(self):
        """After solve() every node is collapsed at the cell it was built for."""
        solver = make_solver(
            (3, 3, 2),
            invariants=[GravityInvariant()],
            heuristic=WeightedRandomHeuristic(seed=7),
        )
        built = [state.position for state in solver.graph.node_weights()]
        solver.solve()
        assert solver.collapsed == set(solver.graph.node_indices())
        assert [state.position for state in solver.graph.node_weights()] == built
        assert all(state.block in solver.block_set for state in solver.graph.node_weights())

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_bindings_mirrored_after_solve(self, seed):
        solver = make_solver((3, 2, 2), heuristic=WeightedRandomHeuristic(seed=seed))
        solver.solve()
        assert solver.connections
        assert_bindings_mirrored(solver)

    def test_no_overlaps_after_solve(self):
        solver = make_solver((3, 3, 1))
        solver.solve()
        states = list(solver.graph.node_weights())
        for i, a in enumerate(states):
            for b in states[i + 1:]:
                assert not a.collides_with(b)

    def test_gravity_solution_is_supported(self):
        solver = make_solver((2, 3, 2), invariants=[GravityInvariant()])
        solver.solve()
        for node in solver.graph.node_indices():
            x, y, z = solver.graph.node_weight(node).position
            if y > 0:
                assert solver.find_node_at_position((x, y - 1, z)) in solver.collapsed

    def test_empty_graph(self):
        diagnostics = SolverDiagnostics()
        solver = WFCSolver(WFCGraph(), lego_palette(), diagnostics=diagnostics)
        solver.solve()
        assert solver.collapsed == set()
        assert diagnostics.warning_count() == 1


class TestSolveOptions:
    """Tests for seeding, step limits and diagnostics."""

    def test_seed_position(self):
        observer = RecordingObserver()
        solver = make_solver((2, 2, 1), observers=[observer])
        solver.solve(seed=(1, 0, 0))
        assert solver.graph.node_weight(observer.collapsed_nodes[0]).position == (1, 0, 0)
        assert solver.is_solved()

    def test_seed_handle(self):
        observer = RecordingObserver()
        solver = make_solver((2, 2, 1), observers=[observer])
        solver.solve(seed=3)
        assert observer.collapsed_nodes[0] == 3

    def test_config_seed_position(self):
        observer = RecordingObserver()
        config = SolverConfig(seed_position=(0, 1, 0))
        solver = make_solver((1, 2, 1), observers=[observer], config=config)
        solver.solve()
        assert observer.collapsed_nodes == [1, 0]

    def test_unknown_seed_position(self):
        solver = make_solver((2, 2, 1))
        with pytest.raises(NodeNotFoundAtPositionError):
            solver.solve(seed=(5, 5, 5))

    def test_unknown_seed_handle(self):
        solver = make_solver((2, 2, 1))
        with pytest.raises(NodeNotFoundError):
            solver.solve(seed=17)

    def test_max_steps(self):
        solver = make_solver((3, 3, 1), config=SolverConfig(max_steps=2))
        with pytest.raises(NoSolutionError, match="within 2 traversal steps"):
            solver.solve()
        assert len(solver.collapsed) == 2

    def test_max_steps_records_an_error(self):
        diagnostics = SolverDiagnostics()
        solver = make_solver((3, 3, 1), diagnostics=diagnostics, config=SolverConfig(max_steps=2))
        with pytest.raises(NoSolutionError):
            solver.solve()
        assert diagnostics.has_errors()
        assert diagnostics.get_messages() == [
            "ERROR [solve]: No solution found within 2 traversal steps"
        ]

    def test_disconnected_graph_is_fully_solved(self):
        graph = WFCGraph()
        for x in range(3):
            graph.add_node(NodeState.with_position(SimpleBlock(), Orientation.O0, (x, 0, 0)))
        graph.add_edge(0, 1)
        solver = WFCSolver(graph, lego_palette(), heuristic=FirstStateHeuristic())
        solver.solve()
        assert solver.is_solved()

    def test_diagnostics_report_progress(self):
        diagnostics = SolverDiagnostics(log_level="info")
        solver = make_solver((2, 1, 1), diagnostics=diagnostics)
        solver.solve()
        messages = diagnostics.get_messages(min_severity=diagnostics.min_severity)
        assert any("Solving 2 nodes" in m for m in messages)
        assert any("Solved 2 nodes" in m for m in messages)
        assert all("[solve" in m for m in messages)


class TestCollapseOperations:
    """Tests for single-node operations."""

    def test_candidate_states(self):
        solver = make_solver((1, 1, 1))
        candidates = solver.candidate_states(0)
        assert len(candidates) == len(lego_palette()) * 4
        assert {c.orientation for c in candidates} == set(Orientation)

    def test_candidates_respect_can_place_at(self):
        class CeilingOnly(SimpleBlock):
            def can_place_at(self, position):
                return position[1] > 0

        solver = make_solver((1, 2, 1), palette=[CeilingOnly(label="c")])
        assert solver.candidate_states(0) == []
        assert len(solver.candidate_states(1)) == 4

    def test_collapse_is_idempotent(self):
        solver = make_solver((2, 1, 1))
        first = solver.collapse_node(0)
        again = solver.collapse_node(0)
        assert again is first
        assert len(solver.history) == 1

    def test_collapse_registers_spatial_grid(self):
        solver = make_solver((2, 1, 1))
        solver.collapse_node(0)
        assert 0 in solver.spatial_grid
        state = NodeState.with_position(BRICK, Orientation.O0, (0, 0, 0))
        assert solver.would_collide(state)
        assert not solver.would_collide(state, exclude=0)

    def test_collapse_binds_to_placed_block(self):
        solver = make_solver((2, 1, 1))
        solver.collapse_node(0)
        solver.collapse_node(1)
        assert solver.graph.node_weight(0).is_connected
        assert solver.graph.node_weight(1).is_connected
        assert_bindings_mirrored(solver)

    def test_collapse_node_at_position(self):
        solver = make_solver((2, 2, 1))
        state = solver.collapse_node_at_position((1, 1, 0))
        assert state.position == (1, 1, 0)
        assert solver.find_node_at_position((1, 1, 0)) in solver.collapsed

    def test_can_connect_to_existing(self):
        solver = make_solver((2, 1, 1), palette=[SimpleBlock()])
        faceless = NodeState.with_position(SimpleBlock(), Orientation.O0, (1, 0, 0))
        assert solver.can_connect_to_existing(faceless)
        solver.collapse_node(0)
        assert not solver.can_connect_to_existing(faceless)

    def test_states_per_node(self):
        solver = make_solver((1, 2, 1), invariants=[GravityInvariant()])
        per_node = solver.states_per_node()
        assert len(per_node[0]) == 16
        assert per_node[1] == []
        solver.collapse_node(0)
        per_node = solver.states_per_node()
        assert per_node[0] == []
        assert len(per_node[1]) == 16

    def test_collapse_next_follows_entropy(self):
        """Under gravity only the floor node has candidates at first."""
        solver = make_solver((1, 2, 1), invariants=[GravityInvariant()])
        assert solver.collapse_next() == 0
        assert solver.collapse_next() == 1
        assert solver.collapse_next() is None
        assert solver.is_solved()

    def test_compatibility_rule_blocks_binding(self):
        """Rejected pairs are not bound, but placement still succeeds."""
        solver = make_solver((2, 1, 1))
        solver.add_compatibility_rule(CompatibilityRule(lambda a, b: False, "never"))
        solver.solve()
        assert solver.is_solved()
        assert solver.connections == {}
        assert solver.compatibility.cache_size > 0

    def test_add_observer(self):
        solver = make_solver((1, 1, 1))
        observer = RecordingObserver()
        solver.add_observer(observer)
        solver.solve()
        assert observer.collapsed_nodes == [0]


class TestSetNodeAtPosition:
    """Tests for overwriting a block at a grid position."""

    def test_replaces_block_and_releases_bindings(self):
        solver = make_solver((2, 1, 1))
        solver.solve()
        assert solver.connections

        solver.set_node_at_position((0, 0, 0), SimpleBlock(label="X"))
        state = solver.graph.node_weight(0)
        assert state.symbol() == "X"
        assert state.connections == {}
        assert not state.is_connected
        assert solver.connections == {}
        assert not solver.graph.node_weight(1).is_connected
        assert 0 in solver.spatial_grid

    def test_uncollapsed_node(self):
        solver = make_solver((2, 1, 1))
        solver.set_node_at_position((1, 0, 0), BRICK)
        assert list(solver.graph.node_weight(1).connections) == ["conn_0", "conn_1"]
        assert 1 not in solver.spatial_grid

    def test_missing_position(self):
        solver = make_solver((2, 1, 1))
        with pytest.raises(NodeNotFoundAtPositionError):
            solver.set_node_at_position((3, 0, 0), BRICK)


class TestRenderLayers:
    """Tests for the per-layer text dump."""

    def test_unsolved_grid(self):
        solver = make_solver((2, 2, 1))
        assert solver.render_layers() == "y=0\n..\ny=1\n.."

    def test_solved_grid(self):
        solver = make_solver((3, 1, 2), palette=[BRICK])
        solver.solve()
        assert solver.render_layers() == "y=0\nBBB\nBBB"
