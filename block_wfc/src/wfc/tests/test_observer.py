"""
Tests for wfc/observer.py - Collapse and propagation notifications.
"""

import logging

from block_wfc.src.core.block import SimpleBlock
from block_wfc.src.core.orientation import Orientation
from block_wfc.src.core.palettes import lego_palette
from block_wfc.src.wfc.graph import WFCGraph
from block_wfc.src.wfc.heuristics import FirstStateHeuristic
from block_wfc.src.wfc.invariants import GravityInvariant
from block_wfc.src.wfc.observer import LoggingObserver, ProgressObserver, RecordingObserver
from block_wfc.src.wfc.solver import WFCSolver
from block_wfc.src.wfc.state import NodeState


def solved_with(observer, dims=(2, 2, 1), gravity=True):
    graph = WFCGraph.grid_graph(*dims, block_factory=SimpleBlock)
    invariants = [GravityInvariant()] if gravity else []
    solver = WFCSolver(graph, lego_palette(), invariants, FirstStateHeuristic(), [observer])
    solver.solve()
    return solver


class TestRecordingObserver:
    """Tests for RecordingObserver."""

    def test_one_event_per_collapse(self):
        observer = RecordingObserver()
        solver = solved_with(observer)
        assert sorted(observer.collapsed_nodes) == list(solver.graph.node_indices())

    def test_first_collapse_is_seed(self):
        observer = RecordingObserver()
        solved_with(observer)
        assert observer.collapsed_nodes[0] == 0

    def test_recorded_state_matches_graph(self):
        observer = RecordingObserver()
        solver = solved_with(observer)
        for node, state in observer.collapses:
            assert state.position == solver.graph.node_weight(node).position

    def test_propagation_names_upper_layer(self):
        """Collapsing a floor node under gravity names the node above it."""
        observer = RecordingObserver()
        solver = solved_with(observer)
        upper = {n for n in solver.graph.node_indices() if solver.graph.node_weight(n).position[1] == 1}
        assert observer.propagations
        assert {n for affected in observer.propagations for n in affected} == upper

    def test_no_propagation_without_invariants(self):
        observer = RecordingObserver()
        solved_with(observer, gravity=False)
        assert observer.propagations == []


class TestLoggingObserver:
    """Tests for LoggingObserver."""

    def test_logs_collapse(self, caplog):
        observer = LoggingObserver()
        state = NodeState.with_position(SimpleBlock(label="Z"), Orientation.O90, (1, 0, 0))
        with caplog.at_level(logging.DEBUG, logger="block_wfc.observer"):
            observer.on_collapse(4, state)
            observer.on_propagate([5, 6])
        assert "Collapsed node 4 at (1, 0, 0) to Z (O90)" in caplog.text
        assert "Propagation touches nodes [5, 6]" in caplog.text

    def test_custom_level(self, caplog):
        observer = LoggingObserver(level=logging.WARNING)
        with caplog.at_level(logging.WARNING, logger="block_wfc.observer"):
            observer.on_propagate([1])
        assert caplog.records[0].levelno == logging.WARNING


class TestProgressObserver:
    """Tests for ProgressObserver."""

    def test_counts_collapses(self):
        observer = ProgressObserver(total=4, disable=False)
        solved_with(observer)
        assert observer.bar.n == 4
        observer.close()
