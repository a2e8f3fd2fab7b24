from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Tuple

from block_wfc.src.core.block import PlaceableBlock, SimpleBlock
from block_wfc.src.core.orientation import Orientation

from .errors import NodeNotFoundError
from .state import EdgeState, NodeState

"""Arena-backed directed grid graph holding one NodeState per cell."""

BlockFactory = Callable[[], PlaceableBlock]


class WFCGraph:
    """Directed graph whose nodes are integer handles into a NodeState arena.

    Edges only carry adjacency. Successor and predecessor lists are kept so
    that either direction can be walked without scanning the edge list.
    """

    def __init__(self) -> None:
        self._nodes: List[NodeState] = []
        self._edges: List[Tuple[int, int, EdgeState]] = []
        self._successors: List[List[int]] = []
        self._predecessors: List[List[int]] = []

    @classmethod
    def grid_graph(
        cls,
        width: int,
        height: int,
        depth: int,
        block_factory: BlockFactory = SimpleBlock,
    ) -> "WFCGraph":
        """Build a width x height x depth grid with +x, +y, +z edges.

        Every node starts as ``block_factory()`` at the default orientation.
        Handles are allocated x-major, then y, then z.
        """
        for name, value in (("width", width), ("height", height), ("depth", depth)):
            if value < 1:
                raise ValueError(f"Grid {name} must be at least 1, got {value}")

        graph = cls()
        indices: Dict[Tuple[int, int, int], int] = {}

        for x in range(width):
            for y in range(height):
                for z in range(depth):
                    indices[(x, y, z)] = graph.add_node(
                        NodeState.with_position(
                            block_factory(), Orientation.default(), (x, y, z)
                        )
                    )

        for x in range(width):
            for y in range(height):
                for z in range(depth):
                    current = indices[(x, y, z)]
                    if x < width - 1:
                        graph.add_edge(current, indices[(x + 1, y, z)])
                    if y < height - 1:
                        graph.add_edge(current, indices[(x, y + 1, z)])
                    if z < depth - 1:
                        graph.add_edge(current, indices[(x, y, z + 1)])

        return graph

    def add_node(self, state: NodeState) -> int:
        self._nodes.append(state)
        self._successors.append([])
        self._predecessors.append([])
        return len(self._nodes) - 1

    def add_edge(self, source: int, target: int, edge: EdgeState | None = None) -> None:
        self._check(source)
        self._check(target)
        self._edges.append((source, target, edge or EdgeState()))
        self._successors[source].append(target)
        self._predecessors[target].append(source)

    def _check(self, node: int) -> None:
        if not 0 <= node < len(self._nodes):
            raise NodeNotFoundError(node)

    def contains(self, node: int) -> bool:
        return 0 <= node < len(self._nodes)

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return len(self._edges)

    def node_indices(self) -> range:
        return range(len(self._nodes))

    def node_weight(self, node: int) -> NodeState:
        self._check(node)
        return self._nodes[node]

    def set_node_weight(self, node: int, state: NodeState) -> None:
        self._check(node)
        self._nodes[node] = state

    def node_weights(self) -> Iterator[NodeState]:
        return iter(self._nodes)

    def edges(self) -> Iterator[Tuple[int, int]]:
        return ((source, target) for source, target, _ in self._edges)

    def successors(self, node: int) -> List[int]:
        self._check(node)
        return list(self._successors[node])

    def predecessors(self, node: int) -> List[int]:
        self._check(node)
        return list(self._predecessors[node])

    def neighbors_undirected(self, node: int) -> List[int]:
        """Successors and predecessors, de-duplicated, in handle order."""
        self._check(node)
        return sorted(set(self._successors[node]) | set(self._predecessors[node]))

    def dimensions(self) -> Tuple[int, int, int]:
        """Extent of the stored positions as (width, height, depth)."""
        if not self._nodes:
            return (0, 0, 0)
        return tuple(
            max(state.position[axis] for state in self._nodes) + 1 for axis in range(3)
        )

    def copy(self) -> "WFCGraph":
        clone = WFCGraph()
        clone._nodes = [state.copy() for state in self._nodes]
        clone._edges = list(self._edges)
        clone._successors = [list(s) for s in self._successors]
        clone._predecessors = [list(p) for p in self._predecessors]
        return clone

    def __len__(self) -> int:
        return len(self._nodes)


__all__ = ["WFCGraph", "BlockFactory"]
