from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from block_wfc.src.common.constants import CONNECTION_ID_PREFIX, TOP_FACE_INDEX
from block_wfc.src.core.block import PlaceableBlock
from block_wfc.src.core.connection import OrientedInterface
from block_wfc.src.core.orientation import Orientation

"""Per-cell assignment state and the connection points derived from it."""

GridPosition = Tuple[int, int, int]
WorldPosition = Tuple[float, float, float]
Binding = Tuple[int, str]  # (other node, other connection id)


@dataclass
class ConnectionPoint:
    """An attachment interface on a placed block."""

    interface: OrientedInterface
    position_offset: WorldPosition = (0.0, 0.0, 0.0)
    connected_to: Optional[Binding] = None

    @property
    def is_bound(self) -> bool:
        return self.connected_to is not None

    def is_compatible_with(self, other_interface: OrientedInterface) -> bool:
        return self.interface.connect(other_interface) is not None

    def world_position(
        self, block_position: WorldPosition, block_orientation: Orientation
    ) -> WorldPosition:
        """Offset rotated by the block orientation, translated to the block."""
        dx, dy, dz = block_orientation.rotate_offset(self.position_offset)
        return (block_position[0] + dx, block_position[1] + dy, block_position[2] + dz)


@dataclass
class NodeState:
    """Block, orientation and position assigned (or proposed) for one cell."""

    block: PlaceableBlock
    orientation: Orientation = Orientation.O0
    position: GridPosition = (0, 0, 0)
    connections: Dict[str, ConnectionPoint] = field(default_factory=dict)
    is_connected: bool = False

    @classmethod
    def new(cls, block: PlaceableBlock, orientation: Orientation) -> "NodeState":
        return cls(block=block, orientation=orientation)

    @classmethod
    def with_position(
        cls,
        block: PlaceableBlock,
        orientation: Orientation,
        position: GridPosition,
    ) -> "NodeState":
        state = cls(block=block, orientation=orientation, position=tuple(position))
        state.initialize_connections()
        return state

    def initialize_connections(self) -> None:
        """Derive one connection point per block face.

        The first face sits on top of the block; the bottom face and any
        further faces sit at the block origin.
        """
        self.connections.clear()
        _, height, _ = self.block.size()

        for index, face in enumerate(self.block.faces()):
            if index == TOP_FACE_INDEX:
                offset = (0.0, float(height), 0.0)
            else:
                offset = (0.0, 0.0, 0.0)
            self.connections[f"{CONNECTION_ID_PREFIX}{index}"] = ConnectionPoint(
                interface=face.oriented_interface,
                position_offset=offset,
            )

    def can_connect_to(
        self, other: "NodeState", free_only: bool = False
    ) -> Optional[Tuple[str, str]]:
        """Return the first compatible (self_conn_id, other_conn_id) pair.

        With ``free_only`` points that are already bound are skipped.
        """
        for self_id, self_conn in self.connections.items():
            if free_only and self_conn.is_bound:
                continue
            for other_id, other_conn in other.connections.items():
                if free_only and other_conn.is_bound:
                    continue
                if self_conn.is_compatible_with(other_conn.interface):
                    return self_id, other_id
        return None

    def world_position(self) -> WorldPosition:
        return (float(self.position[0]), float(self.position[1]), float(self.position[2]))

    def world_size(self) -> WorldPosition:
        width, height, depth = self.block.size()
        return (float(width), float(height), float(depth))

    def collides_with(self, other: "NodeState") -> bool:
        """Strict axis-aligned box overlap; touching boxes do not collide."""
        self_pos, self_size = self.world_position(), self.world_size()
        other_pos, other_size = other.world_position(), other.world_size()

        for axis in range(3):
            if self_pos[axis] + self_size[axis] <= other_pos[axis]:
                return False
            if other_pos[axis] + other_size[axis] <= self_pos[axis]:
                return False
        return True

    def refresh_connected_flag(self) -> None:
        self.is_connected = any(conn.is_bound for conn in self.connections.values())

    def copy(self) -> "NodeState":
        """Independent snapshot; connection points are copied, the block is shared."""
        return replace(
            self,
            connections={cid: replace(conn) for cid, conn in self.connections.items()},
        )

    def symbol(self) -> str:
        return self.block.symbol()


@dataclass
class EdgeState:
    """Adjacency marker; edges carry no data."""


__all__ = ["ConnectionPoint", "NodeState", "EdgeState", "GridPosition", "WorldPosition"]
