"""Placeable block capability and a general-purpose block type."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Tuple

from .face import Face


class PlaceableBlock(ABC):
    """Capability every block type handed to the solver must provide.

    Implementations must be constructible without arguments (the placeholder
    value for unresolved cells) and hashable when used in a palette.
    """

    @abstractmethod
    def size(self) -> Tuple[int, int, int]:
        """Footprint in grid units as (width, height, depth)."""

    @abstractmethod
    def faces(self) -> Iterable[Face]:
        """Connection faces exposed to neighbouring blocks."""

    @abstractmethod
    def symbol(self) -> str:
        """Short display symbol."""

    def ranking(self) -> float:
        """Selection weight used by weighted heuristics."""
        return 1.0

    def can_place_at(self, position: Tuple[int, int, int]) -> bool:
        return True

    def occupied_positions(
        self, position: Tuple[int, int, int]
    ) -> List[Tuple[int, int, int]]:
        """All grid cells covered when placed with its origin at ``position``."""
        width, height, depth = self.size()
        x, y, z = position
        return [
            (x + dx, y + dy, z + dz)
            for dx in range(width)
            for dy in range(height)
            for dz in range(depth)
        ]

    def can_connect_to(
        self, other: "PlaceableBlock", my_face: Face, other_face: Face
    ) -> bool:
        return my_face.can_connect_to(other_face)


class BlockKind(Enum):
    FLOOR = "floor"
    WALL = "wall"
    DOOR = "door"
    WINDOW = "window"
    ROOF = "roof"
    COMPONENT = "component"


_KIND_SYMBOLS = {
    BlockKind.FLOOR: "_",
    BlockKind.WALL: "#",
    BlockKind.DOOR: "D",
    BlockKind.WINDOW: "W",
    BlockKind.ROOF: "^",
    BlockKind.COMPONENT: "C",
}


@dataclass(frozen=True)
class SimpleBlock(PlaceableBlock):
    """Immutable block described entirely by data.

    The no-argument value is a 1x1x1 floor block without faces.
    """

    dimensions: Tuple[int, int, int] = (1, 1, 1)
    kind: BlockKind = BlockKind.FLOOR
    face_list: Tuple[Face, ...] = field(default_factory=tuple)
    weight: float = 1.0
    label: str = ""

    def __post_init__(self) -> None:
        if any(d <= 0 for d in self.dimensions):
            raise ValueError(f"Block dimensions must be positive, got {self.dimensions}")
        # Lists would make the block unhashable
        object.__setattr__(self, "face_list", tuple(self.face_list))

    def size(self) -> Tuple[int, int, int]:
        return self.dimensions

    def faces(self) -> Iterable[Face]:
        return iter(self.face_list)

    def ranking(self) -> float:
        return self.weight

    def symbol(self) -> str:
        return self.label or _KIND_SYMBOLS[self.kind]


__all__ = ["PlaceableBlock", "BlockKind", "SimpleBlock"]
