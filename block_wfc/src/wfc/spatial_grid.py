"""Uniform-cell broad-phase index for collision queries."""

import math
from collections import defaultdict
from typing import Dict, Iterator, List, Set, Tuple

from block_wfc.src.common.constants import DEFAULT_CELL_SIZE

Cell = Tuple[int, int, int]
Vector = Tuple[float, float, float]


class SpatialGrid:
    """Maps grid cells to the node handles whose boxes overlap them.

    Results of :meth:`potential_collisions` are conservative; callers must
    run an exact overlap test before treating a candidate as a collision.
    """

    def __init__(self, cell_size: float = DEFAULT_CELL_SIZE):
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self._cells: Dict[Cell, List[int]] = defaultdict(list)

    def grid_coords(self, position: Vector) -> Cell:
        return (
            math.floor(position[0] / self.cell_size),
            math.floor(position[1] / self.cell_size),
            math.floor(position[2] / self.cell_size),
        )

    def cells_for(self, position: Vector, size: Vector) -> Iterator[Cell]:
        """Yield every cell overlapped by the box [position, position + size]."""
        min_cell = self.grid_coords(position)
        max_cell = self.grid_coords(
            (position[0] + size[0], position[1] + size[1], position[2] + size[2])
        )
        for x in range(min_cell[0], max_cell[0] + 1):
            for y in range(min_cell[1], max_cell[1] + 1):
                for z in range(min_cell[2], max_cell[2] + 1):
                    yield (x, y, z)

    def add_node(self, node: int, position: Vector, size: Vector) -> None:
        """Index ``node`` under the box, replacing any box it had before."""
        self.remove_node(node)
        for cell in self.cells_for(position, size):
            self._cells[cell].append(node)

    def potential_collisions(self, position: Vector, size: Vector) -> List[int]:
        result: Set[int] = set()
        for cell in self.cells_for(position, size):
            bucket = self._cells.get(cell)
            if bucket:
                result.update(bucket)
        return sorted(result)

    def remove_node(self, node: int) -> None:
        """Purge ``node`` from every cell and drop cells left empty."""
        for cell in list(self._cells):
            bucket = self._cells[cell]
            if node in bucket:
                bucket.remove(node)
            if not bucket:
                del self._cells[cell]

    def clear(self) -> None:
        self._cells.clear()

    def __contains__(self, node: int) -> bool:
        return any(node in bucket for bucket in self._cells.values())

    def __len__(self) -> int:
        return len(self._cells)


__all__ = ["SpatialGrid"]
