"""Discrete rotation states about the vertical axis."""

from enum import Enum
from typing import Tuple

from block_wfc.src.common.constants import ORIENTATION_COUNT, ORIENTATION_STEP_DEGREES


class Orientation(Enum):
    """Four quarter-turn rotations forming a cyclic group under ``compose``."""

    O0 = 0
    O90 = 1
    O180 = 2
    O270 = 3

    @classmethod
    def default(cls) -> "Orientation":
        return cls.O0

    @property
    def degrees(self) -> int:
        return self.value * ORIENTATION_STEP_DEGREES

    @classmethod
    def from_degrees(cls, degrees: int) -> "Orientation":
        """Return the orientation for ``degrees`` (normalised mod 360)."""
        normalised = degrees % 360
        if normalised % ORIENTATION_STEP_DEGREES:
            raise ValueError(f"Invalid discrete orientation: {degrees} degrees")
        return cls(normalised // ORIENTATION_STEP_DEGREES)

    def compose(self, other: "Orientation") -> "Orientation":
        return Orientation((self.value + other.value) % ORIENTATION_COUNT)

    def inverse(self) -> "Orientation":
        return Orientation((ORIENTATION_COUNT - self.value) % ORIENTATION_COUNT)

    def rotate_offset(
        self, offset: Tuple[float, float, float]
    ) -> Tuple[float, float, float]:
        """Rotate a local offset about the y axis."""
        x, y, z = offset
        if self is Orientation.O0:
            return (x, y, z)
        if self is Orientation.O90:
            return (z, y, -x)
        if self is Orientation.O180:
            return (-x, y, -z)
        return (-z, y, x)


__all__ = ["Orientation"]
