"""Shared constants across the solver."""

from dataclasses import dataclass
from typing import Optional, Tuple

# Orientation group
ORIENTATION_COUNT = 4
ORIENTATION_STEP_DEGREES = 90

# Connection points
CONNECTION_ID_PREFIX = "conn_"
TOP_FACE_INDEX = 0

# Spatial index
DEFAULT_CELL_SIZE = 1.0

# Preset palettes shipped with the CLI
PALETTE_NAMES = ("lego", "walls", "semiconductor")


@dataclass(frozen=True)
class SolverConfig:
    """Tunable settings for a solve run.

    Attributes:
        cell_size: Edge length of a spatial-grid bucket in world units.
        max_steps: Upper bound on traversal steps before giving up (None = unbounded).
        seed_position: Grid cell the depth-first traversal starts from.
        default_dimensions: Grid size used by the CLI when none is given.
        default_palette: Preset palette used by the CLI when none is given.
    """

    cell_size: float = DEFAULT_CELL_SIZE
    max_steps: Optional[int] = None
    seed_position: Tuple[int, int, int] = (0, 0, 0)
    default_dimensions: Tuple[int, int, int] = (3, 3, 1)
    default_palette: str = "lego"


DEFAULT_CONFIG = SolverConfig()
