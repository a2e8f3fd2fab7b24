"""Preset block palettes used by the CLI and the end-to-end tests."""

from typing import Callable, Dict, FrozenSet

from .block import BlockKind, SimpleBlock
from .connection import ConnectorInterface
from .face import Face


def lego_palette() -> FrozenSet[SimpleBlock]:
    """Bricks with a stud on top and a tube underneath."""
    stud_tube = (Face.of(ConnectorInterface.STUD), Face.of(ConnectorInterface.TUBE))
    return frozenset(
        {
            SimpleBlock((1, 1, 1), BlockKind.WALL, stud_tube, weight=3.0),
            SimpleBlock((1, 1, 1), BlockKind.FLOOR, stud_tube, weight=2.0),
            SimpleBlock((1, 1, 1), BlockKind.DOOR, stud_tube, weight=0.5),
            SimpleBlock((1, 1, 1), BlockKind.WINDOW, stud_tube, weight=1.0),
        }
    )


def walls_palette() -> FrozenSet[SimpleBlock]:
    """Building pieces bonded by mounting surfaces."""
    mount = (
        Face.of(ConnectorInterface.MOUNTING_SURFACE),
        Face.of(ConnectorInterface.MOUNTING_SURFACE),
    )
    return frozenset(
        {
            SimpleBlock((1, 1, 1), BlockKind.WALL, mount, weight=4.0),
            SimpleBlock((1, 1, 1), BlockKind.WINDOW, mount, weight=1.5),
            SimpleBlock((1, 1, 1), BlockKind.DOOR, mount, weight=0.5),
            SimpleBlock((1, 1, 1), BlockKind.ROOF, mount, weight=1.0),
        }
    )


def semiconductor_palette() -> FrozenSet[SimpleBlock]:
    """Package-level parts joined by pads, balls and traces."""
    return frozenset(
        {
            SimpleBlock(
                (1, 1, 1),
                BlockKind.COMPONENT,
                (
                    Face.of(ConnectorInterface.SOLDER_BALL),
                    Face.of(ConnectorInterface.METAL_PAD),
                ),
                label="B",
            ),
            SimpleBlock(
                (1, 1, 1),
                BlockKind.COMPONENT,
                (
                    Face.of(ConnectorInterface.PCB_TRACE),
                    Face.of(ConnectorInterface.VIA),
                ),
                weight=2.0,
                label="T",
            ),
            SimpleBlock(
                (1, 1, 1),
                BlockKind.COMPONENT,
                (
                    Face.of(ConnectorInterface.THERMAL_PAD),
                    Face.of(ConnectorInterface.HEAT_SINK_INTERFACE),
                ),
                weight=0.5,
                label="H",
            ),
        }
    )


PALETTES: Dict[str, Callable[[], FrozenSet[SimpleBlock]]] = {
    "lego": lego_palette,
    "walls": walls_palette,
    "semiconductor": semiconductor_palette,
}


def get_palette(name: str) -> FrozenSet[SimpleBlock]:
    try:
        return PALETTES[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown palette '{name}', expected one of: {', '.join(PALETTES)}"
        ) from None


__all__ = [
    "lego_palette",
    "walls_palette",
    "semiconductor_palette",
    "PALETTES",
    "get_palette",
]
