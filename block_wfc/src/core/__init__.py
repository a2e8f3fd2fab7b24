"""Core block model
==================

Everything the solver needs to know about a block lives here:

1. Orientation – the four quarter-turn rotation states.
2. Connection – interface tags and the symmetric pairing rule table.
3. Face – an oriented interface exposed by a block.
4. Block – the :class:`PlaceableBlock` capability and :class:`SimpleBlock`.
5. Palettes – preset block sets for demos and tests.
"""

from .orientation import Orientation
from .connection import (
    Connector,
    ConnectorInterface,
    CONNECTION_RULES,
    connector_for,
    OrientedConnection,
    OrientedInterface,
)
from .face import Face
from .block import PlaceableBlock, BlockKind, SimpleBlock
from .palettes import PALETTES, get_palette

__all__ = [
    "Orientation",
    "Connector",
    "ConnectorInterface",
    "CONNECTION_RULES",
    "connector_for",
    "OrientedConnection",
    "OrientedInterface",
    "Face",
    "PlaceableBlock",
    "BlockKind",
    "SimpleBlock",
    "PALETTES",
    "get_palette",
]
