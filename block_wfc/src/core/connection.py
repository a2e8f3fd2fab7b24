from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .orientation import Orientation

"""Connector interfaces and the symmetric rule table that pairs them."""


class Connector(Enum):
    """Kind of joint formed when two interfaces meet."""

    STUD_FIT = "stud_fit"
    THERMAL_CONDUCTION = "thermal_conduction"
    ELECTRICAL_CONNECTION = "electrical_connection"
    MECHANICAL_BOND = "mechanical_bond"
    THERMAL_INTERFACE = "thermal_interface"
    DIE_ATTACH = "die_attach"
    PACKAGE_CONNECTION = "package_connection"


class ConnectorInterface(Enum):
    """Interface tag carried by a block face."""

    # Brick-style
    STUD = "stud"
    TUBE = "tube"
    # Semiconductor packaging
    ACTIVE_SURFACE = "active_surface"
    PASSIVE_SURFACE = "passive_surface"
    METAL_PAD = "metal_pad"
    SOLDER_BALL = "solder_ball"
    WIRE_BOND_PAD = "wire_bond_pad"
    THERMAL_PAD = "thermal_pad"
    MOUNTING_SURFACE = "mounting_surface"
    HEAT_SINK_INTERFACE = "heat_sink_interface"
    UNDERFILL_INTERFACE = "underfill_interface"
    PCB_TRACE = "pcb_trace"
    VIA = "via"
    AIR_GAP = "air_gap"

    def inverse(self) -> Optional["ConnectorInterface"]:
        """Return the natural counterpart of this interface, if it has one."""
        return _INVERSES.get(self)


_INVERSES: Dict[ConnectorInterface, ConnectorInterface] = {
    ConnectorInterface.STUD: ConnectorInterface.TUBE,
    ConnectorInterface.TUBE: ConnectorInterface.STUD,
    ConnectorInterface.ACTIVE_SURFACE: ConnectorInterface.THERMAL_PAD,
    ConnectorInterface.PASSIVE_SURFACE: ConnectorInterface.THERMAL_PAD,
    ConnectorInterface.METAL_PAD: ConnectorInterface.SOLDER_BALL,
    ConnectorInterface.SOLDER_BALL: ConnectorInterface.METAL_PAD,
    ConnectorInterface.WIRE_BOND_PAD: ConnectorInterface.METAL_PAD,
    ConnectorInterface.THERMAL_PAD: ConnectorInterface.HEAT_SINK_INTERFACE,
    ConnectorInterface.HEAT_SINK_INTERFACE: ConnectorInterface.THERMAL_PAD,
    ConnectorInterface.MOUNTING_SURFACE: ConnectorInterface.MOUNTING_SURFACE,
}


def _pair(a: ConnectorInterface, b: ConnectorInterface) -> FrozenSet[ConnectorInterface]:
    return frozenset((a, b))


# Keys are unordered, so lookups are symmetric by construction.
CONNECTION_RULES: Dict[FrozenSet[ConnectorInterface], Connector] = {
    _pair(ConnectorInterface.STUD, ConnectorInterface.TUBE): Connector.STUD_FIT,
    _pair(
        ConnectorInterface.PASSIVE_SURFACE, ConnectorInterface.THERMAL_PAD
    ): Connector.THERMAL_CONDUCTION,
    _pair(
        ConnectorInterface.METAL_PAD, ConnectorInterface.SOLDER_BALL
    ): Connector.ELECTRICAL_CONNECTION,
    _pair(
        ConnectorInterface.WIRE_BOND_PAD, ConnectorInterface.METAL_PAD
    ): Connector.ELECTRICAL_CONNECTION,
    _pair(
        ConnectorInterface.THERMAL_PAD, ConnectorInterface.HEAT_SINK_INTERFACE
    ): Connector.THERMAL_INTERFACE,
    _pair(
        ConnectorInterface.MOUNTING_SURFACE, ConnectorInterface.MOUNTING_SURFACE
    ): Connector.MECHANICAL_BOND,
    _pair(
        ConnectorInterface.ACTIVE_SURFACE, ConnectorInterface.THERMAL_PAD
    ): Connector.DIE_ATTACH,
    _pair(
        ConnectorInterface.SOLDER_BALL, ConnectorInterface.PCB_TRACE
    ): Connector.PACKAGE_CONNECTION,
    _pair(
        ConnectorInterface.VIA, ConnectorInterface.PCB_TRACE
    ): Connector.ELECTRICAL_CONNECTION,
}


def connector_for(
    left: ConnectorInterface, right: ConnectorInterface
) -> Optional[Connector]:
    """Return the connector a pair of interfaces forms, or None."""
    return CONNECTION_RULES.get(_pair(left, right))


@dataclass(frozen=True)
class OrientedConnection:
    """A recognised pairing of two oriented interfaces."""

    left: "OrientedInterface"
    connector: Connector
    right: "OrientedInterface"


@dataclass(frozen=True)
class OrientedInterface:
    """An interface together with the rotation it is presented at."""

    interface: ConnectorInterface
    orientation: Orientation = Orientation.O0

    def connect(self, other: "OrientedInterface") -> Optional[OrientedConnection]:
        """Pair two interfaces by tag; orientations are carried, not matched.

        Orientation constraints between placed blocks are compatibility rules
        (see ``CompatibilityRule.lego_connectivity``), which see the node
        orientations rather than the face ones.
        """
        connector = connector_for(self.interface, other.interface)
        if connector is None:
            return None
        return OrientedConnection(left=self, connector=connector, right=other)

    def __add__(self, other: "OrientedInterface") -> Optional[OrientedConnection]:
        return self.connect(other)


__all__ = [
    "Connector",
    "ConnectorInterface",
    "CONNECTION_RULES",
    "connector_for",
    "OrientedConnection",
    "OrientedInterface",
]
