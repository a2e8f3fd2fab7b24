"""Block faces exposing an oriented connector interface."""

from dataclasses import dataclass

from .connection import ConnectorInterface, OrientedInterface
from .orientation import Orientation


@dataclass(frozen=True)
class Face:
    oriented_interface: OrientedInterface

    @classmethod
    def of(
        cls,
        interface: ConnectorInterface,
        orientation: Orientation = Orientation.O0,
    ) -> "Face":
        """Shorthand for a face presenting ``interface`` at ``orientation``."""
        return cls(OrientedInterface(interface, orientation))

    @property
    def interface(self) -> ConnectorInterface:
        return self.oriented_interface.interface

    def can_connect_to(self, other: "Face") -> bool:
        return self.oriented_interface.connect(other.oriented_interface) is not None


__all__ = ["Face"]
