"""Notification sinks for collapse and propagation events."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from .state import NodeState

logger = logging.getLogger("block_wfc.observer")


class Observer(ABC):
    """Receives events synchronously while the solver runs."""

    @abstractmethod
    def on_collapse(self, node: int, state: NodeState) -> None:
        """Called after ``node`` was committed to ``state``."""

    @abstractmethod
    def on_propagate(self, affected: Sequence[int]) -> None:
        """Called with the nodes the invariants named after a collapse."""


class LoggingObserver(Observer):
    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def on_collapse(self, node: int, state: NodeState) -> None:
        logger.log(
            self.level,
            "Collapsed node %d at %s to %s (%s)",
            node,
            state.position,
            state.symbol(),
            state.orientation.name,
        )

    def on_propagate(self, affected: Sequence[int]) -> None:
        logger.log(self.level, "Propagation touches nodes %s", list(affected))


class RecordingObserver(Observer):
    """Keeps every event in arrival order."""

    def __init__(self) -> None:
        self.collapses: List[Tuple[int, NodeState]] = []
        self.propagations: List[List[int]] = []

    def on_collapse(self, node: int, state: NodeState) -> None:
        self.collapses.append((node, state.copy()))

    def on_propagate(self, affected: Sequence[int]) -> None:
        self.propagations.append(list(affected))

    @property
    def collapsed_nodes(self) -> List[int]:
        return [node for node, _ in self.collapses]


class ProgressObserver(Observer):
    """Advances a tqdm bar on every collapse."""

    def __init__(self, total: int, desc: str = "Collapsing", disable: Optional[bool] = None):
        self.bar = tqdm(total=total, desc=desc, unit="node", disable=disable)

    def on_collapse(self, node: int, state: NodeState) -> None:
        self.bar.update(1)

    def on_propagate(self, affected: Sequence[int]) -> None:
        pass

    def close(self) -> None:
        self.bar.close()


__all__ = ["Observer", "LoggingObserver", "RecordingObserver", "ProgressObserver"]
