from typing import Tuple

"""Exceptions raised by graph lookups and the solver."""


class WFCError(Exception):
    """Base class for every solver failure."""


class NoValidStatesError(WFCError):
    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(f"No valid states available for node {node}")


class PropagationFailedError(WFCError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Propagation failed: {reason}")


class IncompleteCollapseError(WFCError):
    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(f"Incomplete collapse for node {node}")


class InvalidStateError(WFCError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid state: {reason}")


class NoValidStatesAfterInvariantsError(WFCError):
    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(f"No valid states after applying invariants for node {node}")


class HeuristicFailureError(WFCError):
    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(f"Heuristic failed to select state for node {node}")


class MultipleStatesRemainError(WFCError):
    def __init__(self, node: int, count: int) -> None:
        self.node = node
        self.count = count
        super().__init__(
            f"Multiple states remain for uncollapsed node {node}: expected 1, found {count}"
        )


class NoSolutionError(WFCError):
    def __init__(self, message: str = "No solution found") -> None:
        super().__init__(message)


class NodeNotFoundError(WFCError):
    def __init__(self, node: int) -> None:
        self.node = node
        super().__init__(f"Node {node} not found in graph")


class NodeNotFoundAtPositionError(WFCError):
    def __init__(self, position: Tuple[int, int, int]) -> None:
        self.position = tuple(position)
        super().__init__(f"Node not found at position {self.position}")


__all__ = [
    "WFCError",
    "NoValidStatesError",
    "PropagationFailedError",
    "IncompleteCollapseError",
    "InvalidStateError",
    "NoValidStatesAfterInvariantsError",
    "HeuristicFailureError",
    "MultipleStatesRemainError",
    "NoSolutionError",
    "NodeNotFoundError",
    "NodeNotFoundAtPositionError",
]
