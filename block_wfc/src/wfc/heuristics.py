from abc import ABC, abstractmethod
from typing import AbstractSet, List, Optional, Sequence, Union

import numpy as np

from .state import NodeState

"""Strategies choosing which node to collapse next and which state to commit."""

SeedLike = Union[None, int, np.random.Generator]


class Heuristic(ABC):
    """Pluggable selection policy for the solver."""

    @abstractmethod
    def select_node_to_collapse(
        self,
        states_per_node: Sequence[Sequence[NodeState]],
        collapsed: AbstractSet[int],
    ) -> Optional[int]:
        """Pick an uncollapsed node with candidates, or None if there is none.

        ``states_per_node[i]`` lists the candidate states of node ``i``.
        """

    @abstractmethod
    def select_state_for_node(
        self, node: int, valid_states: Sequence[NodeState]
    ) -> Optional[NodeState]:
        """Pick one of ``valid_states``, or None if it is empty."""


def minimum_entropy_nodes(
    states_per_node: Sequence[Sequence[NodeState]], collapsed: AbstractSet[int]
) -> List[int]:
    """Uncollapsed nodes with non-empty candidate lists of minimal length."""
    entropies = [
        (node, len(states))
        for node, states in enumerate(states_per_node)
        if node not in collapsed and len(states) > 0
    ]
    if not entropies:
        return []
    lowest = min(entropy for _, entropy in entropies)
    return [node for node, entropy in entropies if entropy == lowest]


class WeightedRandomHeuristic(Heuristic):
    """Minimum-entropy node choice, ranking-weighted state choice.

    Ties between minimum-entropy nodes are broken uniformly at random. State
    weights come from ``block.ranking()``; a weight vector that cannot form a
    distribution (negative, non-finite, all zero, or overflowing when summed)
    falls back to a uniform draw.
    """

    def __init__(self, seed: SeedLike = None) -> None:
        self.rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)

    def select_node_to_collapse(
        self,
        states_per_node: Sequence[Sequence[NodeState]],
        collapsed: AbstractSet[int],
    ) -> Optional[int]:
        candidates = minimum_entropy_nodes(states_per_node, collapsed)
        if not candidates:
            return None
        return candidates[int(self.rng.integers(len(candidates)))]

    def select_state_for_node(
        self, node: int, valid_states: Sequence[NodeState]
    ) -> Optional[NodeState]:
        if not valid_states:
            return None

        probabilities = self._probabilities(valid_states)
        if probabilities is not None:
            index = int(self.rng.choice(len(valid_states), p=probabilities))
        else:
            index = int(self.rng.integers(len(valid_states)))
        return valid_states[index]

    @staticmethod
    def _probabilities(valid_states: Sequence[NodeState]) -> Optional[np.ndarray]:
        weights = np.array(
            [state.block.ranking() for state in valid_states], dtype=np.float64
        )
        if not np.all(np.isfinite(weights)) or np.any(weights < 0):
            return None
        with np.errstate(over="ignore"):
            total = weights.sum()
        if not np.isfinite(total) or total <= 0:
            return None
        return weights / total


class FirstStateHeuristic(Heuristic):
    """Deterministic policy: lowest-handle minimum-entropy node, first state."""

    def select_node_to_collapse(
        self,
        states_per_node: Sequence[Sequence[NodeState]],
        collapsed: AbstractSet[int],
    ) -> Optional[int]:
        candidates = minimum_entropy_nodes(states_per_node, collapsed)
        return candidates[0] if candidates else None

    def select_state_for_node(
        self, node: int, valid_states: Sequence[NodeState]
    ) -> Optional[NodeState]:
        return valid_states[0] if valid_states else None


__all__ = [
    "Heuristic",
    "WeightedRandomHeuristic",
    "FirstStateHeuristic",
    "minimum_entropy_nodes",
]
