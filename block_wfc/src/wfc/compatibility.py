"""Pairwise compatibility rules with a per-node-pair result cache."""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from block_wfc.src.core.connection import ConnectorInterface
from block_wfc.src.common.constants import ORIENTATION_COUNT

from .state import NodeState

RuleCheck = Callable[[NodeState, NodeState], bool]


@dataclass
class CompatibilityRule:
    """A predicate over two node states."""

    check: RuleCheck
    description: Optional[str] = None

    def __call__(self, state1: NodeState, state2: NodeState) -> bool:
        return self.check(state1, state2)

    @classmethod
    def lego_connectivity(cls) -> "CompatibilityRule":
        """First state offers a stud, second a tube, and the turns cancel out."""

        def check(state1: NodeState, state2: NodeState) -> bool:
            has_stud = any(
                face.interface is ConnectorInterface.STUD for face in state1.block.faces()
            )
            has_tube = any(
                face.interface is ConnectorInterface.TUBE for face in state2.block.faces()
            )
            turns = state1.orientation.value + state2.orientation.value
            return has_stud and has_tube and turns % ORIENTATION_COUNT == 0

        return cls(check, "Lego block connectivity rule")


class CompatibilityTable:
    """ANDs every registered rule and memoizes the result per node pair.

    Keys are ordered ``(node1, node2)`` pairs, so asking for ``(b, a)`` after
    ``(a, b)`` evaluates the rules again.
    """

    def __init__(self) -> None:
        self.rules: List[CompatibilityRule] = []
        self._cache: Dict[Tuple[int, int], bool] = {}

    def add_rule(self, rule: CompatibilityRule) -> None:
        self.rules.append(rule)
        self.clear_cache()

    def clear_cache(self) -> None:
        self._cache.clear()

    def invalidate(self, node: int) -> None:
        """Forget every cached pair that involves ``node``."""
        for key in [key for key in self._cache if node in key]:
            del self._cache[key]

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def is_compatible(
        self, node1: int, node2: int, state1: NodeState, state2: NodeState
    ) -> bool:
        key = (node1, node2)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = all(rule(state1, state2) for rule in self.rules)
        self._cache[key] = result
        return result


__all__ = ["CompatibilityRule", "CompatibilityTable", "RuleCheck"]
