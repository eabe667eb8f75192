"""
Enumerations shared by the builder and the compiled graph.
"""

from enum import Enum


class FlowDirection(Enum):
    """
    How a subsystem's declared parent/child links map onto flow.

    DIVERGING trees carry flow from the root outward (arterial trees, efferent
    nerves). CONVERGING trees are declared from the trunk outward but carry flow
    toward the root (a venous forest declared from the venae cavae).
    """
    DIVERGING = "diverging"
    CONVERGING = "converging"


class BuildState(Enum):
    """Construction stages of a network, strictly sequential."""
    UNBUILT = 0
    TREE_BUILT = 1
    BRIDGES_RESOLVED = 2
    FINALIZED = 3

    def next_state(self) -> "BuildState":
        if self is BuildState.FINALIZED:
            raise ValueError("FINALIZED is terminal")
        return BuildState(self.value + 1)
