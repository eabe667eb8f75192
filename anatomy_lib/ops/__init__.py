"""Operations for building transport networks."""

from .tree import NodeDraft, SubsystemTree, build_subsystem
from .bridges import resolve_bridges, bridge_fan_out, bridge_fan_in
from .depth import max_depths, max_cycle
from .regions import index_regions
from .build import NetworkBuilder, compile_network, try_compile_network

__all__ = [
    "NodeDraft",
    "SubsystemTree",
    "build_subsystem",
    "resolve_bridges",
    "bridge_fan_out",
    "bridge_fan_in",
    "max_depths",
    "max_cycle",
    "index_regions",
    "NetworkBuilder",
    "compile_network",
    "try_compile_network",
]
