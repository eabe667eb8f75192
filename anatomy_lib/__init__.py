"""
Anatomy Network Library - Compiled Transport Networks for Physiological Simulation

Builds the vascular and nervous transport networks of an anatomical template
from nested declarations, and publishes them as immutable graphs with
precomputed neighbor, kind and region views.

Key Features:
- Staged construction (trees, bridges, finalize) with all-or-nothing failure
- Cross-subsystem bridges (capillary beds) with fan-out and fan-in preserved
- Depth bounds and full-circuit bound for propagation budgets
- Region reverse index for organ-level lookups
- Template cache with at most one build in flight per template

Example Usage:
    from anatomy_lib import compile_network, get_preset

    template = {
        "name": "minimal",
        "arterial": [{"id": "Aorta", "regions": ["Thorax"], "bridges": ["VenaCava"]}],
        "venous": [{"id": "VenaCava", "regions": ["Thorax"]}],
    }
    graph = compile_network(template, get_preset("circulation"))
    graph.downstream("Aorta")   # frozenset({'VenaCava'})
"""

__version__ = "1.0.0"

from .core.types import FlowDirection, BuildState
from .core.network import Node, CompiledGraph
from .core.result import OperationResult, ErrorCode
from .core.errors import (
    NetworkError,
    ConstructionError,
    MalformedSpec,
    DuplicateIdentity,
    CycleDetected,
    DanglingBridge,
    UnreachableNode,
    ImmutableGraph,
    InvalidTransition,
    QueryError,
    UnknownNode,
    UnknownRegion,
    UnknownSubsystem,
    UnknownKind,
)

from .params.network_types import SubsystemType, BridgePair, NetworkType, BuildOptions
from .params.presets import get_preset, list_presets
from .specs.network_spec import NodeDecl, NetworkSpec

from .ops.build import NetworkBuilder, compile_network, try_compile_network
from .cache.template_cache import TemplateCache

from .analysis.query import (
    get_terminal_nodes,
    get_paths_from_start,
    validate_path,
    get_branch_depth,
)
from .analysis.structure import audit_reachability, compute_depth_stats, compute_branch_stats

from .adapters.networkx_adapter import to_networkx_graph, hop_distance

from .io.serialize import save_json, load_json

__all__ = [
    "FlowDirection",
    "BuildState",
    "Node",
    "CompiledGraph",
    "OperationResult",
    "ErrorCode",
    "NetworkError",
    "ConstructionError",
    "MalformedSpec",
    "DuplicateIdentity",
    "CycleDetected",
    "DanglingBridge",
    "UnreachableNode",
    "ImmutableGraph",
    "InvalidTransition",
    "QueryError",
    "UnknownNode",
    "UnknownRegion",
    "UnknownSubsystem",
    "UnknownKind",
    "SubsystemType",
    "BridgePair",
    "NetworkType",
    "BuildOptions",
    "get_preset",
    "list_presets",
    "NodeDecl",
    "NetworkSpec",
    "NetworkBuilder",
    "compile_network",
    "try_compile_network",
    "TemplateCache",
    "get_terminal_nodes",
    "get_paths_from_start",
    "validate_path",
    "get_branch_depth",
    "audit_reachability",
    "compute_depth_stats",
    "compute_branch_stats",
    "to_networkx_graph",
    "hop_distance",
    "save_json",
    "load_json",
]
