"""Core data structures for transport networks."""

from .types import FlowDirection, BuildState
from .ids import KeyArena
from .network import Node, CompiledGraph
from .result import OperationResult, OperationStatus, ErrorCode
from .errors import (
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

__all__ = [
    "FlowDirection",
    "BuildState",
    "KeyArena",
    "Node",
    "CompiledGraph",
    "OperationResult",
    "OperationStatus",
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
]
