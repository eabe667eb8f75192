"""
Exception taxonomy for network construction and queries.

Construction errors are fatal to the template being built: no partial graph
is ever returned. Query errors are recoverable and left to the caller.
"""

from typing import Optional

from .result import ErrorCode


class NetworkError(Exception):
    """Base class for every error raised by this library."""

    code = None

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.node_id = node_id

    def to_dict(self) -> dict:
        """Structured form for logs and result objects."""
        return {
            "error": type(self).__name__,
            "code": self.code.value if self.code is not None else None,
            "message": self.message,
            "node_id": self.node_id,
        }


class ConstructionError(NetworkError):
    """Any failure while building a template."""


class MalformedSpec(ConstructionError):
    """A required field is missing, empty, or of the wrong shape."""
    code = ErrorCode.MALFORMED_SPEC


class DuplicateIdentity(ConstructionError):
    """A node id was declared more than once."""
    code = ErrorCode.DUPLICATE_IDENTITY


class CycleDetected(ConstructionError):
    """A declared child repeats an id already on its ancestor path."""
    code = ErrorCode.CYCLE_DETECTED


class DanglingBridge(ConstructionError):
    """A bridge names a node absent from the expected subsystem."""
    code = ErrorCode.DANGLING_BRIDGE

    def __init__(self, message: str, source: str, target: str):
        super().__init__(message, node_id=target)
        self.source = source
        self.target = target

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["source"] = self.source
        d["target"] = self.target
        return d


class UnreachableNode(ConstructionError):
    """A node cannot be reached from any start node."""
    code = ErrorCode.UNREACHABLE_NODE


class ImmutableGraph(NetworkError, AttributeError):
    """Mutation attempted on a finalized graph."""
    code = ErrorCode.IMMUTABLE_GRAPH


class InvalidTransition(NetworkError):
    """A builder stage was invoked out of order."""
    code = ErrorCode.INVALID_TRANSITION


class QueryError(NetworkError, KeyError):
    """Lookup against a finalized graph failed."""

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.message


class UnknownNode(QueryError):
    code = ErrorCode.UNKNOWN_NODE


class UnknownRegion(QueryError):
    code = ErrorCode.UNKNOWN_REGION


class UnknownSubsystem(QueryError):
    code = ErrorCode.UNKNOWN_SUBSYSTEM


class UnknownKind(QueryError):
    code = ErrorCode.UNKNOWN_KIND
