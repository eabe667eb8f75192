"""
Operation result types for structured feedback.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from enum import Enum


class OperationStatus(Enum):
    """Status of an operation."""
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorCode(Enum):
    """Standard error codes carried by every network error."""
    MALFORMED_SPEC = "MALFORMED_SPEC"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    DANGLING_BRIDGE = "DANGLING_BRIDGE"
    UNREACHABLE_NODE = "UNREACHABLE_NODE"
    IMMUTABLE_GRAPH = "IMMUTABLE_GRAPH"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    UNKNOWN_NODE = "UNKNOWN_NODE"
    UNKNOWN_REGION = "UNKNOWN_REGION"
    UNKNOWN_SUBSYSTEM = "UNKNOWN_SUBSYSTEM"
    UNKNOWN_KIND = "UNKNOWN_KIND"


@dataclass
class OperationResult:
    """
    Structured result from a non-raising network operation.

    The raising API is the primary one; this wraps it for callers that
    prefer to branch on a status value (e.g. batch validation of templates).
    """

    status: OperationStatus
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    error_codes: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def is_success(self) -> bool:
        """Check if operation was successful."""
        return self.status == OperationStatus.SUCCESS

    def is_failure(self) -> bool:
        """Check if operation failed."""
        return self.status == OperationStatus.FAILURE

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    def add_error(self, error: str, code: Optional[ErrorCode] = None) -> None:
        """Add an error message with optional error code."""
        self.errors.append(error)
        if code is not None:
            self.error_codes.append(code.value)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (JSON-safe apart from metadata)."""
        return {
            "status": self.status.value,
            "message": self.message,
            "warnings": self.warnings,
            "errors": self.errors,
            "error_codes": self.error_codes,
            "metadata": self.metadata,
        }

    @classmethod
    def success(cls, message: str = "", **kwargs) -> "OperationResult":
        """Create a success result."""
        return cls(status=OperationStatus.SUCCESS, message=message, **kwargs)

    @classmethod
    def failure(cls, message: str = "", **kwargs) -> "OperationResult":
        """Create a failure result."""
        return cls(status=OperationStatus.FAILURE, message=message, **kwargs)
