"""Analysis functions for compiled networks."""

from .query import get_terminal_nodes, get_paths_from_start, validate_path, get_branch_depth
from .structure import find_unreachable, audit_reachability, compute_depth_stats, compute_branch_stats

__all__ = [
    "get_terminal_nodes",
    "get_paths_from_start",
    "validate_path",
    "get_branch_depth",
    "find_unreachable",
    "audit_reachability",
    "compute_depth_stats",
    "compute_branch_stats",
]
