"""
Tree Builder: turns one subsystem's nested declarations into node drafts.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..core.errors import CycleDetected, DuplicateIdentity, MalformedSpec
from ..core.ids import KeyArena
from ..core.network import Node
from ..core.types import FlowDirection
from ..params.network_types import NetworkType, SubsystemType
from ..specs.network_spec import NodeDecl

logger = logging.getLogger(__name__)


@dataclass
class NodeDraft:
    """Mutable working record used while a network is under construction."""

    key: int
    id: str
    subsystem: str
    kind: str
    regions: Tuple[str, ...]
    depth: int
    upstream: List[str] = field(default_factory=list)
    downstream: List[str] = field(default_factory=list)

    def freeze(self) -> Node:
        return Node(
            key=self.key,
            id=self.id,
            kind=self.kind,
            subsystem=self.subsystem,
            regions=self.regions,
            upstream=tuple(self.upstream),
            downstream=tuple(self.downstream),
            depth=self.depth,
        )


@dataclass
class SubsystemTree:
    """
    Output of the Tree Builder for one subsystem.

    ``bridge_sources`` maps each declared bridge target id to the source ids
    that declared it, in declaration order.
    """

    subsystem: SubsystemType
    drafts: Dict[str, NodeDraft] = field(default_factory=dict)
    roots: List[str] = field(default_factory=list)
    bridge_sources: Dict[str, List[str]] = field(default_factory=dict)
    max_depth: int = 0

    @property
    def name(self) -> str:
        return self.subsystem.name

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.drafts


def build_subsystem(
    subsystem: SubsystemType,
    roots: List[NodeDecl],
    arena: KeyArena,
    network_type: Optional[NetworkType] = None,
) -> SubsystemTree:
    """
    Build one subsystem forest from its root declarations.

    Parameters
    ----------
    subsystem : SubsystemType
        Subsystem definition (name, kind, flow direction)
    roots : list of NodeDecl
        Root declarations with nested links
    arena : KeyArena
        Shared key arena for the template being built
    network_type : NetworkType, optional
        Used to check region tags against a closed vocabulary

    Returns
    -------
    tree : SubsystemTree
        Drafts keyed by id, with depth and intra-subsystem edges assigned

    Raises
    ------
    MalformedSpec
        On empty ids or regions
    CycleDetected
        If a child repeats an id on its own ancestor path
    DuplicateIdentity
        If an id is declared twice in this subsystem
    """
    tree = SubsystemTree(subsystem=subsystem)
    converging = subsystem.flow is FlowDirection.CONVERGING

    for root in roots:
        tree.roots.append(root.id)
        ancestors: List[str] = []
        on_path: Set[str] = set()
        # (decl, parent id, depth); a None decl marks leaving the last ancestor
        stack: List[Tuple[Optional[NodeDecl], Optional[str], int]] = [(root, None, 0)]
        while stack:
            decl, parent, depth = stack.pop()
            if decl is None:
                on_path.discard(ancestors.pop())
                continue

            if not isinstance(decl.id, str) or not decl.id.strip():
                raise MalformedSpec(f"{subsystem.name}: node id must be a non-empty string")
            if decl.id in on_path:
                path = " -> ".join(ancestors + [decl.id])
                raise CycleDetected(f"{subsystem.name}: cycle in declared links ({path})", node_id=decl.id)
            if decl.id in tree.drafts:
                raise DuplicateIdentity(
                    f"{subsystem.name}: node '{decl.id}' declared more than once", node_id=decl.id
                )
            if not decl.regions:
                raise MalformedSpec(f"{subsystem.name}: node '{decl.id}' has no regions", node_id=decl.id)
            if network_type is not None:
                for region in decl.regions:
                    if not network_type.accepts_region(region):
                        raise MalformedSpec(
                            f"{subsystem.name}: node '{decl.id}' occupies unknown region '{region}'",
                            node_id=decl.id,
                        )

            parent_edge = [parent] if parent is not None else []
            child_edges = [child.id for child in decl.links]
            tree.drafts[decl.id] = NodeDraft(
                key=arena.intern(decl.id),
                id=decl.id,
                subsystem=subsystem.name,
                kind=subsystem.kind,
                regions=tuple(dict.fromkeys(decl.regions)),
                depth=depth,
                upstream=child_edges if converging else parent_edge,
                downstream=parent_edge if converging else child_edges,
            )
            if depth > tree.max_depth:
                tree.max_depth = depth

            for target in decl.bridges:
                tree.bridge_sources.setdefault(target, []).append(decl.id)

            if decl.links:
                ancestors.append(decl.id)
                on_path.add(decl.id)
                stack.append((None, None, depth))
                for child in reversed(decl.links):
                    stack.append((child, decl.id, depth + 1))

    logger.debug(
        "Built subsystem %s: %d nodes, %d roots, max depth %d, %d bridge targets",
        subsystem.name, len(tree.drafts), len(tree.roots), tree.max_depth, len(tree.bridge_sources),
    )
    return tree
