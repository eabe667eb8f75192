"""
Core network data structures.

``CompiledGraph`` is the only object the builder ever publishes. Every view it
exposes is computed once at finalize time and stored keyed by interned node
key, so queries never walk the network.
"""

import copy
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional, Sequence, Tuple

from .errors import ImmutableGraph, UnknownKind, UnknownNode, UnknownRegion, UnknownSubsystem
from .ids import KeyArena

SCHEMA_VERSION = "1.0"


def copy_plain(data: Any) -> Any:
    """
    Copy nested dicts and lists without recursion.

    Handles templates nested deeper than the interpreter's recursion limit.
    Tuples are copied as lists; every other value is shared.
    """
    root = [None]
    stack = [(data, root, 0)]
    while stack:
        value, parent, slot = stack.pop()
        if isinstance(value, dict):
            copied = {}
            parent[slot] = copied
            for key, item in value.items():
                copied[key] = None
                stack.append((item, copied, key))
        elif isinstance(value, (list, tuple)):
            copied = [None] * len(value)
            parent[slot] = copied
            for i, item in enumerate(value):
                stack.append((item, copied, i))
        else:
            parent[slot] = value
    return root[0]


class Node:
    """
    One transport-network element (vessel or nerve segment).

    Node records are immutable. ``upstream`` and ``downstream`` are tuples in
    declaration order: declared links first, then resolved bridges.
    """

    __slots__ = ("key", "id", "kind", "subsystem", "regions", "upstream", "downstream", "depth")

    def __init__(
        self,
        key: int,
        id: str,
        kind: str,
        subsystem: str,
        regions: Tuple[str, ...],
        upstream: Tuple[str, ...],
        downstream: Tuple[str, ...],
        depth: int,
    ):
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "id", id)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "subsystem", subsystem)
        object.__setattr__(self, "regions", tuple(regions))
        object.__setattr__(self, "upstream", tuple(upstream))
        object.__setattr__(self, "downstream", tuple(downstream))
        object.__setattr__(self, "depth", depth)

    def __setattr__(self, name, value):
        raise ImmutableGraph(f"Node '{self.id}' is immutable (tried to set '{name}')", node_id=self.id)

    def __delattr__(self, name):
        raise ImmutableGraph(f"Node '{self.id}' is immutable (tried to delete '{name}')", node_id=self.id)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.subsystem, self.id))

    def __repr__(self):
        return (
            f"Node(id={self.id!r}, kind={self.kind!r}, subsystem={self.subsystem!r}, "
            f"depth={self.depth}, upstream={list(self.upstream)}, downstream={list(self.downstream)})"
        )

    def is_start(self) -> bool:
        return not self.upstream

    def is_terminal(self) -> bool:
        return not self.downstream

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "key": self.key,
            "id": self.id,
            "kind": self.kind,
            "subsystem": self.subsystem,
            "regions": list(self.regions),
            "upstream": list(self.upstream),
            "downstream": list(self.downstream),
            "depth": self.depth,
        }


class CompiledGraph:
    """
    Finalized, immutable transport network for one anatomical template.

    Instances are produced by ``NetworkBuilder.finalize`` (or
    ``compile_network``) and are safe to share between simulation threads
    without locking. Any attempt to set or delete an attribute raises
    ``ImmutableGraph``.

    Query methods take external node ids (strings) and return frozensets or
    tuples. Unknown ids raise ``UnknownNode``.
    """

    def __init__(
        self,
        name: str,
        network_type,
        arena: KeyArena,
        nodes: Sequence[Node],
        bridges: Sequence[Tuple[str, str]],
        region_index: Mapping[str, FrozenSet[str]],
        max_depths: Mapping[str, int],
        max_cycle: int,
        spec: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        nodes = tuple(nodes)
        kinds = network_type.kinds()
        subsystems = network_type.subsystem_names()

        by_kind = {kind: frozenset(n.id for n in nodes if n.kind == kind) for kind in kinds}
        by_subsystem = {
            sub: tuple(n.id for n in nodes if n.subsystem == sub) for sub in subsystems
        }
        sources = {s for s, _ in bridges}
        targets = {t for _, t in bridges}

        # the builder keeps its arena; the graph owns a private snapshot
        frozen_arena = KeyArena()
        frozen_arena.set_state(arena.get_state())

        fields = {
            "name": name,
            "network_type": network_type,
            "metadata": MappingProxyType(copy.deepcopy(dict(metadata or {}))),
            "_arena": frozen_arena,
            "_nodes": nodes,
            "_upstream": tuple(frozenset(n.upstream) for n in nodes),
            "_downstream": tuple(frozenset(n.downstream) for n in nodes),
            "_regions": tuple(frozenset(n.regions) for n in nodes),
            "_by_kind": MappingProxyType(by_kind),
            "_by_subsystem": MappingProxyType(by_subsystem),
            "_start": frozenset(n.id for n in nodes if not n.upstream),
            "_terminal": frozenset(n.id for n in nodes if not n.downstream),
            "_pre_junction": frozenset(sources),
            "_post_junction": frozenset(targets),
            "_bridges": tuple(bridges),
            "_region_index": MappingProxyType(dict(region_index)),
            "_max_depths": MappingProxyType(dict(max_depths)),
            "_max_cycle": max_cycle,
            "_spec": copy_plain(spec),
        }
        for attr, value in fields.items():
            object.__setattr__(self, attr, value)

    def __setattr__(self, name, value):
        raise ImmutableGraph(f"Graph '{self.name}' is finalized (tried to set '{name}')")

    def __delattr__(self, name):
        raise ImmutableGraph(f"Graph '{self.name}' is finalized (tried to delete '{name}')")

    def __repr__(self):
        return (
            f"CompiledGraph(name={self.name!r}, network_type={self.network_type.name!r}, "
            f"nodes={len(self._nodes)}, bridges={len(self._bridges)})"
        )

    def __contains__(self, node_id) -> bool:
        return isinstance(node_id, str) and node_id in self._arena

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._arena)

    def _key(self, node_id: str) -> int:
        key = self._arena.key_of(node_id) if isinstance(node_id, str) else None
        if key is None:
            raise UnknownNode(f"Node '{node_id}' is not part of template '{self.name}'", node_id=node_id)
        return key - self._arena.start_key

    # -- node level ------------------------------------------------------

    def node(self, node_id: str) -> Node:
        """Get the immutable node record."""
        return self._nodes[self._key(node_id)]

    def node_ids(self) -> Tuple[str, ...]:
        """All node ids in declaration order."""
        return tuple(n.id for n in self._nodes)

    def nodes(self) -> Tuple[Node, ...]:
        return self._nodes

    def upstream(self, node_id: str) -> FrozenSet[str]:
        """Ids that flow or signal arrives from."""
        return self._upstream[self._key(node_id)]

    def downstream(self, node_id: str) -> FrozenSet[str]:
        """Ids that flow or signal proceeds to, bridges included."""
        return self._downstream[self._key(node_id)]

    def regions(self, node_id: str) -> FrozenSet[str]:
        return self._regions[self._key(node_id)]

    def kind(self, node_id: str) -> str:
        return self._nodes[self._key(node_id)].kind

    def subsystem(self, node_id: str) -> str:
        return self._nodes[self._key(node_id)].subsystem

    def depth(self, node_id: str) -> int:
        return self._nodes[self._key(node_id)].depth

    def is_pre_junction(self, node_id: str) -> bool:
        self._key(node_id)
        return node_id in self._pre_junction

    def is_post_junction(self, node_id: str) -> bool:
        self._key(node_id)
        return node_id in self._post_junction

    # -- network level ---------------------------------------------------

    def start_nodes(self) -> FrozenSet[str]:
        """Nodes with no upstream neighbor."""
        return self._start

    def terminal_nodes(self) -> FrozenSet[str]:
        """Nodes with no downstream neighbor."""
        return self._terminal

    def of_kind(self, kind: str) -> FrozenSet[str]:
        """All nodes of one classification (e.g. "Artery")."""
        try:
            return self._by_kind[kind]
        except KeyError:
            raise UnknownKind(
                f"Kind '{kind}' is not defined for network type '{self.network_type.name}' "
                f"(known: {list(self._by_kind)})"
            ) from None

    def subsystems(self) -> Tuple[str, ...]:
        return tuple(self._by_subsystem)

    def subsystem_nodes(self, subsystem: str) -> Tuple[str, ...]:
        """Node ids of one subsystem in declaration order."""
        try:
            return self._by_subsystem[subsystem]
        except KeyError:
            raise UnknownSubsystem(
                f"Template '{self.name}' has no subsystem '{subsystem}'"
            ) from None

    def pre_junction_nodes(self) -> FrozenSet[str]:
        """Nodes with outgoing bridge edges."""
        return self._pre_junction

    def post_junction_nodes(self) -> FrozenSet[str]:
        """Nodes receiving bridge edges."""
        return self._post_junction

    def bridges(self) -> Tuple[Tuple[str, str], ...]:
        """Every resolved (source, target) bridge edge, fan-outs included."""
        return self._bridges

    def nodes_in_region(self, region: str) -> FrozenSet[str]:
        """
        Reverse lookup of the nodes occupying ``region``.

        A tag from the network type's vocabulary that no node occupies yields
        an empty set. Any other unindexed tag raises ``UnknownRegion``.
        """
        found = self._region_index.get(region)
        if found is not None:
            return found
        vocabulary = self.network_type.regions
        if vocabulary is not None and region in vocabulary:
            return frozenset()
        raise UnknownRegion(f"Region '{region}' is not occupied in template '{self.name}'")

    def region_tags(self) -> Tuple[str, ...]:
        """Occupied region tags in first-seen order."""
        return tuple(self._region_index)

    def regions_index(self) -> Mapping[str, FrozenSet[str]]:
        """Read-only view of the full region index."""
        return self._region_index

    def max_depth(self, subsystem: str) -> int:
        """Deepest node depth reached in one subsystem (roots are 0)."""
        try:
            return self._max_depths[subsystem]
        except KeyError:
            raise UnknownSubsystem(
                f"Template '{self.name}' has no subsystem '{subsystem}'"
            ) from None

    def max_cycle(self) -> int:
        """Worst-case edge count for one full circuit across bridged subsystems."""
        return self._max_cycle

    def spec_dict(self) -> Optional[Dict[str, Any]]:
        """Copy of the declarative template this graph was compiled from."""
        return copy_plain(self._spec)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "schema_version": SCHEMA_VERSION,
            "name": self.name,
            "network_type": self.network_type.to_dict(),
            "metadata": copy.deepcopy(dict(self.metadata)),
            "spec": self.spec_dict(),
            "nodes": [n.to_dict() for n in self._nodes],
            "bridges": [list(b) for b in self._bridges],
            "region_index": {r: sorted(ids) for r, ids in self._region_index.items()},
            "max_depth": dict(self._max_depths),
            "max_cycle": self._max_cycle,
        }
