"""
Network type definitions.

A network type fixes, for every template of that type, which subsystems must be
declared, the node kind each subsystem produces, how its links map onto flow,
and which subsystem pairs are joined by bridges.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from ..core.types import FlowDirection
from ..core.errors import UnknownSubsystem


@dataclass(frozen=True)
class SubsystemType:
    """
    One side of a network.

    Parameters
    ----------
    name : str
        Key under which templates declare this forest (e.g. "arterial")
    kind : str
        Classification tag given to every node of the forest (e.g. "Artery")
    flow : FlowDirection
        Orientation of declared links relative to flow
    """

    name: str
    kind: str
    flow: FlowDirection = FlowDirection.DIVERGING

    def to_dict(self) -> dict:
        return {"name": self.name, "kind": self.kind, "flow": self.flow.value}

    @classmethod
    def from_dict(cls, d: dict) -> "SubsystemType":
        return cls(
            name=d["name"],
            kind=d["kind"],
            flow=FlowDirection(d.get("flow", FlowDirection.DIVERGING.value)),
        )


@dataclass(frozen=True)
class BridgePair:
    """Bridges declared in ``source`` name entry nodes of ``target``."""

    source: str
    target: str

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, d: dict) -> "BridgePair":
        return cls(source=d["source"], target=d["target"])


@dataclass(frozen=True)
class NetworkType:
    """
    Shape shared by all templates of one kind of transport network.

    Parameters
    ----------
    name : str
        Network type name (e.g. "circulation")
    subsystems : tuple of SubsystemType
        Forests every template must declare, in build order
    bridge_pairs : tuple of BridgePair
        Cross-subsystem junctions; empty for unbridged networks
    regions : frozenset of str, optional
        Closed vocabulary of region tags. None accepts any tag.
    """

    name: str
    subsystems: Tuple[SubsystemType, ...]
    bridge_pairs: Tuple[BridgePair, ...] = ()
    regions: Optional[FrozenSet[str]] = None
    _by_name: Dict[str, SubsystemType] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "subsystems", tuple(self.subsystems))
        object.__setattr__(self, "bridge_pairs", tuple(self.bridge_pairs))
        if self.regions is not None:
            object.__setattr__(self, "regions", frozenset(self.regions))

        if not self.subsystems:
            raise ValueError(f"Network type '{self.name}' declares no subsystems")

        by_name = {}
        for sub in self.subsystems:
            if sub.name in by_name:
                raise ValueError(
                    f"Network type '{self.name}' declares subsystem '{sub.name}' twice"
                )
            by_name[sub.name] = sub
        object.__setattr__(self, "_by_name", by_name)

        for pair in self.bridge_pairs:
            for side in (pair.source, pair.target):
                if side not in by_name:
                    raise ValueError(
                        f"Bridge pair {pair.source}->{pair.target} names unknown subsystem '{side}'"
                    )
            if pair.source == pair.target:
                raise ValueError(f"Bridge pair must join two subsystems, got {pair.source} twice")

    def subsystem(self, name: str) -> SubsystemType:
        """Get a subsystem definition by name."""
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownSubsystem(
                f"Network type '{self.name}' has no subsystem '{name}'"
            ) from None

    def subsystem_names(self) -> Tuple[str, ...]:
        return tuple(sub.name for sub in self.subsystems)

    def kinds(self) -> Tuple[str, ...]:
        """The finite set of node kinds, in subsystem order."""
        seen = []
        for sub in self.subsystems:
            if sub.kind not in seen:
                seen.append(sub.kind)
        return tuple(seen)

    def bridge_targets(self, source: str) -> Tuple[str, ...]:
        """Subsystems that bridges declared in ``source`` may land in."""
        return tuple(p.target for p in self.bridge_pairs if p.source == source)

    def is_bridged(self) -> bool:
        return bool(self.bridge_pairs)

    def accepts_region(self, region: str) -> bool:
        return self.regions is None or region in self.regions

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "subsystems": [s.to_dict() for s in self.subsystems],
            "bridge_pairs": [p.to_dict() for p in self.bridge_pairs],
            "regions": sorted(self.regions) if self.regions is not None else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "NetworkType":
        """Create from dictionary."""
        regions = d.get("regions")
        return cls(
            name=d["name"],
            subsystems=tuple(SubsystemType.from_dict(s) for s in d["subsystems"]),
            bridge_pairs=tuple(BridgePair.from_dict(p) for p in d.get("bridge_pairs", [])),
            regions=frozenset(regions) if regions is not None else None,
        )


@dataclass(frozen=True)
class BuildOptions:
    """
    Construction switches.

    check_reachability runs the no-orphan audit before a graph is published.
    Turning it off is only useful for inspecting deliberately partial
    templates in tests.
    """

    check_reachability: bool = True

    def to_dict(self) -> dict:
        return {"check_reachability": self.check_reachability}

    @classmethod
    def from_dict(cls, d: dict) -> "BuildOptions":
        return cls(check_reachability=d.get("check_reachability", True))


def make_network_type(
    name: str,
    subsystems: Iterable[SubsystemType],
    bridge_pairs: Iterable[BridgePair] = (),
    regions: Optional[Iterable[str]] = None,
) -> NetworkType:
    """Convenience constructor accepting any iterables."""
    return NetworkType(
        name=name,
        subsystems=tuple(subsystems),
        bridge_pairs=tuple(bridge_pairs),
        regions=frozenset(regions) if regions is not None else None,
    )
