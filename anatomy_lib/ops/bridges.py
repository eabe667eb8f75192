"""
Bridge operations for connecting paired subsystems.

A bridge models a capillary bed (or an equivalent junction) joining a node of
one subsystem to an entry node of another. Bridges are declared on the source
side only; resolution adds the forward edge to the source and the matching
reverse edge to the target.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..core.errors import DanglingBridge
from ..params.network_types import NetworkType
from .tree import SubsystemTree

logger = logging.getLogger(__name__)


def _find_target(
    trees: Dict[str, SubsystemTree],
    target_subsystems: Tuple[str, ...],
    target_id: str,
) -> Optional[SubsystemTree]:
    for name in target_subsystems:
        tree = trees.get(name)
        if tree is not None and target_id in tree:
            return tree
    return None


def resolve_bridges(
    trees: Dict[str, SubsystemTree],
    network_type: NetworkType,
) -> List[Tuple[str, str]]:
    """
    Wire every declared bridge as an extra edge.

    Must run after all subsystems of every bridged pair have been built,
    since a source and its target may come from forests built in either order.

    Parameters
    ----------
    trees : dict
        Subsystem name -> built SubsystemTree
    network_type : NetworkType
        Supplies the bridge pairs (which subsystem may bridge into which)

    Returns
    -------
    bridges : list of (source, target)
        Every resolved edge in resolution order. Fan-outs and fan-ins are kept
        edge for edge; how flow is divided across them is left to consumers.

    Raises
    ------
    DanglingBridge
        If a source is missing from its subsystem or a target is absent from
        every subsystem the source may bridge into
    """
    bridges: List[Tuple[str, str]] = []

    for subsystem in network_type.subsystem_names():
        source_tree = trees.get(subsystem)
        if source_tree is None or not source_tree.bridge_sources:
            continue

        target_subsystems = network_type.bridge_targets(subsystem)
        for target_id, sources in source_tree.bridge_sources.items():
            target_tree = _find_target(trees, target_subsystems, target_id)
            if target_tree is None:
                raise DanglingBridge(
                    f"Bridge from '{sources[0]}' names '{target_id}', which is not a node of "
                    f"{' or '.join(target_subsystems) or 'any bridged subsystem'}",
                    source=sources[0],
                    target=target_id,
                )

            target = target_tree.drafts[target_id]
            for source_id in sources:
                source = source_tree.drafts.get(source_id)
                if source is None:
                    raise DanglingBridge(
                        f"Bridge source '{source_id}' is not a node of '{subsystem}'",
                        source=source_id,
                        target=target_id,
                    )
                source.downstream.append(target_id)
                target.upstream.append(source_id)
                bridges.append((source_id, target_id))

        logger.debug(
            "Resolved %d bridge target(s) from %s into %s",
            len(source_tree.bridge_sources), subsystem, ", ".join(target_subsystems),
        )

    return bridges


def bridge_fan_out(bridges: List[Tuple[str, str]]) -> Dict[str, List[str]]:
    """Group resolved bridges by source: source -> targets in edge order."""
    fan_out: Dict[str, List[str]] = {}
    for source, target in bridges:
        fan_out.setdefault(source, []).append(target)
    return fan_out


def bridge_fan_in(bridges: List[Tuple[str, str]]) -> Dict[str, List[str]]:
    """Group resolved bridges by target: target -> sources in edge order."""
    fan_in: Dict[str, List[str]] = {}
    for source, target in bridges:
        fan_in.setdefault(target, []).append(source)
    return fan_in
