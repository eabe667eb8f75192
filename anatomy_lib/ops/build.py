"""
Construction operations for building transport networks.

Construction runs in three strictly ordered stages, tracked by
``NetworkBuilder.state``:

1. build_trees - walk each subsystem's declared forest (Tree Builder)
2. resolve_bridges - wire cross-subsystem edges (Bridge Resolver)
3. finalize - derive depth bounds and the region index, audit reachability,
   and publish an immutable ``CompiledGraph``

Nothing built before ``finalize`` succeeds is ever handed to a caller.
"""

import logging
from typing import Dict, List, Optional, Tuple, Union

from ..core.errors import (
    DuplicateIdentity,
    ImmutableGraph,
    InvalidTransition,
    NetworkError,
    UnreachableNode,
)
from ..core.ids import KeyArena
from ..core.network import CompiledGraph
from ..core.result import OperationResult
from ..core.types import BuildState
from ..params.network_types import BuildOptions, NetworkType
from ..specs.network_spec import NetworkSpec
from ..analysis.structure import find_unreachable
from .tree import SubsystemTree, build_subsystem
from .bridges import resolve_bridges
from .depth import max_depths, max_cycle
from .regions import index_regions

logger = logging.getLogger(__name__)


class NetworkBuilder:
    """
    Staged construction of one template.

    Stages must be called in order; calling a stage twice or out of order
    raises ``InvalidTransition`` and any call after ``finalize`` raises
    ``ImmutableGraph``. A builder whose stage raised is spent.

    Example
    -------
    >>> builder = NetworkBuilder(spec, get_preset("circulation"))
    >>> graph = builder.build_trees().resolve_bridges().finalize()
    """

    def __init__(
        self,
        spec: NetworkSpec,
        network_type: NetworkType,
        options: Optional[BuildOptions] = None,
    ):
        self.spec = spec
        self.network_type = network_type
        self.options = options or BuildOptions()
        self.state = BuildState.UNBUILT
        self.arena = KeyArena()
        self.trees: Dict[str, SubsystemTree] = {}
        self.bridges: List[Tuple[str, str]] = []
        self._failed: Optional[NetworkError] = None

    def _advance(self, expected: BuildState, stage: str) -> None:
        if self.state is BuildState.FINALIZED:
            raise ImmutableGraph(f"Cannot run {stage}: template '{self.spec.name}' is finalized")
        if self._failed is not None:
            raise InvalidTransition(
                f"Cannot run {stage}: an earlier stage failed ({self._failed.message})"
            )
        if self.state is not expected:
            raise InvalidTransition(
                f"Cannot run {stage} in state {self.state.name} (requires {expected.name})"
            )

    def _run(self, stage: str, fn):
        try:
            return fn()
        except NetworkError as e:
            self._failed = e
            logger.debug("Stage %s failed for template '%s': %s", stage, self.spec.name, e.message)
            raise

    def build_trees(self) -> "NetworkBuilder":
        """Tree Builder stage: one forest per subsystem, in network type order."""
        self._advance(BuildState.UNBUILT, "build_trees")
        self._run("build_trees", self._build_trees)
        self.state = self.state.next_state()
        return self

    def resolve_bridges(self) -> "NetworkBuilder":
        """Bridge Resolver stage: runs only once every forest exists."""
        self._advance(BuildState.TREE_BUILT, "resolve_bridges")
        self.bridges = self._run(
            "resolve_bridges", lambda: resolve_bridges(self.trees, self.network_type)
        )
        self.state = self.state.next_state()
        return self

    def finalize(self) -> CompiledGraph:
        """Derive depth bounds and region index, audit, and publish the graph."""
        self._advance(BuildState.BRIDGES_RESOLVED, "finalize")
        graph = self._run("finalize", self._compile)
        self.state = self.state.next_state()
        return graph

    def _build_trees(self) -> None:
        self.spec.check_against(self.network_type)
        owner: Dict[str, str] = {}
        for subsystem in self.network_type.subsystems:
            tree = build_subsystem(
                subsystem, self.spec.roots(subsystem.name), self.arena, self.network_type
            )
            for node_id in tree.drafts:
                if node_id in owner:
                    raise DuplicateIdentity(
                        f"Node '{node_id}' is declared in both '{owner[node_id]}' "
                        f"and '{subsystem.name}'",
                        node_id=node_id,
                    )
                owner[node_id] = subsystem.name
            self.trees[subsystem.name] = tree

    def _compile(self) -> CompiledGraph:
        drafts = [d for tree in self.trees.values() for d in tree.drafts.values()]
        drafts.sort(key=lambda d: d.key)

        if self.options.check_reachability:
            unreachable = find_unreachable(
                [d.id for d in drafts if not d.upstream],
                {d.id: d.downstream for d in drafts},
            )
            if unreachable:
                raise UnreachableNode(
                    f"Template '{self.spec.name}': {len(unreachable)} node(s) unreachable "
                    f"from any start node: {unreachable[:10]}",
                    node_id=unreachable[0],
                )

        depths = max_depths(self.trees)
        cycle = max_cycle(self.network_type, depths)
        nodes = [d.freeze() for d in drafts]
        region_index = index_regions(nodes)

        logger.debug(
            "Finalized template '%s' (%s): %d nodes, %d bridges, depths %s, max cycle %d",
            self.spec.name, self.network_type.name, len(nodes), len(self.bridges), depths, cycle,
        )
        return CompiledGraph(
            name=self.spec.name,
            network_type=self.network_type,
            arena=self.arena,
            nodes=nodes,
            bridges=self.bridges,
            region_index=region_index,
            max_depths=depths,
            max_cycle=cycle,
            spec=self.spec.to_dict(),
            metadata=self.spec.metadata,
        )


def compile_network(
    spec: Union[NetworkSpec, dict],
    network_type: NetworkType,
    options: Optional[BuildOptions] = None,
    name: Optional[str] = None,
) -> CompiledGraph:
    """
    Build a finalized graph from a template in one call.

    Parameters
    ----------
    spec : NetworkSpec or dict
        Parsed template. Raw mappings are validated with ``NetworkSpec.from_dict``.
    network_type : NetworkType
        Network type the template instantiates
    options : BuildOptions, optional
        Construction switches
    name : str, optional
        Template name override

    Returns
    -------
    graph : CompiledGraph
        Immutable, fully derived graph

    Raises
    ------
    ConstructionError
        Any of MalformedSpec, DuplicateIdentity, CycleDetected,
        DanglingBridge or UnreachableNode. No partial graph is returned.

    Example
    -------
    >>> graph = compile_network(template, get_preset("circulation"))
    >>> graph.max_cycle()
    """
    if isinstance(spec, NetworkSpec):
        if name is not None and name != spec.name:
            spec = NetworkSpec(forests=spec.forests, name=name, metadata=spec.metadata)
    else:
        spec = NetworkSpec.from_dict(spec, network_type, name=name)

    builder = NetworkBuilder(spec, network_type, options)
    return builder.build_trees().resolve_bridges().finalize()


def try_compile_network(
    spec: Union[NetworkSpec, dict],
    network_type: NetworkType,
    options: Optional[BuildOptions] = None,
    name: Optional[str] = None,
) -> OperationResult:
    """
    Non-raising variant of ``compile_network``.

    Returns
    -------
    result : OperationResult
        On success metadata["graph"] holds the CompiledGraph; on failure
        error_codes and metadata["error"] describe the construction error.
    """
    try:
        graph = compile_network(spec, network_type, options, name)
    except NetworkError as e:
        result = OperationResult.failure(message=f"Construction failed: {e.message}")
        result.add_error(e.message, e.code)
        result.metadata["error"] = e.to_dict()
        return result

    result = OperationResult.success(
        message=f"Compiled template '{graph.name}' with {len(graph)} nodes",
        metadata={
            "graph": graph,
            "node_count": len(graph),
            "bridge_count": len(graph.bridges()),
            "max_cycle": graph.max_cycle(),
        },
    )
    if options is not None and not options.check_reachability:
        result.add_warning("Reachability audit skipped; some nodes may be unreachable")
    if network_type.bridge_pairs and not graph.bridges():
        result.add_warning(f"Template '{graph.name}' declares no bridges between its subsystems")
    return result
