"""
Template cache: one shared CompiledGraph per anatomical template name.

Construction cost scales with network size, so a graph is built once per
template and then shared by every organism instance that uses it. Finalized
graphs need no locking; the only synchronized state is the cache map itself.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..core.network import CompiledGraph
from ..params.network_types import BuildOptions, NetworkType
from ..specs.network_spec import NetworkSpec
from ..ops.build import compile_network

logger = logging.getLogger(__name__)

Loader = Callable[[str], Union[NetworkSpec, Dict[str, Any]]]


class TemplateCache:
    """
    Get-or-build registry keyed by template name.

    At most one build per template name is in flight at any time. A second
    caller asking for a name that is being built waits for that build and
    receives the same graph (or the same construction error). Failed builds
    are not cached, so a later call retries with a fresh load.
    A loader may request other templates, but never the one it is loading.

    Parameters
    ----------
    loader : callable
        ``loader(name)`` returns the template as a ``NetworkSpec`` or raw mapping
    network_type : NetworkType
        Network type every template in this cache instantiates
    options : BuildOptions, optional
        Construction switches passed to every build

    Example
    -------
    >>> cache = TemplateCache(templates.__getitem__, get_preset("circulation"))
    >>> graph = cache.get_or_build("human")
    >>> graph is cache.get_or_build("human")
    True
    """

    def __init__(
        self,
        loader: Loader,
        network_type: NetworkType,
        options: Optional[BuildOptions] = None,
    ):
        self.loader = loader
        self.network_type = network_type
        self.options = options or BuildOptions()
        self._lock = threading.Lock()
        self._graphs: Dict[str, CompiledGraph] = {}
        # name -> (future, id of the thread running the build)
        self._in_flight: Dict[str, Tuple[Future, int]] = {}
        self._build_counts: Dict[str, int] = {}

    def get_or_build(self, name: str) -> CompiledGraph:
        """
        Return the shared graph for ``name``, building it on first request.

        Raises
        ------
        ConstructionError
            If the template fails to build. Every caller waiting on that
            build receives the same error.
        RuntimeError
            If the loader, while building ``name``, asks for ``name`` again
        """
        with self._lock:
            graph = self._graphs.get(name)
            if graph is not None:
                return graph
            entry = self._in_flight.get(name)
            owner = entry is None
            if owner:
                future = Future()
                self._in_flight[name] = (future, threading.get_ident())
                self._build_counts[name] = self._build_counts.get(name, 0) + 1

        if not owner:
            future, builder_thread = entry
            if builder_thread == threading.get_ident():
                raise RuntimeError(
                    f"Template '{name}' was requested again while this thread is building it "
                    f"(the loader must not call get_or_build for its own template)"
                )
            logger.debug("Waiting for in-flight build of template '%s'", name)
            return future.result()

        try:
            graph = self._build(name)
        except BaseException as e:
            with self._lock:
                del self._in_flight[name]
            future.set_exception(e)
            logger.info("Build of template '%s' failed: %s", name, e)
            raise

        with self._lock:
            self._graphs[name] = graph
            del self._in_flight[name]
        future.set_result(graph)
        logger.info("Built template '%s': %d nodes, max cycle %d", name, len(graph), graph.max_cycle())
        return graph

    def _build(self, name: str) -> CompiledGraph:
        spec = self.loader(name)
        return compile_network(spec, self.network_type, self.options, name=name)

    def get(self, name: str) -> Optional[CompiledGraph]:
        """Cached graph for ``name`` without building, or None."""
        with self._lock:
            return self._graphs.get(name)

    def evict(self, name: str) -> bool:
        """
        Drop a cached graph. Holders of the graph keep a valid reference.

        An in-flight build is not interrupted; its result is still cached.

        Returns
        -------
        evicted : bool
            True if a graph was cached under ``name``
        """
        with self._lock:
            graph = self._graphs.pop(name, None)
        if graph is not None:
            logger.info("Evicted template '%s'", name)
        return graph is not None

    def clear(self) -> None:
        """Drop every cached graph."""
        with self._lock:
            count = len(self._graphs)
            self._graphs.clear()
        logger.info("Cleared %d cached template(s)", count)

    def names(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._graphs)

    def build_count(self, name: str) -> int:
        """Number of builds started for ``name`` (failed attempts included)."""
        with self._lock:
            return self._build_counts.get(name, 0)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._graphs

    def __len__(self) -> int:
        with self._lock:
            return len(self._graphs)
