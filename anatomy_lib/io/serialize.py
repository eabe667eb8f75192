"""
JSON serialization for compiled networks.

A snapshot stores the derived views for inspection, but loading always
recompiles from the stored declarative template so a loaded graph passes the
same validation as a freshly built one.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..core.network import SCHEMA_VERSION, CompiledGraph
from ..params.network_types import BuildOptions, NetworkType
from ..ops.build import compile_network

logger = logging.getLogger(__name__)


def save_json(
    graph: CompiledGraph,
    filepath: Union[str, Path],
    indent: int = 2,
) -> None:
    """
    Save compiled graph to JSON file.

    Parameters
    ----------
    graph : CompiledGraph
        Graph to save
    filepath : str or Path
        Output file path
    indent : int
        JSON indentation level

    Example
    -------
    >>> from anatomy_lib import save_json
    >>> save_json(graph, "human_circulation.json")
    """
    filepath = Path(filepath)

    data = graph.to_dict()

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent)

    logger.debug("Saved template '%s' to %s", graph.name, filepath)


def load_json(
    filepath: Union[str, Path],
    network_type: Optional[NetworkType] = None,
    options: Optional[BuildOptions] = None,
) -> CompiledGraph:
    """
    Load compiled graph from JSON file.

    Parameters
    ----------
    filepath : str or Path
        Input file path
    network_type : NetworkType, optional
        Network type to compile against. Defaults to the one stored in the file.
    options : BuildOptions, optional
        Construction switches

    Returns
    -------
    graph : CompiledGraph
        Recompiled graph

    Raises
    ------
    ValueError
        If the schema version is unsupported or the file has no template

    Example
    -------
    >>> from anatomy_lib import load_json
    >>> graph = load_json("human_circulation.json")
    """
    filepath = Path(filepath)

    with open(filepath, 'r') as f:
        data = json.load(f)

    schema_version = data.get("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {schema_version}")

    spec = data.get("spec")
    if spec is None:
        raise ValueError(f"{filepath} does not contain a declarative template")

    if network_type is None:
        network_type = NetworkType.from_dict(data["network_type"])

    return compile_network(spec, network_type, options, name=data.get("name"))
