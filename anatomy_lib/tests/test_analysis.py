"""
Tests for query and structural analysis functions.
"""

import pytest
from anatomy_lib.core.errors import UnknownKind, UnknownNode
from anatomy_lib.ops.build import compile_network
from anatomy_lib.analysis.query import (
    get_branch_depth,
    get_paths_from_start,
    get_terminal_nodes,
    validate_path,
)
from anatomy_lib.analysis.structure import (
    audit_reachability,
    compute_branch_stats,
    compute_depth_stats,
    find_unreachable,
)


def test_terminal_nerves(nerve_graph):
    assert get_terminal_nodes(nerve_graph) == ["SciaticNerve", "FemoralNerve", "VagusNerve"]
    assert get_terminal_nodes(nerve_graph, kind="Nerve") == ["SciaticNerve", "FemoralNerve", "VagusNerve"]


def test_terminal_nodes_unknown_kind(nerve_graph):
    with pytest.raises(UnknownKind):
        get_terminal_nodes(nerve_graph, kind="Artery")


def test_paths_cross_bridge(chain_graph):
    """The default budget covers a full circuit including the bridge edge."""
    assert get_paths_from_start(chain_graph, "A") == [["A", "B", "C", "V1", "V2"]]


def test_paths_hop_budget(chain_graph):
    assert get_paths_from_start(chain_graph, "A", max_hops=2) == [["A", "B", "C"]]


def test_paths_fan_out(fan_out_template, circulation_type):
    graph = compile_network(fan_out_template, circulation_type)

    assert get_paths_from_start(graph, "A") == [["A", "B", "C", "V1"], ["A", "B", "C", "V2"]]


def test_paths_nerve_tree(nerve_graph):
    paths = get_paths_from_start(nerve_graph, "Brain")

    assert paths == [
        ["Brain", "SpinalCord", "SciaticNerve"],
        ["Brain", "SpinalCord", "FemoralNerve"],
        ["Brain", "VagusNerve"],
    ]


def test_paths_unknown_start(chain_graph):
    with pytest.raises(UnknownNode):
        get_paths_from_start(chain_graph, "Nope")


def test_validate_signal_path(nerve_graph):
    assert validate_path(nerve_graph, ["Brain", "SpinalCord", "SciaticNerve"]) is True
    assert validate_path(nerve_graph, ["Brain", "SciaticNerve"]) is False
    assert validate_path(nerve_graph, ["SciaticNerve", "SpinalCord"]) is False
    assert validate_path(nerve_graph, ["VagusNerve"]) is True


def test_validate_path_errors(nerve_graph):
    with pytest.raises(ValueError):
        validate_path(nerve_graph, [])
    with pytest.raises(UnknownNode):
        validate_path(nerve_graph, ["Brain", "Spleen"])


def test_validate_path_across_bridge(chain_graph):
    assert validate_path(chain_graph, ["B", "C", "V1", "V2"]) is True


def test_branch_depth(nerve_graph):
    assert get_branch_depth(nerve_graph, "Brain") == 0
    assert get_branch_depth(nerve_graph, "FemoralNerve") == 2
    assert get_branch_depth(nerve_graph, "Spleen") == -1


def test_every_node_reachable(chain_graph, nerve_graph, fan_out_template, circulation_type):
    """Valid networks have no orphans."""
    fan_out_graph = compile_network(fan_out_template, circulation_type)

    for graph in (chain_graph, nerve_graph, fan_out_graph):
        assert audit_reachability(graph) == []


def test_find_unreachable():
    downstream = {"A": ["B"], "B": [], "X": ["B"], "Y": ["X"]}

    assert find_unreachable(["A"], downstream) == ["X", "Y"]
    assert find_unreachable(["A", "Y"], downstream) == []
    assert find_unreachable([], downstream) == ["A", "B", "X", "Y"]


def test_depth_stats(chain_graph):
    stats = compute_depth_stats(chain_graph)

    assert stats["count"] == 5
    assert stats["mean"] == pytest.approx(0.8)
    assert stats["min"] == 0.0
    assert stats["max"] == 2.0
    assert stats["terminal_mean"] == pytest.approx(1.0)


def test_depth_stats_per_subsystem(chain_graph):
    stats = compute_depth_stats(chain_graph, subsystem="arterial")

    assert stats["count"] == 3
    assert stats["mean"] == pytest.approx(1.0)
    assert stats["std"] == pytest.approx((2.0 / 3.0) ** 0.5)
    # arterial leaves continue into the venous side, so none are terminal
    assert stats["terminal_mean"] == 0.0


def test_branch_stats(nerve_graph, fan_out_template, circulation_type):
    stats = compute_branch_stats(nerve_graph)

    assert stats["degree_histogram"] == {0: 3, 2: 2}
    assert stats["num_bifurcations"] == 2
    assert stats["max_fan_out"] == 2

    fan_out = compute_branch_stats(compile_network(fan_out_template, circulation_type))
    assert fan_out["degree_histogram"] == {0: 2, 1: 2, 2: 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
