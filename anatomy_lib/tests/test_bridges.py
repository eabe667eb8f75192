"""
Tests for bridge resolution between paired subsystems.
"""

import pytest
from anatomy_lib.core.errors import DanglingBridge, MalformedSpec, UnreachableNode
from anatomy_lib.core.types import FlowDirection
from anatomy_lib.params.network_types import BridgePair, BuildOptions, SubsystemType, make_network_type
from anatomy_lib.params.presets import get_preset
from anatomy_lib.ops.build import compile_network
from anatomy_lib.ops.bridges import bridge_fan_in, bridge_fan_out


def test_chain_with_bridge(chain_graph):
    """Scenario A: chain A->B->C, bridge C->V1, chain V1->V2."""
    graph = chain_graph

    assert graph.start_nodes() == {"A"}
    assert graph.max_depth("arterial") == 2
    assert graph.max_depth("venous") == 1
    assert graph.max_cycle() == 3
    assert graph.pre_junction_nodes() == {"C"}
    assert graph.post_junction_nodes() == {"V1"}
    assert graph.upstream("V1") == {"C"}
    assert graph.downstream("C") == {"V1"}


def test_dangling_bridge(chain_template, circulation_type):
    """Scenario C: bridge target V9 is not a venous node."""
    chain_template["arterial"][0]["links"][0]["links"][0]["bridges"] = ["V9"]

    with pytest.raises(DanglingBridge) as exc_info:
        compile_network(chain_template, circulation_type)

    assert exc_info.value.source == "C"
    assert exc_info.value.target == "V9"


def test_bridge_into_own_subsystem_is_dangling(chain_template, circulation_type):
    """A bridge target must live in the paired subsystem, not the source one."""
    chain_template["arterial"][0]["links"][0]["links"][0]["bridges"] = ["A"]

    with pytest.raises(DanglingBridge):
        compile_network(chain_template, circulation_type)


def test_fan_out_bridge(fan_out_template, circulation_type):
    """Scenario D: C bridges to V1 and V2; no edge dropped or merged."""
    graph = compile_network(fan_out_template, circulation_type)

    assert graph.downstream("C") == {"V1", "V2"}
    assert "C" in graph.upstream("V1")
    assert "C" in graph.upstream("V2")
    assert graph.bridges() == (("C", "V1"), ("C", "V2"))
    assert graph.node("C").downstream == ("V1", "V2")


def test_fan_in_bridge(circulation_type):
    """Two arterial leaves draining into one venous entry keep both edges."""
    template = {
        "arterial": [
            {"id": "A", "regions": ["Leg"], "links": [
                {"id": "L", "regions": ["Leg"], "bridges": ["V"]},
                {"id": "R", "regions": ["Leg"], "bridges": ["V"]},
            ]},
        ],
        "venous": [{"id": "V", "regions": ["Leg"]}],
    }
    graph = compile_network(template, circulation_type)

    assert graph.upstream("V") == {"L", "R"}
    assert graph.node("V").upstream == ("L", "R")
    assert graph.post_junction_nodes() == {"V"}
    assert graph.pre_junction_nodes() == {"L", "R"}


def test_bridge_symmetry(fan_out_template, circulation_type):
    """For every bridge (a -> b): b in downstream(a) and a in upstream(b)."""
    graph = compile_network(fan_out_template, circulation_type)

    for source, target in graph.bridges():
        assert target in graph.downstream(source)
        assert source in graph.upstream(target)


def test_bridge_into_non_root(circulation_type):
    """Bridges may land on any venous node, not only roots."""
    template = {
        "arterial": [{"id": "A", "regions": ["Arm"], "bridges": ["V2"]}],
        "venous": [
            {"id": "V1", "regions": ["Arm"], "links": [{"id": "V2", "regions": ["Arm"]}]},
        ],
    }
    graph = compile_network(template, circulation_type)

    assert graph.upstream("V2") == {"V1", "A"}
    assert graph.start_nodes() == {"A", "V1"}


def test_bridges_on_unbridged_network_rejected(nervous_type):
    template = {"nerves": [{"id": "Brain", "regions": ["Head"], "bridges": ["X"]}]}

    with pytest.raises(MalformedSpec):
        compile_network(template, nervous_type)


def test_converging_venous_preset():
    """Venous forest declared from the vena cava drains toward its root."""
    template = {
        "arterial": [
            {"id": "Aorta", "regions": ["Thorax"], "links": [
                {"id": "Arteriole", "regions": ["Arm"], "bridges": ["VenuleL", "VenuleR"]},
            ]},
        ],
        "venous": [
            {"id": "VenaCava", "regions": ["Thorax"], "links": [
                {"id": "VenuleL", "regions": ["Arm"]},
                {"id": "VenuleR", "regions": ["Arm"]},
            ]},
        ],
    }
    graph = compile_network(template, get_preset("circulation_converging_venous"))

    assert graph.network_type.subsystem("venous").flow is FlowDirection.CONVERGING
    assert graph.start_nodes() == {"Aorta"}
    assert graph.terminal_nodes() == {"VenaCava"}
    assert graph.upstream("VenaCava") == {"VenuleL", "VenuleR"}
    assert graph.upstream("VenuleL") == {"Arteriole"}
    assert graph.downstream("VenuleL") == {"VenaCava"}
    assert graph.max_cycle() == 2


def test_bridges_closing_every_root_are_unreachable():
    """Bridging both ways onto every root leaves no start node."""
    network_type = make_network_type(
        "loop",
        [SubsystemType("left", "Left"), SubsystemType("right", "Right")],
        [BridgePair("left", "right"), BridgePair("right", "left")],
    )
    template = {
        "left": [{"id": "L", "regions": ["Body"], "bridges": ["R"]}],
        "right": [{"id": "R", "regions": ["Body"], "bridges": ["L"]}],
    }

    with pytest.raises(UnreachableNode):
        compile_network(template, network_type)

    graph = compile_network(template, network_type, BuildOptions(check_reachability=False))
    assert graph.start_nodes() == frozenset()


def test_fan_out_and_fan_in_helpers():
    bridges = [("C", "V1"), ("C", "V2"), ("D", "V1")]

    assert bridge_fan_out(bridges) == {"C": ["V1", "V2"], "D": ["V1"]}
    assert bridge_fan_in(bridges) == {"V1": ["C", "D"], "V2": ["C"]}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
