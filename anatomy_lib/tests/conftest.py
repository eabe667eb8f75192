import tempfile
from pathlib import Path

import pytest

from anatomy_lib.params.presets import get_preset
from anatomy_lib.ops.build import compile_network


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def circulation_type():
    return get_preset("circulation")


@pytest.fixture
def nervous_type():
    return get_preset("nervous")


@pytest.fixture
def chain_template():
    """Arterial chain A->B->C, bridge C->V1, venous chain V1->V2."""
    return {
        "name": "chain",
        "metadata": {"species": "test"},
        "arterial": [
            {"id": "A", "regions": ["Thorax"], "links": [
                {"id": "B", "regions": ["Abdomen"], "links": [
                    {"id": "C", "regions": ["Abdomen", "Pelvis"], "bridges": ["V1"]},
                ]},
            ]},
        ],
        "venous": [
            {"id": "V1", "regions": ["Pelvis"], "links": [
                {"id": "V2", "regions": ["Abdomen"]},
            ]},
        ],
    }


@pytest.fixture
def chain_graph(chain_template, circulation_type):
    return compile_network(chain_template, circulation_type)


@pytest.fixture
def fan_out_template():
    """Arterial leaf C bridges to two venous roots."""
    return {
        "name": "fan_out",
        "arterial": [
            {"id": "A", "regions": ["Thorax"], "links": [
                {"id": "B", "regions": ["Abdomen"], "links": [
                    {"id": "C", "regions": ["Leg"], "bridges": ["V1", "V2"]},
                ]},
            ]},
        ],
        "venous": [
            {"id": "V1", "regions": ["Leg"]},
            {"id": "V2", "regions": ["Leg"]},
        ],
    }


@pytest.fixture
def nerve_template():
    return {
        "name": "nerves",
        "nerves": [
            {"id": "Brain", "regions": ["Head"], "links": [
                {"id": "SpinalCord", "regions": ["Neck", "Back"], "links": [
                    {"id": "SciaticNerve", "regions": ["Leg"]},
                    {"id": "FemoralNerve", "regions": ["Leg"]},
                ]},
                {"id": "VagusNerve", "regions": ["Neck", "Thorax"]},
            ]},
        ],
    }


@pytest.fixture
def nerve_graph(nerve_template, nervous_type):
    return compile_network(nerve_template, nervous_type)
