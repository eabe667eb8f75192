"""Network type definitions and presets."""

from .network_types import (
    SubsystemType,
    BridgePair,
    NetworkType,
    BuildOptions,
    make_network_type,
)

from .presets import (
    circulation,
    circulation_converging_venous,
    nervous,
    get_preset,
    list_presets,
    PRESETS,
)

__all__ = [
    # Types
    "SubsystemType",
    "BridgePair",
    "NetworkType",
    "BuildOptions",
    "make_network_type",
    # Presets
    "circulation",
    "circulation_converging_venous",
    "nervous",
    "get_preset",
    "list_presets",
    "PRESETS",
]
