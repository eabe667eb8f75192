"""Network type presets.

Named network types for the transport networks a physiological simulation
ships with. Each preset is a factory so callers can never mutate a shared
instance.
"""

from ..core.types import FlowDirection
from .network_types import BridgePair, NetworkType, SubsystemType


def circulation() -> NetworkType:
    """
    Closed blood circulation.

    Characteristics:
    - Arterial forest rooted at the heart outflow (kind "Artery")
    - Venous forest (kind "Vein")
    - Capillary beds declared as bridges on arterial nodes
    """
    return NetworkType(
        name="circulation",
        subsystems=(
            SubsystemType(name="arterial", kind="Artery"),
            SubsystemType(name="venous", kind="Vein"),
        ),
        bridge_pairs=(BridgePair(source="arterial", target="venous"),),
    )


def circulation_converging_venous() -> NetworkType:
    """
    Closed circulation whose venous forest is declared from the venae cavae.

    Venous links then point against flow: a vein drains into its declared
    parent and receives from its declared children.
    """
    return NetworkType(
        name="circulation_converging_venous",
        subsystems=(
            SubsystemType(name="arterial", kind="Artery"),
            SubsystemType(name="venous", kind="Vein", flow=FlowDirection.CONVERGING),
        ),
        bridge_pairs=(BridgePair(source="arterial", target="venous"),),
    )


def nervous() -> NetworkType:
    """Unbridged nerve forest rooted at the central nervous system."""
    return NetworkType(
        name="nervous",
        subsystems=(SubsystemType(name="nerves", kind="Nerve"),),
    )


PRESETS = {
    "circulation": circulation,
    "circulation_converging_venous": circulation_converging_venous,
    "nervous": nervous,
}


def get_preset(name: str) -> NetworkType:
    """
    Get a network type preset by name.

    Parameters
    ----------
    name : str
        Preset name (e.g., "circulation", "nervous")

    Returns
    -------
    NetworkType
        Network type definition

    Raises
    ------
    ValueError
        If preset name is not recognized
    """
    if name not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise ValueError(f"Unknown preset '{name}'. Available: {available}")

    return PRESETS[name]()


def list_presets() -> list:
    """List all available preset names."""
    return list(PRESETS.keys())
