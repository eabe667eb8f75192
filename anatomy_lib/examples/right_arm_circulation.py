"""
Example: Compiling the circulation of the head and right arm.

This example builds a small closed circulation whose venous forest is declared
from the superior vena cava outward, shares it through a template cache, and
queries it the way an organ component would.
"""

from anatomy_lib import (
    TemplateCache,
    get_preset,
    get_paths_from_start,
    compute_depth_stats,
    save_json,
)


TEMPLATES = {
    "right_arm": {
        "metadata": {"species": "human"},
        "arterial": [
            {"id": "Aorta", "regions": ["Thoracic"], "links": [
                {"id": "RightBraciocephalicArtery", "regions": ["Thoracic"], "links": [
                    {"id": "RightSubclavianArtery", "regions": ["Thoracic"], "links": [
                        {"id": "RightAxillaryArtery", "regions": ["RightAxillary"], "links": [
                            {"id": "RightBrachialArtery", "regions": ["RightBrachial"], "links": [
                                {"id": "RightUlnarArtery", "regions": ["RightAntebrachial"],
                                 "bridges": ["RightBasilicVein"]},
                                {"id": "RightRadialArtery", "regions": ["RightAntebrachial"],
                                 "bridges": ["RightCephalicVein"]},
                            ]},
                        ]},
                    ]},
                    {"id": "RightCommonCarotidArtery", "regions": ["Thoracic", "Cervical"], "links": [
                        {"id": "RightInternalCarotidArtery", "regions": ["Cervical", "Cranial"],
                         "bridges": ["RightInternalJugularVein"]},
                    ]},
                ]},
            ]},
        ],
        "venous": [
            {"id": "SuperiorVenaCava", "regions": ["Thoracic"], "links": [
                {"id": "RightBrachiocephalicVein", "regions": ["Thoracic"], "links": [
                    {"id": "RightSubclavianVein", "regions": ["Thoracic"], "links": [
                        {"id": "RightAxillaryVein", "regions": ["RightAxillary"], "links": [
                            {"id": "RightBasilicVein", "regions": ["RightAntebrachial"]},
                        ]},
                        {"id": "RightCephalicVein", "regions": ["RightAntebrachial"]},
                    ]},
                    {"id": "RightInternalJugularVein", "regions": ["Cervical"]},
                ]},
            ]},
        ],
    },
}


def main():
    """Build, share and query the right arm circulation."""

    print("=" * 60)
    print("Right Arm Circulation Example")
    print("=" * 60)

    print("\n1. Building template through the cache...")
    cache = TemplateCache(TEMPLATES.__getitem__, get_preset("circulation_converging_venous"))
    graph = cache.get_or_build("right_arm")
    assert graph is cache.get_or_build("right_arm")
    print(f"   {graph}")

    print("\n2. Network views:")
    print(f"   Start nodes: {sorted(graph.start_nodes())}")
    print(f"   Terminal nodes: {sorted(graph.terminal_nodes())}")
    print(f"   Capillary beds: {len(graph.bridges())}")
    print(f"   Max depth (arterial): {graph.max_depth('arterial')}")
    print(f"   Max depth (venous): {graph.max_depth('venous')}")
    print(f"   Max cycle: {graph.max_cycle()}")

    print("\n3. Vessels servicing the forearm:")
    for node_id in sorted(graph.nodes_in_region("RightAntebrachial")):
        print(f"   {node_id} ({graph.kind(node_id)})")

    print("\n4. Circuits from the aorta:")
    for path in get_paths_from_start(graph, "Aorta"):
        print("   " + " -> ".join(path))

    stats = compute_depth_stats(graph, subsystem="arterial")
    print(f"\n5. Arterial depth: mean {stats['mean']:.2f}, max {stats['max']:.0f}")

    print("\n6. Saving snapshot...")
    output_path = "right_arm_circulation.json"
    save_json(graph, output_path)
    print(f"   Saved to {output_path}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)

    return graph


if __name__ == "__main__":
    graph = main()
