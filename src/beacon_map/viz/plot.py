from __future__ import annotations

import matplotlib.pyplot as plt

from beacon_map.core.engine import AlignmentResult


def plot_beacon_map(result: AlignmentResult, *, ax=None, title: str | None = None):
    """3D scatter of the assembled beacons (small dots) and scanners (markers)."""
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")

    beacons = sorted(result.beacon_map)
    ax.scatter(
        [b.x for b in beacons],
        [b.y for b in beacons],
        [b.z for b in beacons],
        s=8,
        c="tab:blue",
        label=f"beacons ({len(beacons)})",
    )

    scanners = [(i, p) for i, p in enumerate(result.scanner_positions) if p is not None]
    ax.scatter(
        [p.x for _, p in scanners],
        [p.y for _, p in scanners],
        [p.z for _, p in scanners],
        s=60,
        marker="^",
        c="tab:red",
        label=f"scanners ({len(scanners)})",
    )
    for i, p in scanners:
        ax.text(p.x, p.y, p.z, str(i))

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")
    ax.set_title(title or "Assembled beacon map")
    ax.legend()
    return ax
