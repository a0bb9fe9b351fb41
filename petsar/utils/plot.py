# petsar/utils/plot.py
"""
Visualization helpers for generated heatmaps.
"""
from pathlib import Path

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend for scientific plotting
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.lines import Line2D

from petsar.utils.logging_setup import get_logger

log = get_logger()


def visualize_heatmap(points, center=None, output_file: str | Path | None = None, plot_show=False):
    """
    Scatter plot of heatmap points coloured by weight.

    Args:
        points (list[HeatmapData]): Points as returned by the heatmap generator.
        center (GeoPoint, optional): Last-seen location, drawn as a marker.
        output_file (str | Path, optional): Where to save the figure.
        plot_show (bool): Whether to call ``plt.show()``.

    Returns:
        matplotlib.figure.Figure: The figure, left open for the caller.
    """
    log.info(f"Generating heatmap visualization for {len(points)} points...")

    lngs = np.array([p.location.lng for p in points], dtype=float)
    lats = np.array([p.location.lat for p in points], dtype=float)
    weights = np.array([p.weight for p in points], dtype=float)

    fig, ax = plt.subplots(figsize=(10, 9))
    sc = ax.scatter(lngs, lats, c=weights, cmap="YlOrRd", s=12, alpha=0.8, edgecolors="none")
    fig.colorbar(sc, ax=ax, shrink=0.8, label="Weight")

    if center is not None:
        ax.plot(center.lng, center.lat, marker="*", color="blue", markersize=16, zorder=3)
        ax.legend(
            handles=[Line2D([0], [0], marker="*", color="blue", lw=0, markersize=12, label="Last seen")],
            loc="upper left",
        )

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Discovery Probability Heatmap")
    ax.set_aspect("equal", adjustable="datalim")
    plt.tight_layout()

    if output_file is not None:
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight")
        log.info(f"Saved heatmap visualization to {output_path}")
    if plot_show:
        plt.show()
    return fig
