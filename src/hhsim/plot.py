import logging
import os

import numpy as np
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

WIDTH = 1980
HEIGHT = 1080
DPI = 100


def y_limits(values):
    """
    Axis range for a series: [min, max] when the series dips below zero,
    otherwise [0, max]. Non-finite samples are ignored.
    """
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return 0.0, 1.0
    y_min, y_max = float(finite.min()), float(finite.max())
    if y_min >= 0.0:
        y_min = 0.0
    if y_min == y_max:
        y_max = y_min + 1.0
    return y_min, y_max


def plot_series(values, name, output_dir="graph"):
    """
    Render one series against its sample index to <output_dir>/<name>.png.

    Returns the path of the written file.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        raise ValueError(f"cannot plot empty series {name!r}")

    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{name}.png")

    fig, ax = plt.subplots(figsize=(WIDTH / DPI, HEIGHT / DPI), dpi=DPI)
    try:
        ax.plot(np.arange(values.size), values, color="red")
        ax.set_xlim(0, max(values.size - 1, 1))
        ax.set_ylim(*y_limits(values))
        ax.set_title(name, fontsize=20)
        ax.grid(True)
        fig.savefig(path, facecolor="white")
    finally:
        plt.close(fig)

    logger.info("Wrote %s", path)
    return path
