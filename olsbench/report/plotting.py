"""
Benchmark plots.

Figures are built on matplotlib.figure.Figure directly rather than
through pyplot, so nothing here touches global figure state or needs an
interactive backend; PNG output goes through Agg.
"""

from __future__ import annotations

import base64
import io
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import seaborn as sns
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from olsbench.benchmark.solution import UNIT_NAMES, UNIT_SCALE, select_unit

if TYPE_CHECKING:
    from olsbench.benchmark.solution import BenchmarkSolution


STYLE = "whitegrid"


def _new_axes(n_rows: int, ax: Axes | None) -> tuple[Figure, Axes]:
    if ax is not None:
        return ax.figure, ax
    fig = Figure(figsize=(8, 1.2 + 0.55 * n_rows), layout='constrained')
    return fig, fig.add_subplot()


def plot_timings(
    solution: 'BenchmarkSolution',
    *,
    ax: Axes | None = None,
    log: bool = True,
    title: str | None = None,
) -> Figure:
    """
    Violin plot of every evaluation, one violin per expression.

    Expressions run down the y axis in the order given; time runs along
    a log-scaled x axis in the unit of the fastest median.

    Returns:
        The Figure holding the plot
    """
    frame = solution.timings.copy()
    unit = select_unit(float(solution.medians_ns().min()))
    frame['time'] = frame['time_ns'] / UNIT_SCALE[unit]

    with sns.axes_style(STYLE):
        fig, ax = _new_axes(len(solution.names), ax)
        sns.violinplot(
            data=frame,
            x='time',
            y='expr',
            hue='expr',
            legend=False,
            orient='h',
            cut=0,
            inner='quart',
            density_norm='width',
            log_scale=log,
            ax=ax,
        )
    ax.set_xlabel(f"Time [{UNIT_NAMES[unit]}]")
    ax.set_ylabel("")
    ax.set_title(title or f"{solution.times} evaluations per expression")
    return fig


def plot_speedup(
    solution: 'BenchmarkSolution',
    baseline: str,
    *,
    ax: Axes | None = None,
    title: str | None = None,
) -> Figure:
    """
    Horizontal bars of median speedup over `baseline` (1.0 = as fast).

    Returns:
        The Figure holding the plot
    """
    speedup = solution.speedup(baseline)
    labels = [str(name) for name in speedup.index]

    with sns.axes_style(STYLE):
        fig, ax = _new_axes(len(labels), ax)
        palette = sns.color_palette(n_colors=len(labels))
        y = np.arange(len(labels))
        ax.barh(y, speedup.to_numpy(), color=palette)
        ax.set_yticks(y, labels=labels)
        ax.invert_yaxis()
        ax.axvline(1.0, color='k', linestyle='--', alpha=0.4)
        for pos, value in zip(y, speedup.to_numpy()):
            ax.annotate(
                f"{value:.1f}x",
                xy=(value, pos),
                xytext=(4, 0),
                textcoords='offset points',
                va='center',
            )
    ax.set_xlabel(f"Median speedup over {baseline}")
    ax.set_title(title or f"Speedup relative to {baseline}")
    return fig


def figure_to_base64(fig: Figure, dpi: int = 100) -> str:
    """Render a figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=dpi)
    return base64.b64encode(buf.getvalue()).decode('ascii')


def save_figure(fig: Figure, path: str | Path, dpi: int = 100) -> Path:
    """Write a figure to disk; the format follows the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    return path
