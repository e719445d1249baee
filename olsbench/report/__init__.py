"""
The narrative HTML report.

Public API:
    build_tutorial(config) -> Tutorial
    render_html(tutorial) -> str
    write_report(tutorial, path) -> Path
    plot_timings(solution), plot_speedup(solution, baseline)
"""

from olsbench.report.document import Image, Section, Table, Tutorial, render_html, write_report
from olsbench.report.plotting import figure_to_base64, plot_speedup, plot_timings, save_figure
from olsbench.report.tutorial import TutorialConfig, agreement_table, build_tutorial

__all__ = [
    "build_tutorial",
    "TutorialConfig",
    "agreement_table",
    "Tutorial",
    "Section",
    "Table",
    "Image",
    "render_html",
    "write_report",
    "plot_timings",
    "plot_speedup",
    "figure_to_base64",
    "save_figure",
]
