"""
Tests for the benchmark plots.
"""

import base64

import pytest
from matplotlib.figure import Figure

from olsbench.benchmark import microbenchmark
from olsbench.methods import get_method
from olsbench.report import figure_to_base64, plot_speedup, plot_timings, save_figure

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def bench(sample):
    methods = [get_method(name) for name in ('lm', 'normal_solve', 'crossprod')]
    return microbenchmark(*methods, data=sample, times=5, seed=1)


class TestPlotTimings:

    def test_returns_figure(self, bench):
        fig = plot_timings(bench)
        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        assert ax.get_xlabel().startswith("Time [")
        assert ax.get_xscale() == 'log'

    def test_one_violin_per_expression(self, bench):
        ax = plot_timings(bench).axes[0]
        assert len(ax.collections) >= 3

    def test_linear_scale_and_title(self, bench):
        ax = plot_timings(bench, log=False, title="n = 2,000").axes[0]
        assert ax.get_xscale() == 'linear'
        assert ax.get_title() == "n = 2,000"

    def test_draws_on_given_axes(self, bench):
        fig = Figure()
        ax = fig.add_subplot()
        assert plot_timings(bench, ax=ax) is fig


class TestPlotSpeedup:

    def test_bars_and_reference_line(self, bench):
        ax = plot_speedup(bench, 'lm').axes[0]
        assert len(ax.patches) == 3
        assert "lm" in ax.get_xlabel()

    def test_unknown_baseline(self, bench):
        with pytest.raises(KeyError):
            plot_speedup(bench, 'nope')


class TestOutput:

    def test_base64_png(self, bench):
        data = base64.b64decode(figure_to_base64(plot_timings(bench)))
        assert data.startswith(PNG_MAGIC)

    def test_save_figure(self, bench, tmp_path):
        path = save_figure(plot_speedup(bench, 'lm'), tmp_path / "plots" / "speedup.png")
        assert path.exists()
        assert path.read_bytes().startswith(PNG_MAGIC)
