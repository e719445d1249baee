"""
Tests for microbenchmark().

Covers the evaluation schedule, naming rules, Method preparation,
result checks and the summary/speedup accessors.
"""

from collections import Counter
from dataclasses import replace

import numpy as np
import pandas as pd
import pytest

from olsbench.benchmark import BenchmarkDesign, BenchmarkSolution, microbenchmark, select_unit
from olsbench.benchmark import solvers as benchmark_solvers
from olsbench.core.exceptions import BenchmarkCheckError, ValidationError
from olsbench.methods import get_method


def _counter():
    """Expression that returns how often it has been called."""
    calls = []

    def expr():
        calls.append(1)
        return len(calls)

    return expr, calls


# ═══════════════════════════════════════════════════════════════════════
# Schedule
# ═══════════════════════════════════════════════════════════════════════


class TestSchedule:

    def _design(self, control, times=3, seed=None):
        return BenchmarkDesign.build(
            {'a': int, 'b': float, 'c': str},
            times=times, warmup=0, control=control, seed=seed,
        )

    def test_inorder(self):
        np.testing.assert_array_equal(
            self._design('inorder').schedule(), [0, 1, 2, 0, 1, 2, 0, 1, 2]
        )

    def test_block(self):
        np.testing.assert_array_equal(
            self._design('block').schedule(), [0, 0, 0, 1, 1, 1, 2, 2, 2]
        )

    def test_random_is_permutation(self):
        order = self._design('random', times=50, seed=1).schedule()
        assert Counter(order.tolist()) == {0: 50, 1: 50, 2: 50}

    def test_random_is_seeded(self):
        a = self._design('random', times=20, seed=5).schedule()
        b = self._design('random', times=20, seed=5).schedule()
        np.testing.assert_array_equal(a, b)

    def test_random_actually_shuffles(self):
        order = self._design('random', times=50, seed=1).schedule()
        assert not np.array_equal(order, self._design('inorder', times=50).schedule())


# ═══════════════════════════════════════════════════════════════════════
# Running
# ═══════════════════════════════════════════════════════════════════════


class TestRun:

    def test_evaluation_counts(self):
        expr, calls = _counter()
        res = microbenchmark(expr, times=7, warmup=2)
        assert len(calls) == 9
        assert res.timings.shape == (7, 2)

    def test_warmup_not_recorded(self):
        expr, _ = _counter()
        res = microbenchmark(expr, times=5, warmup=3)
        # First recorded value comes after the warmup calls
        assert res.first_values['expr'] == 4

    def test_setup_runs_before_every_evaluation(self):
        expr, _ = _counter()
        setup, setup_calls = _counter()
        microbenchmark(expr, times=4, warmup=1, setup=setup)
        assert len(setup_calls) == 5

    def test_timings_in_execution_order(self):
        res = microbenchmark(a=lambda: 1, b=lambda: 2, times=3, control='block')
        assert res.timings['expr'].tolist() == ['a', 'a', 'a', 'b', 'b', 'b']
        assert res.timings['time_ns'].dtype == np.int64
        assert (res.timings['time_ns'] >= 0).all()

    def test_expr_is_ordered_categorical(self):
        res = microbenchmark(zeta=lambda: 1, alpha=lambda: 2, times=2)
        assert isinstance(res.timings['expr'].dtype, pd.CategoricalDtype)
        assert list(res.timings['expr'].cat.categories) == ['zeta', 'alpha']

    def test_methods_need_data(self):
        with pytest.raises(ValidationError, match="needs data"):
            microbenchmark(get_method('crossprod'), times=2)

    def test_methods_with_sample_data(self, sample):
        res = microbenchmark(get_method('crossprod'), get_method('jit'), data=sample, times=3)
        assert res.names == ('crossprod', 'jit')
        np.testing.assert_allclose(res.first_values['jit'], [5.0, 2.0], atol=0.1)

    def test_methods_with_tuple_data(self, sample):
        res = microbenchmark(get_method('normal_solve'), data=(sample.X, sample.y), times=2)
        assert res.names == ('normal_solve',)


# ═══════════════════════════════════════════════════════════════════════
# Naming and validation
# ═══════════════════════════════════════════════════════════════════════


class TestNamesAndValidation:

    def test_names_from_function(self):
        def fast():
            return 1
        assert microbenchmark(fast, times=1).names == ('fast',)

    def test_explicit_names(self):
        res = microbenchmark(lambda: 1, lambda: 2, names=['one', 'two'], times=1)
        assert res.names == ('one', 'two')

    def test_keyword_names_follow_positional(self):
        def first():
            return 1
        res = microbenchmark(first, second=lambda: 2, times=1)
        assert res.names == ('first', 'second')

    def test_duplicate_names(self):
        with pytest.raises(ValidationError, match="Duplicate expression name"):
            microbenchmark(lambda: 1, lambda: 2, times=1)

    def test_names_length_mismatch(self):
        with pytest.raises(ValidationError, match="names"):
            microbenchmark(lambda: 1, names=['a', 'b'], times=1)

    def test_no_expressions(self):
        with pytest.raises(ValidationError, match="no expressions"):
            microbenchmark(times=1)

    def test_non_callable(self):
        with pytest.raises(ValidationError, match="expected a callable"):
            microbenchmark(a=42, times=1)

    def test_times_must_be_positive(self):
        with pytest.raises(ValidationError, match="times"):
            microbenchmark(a=lambda: 1, times=0)

    def test_negative_warmup(self):
        with pytest.raises(ValidationError, match="warmup"):
            microbenchmark(a=lambda: 1, warmup=-1)

    def test_unknown_control(self):
        with pytest.raises(ValueError, match="Unknown control"):
            microbenchmark(a=lambda: 1, control='shuffled')

    def test_unknown_check_fails_before_running(self):
        expr, calls = _counter()
        with pytest.raises(ValueError, match="Unknown check"):
            microbenchmark(expr, check='identical')
        assert calls == []


# ═══════════════════════════════════════════════════════════════════════
# Checks
# ═══════════════════════════════════════════════════════════════════════


class TestCheck:

    def test_equal_passes_for_all_methods(self, sample):
        methods = [get_method(name) for name in ('lm', 'normal_inverse', 'crossprod', 'jit')]
        res = microbenchmark(*methods, data=sample, times=2, check='equal')
        assert isinstance(res, BenchmarkSolution)

    def test_equal_fails(self):
        with pytest.raises(BenchmarkCheckError) as exc_info:
            microbenchmark(
                a=lambda: np.array([1.0, 2.0]),
                b=lambda: np.array([1.0, 2.0]),
                c=lambda: np.array([1.0, 2.5]),
                times=2,
                check='equal',
            )
        assert exc_info.value.mismatched == ('c',)
        assert exc_info.value.max_abs_diff == pytest.approx(0.5)

    def test_equal_shape_mismatch(self):
        with pytest.raises(BenchmarkCheckError) as exc_info:
            microbenchmark(a=lambda: np.zeros(2), b=lambda: np.zeros(3), times=1, check='equal')
        assert exc_info.value.mismatched == ('b',)

    def test_callable_check(self):
        res = microbenchmark(
            a=lambda: 1, b=lambda: 1, times=2,
            check=lambda values: len(set(values)) == 1,
        )
        assert res.first_values == {'a': 1, 'b': 1}

    def test_callable_check_fails(self):
        with pytest.raises(BenchmarkCheckError, match="Check function returned False"):
            microbenchmark(a=lambda: 1, b=lambda: 2, times=1, check=lambda values: False)

    def test_tier_follows_method_not_label(self, sample):
        reference = np.linalg.lstsq(sample.X, sample.y, rcond=None)[0]
        drifting = replace(
            get_method('jit'),
            kernel=lambda X, y: reference * (1.0 + 5e-7),
            convert=None,
        )
        res = microbenchmark(
            get_method('lm'), drifting, names=['ref', 'loop'],
            data=sample, times=1, warmup=0, check='equal',
        )
        assert res.names == ('ref', 'loop')

    def test_plain_callable_tier_follows_label(self):
        reference = np.array([5.0, 2.0])
        drift = lambda: reference * (1.0 + 5e-7)
        microbenchmark(lm=lambda: reference, jit=drift, times=1, check='equal')
        with pytest.raises(BenchmarkCheckError) as exc_info:
            microbenchmark(lm=lambda: reference, loop=drift, times=1, check='equal')
        assert exc_info.value.mismatched == ('loop',)


# ═══════════════════════════════════════════════════════════════════════
# Clock resolution
# ═══════════════════════════════════════════════════════════════════════


class TestResolutionWarning:

    def test_warns_below_resolution(self, monkeypatch):
        monkeypatch.setattr(benchmark_solvers, 'clock_resolution_ns', lambda: 1e15)
        with pytest.warns(UserWarning, match="clock resolution"):
            res = microbenchmark(a=lambda: None, times=3)
        assert len(res.warnings) == 1

    def test_no_warning_normally(self, sample):
        res = microbenchmark(get_method('lm'), data=sample, times=2)
        assert res.warnings == ()


# ═══════════════════════════════════════════════════════════════════════
# Units
# ═══════════════════════════════════════════════════════════════════════


class TestSelectUnit:

    @pytest.mark.parametrize("median_ns,unit", [
        (500.0, 'ns'),
        (1_500.0, 'us'),
        (2.5e6, 'ms'),
        (3e9, 's'),
    ])
    def test_units(self, median_ns, unit):
        assert select_unit(median_ns) == unit
