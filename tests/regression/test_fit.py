"""
Tests for regression fit().

Tests the complete pipeline: Design construction, backend selection,
and solution properties.
"""

import pytest
import numpy as np

from olsbench.core.exceptions import DimensionError, ValidationError
from olsbench.regression import fit, Design
from olsbench.regression.solution import LinearSolution


class TestFitBasic:
    """Basic fit() functionality tests."""

    def test_fit_from_arrays(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        assert isinstance(result, LinearSolution)
        assert result.coefficients.shape == (3,)

    def test_fit_from_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(Design.from_arrays(X, y))
        assert isinstance(result, LinearSolution)

    def test_fit_requires_y_with_arrays(self, simple_regression_data):
        X, _, _ = simple_regression_data
        with pytest.raises(ValueError, match="y required"):
            fit(X)

    def test_coefficients_close_to_truth(self, simple_regression_data):
        X, y, beta_true = simple_regression_data
        result = fit(X, y)
        # With low noise (sigma=0.1), coefficients should be close to truth
        np.testing.assert_allclose(result.coefficients, beta_true, atol=0.5)

    def test_matches_lstsq(self, simple_regression_data):
        X, y, _ = simple_regression_data
        expected = np.linalg.lstsq(X, y, rcond=None)[0]
        np.testing.assert_allclose(fit(X, y).coefficients, expected, rtol=1e-10)

    def test_simulated_sample(self, sample):
        result = fit(sample.design())
        np.testing.assert_allclose(result.coefficients, [5.0, 2.0], atol=0.1)

    def test_residuals_sum_to_near_zero_with_intercept(self, sample):
        """For models with intercept, residuals should sum to ~0."""
        result = fit(sample.X, sample.y)
        assert abs(result.residuals.sum()) < 1e-8


class TestFitProperties:
    """Test derived properties of LinearSolution."""

    def test_standard_errors_positive(self, simple_regression_data):
        X, y, _ = simple_regression_data
        se = fit(X, y).standard_errors
        assert np.all(se > 0)
        assert np.all(np.isfinite(se))

    def test_t_statistics_finite(self, simple_regression_data):
        X, y, _ = simple_regression_data
        assert np.all(np.isfinite(fit(X, y).t_statistics))

    def test_p_values_in_zero_one(self, simple_regression_data):
        X, y, _ = simple_regression_data
        pv = fit(X, y).p_values
        assert np.all(pv >= 0.0)
        assert np.all(pv <= 1.0)

    def test_strong_slope_is_significant(self, sample):
        assert fit(sample.X, sample.y).p_values[1] < 1e-10

    def test_fitted_plus_residuals_equals_y(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        np.testing.assert_allclose(result.fitted_values + result.residuals, y, atol=1e-12)

    def test_rss_matches_residuals(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        assert abs(result.rss - float(result.residuals @ result.residuals)) < 1e-12

    def test_r_squared_formula(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        assert abs(result.r_squared - (1.0 - result.rss / result.tss)) < 1e-15

    def test_timing_sections(self, simple_regression_data):
        X, y, _ = simple_regression_data
        timing = fit(X, y).timing
        for key in ('total_seconds', 'qr_decomposition', 'solve', 'residuals', 'statistics'):
            assert key in timing

    def test_summary_runs(self, simple_regression_data):
        X, y, _ = simple_regression_data
        s = fit(X, y).summary()
        assert "R-squared" in s
        assert "Pr(>|t|)" in s
        assert "Backend: cpu_qr" in s

    def test_repr(self, simple_regression_data):
        X, y, _ = simple_regression_data
        assert repr(fit(X, y)).startswith("LinearSolution(n=100, p=3")


class TestFitRankDeficient:
    """Rank-deficient designs fit, with aliased coefficients as NaN."""

    def test_collinear_rank_detection(self, collinear_data):
        X, y = collinear_data
        assert fit(X, y).rank < X.shape[1]

    def test_collinear_has_nan_coefficient(self, collinear_data):
        X, y = collinear_data
        assert np.sum(np.isnan(fit(X, y).coefficients)) == 1

    def test_collinear_has_nan_se(self, collinear_data):
        X, y = collinear_data
        assert np.any(np.isnan(fit(X, y).standard_errors))

    def test_collinear_has_nan_pv(self, collinear_data):
        X, y = collinear_data
        assert np.any(np.isnan(fit(X, y).p_values))

    def test_collinear_warning(self, collinear_data):
        X, y = collinear_data
        result = fit(X, y)
        assert any("rank-deficient" in w for w in result.warnings)

    def test_summary_marks_aliased(self, collinear_data):
        X, y = collinear_data
        assert "(aliased)" in fit(X, y).summary()

    def test_zero_column(self, zero_slope_column_data):
        X, y = zero_slope_column_data
        result = fit(X, y)
        assert result.rank == 1
        assert result.coefficients[0] == pytest.approx(y.mean())
        assert np.isnan(result.coefficients[1])


class TestFitValidation:

    def test_nan_rejected(self, simple_regression_data):
        X, y, _ = simple_regression_data
        y = y.copy()
        y[0] = np.nan
        with pytest.raises(ValidationError, match="non-finite"):
            fit(X, y)

    def test_length_mismatch(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(DimensionError, match="Inconsistent lengths"):
            fit(X, y[:-1])

    def test_too_few_rows(self):
        with pytest.raises(ValidationError, match="at least 3"):
            fit(np.ones((2, 3)), np.ones(2))

    def test_1d_x_becomes_column(self):
        result = fit(np.arange(5.0), 2.0 * np.arange(5.0))
        np.testing.assert_allclose(result.coefficients, [2.0])


class TestBackendSelection:
    """Test backend dispatch logic."""

    @pytest.mark.parametrize("backend", ['auto', 'cpu', 'cpu_qr'])
    def test_cpu_backends(self, simple_regression_data, backend):
        X, y, _ = simple_regression_data
        assert fit(X, y, backend=backend).backend_name == 'cpu_qr'

    def test_invalid_backend_raises(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(ValueError, match="Unknown backend"):
            fit(X, y, backend='nonsense')


class TestStandardErrors:
    """Standard errors come from R of the QR factorization."""

    def test_match_normal_equations_formula(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        sigma_sq = result.rss / result.df_residual
        expected = np.sqrt(sigma_sq * np.diag(np.linalg.inv(X.T @ X)))
        np.testing.assert_allclose(result.standard_errors, expected, rtol=1e-10)

    def test_unscaled_covariance_is_symmetric(self, simple_regression_data):
        X, y, _ = simple_regression_data
        cov = fit(X, y)._result.params.unscaled_covariance
        np.testing.assert_allclose(cov, cov.T, atol=1e-15)

    def test_aliased_rows_nan(self, collinear_data):
        X, y = collinear_data
        result = fit(X, y)
        cov = result._result.params.unscaled_covariance
        aliased = np.isnan(result.coefficients)
        assert np.all(np.isnan(cov[aliased]))
        assert np.all(np.isfinite(cov[np.ix_(~aliased, ~aliased)]))


class TestCoefficientTable:

    def test_columns(self, simple_regression_data):
        X, y, _ = simple_regression_data
        table = fit(X, y).coefficient_table()
        assert list(table.columns) == ['Estimate', 'Std. Error', 't value', 'Pr(>|t|)']
        assert list(table.index) == ['x0', 'x1', 'x2']

    def test_named_columns_from_sample(self, sample):
        table = fit(sample.design()).coefficient_table()
        assert list(table.index) == ['(Intercept)', 'x']
        assert table.loc['x', 'Estimate'] == pytest.approx(2.0, abs=0.1)


class TestDesignFromFrame:

    def test_intercept_prepended(self, sample):
        design = Design.from_frame(sample.to_frame(), y='y', x='x')
        assert design.columns == ('(Intercept)', 'x')
        np.testing.assert_array_equal(design.X, sample.X)

    def test_all_other_columns_by_default(self, sample):
        frame = sample.to_frame().assign(z=1.0)
        design = Design.from_frame(frame, y='y', intercept=False)
        assert design.columns == ('x', 'z')

    def test_missing_column(self, sample):
        with pytest.raises(ValidationError, match="not in frame: w"):
            Design.from_frame(sample.to_frame(), y='y', x=['w'])

    def test_non_numeric_column(self, sample):
        frame = sample.to_frame().assign(label='a')
        with pytest.raises(ValidationError):
            Design.from_frame(frame, y='y', x=['x', 'label'])

    def test_fit_matches_arrays(self, sample):
        design = Design.from_frame(sample.to_frame(), y='y')
        np.testing.assert_allclose(
            fit(design).coefficients, fit(sample.X, sample.y).coefficients, rtol=1e-12,
        )

    def test_column_count_checked(self):
        with pytest.raises(ValidationError, match="columns"):
            Design.from_arrays(np.ones((5, 2)), np.ones(5), columns=['a'])
