"""
Regression solution types.

LinearParams is what the QR backend computes; LinearSolution derives
the inference quantities (standard errors, t statistics, p-values) from
it on first access and caches them.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Any, TYPE_CHECKING
import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy import stats

from olsbench.core.result import Result

if TYPE_CHECKING:
    from olsbench.regression.design import Design


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload of the full model fit.

    Attributes:
        coefficients: Estimates in column order; NaN where aliased
        residuals: y - fitted_values
        fitted_values: X @ coefficients, aliased columns dropped
        rss: Residual sum of squares
        tss: Total sum of squares about the mean of y
        rank: Numerical rank of X
        df_residual: n - rank
        unscaled_covariance: (X'X)⁻¹ over the estimable columns, NaN
            rows and columns for aliased ones
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int
    unscaled_covariance: NDArray[np.floating[Any]]


class LinearSolution:
    """
    Result of fit(): everything the full model fit reports.

    This is deliberately more than the coefficients. Computing it all
    is what makes the full fit the slowest entry in the benchmark.
    """

    def __init__(self, result: Result[LinearParams], design: 'Design'):
        self._result = result
        self._design = design

    # === Backend output ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # === Goodness of fit ===

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - self.rss / self.tss

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        if self.df_residual <= 0 or self.tss == 0:
            return self.r_squared
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / self.df_residual

    @property
    def residual_std_error(self) -> float:
        """sigma-hat = sqrt(RSS / df); NaN with no residual degrees of freedom."""
        if self.df_residual <= 0:
            return float('nan')
        return float(np.sqrt(self.rss / self.df_residual))

    # === Inference ===

    @cached_property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        sigma-hat * sqrt(diag((X'X)⁻¹)), read off the QR factor.

        NaN for aliased coefficients and when df_residual is 0.
        """
        diag = np.diag(self._result.params.unscaled_covariance)
        return self.residual_std_error * np.sqrt(diag)

    @cached_property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @cached_property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t on df_residual degrees of freedom."""
        if self.df_residual <= 0:
            return np.full_like(self.t_statistics, np.nan)
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    def coefficient_table(self) -> pd.DataFrame:
        """Estimate, Std. Error, t value and Pr(>|t|), indexed by column name."""
        return pd.DataFrame(
            {
                'Estimate': self.coefficients,
                'Std. Error': self.standard_errors,
                't value': self.t_statistics,
                'Pr(>|t|)': self.p_values,
            },
            index=list(self._design.columns),
        )

    def summary(self) -> str:
        """Generate R-style summary output."""
        table = self.coefficient_table()
        aliased = table['Estimate'].isna()
        body = table.to_string(na_rep='NA', float_format=lambda v: f"{v:.6g}")
        lines = [
            "Linear Regression Results",
            "=" * 60,
            f"Observations: {self._design.n}    Predictors: {self._design.p}    Rank: {self.rank}",
            "",
            "Coefficients:",
            body,
        ]
        if aliased.any():
            lines.append(f"({int(aliased.sum())} not defined because of singularities: "
                         f"{', '.join(table.index[aliased.to_numpy()])} (aliased))")
        lines += [
            "",
            f"Residual standard error: {self.residual_std_error:.6g} on {self.df_residual} degrees of freedom",
            f"Multiple R-squared: {self.r_squared:.6f},  Adjusted R-squared: {self.adjusted_r_squared:.6f}",
            f"Backend: {self.backend_name}",
        ]
        if self.timing:
            lines.append(f"Time: {self.timing['total_seconds']:.4f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )
