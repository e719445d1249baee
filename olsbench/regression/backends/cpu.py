"""
Pivoted-QR backend for the full model fit.

Besides the coefficients it produces everything the summary needs:
fitted values, residuals, sums of squares, rank, residual degrees of
freedom and the unscaled covariance read off R. All of that work is
part of what the benchmark charges to the full fit.
"""

from typing import Any
import numpy as np

from olsbench.core.result import Result
from olsbench.core.compute.timing import Timer
from olsbench.core.compute.linalg.qr import qr_cpu, qr_solve_cpu, qr_unscaled_covariance
from olsbench.regression.design import Design
from olsbench.regression.solution import LinearParams


class CPUQRBackend:
    """Column-pivoted QR on the CPU. Rank deficiency is reported, not raised."""

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LinearParams]:
        X, y = design.X, design.y

        timer = Timer()
        timer.start()

        with timer.section('qr_decomposition'):
            qr = qr_cpu(X)

        with timer.section('solve'):
            beta = qr_solve_cpu(X, y, qr_result=qr)

        with timer.section('residuals'):
            # aliased columns contribute nothing to the fit
            fitted = X @ np.where(np.isnan(beta), 0.0, beta)
            resid = y - fitted

        with timer.section('statistics'):
            centered = y - y.mean()
            rss = float(resid @ resid)
            tss = float(centered @ centered)
            cov = qr_unscaled_covariance(qr, design.p)

        timer.stop()

        n_aliased = design.p - qr.rank
        notes: tuple[str, ...] = ()
        if n_aliased:
            notes = (
                f"rank-deficient design: {n_aliased} coefficient(s) not defined "
                f"because of singularities",
            )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr.rank,
            'pivot': qr.pivot.tolist(),
        }

        return Result(
            params=LinearParams(
                coefficients=beta,
                residuals=resid,
                fitted_values=fitted,
                rss=rss,
                tss=tss,
                rank=qr.rank,
                df_residual=design.n - qr.rank,
                unscaled_covariance=cov,
            ),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=notes,
        )
