"""
Regression Design.

A Design is a validated (X, y) pair: float64, finite, X two-dimensional,
y one-dimensional, at least as many rows as columns. Every coefficient
computation downstream takes it on trust.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
import pandas as pd
from numpy.typing import NDArray

from olsbench.core.exceptions import ValidationError
from olsbench.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)


@dataclass(frozen=True)
class Design:
    """
    Validated design matrix and response. Immutable.

    Construction:
        Design.from_arrays(X, y)
        Design.from_frame(df, y='y', x=['x'], intercept=True)
        SampleData.design()
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _columns: tuple[str, ...] | None = None

    @classmethod
    def from_arrays(cls, X: Any, y: Any, columns: Sequence[str] | None = None) -> Design:
        """
        Validate array-likes into a Design.

        A 1-D X is read as a single column; an (n, 1) y is flattened.
        """
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr[:, np.newaxis]
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr[:, 0]

        check_2d(X_arr, 'X')
        check_1d(y_arr, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))
        check_min_samples(X_arr, X_arr.shape[1], 'X')
        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')

        if columns is not None:
            columns = tuple(columns)
            if len(columns) != X_arr.shape[1]:
                raise ValidationError(
                    f"columns: {len(columns)} names for {X_arr.shape[1]} columns of X"
                )

        return cls(
            _X=X_arr.astype(np.float64, copy=False),
            _y=y_arr.astype(np.float64, copy=False),
            _columns=columns,
        )

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        *,
        y: str,
        x: str | Sequence[str] | None = None,
        intercept: bool = True,
    ) -> Design:
        """
        Build a Design from DataFrame columns.

        Args:
            frame: Source data
            y: Response column
            x: Predictor column(s); all other columns when None
            intercept: Prepend a column of ones named '(Intercept)'

        Raises:
            ValidationError: If a named column is missing
        """
        if isinstance(x, str):
            x = [x]
        predictors = list(x) if x is not None else [c for c in frame.columns if c != y]
        missing = [c for c in [y, *predictors] if c not in frame.columns]
        if missing:
            raise ValidationError(f"columns not in frame: {', '.join(map(str, missing))}")

        X = check_array(frame[predictors].to_numpy(), 'X')
        names = [str(c) for c in predictors]
        if intercept:
            X = np.column_stack([np.ones(len(frame)), X])
            names.insert(0, '(Intercept)')
        return cls.from_arrays(X, frame[y].to_numpy(), columns=names)

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        return self._X.shape[0]

    @property
    def p(self) -> int:
        """Number of columns of X, intercept included."""
        return self._X.shape[1]

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names; x0, x1, ... when none were given."""
        if self._columns is None:
            return tuple(f"x{i}" for i in range(self.p))
        return self._columns
