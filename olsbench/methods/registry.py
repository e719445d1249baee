"""
Registry of coefficient methods.

A Method bundles a kernel with the text the report prints for it and an
optional conversion step. Conversion (building a sparse matrix, changing
memory order, compiling the JIT closure) runs in prepare(), before any
timing, so benchmarks measure only the expression itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable
import numpy as np
from numpy.typing import NDArray

from olsbench.methods.backends import dense, jit, matrix_class


Kernel = Callable[..., NDArray[np.floating[Any]]]
Converter = Callable[[NDArray, NDArray], tuple[Any, Any]]


STEP_TITLES = {
    1: "Full model fit",
    2: "Normal equations",
    3: "Regrouping the products",
    4: "Cross-products",
    5: "Alternate matrix classes",
    6: "A JIT-compiled closure",
}


@dataclass(frozen=True)
class Method:
    """
    One way of computing OLS coefficients.

    Attributes:
        name: Registry key, also the benchmark label
        step: Tutorial step (1-6) that introduces it
        label: Short human-readable description
        expression: Code shown in the report
        kernel: Function computing coefficients from the converted inputs
        convert: Optional (X, y) -> converted (X, y), run once before timing
        normal_equations: True if the method forms X'X
    """
    name: str
    step: int
    label: str
    expression: str
    kernel: Kernel
    convert: Converter | None = None
    normal_equations: bool = True

    def prepare(self, X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> Callable[[], NDArray[np.floating[Any]]]:
        """Convert the inputs and return a zero-argument callable for timing."""
        args = self.convert(X, y) if self.convert is not None else (X, y)
        return partial(self.kernel, *args)

    def __call__(self, X: NDArray[np.floating[Any]], y: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return self.prepare(X, y)()

    @property
    def step_title(self) -> str:
        return STEP_TITLES[self.step]


_METHODS: dict[str, Method] = {}


def register(method: Method) -> Method:
    """Add a method to the registry. Names must be unique."""
    if method.name in _METHODS:
        raise ValueError(f"Method already registered: {method.name!r}")
    if method.step not in STEP_TITLES:
        raise ValueError(f"Unknown tutorial step {method.step} for {method.name!r}")
    _METHODS[method.name] = method
    return method


def get_method(name: str | Method) -> Method:
    """
    Look up a method by name.

    Raises:
        ValueError: If no method has that name
    """
    if isinstance(name, Method):
        return name
    try:
        return _METHODS[name]
    except KeyError:
        raise ValueError(
            f"Unknown method: {name!r}. Available: {', '.join(_METHODS)}"
        ) from None


def available_methods(step: int | None = None) -> tuple[Method, ...]:
    """All registered methods in tutorial order, optionally for one step."""
    methods = sorted(_METHODS.values(), key=lambda m: m.step)
    if step is not None:
        methods = [m for m in methods if m.step == step]
    return tuple(methods)


register(Method(
    name='lm',
    step=1,
    label='full model fit (pivoted QR)',
    expression='fit(X, y).coefficients',
    kernel=dense.lm_coefficients,
    normal_equations=False,
))
register(Method(
    name='normal_inverse',
    step=2,
    label="explicit inverse, left to right",
    expression='np.linalg.inv(X.T @ X) @ X.T @ y',
    kernel=dense.normal_inverse,
))
register(Method(
    name='normal_regrouped',
    step=3,
    label="explicit inverse, X'y first",
    expression='np.linalg.inv(X.T @ X) @ (X.T @ y)',
    kernel=dense.normal_regrouped,
))
register(Method(
    name='normal_solve',
    step=3,
    label='LU solve, no inverse',
    expression='np.linalg.solve(X.T @ X, X.T @ y)',
    kernel=dense.normal_solve,
))
register(Method(
    name='crossprod',
    step=4,
    label='BLAS syrk/gemv cross-products + LU solve',
    expression='np.linalg.solve(crossprod(X), crossprod(X, y))',
    kernel=dense.crossprod_solve,
))
register(Method(
    name='cholesky',
    step=4,
    label='cross-products + Cholesky solve',
    expression='cho_solve(cho_factor(crossprod(X)), crossprod(X, y))',
    kernel=dense.cholesky_coefficients,
))
register(Method(
    name='matrix_dense',
    step=5,
    label='column-major storage + symmetric solve',
    expression=(
        "Xf = np.asfortranarray(X)\n"
        "scipy.linalg.solve(crossprod(Xf), crossprod(Xf, y), assume_a='sym')"
    ),
    kernel=matrix_class.dense_coefficients,
    convert=matrix_class.to_column_major,
))
register(Method(
    name='matrix_sparse',
    step=5,
    label='scipy.sparse CSC + spsolve',
    expression=(
        "Xs = scipy.sparse.csc_matrix(X)\n"
        "spsolve((Xs.T @ Xs).tocsc(), Xs.T @ y)"
    ),
    kernel=matrix_class.sparse_coefficients,
    convert=matrix_class.to_sparse,
))
register(Method(
    name='jit',
    step=6,
    label='numba closure, single pass',
    expression=(
        "@njit\n"
        "def normal_equations(X, y):\n"
        "    XtX = np.zeros((p, p)); Xty = np.zeros(p)\n"
        "    for i in range(X.shape[0]):\n"
        "        for j in range(p):\n"
        "            Xty[j] += X[i, j] * y[i]\n"
        "            for k in range(j, p):\n"
        "                XtX[j, k] += X[i, j] * X[i, k]\n"
        "    ...  # mirror the upper triangle\n"
        "    return np.linalg.solve(XtX, Xty)"
    ),
    kernel=jit.jit_coefficients,
    convert=jit.compile_for,
))
