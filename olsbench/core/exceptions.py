"""
Errors raised by olsbench.

OlsBenchError is the root; the CLI catches it and prints the message.
Bad input (wrong dtype, NaN, mismatched lengths) is a ValidationError
and is raised before any arithmetic runs. Failures inside LAPACK are
caught where a coefficient method calls it and re-raised as a
NumericalError subclass that records what went wrong on attributes,
so callers can inspect the matrix rank or the smallest eigenvalue
without parsing the message.
"""


class OlsBenchError(Exception):
    """Root of the olsbench error tree."""


class ValidationError(OlsBenchError):
    """An argument was rejected before computation started."""


class DimensionError(ValidationError):
    """Arrays have the wrong number of dimensions or disagree in length."""


class NumericalError(OlsBenchError):
    """A factorization or solve could not produce a usable answer."""


class SingularMatrixError(NumericalError):
    """
    The system matrix (usually X'X) has no inverse in floating point.

    Attributes:
        matrix_name: Which matrix, e.g. "X'X"
        condition_number: 2-norm condition number, when it was computed
        rank: Numerical rank, when it was computed
        expected_rank: Rank a well-posed problem would have (p)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Cholesky factorization of the cross-product failed.

    Attributes:
        matrix_name: Which matrix, e.g. "X'X"
        min_eigenvalue: Smallest eigenvalue, when it was computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class BenchmarkCheckError(OlsBenchError):
    """
    microbenchmark(check=...) found expressions returning different values.

    Attributes:
        mismatched: Expressions that disagree with the first one
        max_abs_diff: Largest elementwise difference seen, for numeric results
    """

    def __init__(
        self,
        message: str,
        mismatched: tuple[str, ...] = (),
        max_abs_diff: float | None = None
    ):
        super().__init__(message)
        self.mismatched = mismatched
        self.max_abs_diff = max_abs_diff
