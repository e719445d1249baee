"""
Argument checks used at the public boundary.

fit(), coefficients(), simulate() and microbenchmark() validate their
arguments with these helpers and then trust them. Every check raises on
the first problem it finds and names the offending argument; none of
them repairs input.
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from olsbench.core.exceptions import ValidationError, DimensionError

FloatArray = NDArray[np.floating[Any]]


def check_array(value: ArrayLike, name: str) -> FloatArray:
    """
    Convert an array-like to a floating-point ndarray.

    Integer and boolean input is promoted to float64; floating input
    keeps its dtype. Strings, objects and complex numbers are refused.

    Raises:
        ValidationError: If the input is not real numeric data
    """
    try:
        arr = np.asarray(value)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: not array-like ({e})") from e

    if arr.dtype == object:
        raise ValidationError(f"{name}: object dtype; expected real numbers")
    if np.issubdtype(arr.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex dtype {arr.dtype}; expected real numbers")
    if not (np.issubdtype(arr.dtype, np.number) or arr.dtype == np.bool_):
        raise ValidationError(f"{name}: dtype {arr.dtype} is not numeric")

    if np.issubdtype(arr.dtype, np.floating):
        return arr
    return arr.astype(np.float64)


def check_finite(arr: FloatArray, name: str) -> None:
    """Raise ValidationError if arr holds any NaN or infinity."""
    finite = np.isfinite(arr)
    if finite.all():
        return
    bad = arr[~finite]
    raise ValidationError(
        f"{name}: {bad.size} non-finite value(s) "
        f"({int(np.isnan(bad).sum())} NaN, {int(np.isinf(bad).sum())} Inf)"
    )


def check_ndim(arr: FloatArray, ndim: int, name: str) -> None:
    """Raise DimensionError unless arr has exactly `ndim` axes."""
    if arr.ndim != ndim:
        raise DimensionError(f"{name}: expected {ndim}D, got shape {arr.shape}")


def check_1d(arr: FloatArray, name: str) -> None:
    check_ndim(arr, 1, name)


def check_2d(arr: FloatArray, name: str) -> None:
    check_ndim(arr, 2, name)


def check_consistent_length(*arrays: FloatArray, names: tuple[str, ...]) -> None:
    """
    Require every array to have the same number of rows.

    Args:
        *arrays: Arrays to compare along axis 0
        names: One name per array, used in the message

    Raises:
        ValueError: If names and arrays differ in count (a caller bug)
        DimensionError: If the row counts differ
    """
    if len(names) != len(arrays):
        raise ValueError(f"got {len(arrays)} arrays but {len(names)} names")

    rows = {name: arr.shape[0] for name, arr in zip(names, arrays)}
    if len(set(rows.values())) > 1:
        listing = ", ".join(f"{name}={n}" for name, n in rows.items())
        raise DimensionError(f"Inconsistent lengths: {listing}")


def check_min_samples(arr: FloatArray, min_samples: int, name: str) -> None:
    """Raise ValidationError if arr has fewer than `min_samples` rows."""
    if arr.shape[0] < min_samples:
        raise ValidationError(
            f"{name}: has {arr.shape[0]} rows, needs at least {min_samples}"
        )


def check_positive_int(value: Any, name: str, minimum: int = 1) -> int:
    """
    Require an integer count no smaller than `minimum`.

    bool is refused although it subclasses int.

    Returns:
        value as a plain int

    Raises:
        ValidationError: If value is not an integer or is below minimum
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"{name}: expected an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValidationError(f"{name}: must be >= {minimum}, got {value}")
    return int(value)


def check_callable(value: Any, name: str) -> None:
    """Raise ValidationError unless value can be called."""
    if not callable(value):
        raise ValidationError(f"{name}: expected a callable, got {type(value).__name__}")
