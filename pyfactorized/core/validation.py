"""
Input validation utilities for pyfactorized.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
import scipy.sparse as sp
from numpy.typing import ArrayLike, NDArray
from typing import Any, Sequence

from pyfactorized.core.exceptions import (
    ValidationError,
    DimensionError,
    MalformedFactorizationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a numeric matrix.

    Accepts any array-like and converts to numpy array. SciPy sparse
    matrices are passed through unchanged (with integer data promoted to
    float64), since indicator factors are usually sparse. Rejects inputs
    that result in object dtype.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray or scipy sparse matrix with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    if sp.issparse(array):
        if not np.issubdtype(array.dtype, np.number):
            raise ValidationError(
                f"{name}: non-numeric sparse dtype {array.dtype}, expected numeric data"
            )
        if not np.issubdtype(array.dtype, np.floating):
            array = array.astype(np.float64)
        return array

    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_2d(array: Any, name: str) -> None:
    """
    Verify array is 2-dimensional.

    Args:
        array: Array to check (anything with .ndim and .shape)
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 2D
    """
    if array.ndim != 2:
        raise DimensionError(
            f"{name}: expected 2D array, got {array.ndim}D with shape {tuple(array.shape)}"
        )


def check_factor_counts(
    left_factors: Sequence[Any],
    right_factors: Sequence[Any],
    base_absent: bool,
) -> None:
    """
    Verify the factor sequences pair up and describe a non-empty matrix.

    Args:
        left_factors: K_0..K_{r-1}
        right_factors: R_0..R_{r-1}
        base_absent: Whether the base block is absent

    Raises:
        MalformedFactorizationError: If lengths differ, or there is
            neither a base nor any correction term
    """
    n_left = len(left_factors)
    n_right = len(right_factors)
    if n_left != n_right:
        raise MalformedFactorizationError(
            f"left_factors has {n_left} entries but right_factors has {n_right}",
            expected=n_left,
            actual=n_right,
        )
    if base_absent and n_left == 0:
        raise MalformedFactorizationError(
            "base is absent and there are no correction terms; "
            "the factorization describes no matrix",
            expected=1,
            actual=0,
        )


def check_term_shapes(
    base_shape: tuple[int, int] | None,
    term_shapes: Sequence[tuple[tuple[int, int], tuple[int, int]]],
) -> None:
    """
    Verify every block of the aggregate lines up.

    All blocks must share the row count n (rows of the base, rows of each
    K_i), and each pair must chain (cols(K_i) == rows(R_i)).

    Args:
        base_shape: (rows, cols) of the base, or None if absent
        term_shapes: ((rows(K_i), cols(K_i)), (rows(R_i), cols(R_i))) per term

    Raises:
        MalformedFactorizationError: On the first inconsistent block
    """
    n_rows = base_shape[0] if base_shape is not None else None

    for i, ((k_rows, k_cols), (r_rows, _)) in enumerate(term_shapes):
        if n_rows is None:
            n_rows = k_rows
        elif k_rows != n_rows:
            raise MalformedFactorizationError(
                f"left_factors[{i}] has {k_rows} rows, expected {n_rows} "
                f"(rows of the base / first left factor)",
                term=i,
                expected=n_rows,
                actual=k_rows,
            )
        if k_cols != r_rows:
            raise MalformedFactorizationError(
                f"left_factors[{i}] has {k_cols} columns but right_factors[{i}] "
                f"has {r_rows} rows",
                term=i,
                expected=k_cols,
                actual=r_rows,
            )
