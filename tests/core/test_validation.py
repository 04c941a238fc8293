"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, sparse pass-through
    - check_2d: dimensionality check
    - check_factor_counts: pairing of left and right factors
    - check_term_shapes: block alignment
"""

import numpy as np
import pytest
import scipy.sparse as sp

from pyfactorized.core.exceptions import (
    DimensionError,
    MalformedFactorizationError,
    ValidationError,
)
from pyfactorized.core.validation import (
    check_2d,
    check_array,
    check_factor_counts,
    check_term_shapes,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to a float matrix and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([[1, 2], [3, 4]], "X")
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64

    def test_float32_preserved(self):
        result = check_array(np.ones((2, 2), dtype=np.float32), "X")
        assert result.dtype == np.float32

    def test_object_dtype_rejected(self):
        with pytest.raises(ValidationError, match="X"):
            check_array(np.array([[1, "a"], [None, 2]], dtype=object), "X")

    def test_string_dtype_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(np.array([["a", "b"]]), "X")

    def test_sparse_passes_through(self):
        k = sp.csr_matrix(np.eye(3))
        result = check_array(k, "K")
        assert sp.issparse(result)

    def test_sparse_integer_promoted(self):
        k = sp.csr_matrix(np.eye(3, dtype=np.int64))
        result = check_array(k, "K")
        assert sp.issparse(result)
        assert result.dtype == np.float64


# ═══════════════════════════════════════════════════════════════════════
# check_2d
# ═══════════════════════════════════════════════════════════════════════


class TestCheck2D:

    def test_2d_passes(self):
        check_2d(np.ones((3, 2)), "X")

    def test_1d_fails(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.ones(3), "X")

    def test_3d_fails(self):
        with pytest.raises(DimensionError, match="3D"):
            check_2d(np.ones((2, 2, 2)), "X")


# ═══════════════════════════════════════════════════════════════════════
# check_factor_counts
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFactorCounts:

    def test_matching_lengths_pass(self):
        check_factor_counts([1, 2], [3, 4], base_absent=False)

    def test_no_terms_with_base_passes(self):
        check_factor_counts([], [], base_absent=False)

    def test_length_mismatch(self):
        with pytest.raises(MalformedFactorizationError) as exc_info:
            check_factor_counts([1, 2], [3], base_absent=False)
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1

    def test_no_terms_without_base(self):
        with pytest.raises(MalformedFactorizationError, match="no matrix"):
            check_factor_counts([], [], base_absent=True)


# ═══════════════════════════════════════════════════════════════════════
# check_term_shapes
# ═══════════════════════════════════════════════════════════════════════


class TestCheckTermShapes:

    def test_consistent_blocks_pass(self):
        check_term_shapes((10, 3), [((10, 4), (4, 2)), ((10, 5), (5, 1))])

    def test_base_absent_uses_first_term_rows(self):
        check_term_shapes(None, [((7, 2), (2, 3)), ((7, 4), (4, 1))])

    def test_row_mismatch_against_base(self):
        with pytest.raises(MalformedFactorizationError) as exc_info:
            check_term_shapes((10, 3), [((10, 4), (4, 2)), ((9, 5), (5, 1))])
        err = exc_info.value
        assert err.term == 1
        assert err.expected == 10
        assert err.actual == 9

    def test_row_mismatch_without_base(self):
        with pytest.raises(MalformedFactorizationError):
            check_term_shapes(None, [((7, 2), (2, 3)), ((8, 4), (4, 1))])

    def test_inner_dimension_mismatch(self):
        with pytest.raises(MalformedFactorizationError, match="right_factors\\[0\\]") as exc_info:
            check_term_shapes((10, 3), [((10, 4), (5, 2))])
        assert exc_info.value.term == 0
        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 5
