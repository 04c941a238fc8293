"""
Tests for the pyfactorized exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyFactorizedError)
    - Diagnostic attributes on MalformedFactorizationError,
      BackendIncompatibleError, UnsupportedOperationError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pyfactorized.core.exceptions import (
    BackendIncompatibleError,
    DimensionError,
    MalformedFactorizationError,
    PyFactorizedError,
    UnsupportedOperationError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyFactorizedError."""

    def test_validation_error_is_pyfactorized_error(self):
        with pytest.raises(PyFactorizedError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_malformed_factorization_is_dimension_error(self):
        with pytest.raises(DimensionError):
            raise MalformedFactorizationError("bad blocks")

    def test_backend_incompatible_is_pyfactorized_error(self):
        with pytest.raises(PyFactorizedError):
            raise BackendIncompatibleError("missing", operation="row_sum")

    def test_backend_incompatible_is_not_validation_error(self):
        """Boundary failures are not input validation failures."""
        err = BackendIncompatibleError("missing", operation="row_sum")
        assert not isinstance(err, ValidationError)

    def test_unsupported_is_pyfactorized_error(self):
        with pytest.raises(PyFactorizedError):
            raise UnsupportedOperationError("nope", operation="invert")


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestMalformedFactorizationError:

    def test_attributes(self):
        err = MalformedFactorizationError("mismatch", term=1, expected=4, actual=5)
        assert err.term == 1
        assert err.expected == 4
        assert err.actual == 5
        assert str(err) == "mismatch"

    def test_defaults_are_none(self):
        err = MalformedFactorizationError("mismatch")
        assert err.term is None
        assert err.expected is None
        assert err.actual is None


class TestBackendIncompatibleError:

    def test_attributes(self):
        err = BackendIncompatibleError("bad", operation="num_rows", backend_name="cpu_numpy")
        assert err.operation == "num_rows"
        assert err.backend_name == "cpu_numpy"

    def test_backend_name_defaults_to_none(self):
        err = BackendIncompatibleError("bad", operation="num_rows")
        assert err.backend_name is None


class TestUnsupportedOperationError:

    def test_operation_attribute(self):
        err = UnsupportedOperationError("no rewrite", operation="slice")
        assert err.operation == "slice"
        assert "no rewrite" in str(err)
