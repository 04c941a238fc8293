"""
Exception hierarchy for pyfactorized.

All exceptions inherit from PyFactorizedError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyFactorizedError(Exception):
    """Base exception for all pyfactorized errors."""
    pass


class ValidationError(PyFactorizedError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class MalformedFactorizationError(DimensionError):
    """
    A factorization cannot describe a well-formed aggregate matrix.

    Raised at construction when the left and right factor sequences have
    different lengths, or when a block does not line up with the others
    (row counts differ, or cols(K_i) != rows(R_i)).

    Attributes:
        term: Index of the offending correction term, or None for the base
            or for sequence-level problems
        expected: The dimension that was required
        actual: The dimension that was found
    """

    def __init__(
        self,
        message: str,
        term: int | None = None,
        expected: int | None = None,
        actual: int | None = None
    ):
        super().__init__(message)
        self.term = term
        self.expected = expected
        self.actual = actual


class BackendIncompatibleError(PyFactorizedError):
    """
    A backend operation is unavailable or returned an incompatible value.

    Raised by the backend adapter when an operation cannot be found on the
    bound backend, cannot be invoked with the given arguments, or returns
    a value of the wrong kind (e.g. a non-integer for a dimension query).
    The underlying cause is chained as __cause__.

    Attributes:
        operation: Name of the backend operation that failed
        backend_name: Identifier of the bound backend
    """

    def __init__(
        self,
        message: str,
        operation: str,
        backend_name: str | None = None
    ):
        super().__init__(message)
        self.operation = operation
        self.backend_name = backend_name


class UnsupportedOperationError(PyFactorizedError):
    """
    Operation is not implemented for factored matrices.

    Row/column appends, addition of two factored matrices, slicing,
    inversion and diagonal extraction have no factor-level rewrite and
    fail explicitly instead of returning a placeholder.

    Attributes:
        operation: Name of the requested operation
    """

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation
