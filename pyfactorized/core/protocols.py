"""
Core protocols for pyfactorized.

These define structural interfaces that numeric backends must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so a
backend written elsewhere can be bound without inheriting from anything
in this package.

Design Principles:
    - Minimal contracts: prescribe only the capability surface the
      factored-matrix rewrites consume
    - Opaque values: backends own their matrix values; the engine never
      looks inside them
    - Bound once: BackendAdapter resolves the surface at construction,
      not on every call
"""

from typing import Protocol, Any, runtime_checkable


@runtime_checkable
class MatrixBackend(Protocol):
    """
    Protocol for numeric backends.

    A backend executes primitive matrix operations on values it owns
    (NumPy arrays, SciPy sparse matrices, PyTorch tensors, ...). Every
    operation takes the receiving matrix value as its first argument.

    Backends are stateless with respect to their values: no operation
    mutates an argument in place. This lets factored matrices alias
    backend values freely.

    Shape conventions:
        row_sum returns an (n, 1) column, column_sum returns a (1, m) row.
        left_multiply(a, b) is b @ a; right_multiply(a, b) is a @ b.
        slice ranges are half-open.
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{library}[_{precision}]'
        Examples: 'cpu_numpy', 'gpu_torch_fp32'
        """
        ...

    def num_rows(self, a: Any) -> int:
        """Number of rows of a."""
        ...

    def num_cols(self, a: Any) -> int:
        """Number of columns of a."""
        ...

    def transpose(self, a: Any) -> Any:
        ...

    def scalar_add(self, a: Any, scalar: float) -> Any:
        ...

    def scalar_multiply(self, a: Any, scalar: float) -> Any:
        ...

    def scalar_exponent(self, a: Any, scalar: float) -> Any:
        """Elementwise power a ** scalar."""
        ...

    def elementwise_exp(self, a: Any) -> Any:
        ...

    def elementwise_log(self, a: Any) -> Any:
        ...

    def elementwise_sqrt(self, a: Any) -> Any:
        ...

    def diagonal(self, v: Any) -> Any:
        """Square diagonal matrix built from a row or column vector."""
        ...

    def row_sum(self, a: Any) -> Any:
        ...

    def column_sum(self, a: Any) -> Any:
        ...

    def element_wise_sum(self, a: Any) -> float:
        """Sum of all entries as a real number."""
        ...

    def cross_product(self, a: Any) -> Any:
        """a^T a."""
        ...

    def cross_product_of(self, a: Any, b: Any) -> Any:
        """a^T b."""
        ...

    def matrix_add(self, a: Any, b: Any) -> Any:
        ...

    def left_multiply(self, a: Any, b: Any) -> Any:
        """b @ a."""
        ...

    def right_multiply(self, a: Any, b: Any) -> Any:
        """a @ b."""
        ...

    def row_append(self, a: Any, b: Any) -> Any:
        """Stack b below a."""
        ...

    def column_append(self, a: Any, b: Any) -> Any:
        """Place b to the right of a."""
        ...

    def slice(
        self, a: Any, row_start: int, row_end: int, col_start: int, col_end: int
    ) -> Any:
        """a[row_start:row_end, col_start:col_end]."""
        ...

    def invert(self, a: Any) -> Any:
        ...
