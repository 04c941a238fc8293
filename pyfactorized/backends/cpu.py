"""
CPU reference backend: NumPy dense arrays and SciPy sparse matrices.

Foreign-key indicator factors (K_i) are naturally sparse, so every
operation accepts either representation. Mixed sparse/dense products come
back dense; results are never np.matrix.
"""

from __future__ import annotations

from typing import Any
import numpy as np
import scipy.sparse as sp
from numpy.typing import ArrayLike, NDArray

from pyfactorized.core.validation import check_array, check_2d


def _dense(a: Any) -> NDArray:
    """Densify a sparse matrix or np.matrix, pass ndarrays through."""
    if sp.issparse(a):
        return a.toarray()
    return np.asarray(a)


def _sparse(a: Any) -> Any:
    if sp.issparse(a):
        return a
    return sp.csr_matrix(np.asarray(a))


def _clean(result: Any) -> Any:
    # spmatrix arithmetic with ndarrays returns np.matrix
    if isinstance(result, np.matrix):
        return np.asarray(result)
    return result


def _matmul(a: Any, b: Any) -> Any:
    """a @ b for any mix of dense and sparse operands."""
    if sp.issparse(b) and not sp.issparse(a):
        # dense @ sparse: let the sparse operand drive
        return _clean((b.T @ np.asarray(a).T).T)
    return _clean(a @ b)


class CPUMatrixBackend:
    """
    CPU backend over NumPy/SciPy.

    Elementwise maps that do not preserve zeros (exp, log, scalar add)
    densify sparse inputs. Products and reductions keep sparse inputs
    sparse where SciPy does.
    """

    @property
    def name(self) -> str:
        return 'cpu_numpy'

    # === Conversion ===

    def asarray(self, x: ArrayLike) -> Any:
        """Validate x as a 2D float matrix (sparse passes through)."""
        arr = check_array(x, "matrix")
        check_2d(arr, "matrix")
        return arr

    def to_numpy(self, a: Any) -> NDArray:
        return _dense(a)

    # === Dimensions ===

    def num_rows(self, a: Any) -> int:
        return int(a.shape[0])

    def num_cols(self, a: Any) -> int:
        return int(a.shape[1])

    # === Structure ===

    def transpose(self, a: Any) -> Any:
        return a.T

    def diagonal(self, v: Any) -> Any:
        return sp.diags(np.ravel(_dense(v))).tocsr()

    def slice(
        self, a: Any, row_start: int, row_end: int, col_start: int, col_end: int
    ) -> Any:
        return a[row_start:row_end, col_start:col_end]

    def row_append(self, a: Any, b: Any) -> Any:
        if sp.issparse(a) or sp.issparse(b):
            return sp.vstack([_sparse(a), _sparse(b)]).tocsr()
        return np.vstack([a, b])

    def column_append(self, a: Any, b: Any) -> Any:
        if sp.issparse(a) or sp.issparse(b):
            return sp.hstack([_sparse(a), _sparse(b)]).tocsr()
        return np.hstack([a, b])

    def invert(self, a: Any) -> Any:
        return np.linalg.inv(_dense(a))

    # === Scalar and elementwise maps ===

    def scalar_add(self, a: Any, scalar: float) -> Any:
        return _dense(a) + scalar

    def scalar_multiply(self, a: Any, scalar: float) -> Any:
        return _clean(a * scalar)

    def scalar_exponent(self, a: Any, scalar: float) -> Any:
        if sp.issparse(a) and scalar > 0:
            return a.power(scalar)
        return np.power(_dense(a), scalar)

    def elementwise_exp(self, a: Any) -> Any:
        return np.exp(_dense(a))

    def elementwise_log(self, a: Any) -> Any:
        return np.log(_dense(a))

    def elementwise_sqrt(self, a: Any) -> Any:
        if sp.issparse(a):
            return a.sqrt()
        return np.sqrt(a)

    # === Reductions ===

    def row_sum(self, a: Any) -> NDArray:
        return np.asarray(a.sum(axis=1)).reshape(-1, 1)

    def column_sum(self, a: Any) -> NDArray:
        return np.asarray(a.sum(axis=0)).reshape(1, -1)

    def element_wise_sum(self, a: Any) -> float:
        return float(a.sum())

    # === Products ===

    def cross_product(self, a: Any) -> Any:
        return _clean(a.T @ a)

    def cross_product_of(self, a: Any, b: Any) -> Any:
        return _matmul(a.T, b)

    def matrix_add(self, a: Any, b: Any) -> Any:
        if sp.issparse(a) and sp.issparse(b):
            return (a + b).tocsr()
        return _dense(a) + _dense(b)

    def left_multiply(self, a: Any, b: Any) -> Any:
        return _matmul(b, a)

    def right_multiply(self, a: Any, b: Any) -> Any:
        return _matmul(a, b)
