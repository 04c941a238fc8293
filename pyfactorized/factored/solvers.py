"""
Entry points for factored matrices.

Provides backend selection, build() for factors that already live on a
backend, from_arrays() for NumPy/SciPy inputs, and invoke() for callers
that address operations by name on either a FactoredMatrix or a raw
backend value.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal
from numpy.typing import ArrayLike

from pyfactorized.backends.adapter import BackendAdapter
from pyfactorized.backends.cpu import CPUMatrixBackend
from pyfactorized.core.compute.device import select_device
from pyfactorized.core.exceptions import ValidationError
from pyfactorized.factored.matrix import FactoredMatrix


BackendChoice = Literal['auto', 'cpu', 'gpu']
Precision = Literal['fp32', 'fp64']


def _identity(x: Any) -> Any:
    return x


def get_backend(
    backend: BackendChoice | Any = 'auto',
    *,
    precision: Precision = 'fp32',
) -> BackendAdapter:
    """
    Select and bind a backend.

    Parameters
    ----------
    backend : str or object
        'cpu', 'gpu', 'auto' (GPU if one is available and torch imports,
        else CPU), a backend handle, or an existing BackendAdapter.
    precision : str
        GPU precision, 'fp32' or 'fp64'. Ignored on CPU.

    Returns
    -------
    BackendAdapter bound to the selected backend.
    """
    if isinstance(backend, BackendAdapter):
        return backend
    if not isinstance(backend, str):
        return BackendAdapter(backend)

    if backend == 'cpu':
        return BackendAdapter(CPUMatrixBackend())

    if backend == 'auto':
        device = select_device('auto')
        if device.is_gpu:
            try:
                from pyfactorized.backends.gpu import GPUMatrixBackend
                return BackendAdapter(GPUMatrixBackend(device=device, precision=precision))
            except ImportError:
                return BackendAdapter(CPUMatrixBackend())
        return BackendAdapter(CPUMatrixBackend())

    if backend == 'gpu':
        device = select_device('gpu')
        from pyfactorized.backends.gpu import GPUMatrixBackend
        return BackendAdapter(GPUMatrixBackend(device=device, precision=precision))

    raise ValidationError(f"Unknown backend: {backend!r}")


def build(
    base: Any,
    left_factors: Iterable[Any],
    right_factors: Iterable[Any],
    base_absent: bool = False,
    backend: BackendChoice | Any = 'cpu',
) -> FactoredMatrix:
    """
    Build a factored matrix from values already owned by a backend.

    No conversion is performed: the values are handed to the backend as
    they are.

    Parameters
    ----------
    base : backend value or None
        Base block S. May be None when base_absent is True.
    left_factors, right_factors : iterables of backend values
        K_i and R_i, paired by position.
    base_absent : bool
        Whether the aggregate starts from the correction terms.
    backend : str or object
        See get_backend().

    Returns
    -------
    FactoredMatrix
    """
    return FactoredMatrix.build(
        base, left_factors, right_factors, base_absent, get_backend(backend)
    )


def from_arrays(
    base: ArrayLike | None,
    left_factors: Iterable[ArrayLike],
    right_factors: Iterable[ArrayLike],
    *,
    base_absent: bool = False,
    backend: BackendChoice | Any = 'auto',
    precision: Precision = 'fp32',
) -> FactoredMatrix:
    """
    Build a factored matrix from NumPy arrays or SciPy sparse matrices.

    Every input is validated as a numeric 2D matrix and moved onto the
    selected backend with its asarray() conversion (backends without one
    receive the inputs unchanged).

    Parameters
    ----------
    base : array-like or None
        Base block S, shape (n, d_S). Ignored when base_absent.
    left_factors : iterable of array-like
        Indicator matrices K_i, shape (n, n_i).
    right_factors : iterable of array-like
        Attribute blocks R_i, shape (n_i, d_i).
    base_absent : bool
        Whether S is absent.
    backend : str or object
        See get_backend().
    precision : str
        GPU precision.

    Returns
    -------
    FactoredMatrix

    Examples
    --------
    >>> m = from_arrays(np.eye(2), [np.ones((2, 1))], [np.array([[3.0, 4.0]])],
    ...                 backend='cpu')
    >>> m.row_sum()
    array([[8.],
           [8.]])
    """
    adapter = get_backend(backend, precision=precision)
    convert = getattr(adapter.handle, "asarray", None) or _identity

    base_value = None if base_absent else convert(base)
    left = [convert(k) for k in left_factors]
    right = [convert(r) for r in right_factors]
    return FactoredMatrix.build(base_value, left, right, base_absent, adapter)


def invoke(
    target: Any,
    member: str,
    *arguments: Any,
    backend: BackendChoice | Any | None = None,
) -> Any:
    """
    Invoke an operation by name on a FactoredMatrix or a backend value.

    For a FactoredMatrix the call goes through FactoredMatrix.invoke();
    for anything else it goes through the backend adapter with target as
    the receiving value, so both kinds of matrix answer the same names.

    Parameters
    ----------
    target : FactoredMatrix or backend value
    member : str
        Operation name, e.g. 'row_sum', 'right_multiply'.
    *arguments
        Operation arguments (excluding the receiver).
    backend : str or object, optional
        Backend for raw values. Defaults to the CPU backend. Ignored for
        factored matrices, which carry their own.
    """
    if isinstance(target, FactoredMatrix):
        return target.invoke(member, *arguments)
    adapter = get_backend(backend if backend is not None else 'cpu')
    return adapter.invoke(member, target, *arguments)
