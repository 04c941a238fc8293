"""
Backend adapter: the dispatch boundary between the engine and a backend.

The adapter binds an opaque backend handle once. At bind time every
operation name in ALL_OPERATIONS is looked up on the handle and the
callable is recorded; at call time the recorded callable is invoked and
its result checked against the kind the operation promises (object, int
or real).

Anything that goes wrong at the boundary (operation missing, wrong arity,
wrong argument types, wrong result kind) surfaces as a single error kind,
BackendIncompatibleError. The specific cause is logged at DEBUG and chained
as __cause__. Numeric errors from inside the backend (e.g. ValueError on
mismatched shapes) are not boundary failures and propagate unchanged.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, Callable

from pyfactorized.core.capabilities import (
    ALL_OPERATIONS,
    INTEGER_OPERATIONS,
    REAL_OPERATIONS,
    OP_NUM_ROWS,
    OP_NUM_COLS,
    OP_TRANSPOSE,
    OP_DIAGONAL,
    OP_SLICE,
    OP_ROW_APPEND,
    OP_COLUMN_APPEND,
    OP_INVERT,
    OP_SCALAR_ADD,
    OP_SCALAR_MULTIPLY,
    OP_SCALAR_EXPONENT,
    OP_ELEMENTWISE_EXP,
    OP_ELEMENTWISE_LOG,
    OP_ELEMENTWISE_SQRT,
    OP_ROW_SUM,
    OP_COLUMN_SUM,
    OP_ELEMENT_WISE_SUM,
    OP_CROSS_PRODUCT,
    OP_CROSS_PRODUCT_OF,
    OP_MATRIX_ADD,
    OP_LEFT_MULTIPLY,
    OP_RIGHT_MULTIPLY,
)
from pyfactorized.core.exceptions import BackendIncompatibleError

logger = logging.getLogger(__name__)

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _backend_name(handle: Any) -> str:
    name = getattr(handle, 'name', None)
    if isinstance(name, str):
        return name
    return type(handle).__name__


class BackendAdapter:
    """
    Bound view of a numeric backend.

    Parameters
    ----------
    handle : object
        Any object exposing (some of) the MatrixBackend surface. Missing
        operations are tolerated at bind time and fail when called.

    Examples
    --------
    >>> adapter = BackendAdapter(CPUMatrixBackend())
    >>> adapter.num_rows(np.eye(3))
    3
    >>> adapter.invoke('row_sum', np.eye(3)).shape
    (3, 1)
    """

    def __init__(self, handle: Any):
        if isinstance(handle, BackendAdapter):
            handle = handle.handle
        self._handle = handle
        self._name = _backend_name(handle)
        self._bound: dict[str, Callable[..., Any]] = {}
        for op in ALL_OPERATIONS:
            fn = getattr(handle, op, None)
            if callable(fn):
                self._bound[op] = fn
        missing = ALL_OPERATIONS - self._bound.keys()
        if missing:
            logger.debug(
                "backend %r bound without operations: %s",
                self._name, ", ".join(sorted(missing)),
            )

    @property
    def handle(self) -> Any:
        """The wrapped backend object."""
        return self._handle

    @property
    def name(self) -> str:
        """Identifier of the bound backend."""
        return self._name

    def supports(self, operation: str) -> bool:
        """
        Check whether an operation was bound.

        Unknown operation names return False, never raise.
        """
        return operation in self._bound

    def __repr__(self) -> str:
        return f"BackendAdapter({self._name!r}, ops={len(self._bound)}/{len(ALL_OPERATIONS)})"

    # === Dispatch ===

    def _fail(self, operation: str, reason: str, cause: BaseException | None = None):
        logger.debug(
            "backend %r: operation %r failed: %s", self._name, operation, reason,
            exc_info=cause,
        )
        return BackendIncompatibleError(
            f"backend {self._name!r}: operation {operation!r} unavailable or incompatible",
            operation=operation,
            backend_name=self._name,
        )

    def _call(self, operation: str, args: tuple[Any, ...]) -> Any:
        fn = self._bound.get(operation)
        if fn is None:
            raise self._fail(operation, "not provided by backend")
        try:
            return fn(*args)
        except (TypeError, AttributeError) as e:
            raise self._fail(operation, f"{type(e).__name__}: {e}", e) from e

    def _call_int(self, operation: str, args: tuple[Any, ...]) -> int:
        result = self._call(operation, args)
        if (
            isinstance(result, numbers.Real)
            and not isinstance(result, bool)
            and float(result).is_integer()
            and _INT64_MIN <= int(result) <= _INT64_MAX
        ):
            return int(result)
        raise self._fail(
            operation, f"expected an integer result, got {type(result).__name__}: {result!r}"
        )

    def _call_float(self, operation: str, args: tuple[Any, ...]) -> float:
        result = self._call(operation, args)
        if isinstance(result, numbers.Real) and not isinstance(result, bool):
            return float(result)
        raise self._fail(
            operation, f"expected a real result, got {type(result).__name__}: {result!r}"
        )

    def invoke(self, operation: str, *args: Any) -> Any:
        """
        Invoke a backend operation by name.

        The result is checked according to the operation's kind: dimension
        queries must return integers, element_wise_sum a real number, all
        others are returned unchanged.

        Raises:
            BackendIncompatibleError: If the operation is unknown, missing,
                cannot be called with args, or returns the wrong kind.
        """
        if operation in INTEGER_OPERATIONS:
            return self._call_int(operation, args)
        if operation in REAL_OPERATIONS:
            return self._call_float(operation, args)
        return self._call(operation, args)

    # === Typed capability surface ===

    def num_rows(self, a: Any) -> int:
        return self._call_int(OP_NUM_ROWS, (a,))

    def num_cols(self, a: Any) -> int:
        return self._call_int(OP_NUM_COLS, (a,))

    def transpose(self, a: Any) -> Any:
        return self._call(OP_TRANSPOSE, (a,))

    def scalar_add(self, a: Any, scalar: Any) -> Any:
        return self._call(OP_SCALAR_ADD, (a, scalar))

    def scalar_multiply(self, a: Any, scalar: Any) -> Any:
        return self._call(OP_SCALAR_MULTIPLY, (a, scalar))

    def scalar_exponent(self, a: Any, scalar: Any) -> Any:
        return self._call(OP_SCALAR_EXPONENT, (a, scalar))

    def elementwise_exp(self, a: Any) -> Any:
        return self._call(OP_ELEMENTWISE_EXP, (a,))

    def elementwise_log(self, a: Any) -> Any:
        return self._call(OP_ELEMENTWISE_LOG, (a,))

    def elementwise_sqrt(self, a: Any) -> Any:
        return self._call(OP_ELEMENTWISE_SQRT, (a,))

    def diagonal(self, v: Any) -> Any:
        return self._call(OP_DIAGONAL, (v,))

    def row_sum(self, a: Any) -> Any:
        return self._call(OP_ROW_SUM, (a,))

    def column_sum(self, a: Any) -> Any:
        return self._call(OP_COLUMN_SUM, (a,))

    def element_wise_sum(self, a: Any) -> float:
        return self._call_float(OP_ELEMENT_WISE_SUM, (a,))

    def cross_product(self, a: Any) -> Any:
        return self._call(OP_CROSS_PRODUCT, (a,))

    def cross_product_of(self, a: Any, b: Any) -> Any:
        return self._call(OP_CROSS_PRODUCT_OF, (a, b))

    def matrix_add(self, a: Any, b: Any) -> Any:
        return self._call(OP_MATRIX_ADD, (a, b))

    def left_multiply(self, a: Any, b: Any) -> Any:
        return self._call(OP_LEFT_MULTIPLY, (a, b))

    def right_multiply(self, a: Any, b: Any) -> Any:
        return self._call(OP_RIGHT_MULTIPLY, (a, b))

    def row_append(self, a: Any, b: Any) -> Any:
        return self._call(OP_ROW_APPEND, (a, b))

    def column_append(self, a: Any, b: Any) -> Any:
        return self._call(OP_COLUMN_APPEND, (a, b))

    def slice(
        self, a: Any, row_start: int, row_end: int, col_start: int, col_end: int
    ) -> Any:
        return self._call(OP_SLICE, (a, row_start, row_end, col_start, col_end))

    def invert(self, a: Any) -> Any:
        return self._call(OP_INVERT, (a,))
