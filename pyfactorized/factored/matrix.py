"""
FactoredMatrix: matrix algebra over a factorization.

Every operation is rewritten into backend calls on the factors; the
aggregate matrix is never formed (materialize() excepted, which exists
for inspection of small matrices).

Dispatch is on DispatchState, the 2x2 product of the transpose flag and
the base-absent flag, selected once per call. Transposed states reduce to
the plain rules through a derived untransposed instance; no operation
mutates its receiver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Any, Callable, Iterable

from pyfactorized.backends.adapter import BackendAdapter
from pyfactorized.core.compute.timing import Timer
from pyfactorized.core.exceptions import (
    DimensionError,
    UnsupportedOperationError,
    ValidationError,
)
from pyfactorized.factored.design import Factorization
from pyfactorized.factored._gram import blockwise_gram, transposed_gram

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    """(transposed, base_absent) as an explicit case."""
    PLAIN = (False, False)
    PLAIN_BASE_ABSENT = (False, True)
    TRANSPOSED = (True, False)
    TRANSPOSED_BASE_ABSENT = (True, True)

    @classmethod
    def of(cls, transposed: bool, base_absent: bool) -> DispatchState:
        return cls((transposed, base_absent))

    @property
    def transposed(self) -> bool:
        return self.value[0]

    @property
    def base_absent(self) -> bool:
        return self.value[1]


# Named-operation surface: member name -> number of arguments
_MEMBER_ARITY: dict[str, int] = {
    'num_rows': 0,
    'num_cols': 0,
    'transpose': 0,
    'elementwise_exp': 0,
    'elementwise_log': 0,
    'elementwise_sqrt': 0,
    'scalar_add': 1,
    'scalar_multiply': 1,
    'scalar_exponent': 1,
    'right_multiply': 1,
    'left_multiply': 1,
    'cross_product': 0,
    'cross_product_of': 1,
    'row_sum': 0,
    'column_sum': 0,
    'element_wise_sum': 0,
    'materialize': 0,
}

_UNSUPPORTED = frozenset({
    'row_append',
    'column_append',
    'matrix_add',
    'slice',
    'invert',
    'diagonal',
})

_BUILD_ARITY = 5


def _unsupported(operation: str) -> UnsupportedOperationError:
    return UnsupportedOperationError(
        f"{operation} is not supported on a FactoredMatrix; "
        f"materialize() the matrix first if the dense result is small enough",
        operation=operation,
    )


@dataclass(frozen=True, eq=False)
class FactoredMatrix:
    """
    Matrix represented as a base block plus correction terms.

    The value denoted is the column-block aggregate
    [S | K_0 R_0 | ... | K_{r-1} R_{r-1}] (S omitted when the base is
    absent), transposed when `transposed` is set.

    Construct via FactoredMatrix.build() or pyfactorized.from_arrays().
    Derived matrices share the adapter and alias every backend value they
    do not change.

    Attributes:
        factorization: Validated factors and their block dimensions
        adapter: Backend adapter owning every value in the factorization
        transposed: Whether this object denotes the transpose
    """
    factorization: Factorization
    adapter: BackendAdapter
    transposed: bool = False

    @classmethod
    def build(
        cls,
        base: Any,
        left_factors: Iterable[Any],
        right_factors: Iterable[Any],
        base_absent: bool,
        backend: Any,
    ) -> FactoredMatrix:
        """
        Build a factored matrix from backend values.

        Parameters
        ----------
        base : backend value or None
            Base block S (None allowed when base_absent).
        left_factors, right_factors : iterables of backend values
            K_i and R_i, paired by position.
        base_absent : bool
            Whether S is absent.
        backend : object
            Backend handle or an existing BackendAdapter.

        Raises
        ------
        MalformedFactorizationError
            If the factors do not form a well-defined aggregate.
        """
        adapter = backend if isinstance(backend, BackendAdapter) else BackendAdapter(backend)
        factorization = Factorization.from_factors(
            base, left_factors, right_factors, base_absent, adapter
        )
        return cls(factorization=factorization, adapter=adapter)

    # === Properties ===

    @property
    def base(self) -> Any:
        return self.factorization.base

    @property
    def left_factors(self) -> tuple[Any, ...]:
        return self.factorization.left_factors

    @property
    def right_factors(self) -> tuple[Any, ...]:
        return self.factorization.right_factors

    @property
    def base_absent(self) -> bool:
        return self.factorization.base_absent

    @property
    def rank(self) -> int:
        """Number of correction terms."""
        return self.factorization.rank

    @property
    def state(self) -> DispatchState:
        return DispatchState.of(self.transposed, self.factorization.base_absent)

    @property
    def shape(self) -> tuple[int, int]:
        return self.num_rows(), self.num_cols()

    def num_rows(self) -> int:
        f = self.factorization
        return f.n_cols if self.transposed else f.n_rows

    def num_cols(self) -> int:
        f = self.factorization
        return f.n_rows if self.transposed else f.n_cols

    def _plain(self) -> FactoredMatrix:
        """Untransposed view over the same factors."""
        return replace(self, transposed=False)

    def __repr__(self) -> str:
        n, m = self.shape
        flags = []
        if self.transposed:
            flags.append("transposed")
        if self.base_absent:
            flags.append("base_absent")
        extra = f", {', '.join(flags)}" if flags else ""
        return (
            f"<FactoredMatrix {n}x{m}, r={self.rank}, "
            f"backend={self.adapter.name!r}{extra}>"
        )

    # === Transpose ===

    def transpose(self) -> FactoredMatrix:
        """Flip the transpose flag. No backend calls."""
        return replace(self, transposed=not self.transposed)

    @property
    def T(self) -> FactoredMatrix:
        return self.transpose()

    # === Scalar elementwise maps ===
    #
    # Applied to every R_i and to S (when present); K_i are reused. For
    # indicator K_i this equals mapping the aggregate, since each entry of
    # K_i R_i is a copy of an entry of R_i.

    def _map_values(self, fn: Callable[[Any], Any]) -> FactoredMatrix:
        f = self.factorization
        new_right = tuple(fn(r) for r in f.right_factors)
        new_base = f.base if f.base_absent else fn(f.base)
        return replace(
            self, factorization=replace(f, base=new_base, right_factors=new_right)
        )

    def elementwise_exp(self) -> FactoredMatrix:
        return self._map_values(self.adapter.elementwise_exp)

    def elementwise_log(self) -> FactoredMatrix:
        return self._map_values(self.adapter.elementwise_log)

    def elementwise_sqrt(self) -> FactoredMatrix:
        return self._map_values(self.adapter.elementwise_sqrt)

    def scalar_add(self, scalar: Any) -> FactoredMatrix:
        return self._map_values(lambda a: self.adapter.scalar_add(a, scalar))

    def scalar_multiply(self, scalar: Any) -> FactoredMatrix:
        return self._map_values(lambda a: self.adapter.scalar_multiply(a, scalar))

    def scalar_exponent(self, scalar: Any) -> FactoredMatrix:
        return self._map_values(lambda a: self.adapter.scalar_exponent(a, scalar))

    # === Multiplication ===

    def right_multiply(self, x: Any) -> Any:
        """
        self @ x.

        Untransposed, x is cut into row ranges matching the column blocks
        of the aggregate and each term contributes K_i (R_i x_i); the
        contributions are added. Transposed, M^T x = (x^T M)^T.
        """
        x_rows = self.adapter.num_rows(x)
        if x_rows != self.num_cols():
            raise DimensionError(
                f"right_multiply: operand has {x_rows} rows, "
                f"expected {self.num_cols()} (columns of the factored matrix)"
            )
        if self.state.transposed:
            a = self.adapter
            return a.transpose(self._plain()._left_multiply_plain(a.transpose(x)))
        return self._right_multiply_plain(x)

    def left_multiply(self, x: Any) -> Any:
        """
        x @ self.

        Untransposed, each block contributes its own output columns
        ((x K_i) R_i), which are column-appended. Transposed,
        x M^T = (M x^T)^T.
        """
        x_cols = self.adapter.num_cols(x)
        if x_cols != self.num_rows():
            raise DimensionError(
                f"left_multiply: operand has {x_cols} columns, "
                f"expected {self.num_rows()} (rows of the factored matrix)"
            )
        if self.state.transposed:
            a = self.adapter
            return a.transpose(self._plain()._right_multiply_plain(a.transpose(x)))
        return self._left_multiply_plain(x)

    def _timer(self) -> Timer:
        # GPU kernels run asynchronously; sync so sections measure execution
        return Timer(sync_cuda=self.adapter.name.startswith('gpu'))

    def _right_multiply_plain(self, x: Any) -> Any:
        a = self.adapter
        f = self.factorization
        x_cols = a.num_cols(x)

        timer = self._timer()
        result = None
        if self.state is DispatchState.PLAIN:
            with timer.section('base'):
                head = a.slice(x, 0, f.base_cols, 0, x_cols)
                result = a.right_multiply(f.base, head)

        for i, ((k, r), (start, end)) in enumerate(zip(f.terms(), f.term_ranges())):
            with timer.section(f'term_{i}'):
                block = a.slice(x, start, end, 0, x_cols)
                partial = a.right_multiply(k, a.right_multiply(r, block))
                result = partial if result is None else a.matrix_add(result, partial)

        timer.log(logger, 'right_multiply')
        return result

    def _left_multiply_plain(self, x: Any) -> Any:
        a = self.adapter
        f = self.factorization

        timer = self._timer()
        result = None
        if self.state is DispatchState.PLAIN:
            with timer.section('base'):
                result = a.left_multiply(f.base, x)

        for i, (k, r) in enumerate(f.terms()):
            with timer.section(f'term_{i}'):
                partial = a.left_multiply(r, a.left_multiply(k, x))
                result = partial if result is None else a.column_append(result, partial)

        timer.log(logger, 'left_multiply')
        return result

    # === Cross products ===

    def cross_product(self) -> Any:
        """
        self^T @ self (the Gram matrix).

        Untransposed: assembled block row by block row, one per term.
        Transposed: M M^T = S S^T + sum_i K_i (R_i R_i^T) K_i^T.
        """
        if self.state.transposed:
            return transposed_gram(self.factorization, self.adapter)
        return blockwise_gram(self.factorization, self.adapter)

    def cross_product_of(self, x: Any) -> Any:
        """self^T @ x."""
        return self.transpose().right_multiply(x)

    # === Reductions ===

    def row_sum(self) -> Any:
        """
        Row sums as an (n, 1) column.

        rowSum(S) + sum_i K_i rowSum(R_i); the reduction folds into the
        left factor.
        """
        if self.state.transposed:
            return self.adapter.transpose(self._plain()._column_sum_plain())
        return self._row_sum_plain()

    def column_sum(self) -> Any:
        """
        Column sums as a (1, m) row.

        colSum(S) followed by colSum(K_i) R_i for each term; the reduction
        folds into the right factor.
        """
        if self.state.transposed:
            return self.adapter.transpose(self._plain()._row_sum_plain())
        return self._column_sum_plain()

    def _row_sum_plain(self) -> Any:
        a = self.adapter
        f = self.factorization
        result = a.row_sum(f.base) if self.state is DispatchState.PLAIN else None
        for k, r in f.terms():
            partial = a.right_multiply(k, a.row_sum(r))
            result = partial if result is None else a.matrix_add(result, partial)
        return result

    def _column_sum_plain(self) -> Any:
        a = self.adapter
        f = self.factorization
        result = a.column_sum(f.base) if self.state is DispatchState.PLAIN else None
        for k, r in f.terms():
            partial = a.left_multiply(r, a.column_sum(k))
            result = partial if result is None else a.column_append(result, partial)
        return result

    def element_wise_sum(self) -> float:
        """Sum of all entries. Independent of the transpose flag."""
        a = self.adapter
        f = self.factorization
        total = 0.0 if f.base_absent else a.element_wise_sum(f.base)
        for k, r in f.terms():
            total += a.element_wise_sum(a.right_multiply(a.column_sum(k), a.row_sum(r)))
        return total

    # === Inspection ===

    def materialize(self) -> Any:
        """
        Form the dense aggregate on the backend.

        Defeats the purpose of the factorization; meant for checking small
        matrices.
        """
        a = self.adapter
        f = self.factorization
        blocks = [] if f.base_absent else [f.base]
        blocks.extend(a.right_multiply(k, r) for k, r in f.terms())
        dense = reduce(a.column_append, blocks)
        return a.transpose(dense) if self.transposed else dense

    # === Unsupported ===

    def row_append(self, other: Any) -> Any:
        raise _unsupported('row_append')

    def column_append(self, other: Any) -> Any:
        raise _unsupported('column_append')

    def matrix_add(self, other: Any) -> Any:
        raise _unsupported('matrix_add')

    def slice(self, row_start: int, row_end: int, col_start: int, col_end: int) -> Any:
        raise _unsupported('slice')

    def invert(self) -> Any:
        raise _unsupported('invert')

    def diagonal(self) -> Any:
        raise _unsupported('diagonal')

    # === Named-operation entry point ===

    @staticmethod
    def members() -> tuple[str, ...]:
        """Operation names accepted by invoke()."""
        return ('build',) + tuple(_MEMBER_ARITY)

    def invoke(self, member: str, *arguments: Any) -> Any:
        """
        Invoke an operation by name.

        Mirrors the backend surface so callers that only know operation
        names can treat a FactoredMatrix like a backend value. 'build'
        takes (base, left_factors, right_factors, base_absent, backend)
        and returns a new, unrelated FactoredMatrix.

        Raises:
            UnsupportedOperationError: Unknown or unsupported member
            ValidationError: Wrong number of arguments
        """
        if member == 'build':
            if len(arguments) != _BUILD_ARITY:
                raise ValidationError(
                    f"build: expected {_BUILD_ARITY} arguments, got {len(arguments)}"
                )
            return FactoredMatrix.build(*arguments)

        if member in _UNSUPPORTED:
            raise _unsupported(member)

        arity = _MEMBER_ARITY.get(member)
        if arity is None:
            raise UnsupportedOperationError(
                f"unknown operation {member!r}; available: {', '.join(self.members())}",
                operation=member,
            )
        if len(arguments) != arity:
            raise ValidationError(
                f"{member}: expected {arity} arguments, got {len(arguments)}"
            )
        return getattr(self, member)(*arguments)
