"""
Factorization: validated input of a factored matrix.

Holds the base block and the correction-term pairs together with the
block dimensions, which are read from the backend once at construction
and reused by every rewrite (column boundaries for slicing the operand of
a multiplication, derived shape of the aggregate).

The aggregate described is the column-block matrix

    [ S | K_0 R_0 | K_1 R_1 | ... ]      (base present)
    [ K_0 R_0 | K_1 R_1 | ... ]          (base absent)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator
import numpy as np

from pyfactorized.backends.adapter import BackendAdapter
from pyfactorized.core.exceptions import MalformedFactorizationError, ValidationError
from pyfactorized.core.validation import check_factor_counts, check_term_shapes


def _block_shape(
    adapter: BackendAdapter, value: Any, label: str, term: int | None
) -> tuple[int, int]:
    """(rows, cols) of one block; a missing value or one without a second axis is malformed."""
    if value is None:
        raise MalformedFactorizationError(
            f"{label} is None; pass base_absent=True if there is no base",
            term=term,
        )
    try:
        return adapter.num_rows(value), adapter.num_cols(value)
    except IndexError as e:
        raise MalformedFactorizationError(
            f"{label}: expected a 2D matrix, got a value without a second axis",
            term=term,
        ) from e


@dataclass(frozen=True, eq=False)
class Factorization:
    """
    Immutable factorization with its block dimensions.

    Construction:
        Factorization.from_factors(base, left_factors, right_factors,
                                   base_absent, adapter)
    """
    base: Any
    left_factors: tuple[Any, ...]
    right_factors: tuple[Any, ...]
    base_absent: bool
    n_rows: int
    base_cols: int
    term_widths: tuple[int, ...]

    @classmethod
    def from_factors(
        cls,
        base: Any,
        left_factors: Iterable[Any],
        right_factors: Iterable[Any],
        base_absent: bool,
        adapter: BackendAdapter,
    ) -> Factorization:
        """
        Validate the factors and record their dimensions.

        Parameters
        ----------
        base : backend value or None
            The base block S. Ignored (and may be None) when base_absent.
        left_factors, right_factors : iterables of backend values
            K_i and R_i, paired by position.
        base_absent : bool
            Whether the aggregate starts from the correction terms.
        adapter : BackendAdapter
            Used for the dimension queries.

        Raises
        ------
        ValidationError
            If base_absent is not a boolean.
        MalformedFactorizationError
            If the factor sequences differ in length, describe no matrix,
            contain a missing or non-2D block, or contain blocks that do
            not line up.
        BackendIncompatibleError
            If the backend cannot answer the dimension queries.
        """
        if not isinstance(base_absent, (bool, np.bool_)):
            raise ValidationError(
                f"base_absent: expected a boolean, got {type(base_absent).__name__}"
            )
        base_absent = bool(base_absent)
        left = tuple(left_factors)
        right = tuple(right_factors)

        check_factor_counts(left, right, base_absent)

        base_shape = None
        if not base_absent:
            base_shape = _block_shape(adapter, base, "base", None)

        term_shapes = [
            (
                _block_shape(adapter, k, f"left_factors[{i}]", i),
                _block_shape(adapter, r, f"right_factors[{i}]", i),
            )
            for i, (k, r) in enumerate(zip(left, right))
        ]
        check_term_shapes(base_shape, term_shapes)

        if base_shape is not None:
            n_rows, base_cols = base_shape
        else:
            n_rows, base_cols = term_shapes[0][0][0], 0

        return cls(
            base=base,
            left_factors=left,
            right_factors=right,
            base_absent=base_absent,
            n_rows=n_rows,
            base_cols=base_cols,
            term_widths=tuple(r_shape[1] for _, r_shape in term_shapes),
        )

    @property
    def rank(self) -> int:
        """Number of correction terms r."""
        return len(self.left_factors)

    @property
    def n_cols(self) -> int:
        """Columns of the (untransposed) aggregate."""
        return self.base_cols + sum(self.term_widths)

    def terms(self) -> Iterator[tuple[Any, Any]]:
        """Yield (K_i, R_i) pairs in order."""
        return zip(self.left_factors, self.right_factors)

    def term_ranges(self) -> Iterator[tuple[int, int]]:
        """
        Half-open column range of each term's block in the aggregate.

        The base occupies [0, base_cols); term i occupies
        [c_i, c_i + width(R_i)) with c_0 = base_cols.
        """
        start = self.base_cols
        for width in self.term_widths:
            yield start, start + width
            start += width

    def __repr__(self) -> str:
        base = "absent" if self.base_absent else f"{self.n_rows}x{self.base_cols}"
        return (
            f"Factorization(n={self.n_rows}, base={base}, "
            f"r={self.rank}, widths={list(self.term_widths)})"
        )
