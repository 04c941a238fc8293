"""
Gram matrix (cross product) of a factored matrix.

Plain orientation builds M^T M one block row per correction term:

    [ G_{i-1}   Y_i^T ]
    [ Y_i       D_i   ]

where G_{i-1} is the Gram matrix of the blocks seen so far,
Y_i = [ R_i^T K_i^T S | R_i^T K_i^T K_0 R_0 | ... | R_i^T K_i^T K_{i-1} R_{i-1} ]
and D_i = (diag(sqrt(colSum(K_i))) R_i)^T (diag(sqrt(colSum(K_i))) R_i).

D_i equals R_i^T K_i^T K_i R_i only when K_i is an indicator matrix
(one 1 per row), which is the contract for left factors.

Transposed orientation has no block structure to exploit and is formed
directly as M M^T = S S^T + sum_i K_i (R_i R_i^T) K_i^T.
"""

from __future__ import annotations

from functools import reduce
from typing import Any

from pyfactorized.backends.adapter import BackendAdapter
from pyfactorized.factored.design import Factorization


def _diagonal_block(adapter: BackendAdapter, k: Any, r: Any) -> Any:
    weights = adapter.diagonal(adapter.elementwise_sqrt(adapter.column_sum(k)))
    return adapter.cross_product(adapter.right_multiply(weights, r))


def _cross_term(adapter: BackendAdapter, k_i: Any, r_i: Any, k_j: Any, r_j: Any) -> Any:
    """R_i^T K_i^T K_j R_j as a chain of a^T b products."""
    kk = adapter.cross_product_of(k_j, k_i)      # K_j^T K_i
    kkr = adapter.cross_product_of(kk, r_j)      # K_i^T K_j R_j
    return adapter.cross_product_of(r_i, kkr)


def blockwise_gram(factorization: Factorization, adapter: BackendAdapter) -> Any:
    """M^T M for an untransposed factored matrix."""
    f = factorization
    terms = list(f.terms())

    result = None if f.base_absent else adapter.cross_product(f.base)

    for i, (k_i, r_i) in enumerate(terms):
        diag = _diagonal_block(adapter, k_i, r_i)
        if result is None:
            result = diag
            continue

        row = []
        if not f.base_absent:
            row.append(adapter.cross_product_of(r_i, adapter.cross_product_of(k_i, f.base)))
        for k_j, r_j in terms[:i]:
            row.append(_cross_term(adapter, k_i, r_i, k_j, r_j))
        off_diag = reduce(adapter.column_append, row)

        upper = adapter.column_append(result, adapter.transpose(off_diag))
        lower = adapter.column_append(off_diag, diag)
        result = adapter.row_append(upper, lower)

    return result


def transposed_gram(factorization: Factorization, adapter: BackendAdapter) -> Any:
    """M M^T, i.e. the Gram matrix of a transposed factored matrix."""
    f = factorization

    result = None
    if not f.base_absent:
        result = adapter.cross_product(adapter.transpose(f.base))

    for k, r in f.terms():
        inner = adapter.cross_product(adapter.transpose(r))
        part = adapter.right_multiply(adapter.right_multiply(k, inner), adapter.transpose(k))
        result = part if result is None else adapter.matrix_add(result, part)

    return result
