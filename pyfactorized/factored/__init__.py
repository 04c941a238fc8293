"""
Factored matrix module.

A matrix held as a base block plus correction terms K_i R_i, with the
matrix-algebra operation set implemented on the factors.

Public API:
    build(base, left_factors, right_factors, base_absent, backend)
    from_arrays(base, left_factors, right_factors, ...)
    invoke(target, member, *args)   - name-based dispatch
    get_backend(backend)            - backend selection
"""

from pyfactorized.factored.design import Factorization
from pyfactorized.factored.matrix import DispatchState, FactoredMatrix
from pyfactorized.factored.solvers import (
    build,
    from_arrays,
    get_backend,
    invoke,
)

__all__ = [
    "build",
    "from_arrays",
    "get_backend",
    "invoke",
    "DispatchState",
    "Factorization",
    "FactoredMatrix",
]
