"""
pyfactorized: factored matrix algebra on pluggable numeric backends.

A large matrix is represented as a base block plus correction terms
K_i R_i, and transpose, multiplication, cross products, reductions and
scalar maps are rewritten onto the factors, so the full matrix is never
formed. Arithmetic runs on a NumPy/SciPy CPU backend or a PyTorch GPU
backend.

Submodules:
    core: protocols, exceptions, validation, compute utilities
    backends: backend adapter and the CPU/GPU backends
    factored: FactoredMatrix and its entry points
"""

import logging

__version__ = "0.1.0"

from pyfactorized.core.exceptions import (
    PyFactorizedError,
    ValidationError,
    DimensionError,
    MalformedFactorizationError,
    BackendIncompatibleError,
    UnsupportedOperationError,
)
from pyfactorized.backends import BackendAdapter, CPUMatrixBackend
from pyfactorized.factored import (
    FactoredMatrix,
    build,
    from_arrays,
    get_backend,
    invoke,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "FactoredMatrix",
    "build",
    "from_arrays",
    "get_backend",
    "invoke",
    "BackendAdapter",
    "CPUMatrixBackend",
    "PyFactorizedError",
    "ValidationError",
    "DimensionError",
    "MalformedFactorizationError",
    "BackendIncompatibleError",
    "UnsupportedOperationError",
]
