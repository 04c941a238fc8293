"""
Core infrastructure for pyfactorized.

Shared abstractions used by the backends and the factored-matrix engine.

Key components:
    protocols: MatrixBackend protocol (the numeric capability surface)
    capabilities: Operation name constants
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device selection, timing, tolerance tiers
"""

from pyfactorized.core.protocols import MatrixBackend
from pyfactorized.core.exceptions import (
    PyFactorizedError,
    ValidationError,
    DimensionError,
    MalformedFactorizationError,
    BackendIncompatibleError,
    UnsupportedOperationError,
)

__all__ = [
    # Protocols
    "MatrixBackend",
    # Exceptions
    "PyFactorizedError",
    "ValidationError",
    "DimensionError",
    "MalformedFactorizationError",
    "BackendIncompatibleError",
    "UnsupportedOperationError",
]
