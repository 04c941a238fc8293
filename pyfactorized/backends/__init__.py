"""
Numeric backends.

Available backends:
    CPUMatrixBackend: CPU reference implementation (NumPy + SciPy sparse)
    GPUMatrixBackend: GPU implementation using PyTorch (imported lazily)

BackendAdapter binds any object exposing the MatrixBackend surface.
"""

from pyfactorized.backends.adapter import BackendAdapter
from pyfactorized.backends.cpu import CPUMatrixBackend

__all__ = [
    "BackendAdapter",
    "CPUMatrixBackend",
]
