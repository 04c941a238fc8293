"""
Shared compute infrastructure for pyfactorized.

IMPORTANT: This is NOT where numeric backends live. Those go in
pyfactorized/backends/. This module contains device selection, timing
and tolerance tiers shared by the backends and the test suite.

Submodules:
    device: Hardware detection and device selection
    timing: Section timing for rewrite diagnostics
    tolerances: Comparison tolerances per compute path
"""

from pyfactorized.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pyfactorized.core.compute.timing import Timer
from pyfactorized.core.compute.tolerances import (
    ToleranceTier,
    CPU_FP64,
    GPU_FP64,
    GPU_FP32,
    select_tolerance,
)

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
    # Tolerances
    "ToleranceTier",
    "CPU_FP64",
    "GPU_FP64",
    "GPU_FP32",
    "select_tolerance",
]
