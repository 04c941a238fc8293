"""
Tolerance tiers for numerical comparison.

Defines precision expectations for different compute paths:
- CPU FP64 (reference): rewrites agree with the materialized product
  to near machine precision
- GPU FP64: same as CPU
- GPU FP32: relaxed for single-precision arithmetic

Used by the test suite to compare factored results with dense references.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, matches dense reference',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

# Block rewrites reorder the summation, so FP32 drifts further than a
# single dense matmul would.
GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-4,
    name='gpu_fp32',
    description='GPU single precision',
)


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend name."""
    if 'gpu' in backend_name:
        if 'fp64' in backend_name:
            return GPU_FP64
        return GPU_FP32
    return CPU_FP64
