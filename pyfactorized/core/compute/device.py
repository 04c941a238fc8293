"""
Hardware detection and device selection.

Decides where the GPU backend places its tensors. Torch is imported
lazily so the CPU path never pays for it.
"""

from dataclasses import dataclass
from typing import Literal, Any
import platform


@dataclass(frozen=True)
class DeviceInfo:
    """
    Information about a compute device.

    Attributes:
        device_type: Type of device ('cpu', 'cuda', 'mps')
        device_index: Device index (None for CPU)
        name: Human-readable device name
        supports_fp64: Whether float64 kernels are available on the device
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    supports_fp64: bool

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name})"

    @property
    def is_gpu(self) -> bool:
        """True if this is a GPU device."""
        return self.device_type in ('cuda', 'mps')

    def torch_device(self) -> Any:
        """The matching torch.device."""
        import torch

        if self.device_type == 'cuda':
            return torch.device(f'cuda:{self.device_index or 0}')
        return torch.device(self.device_type)


def detect_gpu() -> DeviceInfo | None:
    """
    Detect available GPU, if any.

    Returns:
        DeviceInfo for the best available GPU, or None if no GPU (or no
        torch) is available.

    Priority: CUDA > MPS (Apple Silicon)
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        idx = torch.cuda.current_device()
        return DeviceInfo(
            device_type='cuda',
            device_index=idx,
            name=torch.cuda.get_device_properties(idx).name,
            supports_fp64=True,
        )

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        # MPS has no float64 kernels
        return DeviceInfo(
            device_type='mps',
            device_index=0,
            name='Apple Silicon GPU',
            supports_fp64=False,
        )

    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"

    return DeviceInfo(
        device_type='cpu',
        device_index=None,
        name=processor,
        supports_fp64=True,
    )


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: Device preference
            - 'cpu': Always use CPU
            - 'gpu': Require GPU (raises if unavailable)
            - 'auto': Use GPU if available, else CPU

    Returns:
        DeviceInfo for selected device

    Raises:
        RuntimeError: If 'gpu' requested but no GPU available
    """
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()

    if prefer == 'gpu':
        if gpu is None:
            raise RuntimeError(
                "GPU requested but no GPU available. "
                "Ensure PyTorch is installed with CUDA/MPS support."
            )
        return gpu

    return gpu if gpu is not None else get_cpu_info()
