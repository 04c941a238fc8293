"""
Execution timing utilities.

Per-section wall-clock timing for the factored-matrix rewrites, with
optional CUDA synchronization so GPU kernels are measured rather than
just their launch.
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Accumulating section timer.

    Usage:
        timer = Timer()

        with timer.section('term_0'):
            partial = adapter.right_multiply(r, x_slice)

        timer.log(logger, 'right_multiply')
        # DEBUG right_multiply: term_0=0.0003s
    """

    def __init__(self, sync_cuda: bool = False):
        """
        Args:
            sync_cuda: If True, synchronize CUDA around each section.
        """
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}

    def _sync(self) -> None:
        if self._sync_cuda:
            try:
                import torch
                if torch.cuda.is_available():
                    torch.cuda.synchronize()
            except ImportError:
                pass

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """
        Time a named section. Repeated names accumulate.

        Args:
            name: Section identifier (used as key in sections)
        """
        self._sync()
        start = time.perf_counter()
        try:
            yield
        finally:
            self._sync()
            elapsed = time.perf_counter() - start
            self._sections[name] = self._sections.get(name, 0.0) + elapsed

    @property
    def sections(self) -> dict[str, float]:
        """Copy of the accumulated section timings, in seconds."""
        return dict(self._sections)

    @property
    def total(self) -> float:
        """Sum over all sections."""
        return sum(self._sections.values())

    def log(self, logger: logging.Logger, label: str) -> None:
        """Emit the section timings as one DEBUG record."""
        if not logger.isEnabledFor(logging.DEBUG):
            return
        parts = ", ".join(f"{k}={v:.4f}s" for k, v in self._sections.items())
        logger.debug("%s: %s (total %.4fs)", label, parts, self.total)
