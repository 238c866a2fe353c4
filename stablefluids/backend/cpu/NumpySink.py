"""Command sink that executes kernels immediately on numpy arrays."""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from ...Exceptions import BackendError, KernelLoadError
from ..CommandSink import CommandSink


class NumpyBuffer():
    """A float32 field shaped (height, width, components)."""

    def __init__(self, width: int, height: int, components: int) -> None:
        self.width: int = width
        self.height: int = height
        self.components: int = components
        self.data: np.ndarray = np.zeros((height, width, components), dtype=np.float32)
        self.allocated: bool = True

    def __repr__(self) -> str:
        return f"NumpyBuffer({self.width}x{self.height}x{self.components})"


class NumpyProgram():
    def __init__(self, name: str, kernel: Callable[..., np.ndarray]) -> None:
        self.name: str = name
        self.kernel: Callable[..., np.ndarray] = kernel

    def __repr__(self) -> str:
        return f"NumpyProgram({self.name})"


class NumpySink(CommandSink):
    """Reference backend: every dispatch runs synchronously on the CPU.

    Running each command as it is enqueued trivially preserves enqueue order.
    Dispatching to the visible surface (output None) stores an RGB image
    clipped to [0, 1] in `frame`.
    """

    def __init__(self) -> None:
        self.frame: np.ndarray | None = None
        self.dispatch_count: int = 0

    def allocate(self, width: int, height: int, components: int) -> NumpyBuffer:
        if width <= 0 or height <= 0:
            raise BackendError(f"Invalid buffer size {width}x{height}")
        if not 1 <= components <= 4:
            raise BackendError(f"Invalid component count {components}")
        return NumpyBuffer(width, height, components)

    def deallocate(self, buffer: NumpyBuffer) -> None:
        buffer.allocated = False

    def compile(self, name: str, source: Any, vertex_source: Any = None) -> NumpyProgram:
        if not callable(source):
            raise KernelLoadError(f"Kernel '{name}' is not callable")
        return NumpyProgram(name, source)

    def dispatch(self, program: NumpyProgram, inputs: dict[str, NumpyBuffer], output: NumpyBuffer | None,
                 params: dict[str, Any]) -> None:
        for name, buffer in inputs.items():
            if not buffer.allocated:
                raise BackendError(f"{program.name}: input '{name}' is not allocated")
        if output is not None and not output.allocated:
            raise BackendError(f"{program.name}: output is not allocated")

        arrays = {name: buffer.data for name, buffer in inputs.items()}
        try:
            result = program.kernel(**arrays, **params)
        except (TypeError, ValueError, IndexError) as e:
            raise BackendError(f"{program.name} dispatch failed: {e}") from e
        self.dispatch_count += 1

        if output is None:
            self.frame = np.clip(result, 0.0, 1.0).astype(np.float32)
            return

        expected = output.data.shape[:2]
        if result.shape[:2] != expected:
            raise BackendError(f"{program.name}: result shape {result.shape[:2]} does not match output {expected}")
        # Fit the result to the output's channel count, dropping or zero-filling
        count = min(result.shape[-1], output.components)
        output.data[..., :count] = result[..., :count]
        output.data[..., count:] = 0.0

    def clear(self, buffer: NumpyBuffer) -> None:
        buffer.data.fill(0.0)

    def read(self, buffer: NumpyBuffer) -> np.ndarray:
        """Copy of the buffer contents, for tests and debugging."""
        return buffer.data.copy()
