"""Command sink interface shared by the compute backends.

A sink owns the buffers and programs of one backend and executes dispatches
strictly in the order they are enqueued, so a dispatch always sees the
writes of every dispatch enqueued before it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Protocol


# Kernel programs every backend must provide
OPERATOR_PROGRAMS: tuple[str, ...] = ("advect", "divergence", "jacobi", "gradient", "splat")
DISPLAY_PROGRAMS: tuple[str, ...] = ("displayscalar", "displayvector")
PROGRAM_NAMES: tuple[str, ...] = OPERATOR_PROGRAMS + DISPLAY_PROGRAMS
# Generic full-screen-pass vertex stage
VERTEX_PROGRAM: str = "basic"


class CommandSink(ABC):
    """Ordered queue of kernel dispatches against grid-shaped buffers."""

    @abstractmethod
    def allocate(self, width: int, height: int, components: int) -> Any:
        """Create a float buffer with 1 to 4 components per cell."""

    @abstractmethod
    def deallocate(self, buffer: Any) -> None:
        """Release a buffer created by allocate()."""

    @abstractmethod
    def compile(self, name: str, source: Any, vertex_source: Any = None) -> Any:
        """Turn program source into something dispatch() accepts.

        Raises:
            KernelLoadError: If the source does not compile.
        """

    @abstractmethod
    def dispatch(self, program: Any, inputs: dict[str, Any], output: Any | None, params: dict[str, Any]) -> None:
        """Run program over every cell of output.

        Args:
            program: Compiled program
            inputs: Sampled buffers by name
            output: Target buffer, or None for the visible surface
            params: Scalar and vector parameters by name

        Raises:
            BackendError: If the dispatch cannot be executed.
        """

    @abstractmethod
    def clear(self, buffer: Any) -> None:
        """Set every component of every cell to zero."""


class KernelSource(Protocol):
    """Supplies program sources by name, asynchronously."""

    def load(self, names: tuple[str, ...]) -> Future[dict[str, Any]]:
        ...
