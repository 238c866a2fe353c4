"""Double-buffered grid field."""

from __future__ import annotations

from typing import Any

from .backend.CommandSink import CommandSink


class Slab():
    """A 2D field stored as a read/write buffer pair.

    Kernels cannot sample the buffer they render into, so every in-place
    update renders into `write` and then swaps. Outside a dispatch `read`
    always holds the current value of the field.
    """

    def __init__(self, buffers: list[Any], components: int) -> None:
        if len(buffers) != 2:
            raise ValueError(f"Slab needs exactly two buffers, got {len(buffers)}")
        self.buffers: list[Any] = buffers
        self.components: int = components
        self.swap_state: bool = False

    @classmethod
    def make(cls, sink: CommandSink, width: int, height: int, components: int) -> Slab:
        """Allocate both buffers on the sink and clear them."""
        buffers = [sink.allocate(width, height, components), sink.allocate(width, height, components)]
        for buffer in buffers:
            sink.clear(buffer)
        return cls(buffers, components)

    @property
    def read(self) -> Any:
        return self.buffers[self.swap_state]

    @property
    def write(self) -> Any:
        return self.buffers[not self.swap_state]

    def swap(self) -> None:
        self.swap_state = not self.swap_state

    def apply(self, sink: CommandSink, program: Any, inputs: dict[str, Any], params: dict[str, Any]) -> None:
        """Dispatch program into the write buffer, then swap.

        Inputs must be resolved to buffers by the caller before this call, so
        that passing this slab's own `read` is safe.
        """
        sink.dispatch(program, inputs, self.write, params)
        self.swap()

    def clear(self, sink: CommandSink) -> None:
        """Zero the field: clear the write buffer and swap it in."""
        sink.clear(self.write)
        self.swap()

    def reset(self, sink: CommandSink) -> None:
        """Zero both buffers."""
        for buffer in self.buffers:
            sink.clear(buffer)

    def deallocate(self, sink: CommandSink) -> None:
        for buffer in self.buffers:
            sink.deallocate(buffer)
