"""Interface shared by the five slab operators."""

from typing import Any, Protocol, runtime_checkable

from ..Grid import Grid
from ..backend.CommandSink import CommandSink


@runtime_checkable
class SlabOperator(Protocol):
    """A compiled kernel program bound to a grid.

    compute() enqueues one or more dispatches on the sink and returns
    nothing; all state lives in the slabs it is given.
    """

    program: Any
    grid: Grid

    def compute(self, sink: CommandSink, *slabs: Any, **kwargs: Any) -> None:
        ...
