"""Gradient operator - subtract a scalar field's gradient from a vector field."""

from typing import Any

from ..Grid import Grid
from ..Slab import Slab
from ..backend.CommandSink import CommandSink


class Gradient():
    """w' = w - grad(p), the final step of the projection."""

    def __init__(self, program: Any, grid: Grid) -> None:
        self.program: Any = program
        self.grid: Grid = grid

    def compute(self, sink: CommandSink, p: Slab, w: Slab, output: Slab) -> None:
        output.apply(sink, self.program,
            {"p": p.read, "w": w.read},
            {"grid_size": self.grid.size, "half_rdx": 0.5})
