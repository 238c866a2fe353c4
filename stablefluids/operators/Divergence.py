"""Divergence operator."""

from typing import Any

from ..Grid import Grid
from ..Slab import Slab
from ..backend.CommandSink import CommandSink


class Divergence():
    """Central-difference divergence of a vector field into a scalar field."""

    def __init__(self, program: Any, grid: Grid) -> None:
        self.program: Any = program
        self.grid: Grid = grid

    def compute(self, sink: CommandSink, velocity: Slab, divergence: Slab) -> None:
        divergence.apply(sink, self.program,
            {"velocity": velocity.read},
            {"grid_size": self.grid.size, "half_rdx": 0.5})
