"""Jacobi operator - iterative Poisson solver."""

from dataclasses import dataclass
from typing import Any

from ..ConfigBase import ConfigBase, config_field
from ..Grid import Grid
from ..Slab import Slab
from ..backend.CommandSink import CommandSink


@dataclass
class JacobiConfig(ConfigBase):
    iterations: int = config_field(
        50, min=0, max=500, step=10,
        description="Relaxation sweeps per frame (more = closer to incompressible, slower)")
    warm_start: bool = config_field(
        False,
        description="Start from last frame's pressure instead of zero")


class Jacobi():
    """Relaxation sweeps of the discrete Poisson equation lap(x) = b.

    Each sweep computes x' = (xL + xR + xB + xT + alpha * b) / beta with
    alpha = -1 and beta = 4 on a unit cell grid.
    """

    def __init__(self, program: Any, grid: Grid, config: JacobiConfig | None = None,
                 alpha: float = -1.0, beta: float = 4.0) -> None:
        self.program: Any = program
        self.grid: Grid = grid
        self.config: JacobiConfig = config or JacobiConfig()
        self.alpha: float = alpha
        self.beta: float = beta

    def compute(self, sink: CommandSink, x: Slab, b: Slab, output: Slab) -> None:
        """Run config.iterations sweeps, one dispatch and swap each.

        x is normally the same slab as output, so every sweep reads the
        previous sweep's result.
        """
        params = {"grid_size": self.grid.size, "alpha": self.alpha, "beta": self.beta}
        for _ in range(self.config.iterations):
            output.apply(sink, self.program, {"x": x.read, "b": b.read}, params)
