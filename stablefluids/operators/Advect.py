"""Advect operator - semi-Lagrangian transport with dissipation."""

from dataclasses import dataclass
from typing import Any

from ..ConfigBase import ConfigBase, config_field
from ..Grid import Grid
from ..Slab import Slab
from ..backend.CommandSink import CommandSink


@dataclass
class AdvectConfig(ConfigBase):
    timestep: float = config_field(
        1.0, min=0.001, max=10.0, step=0.1,
        description="Backtrace distance per frame, in cells per unit of velocity")
    dissipation: float = config_field(
        0.998, min=0.001, max=1.0, step=0.001,
        description="Per-frame decay of advected quantities (1 = no decay)")


class Advect():
    """Transport a field along a velocity field.

    For each cell: trace back along `velocity` by `timestep`, sample the
    advected field there with bilinear filtering and scale by dissipation.
    """

    def __init__(self, program: Any, grid: Grid, config: AdvectConfig | None = None) -> None:
        self.program: Any = program
        self.grid: Grid = grid
        self.config: AdvectConfig = config or AdvectConfig()

    def compute(self, sink: CommandSink, velocity: Slab, advected: Slab, output: Slab,
                dissipation: float | None = None) -> None:
        """Advect `advected` through `velocity` into `output`.

        Args:
            dissipation: Overrides the configured dissipation for this call
        """
        output.apply(sink, self.program,
            {"velocity": velocity.read, "advected": advected.read},
            {
                "grid_size": self.grid.size,
                "timestep": self.config.timestep,
                "dissipation": self.config.dissipation if dissipation is None else dissipation,
            })
