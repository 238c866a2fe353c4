"""Splat operator - localized additive injection of force or colour."""

from dataclasses import dataclass
from typing import Any

from ..ConfigBase import ConfigBase, config_field
from ..Grid import Grid
from ..Slab import Slab
from ..backend.CommandSink import CommandSink


@dataclass
class SplatConfig(ConfigBase):
    radius: float = config_field(
        6.0, min=0.1, max=100.0, step=1.0,
        description="Splat radius in grid cells")
    ink: tuple[float, float, float] = config_field(
        (0.0, 0.06, 0.19),
        description="Colour injected into the density field")


class Splat():
    """Add `color` around `point`, falling off to zero at the radius."""

    def __init__(self, program: Any, grid: Grid, config: SplatConfig | None = None) -> None:
        self.program: Any = program
        self.grid: Grid = grid
        self.config: SplatConfig = config or SplatConfig()

    def compute(self, sink: CommandSink, read: Slab, color: tuple[float, ...], point: tuple[float, float],
                output: Slab) -> None:
        output.apply(sink, self.program,
            {"read": read.read},
            {
                "grid_size": self.grid.size,
                "color": tuple(float(c) for c in color),
                "point": (float(point[0]), float(point[1])),
                "radius": self.config.radius,
            })
