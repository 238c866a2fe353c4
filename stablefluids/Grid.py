"""Simulation grid description."""

from dataclasses import dataclass

from .ConfigBase import ConfigBase, config_field


@dataclass
class Grid(ConfigBase):
    """Simulation resolution plus a display magnification.

    Width and height are fixed for the lifetime of the simulation; only the
    display scale may change, and it never enters the simulation math.
    """

    width: int = config_field(512, fixed=True, min=1, description="Grid width in cells")
    height: int = config_field(256, fixed=True, min=1, description="Grid height in cells")
    scale: float = config_field(1.0, min=0.25, max=8.0, step=0.25, description="Display magnification")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)
