"""Display pass - maps a slab's read buffer to visible colour."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .ConfigBase import ConfigBase, config_field
from .Exceptions import KernelLoadError
from .Slab import Slab
from .backend.CommandSink import CommandSink


class DisplayField(Enum):
    DENSITY =       0
    VELOCITY =      1
    DIVERGENCE =    2
    PRESSURE =      3


@dataclass
class DisplayConfig(ConfigBase):
    field: DisplayField = config_field(DisplayField.DENSITY, description="Simulation field shown on screen")


class Display():
    """Render the chosen solver field to the sink's visible surface.

    Signed fields (velocity, divergence, pressure) are shown with scale and
    bias 0.5 so that zero maps to mid grey; density is shown as is.
    """

    # field -> (program name, scale, bias)
    PASSES: dict[DisplayField, tuple[str, float, float]] = {
        DisplayField.DENSITY:       ("displayvector", 1.0, 0.0),
        DisplayField.VELOCITY:      ("displayvector", 0.5, 0.5),
        DisplayField.DIVERGENCE:    ("displayscalar", 0.5, 0.5),
        DisplayField.PRESSURE:      ("displayscalar", 0.5, 0.5),
    }

    SLAB_NAMES: dict[DisplayField, str] = {
        DisplayField.DENSITY:       "density",
        DisplayField.VELOCITY:      "velocity",
        DisplayField.DIVERGENCE:    "divergence",
        DisplayField.PRESSURE:      "pressure",
    }

    def __init__(self, programs: dict[str, Any], config: DisplayConfig | None = None) -> None:
        missing = [name for name, _, _ in self.PASSES.values() if programs.get(name) is None]
        if missing:
            raise KernelLoadError(f"Cannot build display, missing programs: {', '.join(sorted(set(missing)))}")
        self.programs: dict[str, Any] = programs
        self.config: DisplayConfig = config or DisplayConfig()

    def render(self, sink: CommandSink, slabs: dict[str, Slab]) -> None:
        field = self.config.field
        self.render_slab(sink, slabs[self.SLAB_NAMES[field]], field)

    def render_slab(self, sink: CommandSink, slab: Slab, field: DisplayField) -> None:
        program_name, scale, bias = self.PASSES[field]
        sink.dispatch(self.programs[program_name], {"read": slab.read}, None, {"scale": scale, "bias": bias})
