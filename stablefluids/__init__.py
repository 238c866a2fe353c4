"""Real-time 2D stable fluids.

The OpenGL window and backend live in `stablefluids.render` and
`stablefluids.backend.gl` and are imported on demand.
"""

from .Exceptions import FluidError, ConfigError, KernelLoadError, BackendError
from .ConfigBase import ConfigBase, config_field
from .Grid import Grid
from .Slab import Slab
from .Solver import Solver
from .Display import Display, DisplayConfig, DisplayField
from .Settings import Settings, WindowConfig
from .input import Mouse, Motion, Button

__all__ = [
    "FluidError", "ConfigError", "KernelLoadError", "BackendError",
    "ConfigBase", "config_field",
    "Grid", "Slab", "Solver",
    "Display", "DisplayConfig", "DisplayField",
    "Settings", "WindowConfig",
    "Mouse", "Motion", "Button",
]
