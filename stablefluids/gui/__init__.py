from .ControlSurface import ControlSurface, DISSIPATION_PRESETS, INK_PRESETS

__all__ = ["ControlSurface", "DISSIPATION_PRESETS", "INK_PRESETS"]
