"""Keyboard control surface for the live-tunable parameters.

Edits go straight into the config instances the solver reads, after type
conversion and clamping to each field's [min, max] metadata. The per-frame
algorithm therefore only ever sees validated values.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from ..ConfigBase import ConfigBase
from ..Display import DisplayConfig, DisplayField
from ..Grid import Grid
from ..operators import AdvectConfig, JacobiConfig, SplatConfig


DISSIPATION_PRESETS: dict[str, float] = {
    "none": 1.0,
    "slow": 0.998,
    "fast": 0.992,
    "very fast": 0.9,
}

INK_PRESETS: list[tuple[float, float, float]] = [
    (0.0, 0.06, 0.19),
    (0.19, 0.06, 0.0),
    (0.0, 0.19, 0.06),
    (0.12, 0.12, 0.12),
]


class ControlSurface():
    """Binds key presses to parameter edits.

    Keys:
        1-4     show density / velocity / divergence / pressure
        T / G   timestep up / down
        D       cycle dissipation presets
        I / K   Jacobi iterations up / down
        W       toggle pressure warm start
        = / -   splat radius up / down
        C       cycle ink colours
        ] / [   display scale up / down
        R       reset the simulation
    """

    def __init__(self, grid: Grid, advect: AdvectConfig, jacobi: JacobiConfig, splat: SplatConfig,
                 display: DisplayConfig, reset_callback: Callable[[], None] | None = None) -> None:
        self.grid: Grid = grid
        self.advect: AdvectConfig = advect
        self.jacobi: JacobiConfig = jacobi
        self.splat: SplatConfig = splat
        self.display: DisplayConfig = display
        self.reset_callback: Callable[[], None] | None = reset_callback

        fields = list(DisplayField)
        self._bindings: dict[bytes, Callable[[], None]] = {
            b'1': lambda: self.set(self.display, 'field', fields[0]),
            b'2': lambda: self.set(self.display, 'field', fields[1]),
            b'3': lambda: self.set(self.display, 'field', fields[2]),
            b'4': lambda: self.set(self.display, 'field', fields[3]),
            b'T': lambda: self.nudge(self.advect, 'timestep', 1),
            b'G': lambda: self.nudge(self.advect, 'timestep', -1),
            b'D': self.cycle_dissipation,
            b'I': lambda: self.nudge(self.jacobi, 'iterations', 1),
            b'K': lambda: self.nudge(self.jacobi, 'iterations', -1),
            b'W': lambda: self.set(self.jacobi, 'warm_start', not self.jacobi.warm_start),
            b'=': lambda: self.nudge(self.splat, 'radius', 1),
            b'-': lambda: self.nudge(self.splat, 'radius', -1),
            b'C': self.cycle_ink,
            b']': lambda: self.nudge(self.grid, 'scale', 1),
            b'[': lambda: self.nudge(self.grid, 'scale', -1),
            b'R': self.reset,
        }

    def on_key(self, key: bytes) -> None:
        """Run the action bound to key, if any. Letters match either case."""
        action = self._bindings.get(key.upper())
        if action is not None:
            action()

    def set(self, config: ConfigBase, name: str, value: Any) -> Any:
        """Convert value to the field's current type, clamp it and assign it.

        Invalid input leaves the field unchanged. Returns the field's value
        after the edit.
        """
        meta = config.info(name)
        if meta["fixed"]:
            logging.warning(f"{config.__class__.__name__}.{name} is fixed and cannot be changed")
            return meta["value"]

        try:
            converted = self._convert(meta["value"], value)
        except (ValueError, TypeError, KeyError) as e:
            logging.warning(f"Rejected {config.__class__.__name__}.{name} = {value!r}: {e}")
            return meta["value"]

        if isinstance(converted, (int, float)) and not isinstance(converted, bool):
            converted = config.clamp(name, converted)

        setattr(config, name, converted)
        logging.info(f"{meta['label']}: {converted}")
        return converted

    def nudge(self, config: ConfigBase, name: str, direction: int) -> Any:
        step = config.info(name)["step"] or 1
        return self.set(config, name, getattr(config, name) + direction * step)

    def cycle_dissipation(self) -> float:
        presets = list(DISSIPATION_PRESETS.values())
        current = self.advect.dissipation
        index = presets.index(current) if current in presets else -1
        return self.set(self.advect, 'dissipation', presets[(index + 1) % len(presets)])

    def cycle_ink(self) -> tuple[float, float, float]:
        current = tuple(self.splat.ink)
        index = INK_PRESETS.index(current) if current in INK_PRESETS else -1
        return self.set(self.splat, 'ink', INK_PRESETS[(index + 1) % len(INK_PRESETS)])

    def reset(self) -> None:
        if self.reset_callback is not None:
            self.reset_callback()

    @staticmethod
    def _convert(current: Any, value: Any) -> Any:
        if isinstance(current, Enum):
            enum_type = type(current)
            return value if isinstance(value, enum_type) else enum_type[str(value)]
        if isinstance(current, bool):
            return bool(value)
        if isinstance(current, int):
            return int(float(value))
        if isinstance(current, float):
            return float(value)
        if isinstance(current, tuple):
            converted = tuple(float(v) for v in value)
            if len(converted) != len(current):
                raise ValueError(f"expected {len(current)} components, got {len(converted)}")
            return converted
        return value
