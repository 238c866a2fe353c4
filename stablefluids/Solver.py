"""Stable fluids solver.

Per-frame pipeline:
    1. Self-advect velocity (no dissipation)
    2. Advect density through the updated velocity (configured dissipation)
    3. Inject forces and ink from queued pointer motions
    4. Project: divergence, Poisson solve for pressure, subtract gradient
"""

from __future__ import annotations

import logging
from typing import Any

from .Exceptions import KernelLoadError
from .Grid import Grid
from .Slab import Slab
from .backend.CommandSink import CommandSink, OPERATOR_PROGRAMS
from .input.Mouse import Mouse
from .operators import (
    Advect, AdvectConfig, Divergence, Jacobi, JacobiConfig, Gradient, Splat, SplatConfig
)


class Solver():
    """Owns the four simulation slabs and the operator set.

    Fields:
        - velocity (2 components)
        - density (3 components, the visible "ink")
        - velocity_divergence (1 component, rebuilt every frame)
        - pressure (1 component, kept between frames)
    """

    def __init__(self, grid: Grid, window_size: tuple[float, float],
                 velocity: Slab, density: Slab, velocity_divergence: Slab, pressure: Slab,
                 advect: Advect, divergence: Divergence, jacobi: Jacobi, gradient: Gradient, splat: Splat) -> None:
        self.grid: Grid = grid
        self.window_size: tuple[float, float] = window_size

        self.velocity: Slab = velocity
        self.density: Slab = density
        self.velocity_divergence: Slab = velocity_divergence
        self.pressure: Slab = pressure

        self.advect: Advect = advect
        self.divergence: Divergence = divergence
        self.jacobi: Jacobi = jacobi
        self.gradient: Gradient = gradient
        self.splat: Splat = splat

    @property
    def ink(self) -> tuple[float, float, float]:
        return self.splat.config.ink

    @property
    def slabs(self) -> dict[str, Slab]:
        return {
            "velocity": self.velocity,
            "density": self.density,
            "divergence": self.velocity_divergence,
            "pressure": self.pressure,
        }

    # ========== Update Pipeline ==========

    def step(self, sink: CommandSink, mouse: Mouse) -> None:
        # Only the carried quantity dissipates, never momentum
        self.advect.compute(sink, self.velocity, self.velocity, self.velocity, dissipation=1.0)
        self.advect.compute(sink, self.velocity, self.density, self.density)

        self.add_forces(sink, mouse)
        self.project(sink)

    def add_forces(self, sink: CommandSink, mouse: Mouse) -> None:
        window_width, window_height = self.window_size
        grid_width, grid_height = self.grid.size

        for motion in mouse.drain():
            # Window origin is top-left, grid origin is bottom-left
            point = (
                motion.position[0] / window_width * grid_width,
                (window_height - motion.position[1]) / window_height * grid_height,
            )

            if motion.left:
                force = (motion.drag[0], -motion.drag[1], 0.0)
                self.splat.compute(sink, self.velocity, force, point, self.velocity)

            if motion.right:
                self.splat.compute(sink, self.density, self.ink, point, self.density)

    def project(self, sink: CommandSink) -> None:
        """Solve the pressure Poisson equation and subtract its gradient."""
        self.divergence.compute(sink, self.velocity, self.velocity_divergence)

        # Zero is the initial guess for the Poisson solve
        if not self.jacobi.config.warm_start:
            self.pressure.clear(sink)
        self.jacobi.compute(sink, self.pressure, self.velocity_divergence, self.pressure)

        self.gradient.compute(sink, self.pressure, self.velocity, self.velocity)

    def reset(self, sink: CommandSink) -> None:
        """Zero every field."""
        for slab in self.slabs.values():
            slab.reset(sink)
        logging.info("Fluid simulation reset")

    def deallocate(self, sink: CommandSink) -> None:
        for slab in self.slabs.values():
            slab.deallocate(sink)

    # ========== Construction ==========

    @classmethod
    def make(cls, grid: Grid, window_size: tuple[float, float], sink: CommandSink, programs: dict[str, Any],
             advect_config: AdvectConfig | None = None,
             jacobi_config: JacobiConfig | None = None,
             splat_config: SplatConfig | None = None) -> Solver:
        """Allocate the slabs on sink and bind the operators to their programs.

        Raises:
            KernelLoadError: If any operator program is missing.
            ConfigError: If a config value is out of range.
        """
        missing = [name for name in OPERATOR_PROGRAMS if programs.get(name) is None]
        if missing:
            raise KernelLoadError(f"Cannot build solver, missing programs: {', '.join(missing)}")

        advect_config = advect_config or AdvectConfig()
        jacobi_config = jacobi_config or JacobiConfig()
        splat_config = splat_config or SplatConfig()
        for config in (grid, advect_config, jacobi_config, splat_config):
            config.validate()

        w, h = grid.size
        solver = cls(
            grid, window_size,
            velocity=Slab.make(sink, w, h, 2),
            density=Slab.make(sink, w, h, 3),
            velocity_divergence=Slab.make(sink, w, h, 1),
            pressure=Slab.make(sink, w, h, 1),
            advect=Advect(programs["advect"], grid, advect_config),
            divergence=Divergence(programs["divergence"], grid),
            jacobi=Jacobi(programs["jacobi"], grid, jacobi_config),
            gradient=Gradient(programs["gradient"], grid),
            splat=Splat(programs["splat"], grid, splat_config),
        )
        logging.info(f"Fluid solver allocated: {w}x{h} cells")
        return solver
