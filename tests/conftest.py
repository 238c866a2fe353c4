"""Shared fixtures: a headless numpy sink with every kernel program loaded."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from stablefluids.Grid import Grid
from stablefluids.Solver import Solver
from stablefluids.backend import load_programs
from stablefluids.backend.cpu import NumpySink, NumpyKernelSource
from stablefluids.operators import AdvectConfig, JacobiConfig, SplatConfig


@pytest.fixture
def sink() -> NumpySink:
    return NumpySink()


@pytest.fixture
def programs(sink: NumpySink) -> dict[str, Any]:
    return load_programs(sink, NumpyKernelSource())


@pytest.fixture
def make_solver(sink: NumpySink, programs: dict[str, Any]) -> Callable[..., Solver]:
    def _make(width: int = 8, height: int = 8, window_size: tuple[float, float] = (8.0, 8.0),
              dissipation: float = 1.0, iterations: int = 0, warm_start: bool = False,
              radius: float = 1.0) -> Solver:
        return Solver.make(
            Grid(width=width, height=height), window_size, sink, programs,
            AdvectConfig(timestep=1.0, dissipation=dissipation),
            JacobiConfig(iterations=iterations, warm_start=warm_start),
            SplatConfig(radius=radius),
        )
    return _make
