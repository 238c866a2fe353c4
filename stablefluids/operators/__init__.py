"""Slab operators: stateless kernels bound to a grid and a config struct."""

from .SlabOperator import SlabOperator
from .Advect import Advect, AdvectConfig
from .Divergence import Divergence
from .Jacobi import Jacobi, JacobiConfig
from .Gradient import Gradient
from .Splat import Splat, SplatConfig

__all__ = [
    "SlabOperator",
    "Advect", "AdvectConfig",
    "Divergence",
    "Jacobi", "JacobiConfig",
    "Gradient",
    "Splat", "SplatConfig",
]
