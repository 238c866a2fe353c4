"""Reference kernels for the numpy backend.

Each kernel mirrors the fragment program of the same name in
`stablefluids/shaders`. Fields are float32 arrays shaped
(height, width, components) with row 0 at the bottom of the grid; cell
(i, j) has its centre at (i + 0.5, j + 0.5). Samples outside the grid clamp
to the edge, like a GL_CLAMP_TO_EDGE texture.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

import numpy as np

from ...Exceptions import KernelLoadError


def _cell_centres(grid_size: tuple[int, int]) -> tuple[np.ndarray, np.ndarray]:
    width, height = grid_size
    x, y = np.meshgrid(np.arange(width, dtype=np.float32) + 0.5,
                       np.arange(height, dtype=np.float32) + 0.5)
    return x, y


def _bilinear(field: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Sample field at cell-space positions with linear filtering."""
    height, width = field.shape[:2]
    x = np.clip(x - 0.5, 0.0, width - 1)
    y = np.clip(y - 0.5, 0.0, height - 1)

    x0 = np.floor(x).astype(np.int32)
    y0 = np.floor(y).astype(np.int32)
    x1 = np.minimum(x0 + 1, width - 1)
    y1 = np.minimum(y0 + 1, height - 1)

    tx = (x - x0)[..., None]
    ty = (y - y0)[..., None]

    bottom = field[y0, x0] * (1.0 - tx) + field[y0, x1] * tx
    top = field[y1, x0] * (1.0 - tx) + field[y1, x1] * tx
    return bottom * (1.0 - ty) + top * ty


def _neighbours(field: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Left, right, bottom and top neighbour of every cell."""
    padded = np.pad(field, ((1, 1), (1, 1), (0, 0)), mode="edge")
    left = padded[1:-1, :-2]
    right = padded[1:-1, 2:]
    bottom = padded[:-2, 1:-1]
    top = padded[2:, 1:-1]
    return left, right, bottom, top


def advect(velocity: np.ndarray, advected: np.ndarray, *, grid_size: tuple[int, int],
           timestep: float, dissipation: float) -> np.ndarray:
    """Semi-Lagrangian advection: trace back along velocity and resample."""
    x, y = _cell_centres(grid_size)
    back_x = x - timestep * velocity[..., 0]
    back_y = y - timestep * velocity[..., 1]
    return dissipation * _bilinear(advected, back_x, back_y)


def divergence(velocity: np.ndarray, *, grid_size: tuple[int, int], half_rdx: float) -> np.ndarray:
    left, right, bottom, top = _neighbours(velocity)
    result = half_rdx * ((right[..., 0] - left[..., 0]) + (top[..., 1] - bottom[..., 1]))
    return result[..., None]


def jacobi(x: np.ndarray, b: np.ndarray, *, grid_size: tuple[int, int], alpha: float, beta: float) -> np.ndarray:
    """One relaxation sweep of the 5-point Poisson stencil."""
    left, right, bottom, top = _neighbours(x)
    return (left + right + bottom + top + alpha * b) / beta


def gradient(p: np.ndarray, w: np.ndarray, *, grid_size: tuple[int, int], half_rdx: float) -> np.ndarray:
    """Subtract the pressure gradient from the vector field w."""
    left, right, bottom, top = _neighbours(p)
    result = w.copy()
    result[..., 0] -= half_rdx * (right[..., 0] - left[..., 0])
    result[..., 1] -= half_rdx * (top[..., 0] - bottom[..., 0])
    return result


def splat(read: np.ndarray, *, grid_size: tuple[int, int], color: tuple[float, ...],
          point: tuple[float, float], radius: float) -> np.ndarray:
    """Add color with a Gaussian falloff that reaches zero at radius."""
    x, y = _cell_centres(grid_size)
    distance_sq = (x - point[0]) ** 2 + (y - point[1]) ** 2
    weight = np.where(distance_sq < radius * radius, np.exp(-4.0 * distance_sq / (radius * radius)), 0.0)

    components = read.shape[-1]
    value = np.zeros(components, dtype=np.float32)
    count = min(components, len(color))
    value[:count] = color[:count]
    return read + weight[..., None].astype(np.float32) * value


def displayscalar(read: np.ndarray, *, scale: float, bias: float) -> np.ndarray:
    return np.repeat(bias + scale * read[..., :1], 3, axis=-1)


def displayvector(read: np.ndarray, *, scale: float, bias: float) -> np.ndarray:
    rgb = np.zeros(read.shape[:2] + (3,), dtype=np.float32)
    count = min(3, read.shape[-1])
    rgb[..., :count] = read[..., :count]
    # Missing channels are biased too, so a 2D field shows 0.5 blue at rest
    return bias + scale * rgb


KERNELS: dict[str, Callable[..., np.ndarray]] = {
    "advect": advect,
    "divergence": divergence,
    "jacobi": jacobi,
    "gradient": gradient,
    "splat": splat,
    "displayscalar": displayscalar,
    "displayvector": displayvector,
}


class NumpyKernelSource():
    """Kernel source provider for the numpy backend.

    Lookups run on a worker thread to honour the asynchronous loading
    contract. Names without a kernel (such as the vertex stage, which the
    numpy backend does not need) map to None.
    """

    def __init__(self, kernels: dict[str, Callable[..., np.ndarray]] | None = None) -> None:
        self.kernels: dict[str, Callable[..., np.ndarray]] = dict(KERNELS if kernels is None else kernels)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kernel-source")

    def load(self, names: tuple[str, ...]) -> Future[dict[str, Callable[..., np.ndarray] | None]]:
        return self._executor.submit(self._lookup, names)

    def _lookup(self, names: tuple[str, ...]) -> dict[str, Callable[..., np.ndarray] | None]:
        for name in names:
            kernel = self.kernels.get(name)
            if kernel is not None and not callable(kernel):
                raise KernelLoadError(f"Kernel '{name}' is not callable")
        return {name: self.kernels.get(name) for name in names}
