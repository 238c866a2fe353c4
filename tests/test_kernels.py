"""Numpy reference kernels."""

from __future__ import annotations

import numpy as np
import pytest

from stablefluids.backend.cpu import Kernels


def _field(width: int, height: int, components: int, value: float = 0.0) -> np.ndarray:
    return np.full((height, width, components), value, dtype=np.float32)


def test_advect_with_zero_velocity_is_identity():
    rng = np.random.default_rng(1)
    advected = rng.random((6, 5, 3), dtype=np.float32)
    result = Kernels.advect(_field(5, 6, 2), advected, grid_size=(5, 6), timestep=1.0, dissipation=1.0)
    np.testing.assert_array_equal(result, advected)


def test_advect_moves_along_velocity():
    advected = _field(6, 1, 1)
    advected[0, 2, 0] = 1.0
    velocity = _field(6, 1, 2)
    velocity[..., 0] = 1.0

    result = Kernels.advect(velocity, advected, grid_size=(6, 1), timestep=1.0, dissipation=1.0)

    assert result[0, 3, 0] == pytest.approx(1.0)
    assert result[0, 2, 0] == pytest.approx(0.0)


def test_advect_interpolates_between_cells():
    advected = _field(4, 1, 1)
    advected[0, 1, 0] = 1.0
    velocity = _field(4, 1, 2)
    velocity[..., 0] = 0.5

    result = Kernels.advect(velocity, advected, grid_size=(4, 1), timestep=1.0, dissipation=1.0)

    assert result[0, 1, 0] == pytest.approx(0.5)
    assert result[0, 2, 0] == pytest.approx(0.5)


def test_advect_applies_dissipation():
    result = Kernels.advect(_field(3, 3, 2), _field(3, 3, 3, 1.0), grid_size=(3, 3), timestep=1.0, dissipation=0.9)
    np.testing.assert_allclose(result, 0.9)


def test_advect_clamps_at_edges():
    advected = _field(4, 4, 1)
    advected[:, 0, 0] = 2.0
    velocity = _field(4, 4, 2)
    velocity[..., 0] = 10.0
    result = Kernels.advect(velocity, advected, grid_size=(4, 4), timestep=1.0, dissipation=1.0)
    np.testing.assert_allclose(result, 2.0)


def test_divergence_of_linear_flow():
    width, height = 6, 6
    velocity = _field(width, height, 2)
    velocity[..., 0] = np.arange(width, dtype=np.float32)[None, :]
    result = Kernels.divergence(velocity, grid_size=(width, height), half_rdx=0.5)
    assert result.shape == (height, width, 1)
    # Interior central difference of u = x is 1
    np.testing.assert_allclose(result[1:-1, 1:-1, 0], 1.0)


def test_jacobi_sweep():
    x = _field(3, 3, 1)
    x[1, 0, 0], x[1, 2, 0], x[0, 1, 0], x[2, 1, 0] = 1.0, 2.0, 3.0, 4.0
    b = _field(3, 3, 1, 2.0)
    result = Kernels.jacobi(x, b, grid_size=(3, 3), alpha=-1.0, beta=4.0)
    assert result[1, 1, 0] == pytest.approx((1.0 + 2.0 + 3.0 + 4.0 - 2.0) / 4.0)


def test_gradient_subtraction():
    width, height = 5, 5
    p = _field(width, height, 1)
    p[..., 0] = np.arange(height, dtype=np.float32)[:, None] * 2.0
    w = _field(width, height, 2, 1.0)
    result = Kernels.gradient(p, w, grid_size=(width, height), half_rdx=0.5)
    np.testing.assert_allclose(result[1:-1, :, 0], 1.0)
    np.testing.assert_allclose(result[1:-1, :, 1], 1.0 - 2.0)


def test_splat_falloff_and_cutoff():
    read = _field(9, 9, 1)
    result = Kernels.splat(read, grid_size=(9, 9), color=(1.0,), point=(4.5, 4.5), radius=3.0)
    assert result[4, 4, 0] == pytest.approx(1.0)
    assert 0.0 < result[4, 5, 0] < 1.0
    assert result[4, 8, 0] == 0.0
    assert result[0, 0, 0] == 0.0


def test_splat_fits_color_to_components():
    result = Kernels.splat(_field(3, 3, 2), grid_size=(3, 3), color=(1.0, 2.0, 3.0), point=(1.5, 1.5), radius=1.0)
    assert result.shape == (3, 3, 2)
    assert tuple(result[1, 1]) == pytest.approx((1.0, 2.0))


def test_display_scale_and_bias():
    scalar = Kernels.displayscalar(_field(2, 2, 1, 0.0), scale=0.5, bias=0.5)
    assert scalar.shape == (2, 2, 3)
    np.testing.assert_allclose(scalar, 0.5)

    vector = Kernels.displayvector(_field(2, 2, 2, 1.0), scale=0.5, bias=0.5)
    np.testing.assert_allclose(vector[..., :2], 1.0)
    np.testing.assert_allclose(vector[..., 2], 0.5)
