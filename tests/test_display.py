"""Display pass to the visible surface."""

from __future__ import annotations

import numpy as np
import pytest

from stablefluids.Display import Display, DisplayConfig, DisplayField
from stablefluids.Exceptions import BackendError, KernelLoadError
from stablefluids.input import Mouse


def test_signed_fields_at_rest_show_mid_grey(sink, programs, make_solver):
    solver = make_solver()
    display = Display(programs, DisplayConfig(field=DisplayField.PRESSURE))
    display.render(sink, solver.slabs)
    assert sink.frame is not None
    assert sink.frame.shape == (8, 8, 3)
    np.testing.assert_allclose(sink.frame, 0.5)


def test_density_is_shown_unbiased(sink, programs, make_solver):
    solver = make_solver()
    solver.density.read.data[...] = (0.2, 0.4, 0.6)
    display = Display(programs)
    display.render(sink, solver.slabs)
    np.testing.assert_allclose(sink.frame, np.broadcast_to((0.2, 0.4, 0.6), (8, 8, 3)), rtol=1e-6)


def test_render_follows_config_changes(sink, programs, make_solver):
    solver = make_solver()
    solver.velocity.read.data[..., 0] = 1.0
    config = DisplayConfig()
    display = Display(programs, config)

    config.field = DisplayField.VELOCITY
    display.render(sink, solver.slabs)

    np.testing.assert_allclose(sink.frame[..., 0], 1.0)
    np.testing.assert_allclose(sink.frame[..., 1:], 0.5)


def test_frame_after_step(sink, programs, make_solver):
    solver = make_solver()
    display = Display(programs)
    solver.step(sink, Mouse())
    display.render(sink, solver.slabs)
    assert not sink.frame.any()


def test_missing_display_program(programs):
    incomplete = {name: program for name, program in programs.items() if name != "displayscalar"}
    with pytest.raises(KernelLoadError, match="displayscalar"):
        Display(incomplete)


def test_dispatch_to_deallocated_buffer_fails(sink, programs, make_solver):
    solver = make_solver()
    solver.deallocate(sink)
    with pytest.raises(BackendError):
        Display(programs).render(sink, solver.slabs)
