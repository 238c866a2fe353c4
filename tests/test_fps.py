"""Frame rate counter shown in the window title."""

from __future__ import annotations

import pytest

pytest.importorskip("glfw")
pytest.importorskip("OpenGL.GL")

from stablefluids.render.FpsCounter import FpsCounter  # noqa: E402


def test_no_samples_reports_zero():
    counter = FpsCounter()
    assert counter.get_fps() == 0
    counter.tick(0.0)
    assert counter.get_fps() == 0
    assert counter.get_min_fps() == 0


def test_rates_from_frame_times():
    counter = FpsCounter()
    for now in (0.0, 0.25, 0.5, 1.0):
        counter.tick(now)
    assert counter.get_fps() == 3
    assert counter.get_min_fps() == 2


def test_window_keeps_only_recent_frames():
    counter = FpsCounter(num_samples=3)
    # One slow frame early on, then steady 4 fps
    for now in (0.0, 2.0, 2.25, 2.5, 2.75):
        counter.tick(now)
    assert counter.num_samples == 3
    assert counter.get_fps() == 4
    assert counter.get_min_fps() == 4
