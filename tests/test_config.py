"""Config structs and the JSON settings file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

import pytest

from stablefluids.ConfigBase import ConfigBase
from stablefluids.Display import DisplayField
from stablefluids.Exceptions import ConfigError
from stablefluids.Grid import Grid
from stablefluids.Settings import Settings, WindowConfig
from stablefluids.operators import AdvectConfig, JacobiConfig, SplatConfig


def test_fixed_fields_are_read_only_after_init():
    grid = Grid(width=64, height=32)
    assert grid.size == (64, 32)
    with pytest.raises(AttributeError):
        grid.width = 128
    grid.scale = 2.0
    assert grid.scale == 2.0


def test_undeclared_attribute_is_rejected():
    with pytest.raises(AttributeError):
        AdvectConfig().time_step = 2.0  # type: ignore[attr-defined]


def test_clamp_uses_field_range():
    config = JacobiConfig()
    assert config.clamp("iterations", -5) == 0
    assert config.clamp("iterations", 10_000) == 500
    assert config.clamp("iterations", 40) == 40


def test_validate_rejects_out_of_range_values():
    config = AdvectConfig()
    config.validate()
    config.timestep = 0.0
    with pytest.raises(ConfigError, match="timestep"):
        config.validate()


def test_info_reports_metadata_and_generated_label():
    meta = SplatConfig().info("radius")
    assert meta["label"] == "Radius"
    assert meta["min"] == 0.1
    assert meta["value"] == 6.0
    assert meta["fixed"] is False
    assert JacobiConfig().info("warm_start")["label"] == "Warm Start"


def test_watch_notifies_until_unwatched():
    config = AdvectConfig()
    seen: list[float] = []
    unwatch = config.watch(seen.append, "dissipation")
    config.dissipation = 0.9
    unwatch()
    config.dissipation = 0.8
    assert seen == [0.9]


def test_unknown_metadata_key_is_an_error():
    @dataclass
    class Broken(ConfigBase):
        value: float = field(default=1.0, metadata={"units": "m"})

    with pytest.raises(ConfigError):
        Broken()


def test_settings_round_trip(tmp_path):
    settings = Settings()
    settings.advect.dissipation = 0.992
    settings.jacobi.iterations = 20
    settings.splat.ink = (0.1, 0.2, 0.3)
    settings.display.field = DisplayField.PRESSURE
    path = tmp_path / "settings.json"

    settings.save(str(path))
    loaded = Settings.load(str(path))

    assert loaded.advect.dissipation == 0.992
    assert loaded.jacobi.iterations == 20
    assert loaded.splat.ink == (0.1, 0.2, 0.3)
    assert loaded.display.field is DisplayField.PRESSURE


def test_settings_missing_keys_keep_defaults(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"grid": {"width": 128, "height": 64}, "advect": {"timestep": 2}}))

    settings = Settings.load(str(path))

    assert settings.grid.size == (128, 64)
    assert settings.advect.timestep == 2.0
    assert isinstance(settings.advect.timestep, float)
    assert settings.jacobi.iterations == JacobiConfig().iterations


@pytest.mark.parametrize("data", [
    {"grid": {"depth": 3}},
    {"colour": {}},
    {"display": {"field": "VORTICITY"}},
    {"jacobi": {"iterations": -1}},
    {"jacobi": {"iterations": 2.5}},
    {"jacobi": {"warm_start": 1}},
    {"advect": {"timestep": "fast"}},
    {"grid": {"width": True}},
    {"splat": {"ink": [1.0]}},
    {"splat": {"ink": "blue"}},
    {"splat": {"ink": [0.0, "a", 1.0]}},
    {"window": {"title": 5}},
    {"display": {"field": 2}},
])
def test_settings_reject_bad_content(tmp_path, data):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(data))
    with pytest.raises(ConfigError):
        Settings.load(str(path))


def test_settings_unreadable_file(tmp_path):
    with pytest.raises(ConfigError):
        Settings.load(str(tmp_path / "missing.json"))
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ConfigError):
        Settings.load(str(broken))


def test_default_settings_file_loads():
    path = Path(__file__).resolve().parents[1] / "files" / "settings" / "default.json"
    settings = Settings.load(str(path))
    assert settings == Settings()


def test_window_overrides_use_a_new_instance():
    window = WindowConfig()
    with pytest.raises(AttributeError):
        window.hot_reload = True
    assert replace(window, hot_reload=True).hot_reload is True


@pytest.mark.parametrize("config, name, value", [
    (JacobiConfig(), "iterations", 2.5),
    (JacobiConfig(), "warm_start", "yes"),
    (AdvectConfig(), "timestep", "fast"),
    (SplatConfig(), "ink", (1.0,)),
    (SplatConfig(), "ink", [0.0, 0.1, 0.2]),
])
def test_validate_rejects_wrong_types(config, name, value):
    setattr(config, name, value)
    with pytest.raises(ConfigError, match=name):
        config.validate()


def test_validate_accepts_int_for_float():
    config = AdvectConfig(timestep=2)
    config.validate()
    SplatConfig(ink=(0, 0, 1)).validate()


def test_wrong_type_fails_before_the_first_frame(tmp_path):
    path = tmp_path / "typo.json"
    path.write_text(json.dumps({"jacobi": {"iterations": 2.5}}))
    with pytest.raises(ConfigError, match="iterations"):
        Settings.load(str(path))
