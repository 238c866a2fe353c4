"""Application settings: every config struct, loadable from JSON."""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, cast, get_type_hints, get_origin

from .ConfigBase import ConfigBase, config_field, check_type
from .Display import DisplayConfig
from .Exceptions import ConfigError
from .Grid import Grid
from .operators import AdvectConfig, JacobiConfig, SplatConfig

T = TypeVar("T")


@dataclass
class WindowConfig(ConfigBase):
    width: int = config_field(1024, fixed=True, min=1, description="Initial window width in pixels")
    height: int = config_field(512, fixed=True, min=1, description="Initial window height in pixels")
    title: str = config_field("Stable Fluids", fixed=True)
    fullscreen: bool = config_field(False, fixed=True)
    v_sync: bool = config_field(True, fixed=True)
    fps: float = config_field(0.0, fixed=True, min=0.0, max=240.0, description="Frame cap, 0 = follow v-sync")
    hot_reload: bool = config_field(False, fixed=True, description="Recompile shaders when their files change")


@dataclass
class Settings():
    grid: Grid = field(default_factory=Grid)
    advect: AdvectConfig = field(default_factory=AdvectConfig)
    jacobi: JacobiConfig = field(default_factory=JacobiConfig)
    splat: SplatConfig = field(default_factory=SplatConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    window: WindowConfig = field(default_factory=WindowConfig)

    def validate(self) -> None:
        for f in dataclasses.fields(self):
            getattr(self, f.name).validate()

    def save(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(Settings.serialize(self), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'Settings':
        """Read settings from a JSON file; missing keys keep their defaults.

        Raises:
            ConfigError: If the file is unreadable, has unknown keys or
                         out-of-range values.
        """
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read settings file '{path}': {e}") from e

        settings = Settings.deserialize(data, Settings)
        settings.validate()
        logging.info(f"Loaded settings from {path}")
        return settings

    @staticmethod
    def serialize(obj) -> Any:
        if isinstance(obj, Enum):
            return obj.name
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: Settings.serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        if isinstance(obj, (list, tuple)):
            return [Settings.serialize(v) for v in obj]
        return obj

    @staticmethod
    def deserialize(data: Any, target_type: type[T], path: str = "") -> T:
        """Build target_type from JSON data.

        Raises:
            ConfigError: On unknown keys, unknown enum names, or values whose
                         type or length does not match the field's type hint.
        """
        label = path or getattr(target_type, "__name__", str(target_type))

        if dataclasses.is_dataclass(target_type):
            if not isinstance(data, dict):
                raise ConfigError(f"Expected an object for {label}, got {type(data).__name__}")
            hints: dict[str, Any] = get_type_hints(target_type)
            field_names = {f.name for f in dataclasses.fields(target_type)}
            unknown = set(data) - field_names
            if unknown:
                raise ConfigError(f"Unknown settings for {label}: {', '.join(sorted(unknown))}")
            kwargs = {key: Settings.deserialize(value, hints[key], f"{target_type.__name__}.{key}")
                      for key, value in data.items()}
            return cast(T, target_type(**kwargs))

        if isinstance(target_type, type) and issubclass(target_type, Enum):
            try:
                return cast(T, target_type[data])
            except (KeyError, TypeError):
                raise ConfigError(f"{label}: '{data}' is not a valid {target_type.__name__}") from None

        if get_origin(target_type) is tuple:
            if not isinstance(data, list):
                raise ConfigError(f"{label} must be a list, got {type(data).__name__}")
            value = tuple(data)
            check_type(label, value, target_type)
            return cast(T, value)

        check_type(label, data, target_type)
        if target_type is float:
            return cast(T, float(data))
        return cast(T, data)
