"""Base class for live-tunable parameter structs.

Configs are plain dataclasses whose fields carry range metadata. The solver
and the control surface share the same instance, so a change made on the
control surface is picked up by the next operator call.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, fields, field, MISSING
from enum import Enum
from typing import Any, Callable, TypeVar, get_args, get_origin, get_type_hints

from .Exceptions import ConfigError

T = TypeVar('T')


METADATA_KEYS = {
    "description",  # Tooltip / help text
    "fixed",        # Settable at init, read-only afterwards
    "label",        # Display label (generated from the field name if omitted)
    "min",          # Lower bound, inclusive
    "max",          # Upper bound, inclusive
    "step",         # Increment used by the control surface
}


def config_field(
    default: T = MISSING,
    *,
    default_factory: Any = MISSING,
    description: str = "",
    label: str | None = None,
    min: float | int | None = None,
    max: float | int | None = None,
    step: float | int | None = None,
    fixed: bool = False,
    repr: bool = True,
    compare: bool = True,
) -> T:
    """Create a dataclass field carrying config metadata.

    Examples:
        >>> timestep: float = config_field(1.0, min=0.001, max=10.0, step=0.1)
        >>> width: int = config_field(512, fixed=True, description="Grid width in cells")
    """
    metadata: dict[str, Any] = {}
    if description:
        metadata["description"] = description
    if label:
        metadata["label"] = label
    if min is not None:
        metadata["min"] = min
    if max is not None:
        metadata["max"] = max
    if step is not None:
        metadata["step"] = step
    if fixed:
        metadata["fixed"] = True

    return field(  # type: ignore[return-value]
        default=default,
        default_factory=default_factory,
        repr=repr,
        compare=compare,
        metadata=metadata
    )


def _generate_label(name: str) -> str:
    """"splat_radius" -> "Splat Radius", keeping all-caps acronyms."""
    parts: list[str] = name.split('_')
    return ' '.join(part if part.isupper() and len(part) > 1 else part.capitalize() for part in parts)


@dataclass
class ConfigBase:
    """Dataclass base with range metadata, fixed fields and change listeners.

    Example:
        @dataclass
        class AdvectConfig(ConfigBase):
            timestep: float = config_field(1.0, min=0.001, max=10.0)

    Ranges are enforced at the boundaries, never on plain assignment:
        - clamp() is used by the control surface for live edits
        - validate() is used for settings files and at solver construction
    """

    def __post_init__(self) -> None:
        object.__setattr__(self, '_listeners', set())
        object.__setattr__(self, '_lock', threading.Lock())

        fixed_set: set[str] = set()
        for f in fields(self):
            for key in f.metadata:
                if key not in METADATA_KEYS:
                    raise ConfigError(f"{self.__class__.__name__}.{f.name}: unknown metadata key '{key}'")
            if f.metadata.get('fixed'):
                fixed_set.add(f.name)

        object.__setattr__(self, '_fixed_fields', fixed_set)
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, value)
            return

        if name not in {f.name for f in fields(self)}:
            raise AttributeError(f"Cannot set undeclared attribute '{name}' on {self.__class__.__name__}")

        if not hasattr(self, '_initialized'):
            object.__setattr__(self, name, value)
            return

        if name in self._fixed_fields:  # type: ignore
            raise AttributeError(f"Cannot modify fixed field '{name}' on {self.__class__.__name__}")

        with self._lock:  # type: ignore
            object.__setattr__(self, name, value)
            listeners_copy = list(self._listeners)  # type: ignore

        # Listeners run outside the lock so they may write other fields
        for listener in listeners_copy:
            listener()

    def watch(self, callback: Callable, attribute: str | None = None) -> Callable[[], None]:
        """Register a change listener and return a function that removes it.

        Args:
            callback: Called with no arguments, or with the new value when
                      attribute is given.
            attribute: Optional field name to watch.

        Raises:
            AttributeError: If attribute is not a declared field.
        """
        if attribute is None:
            listener = callback
        else:
            if attribute not in {f.name for f in fields(self)}:
                raise AttributeError(f"Attribute '{attribute}' not found in {self.__class__.__name__}")

            def listener() -> None:
                callback(getattr(self, attribute))

        with self._lock:  # type: ignore
            self._listeners.add(listener)  # type: ignore

        def unwatch() -> None:
            with self._lock:  # type: ignore
                self._listeners.discard(listener)  # type: ignore
        return unwatch

    def info(self, attribute: str | None = None) -> dict[str, Any]:
        """Field metadata merged with type, default and current value.

        Returns one field's metadata when attribute is given, otherwise a
        mapping of every field name to its metadata.
        """
        result: dict[str, dict[str, Any]] = {}
        for f in fields(self):
            if f.default is not MISSING:
                default_val = f.default
            elif f.default_factory is not MISSING:
                default_val = f.default_factory()
            else:
                default_val = None

            entry: dict[str, Any] = {**f.metadata, "type": f.type, "default": default_val, "value": getattr(self, f.name)}
            entry.setdefault("label", _generate_label(f.name))
            entry.setdefault("description", "")
            entry.setdefault("min", None)
            entry.setdefault("max", None)
            entry.setdefault("step", None)
            entry.setdefault("fixed", False)
            result[f.name] = entry

        if attribute is not None:
            if attribute not in result:
                raise AttributeError(f"Attribute '{attribute}' not found in {self.__class__.__name__}")
            return result[attribute]
        return result

    def clamp(self, attribute: str, value: Any) -> Any:
        """Return value limited to the field's [min, max] range."""
        meta = self.info(attribute)
        if meta["min"] is not None:
            value = max(meta["min"], value)
        if meta["max"] is not None:
            value = min(meta["max"], value)
        return value

    def validate(self) -> None:
        """Raise ConfigError if a field has the wrong type or lies outside its bounds."""
        hints: dict[str, Any] = get_type_hints(type(self))
        for name, meta in self.info().items():
            value = meta["value"]
            check_type(f"{self.__class__.__name__}.{name}", value, hints.get(name))
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                continue
            if meta["min"] is not None and value < meta["min"]:
                raise ConfigError(f"{self.__class__.__name__}.{name} = {value} is below minimum {meta['min']}")
            if meta["max"] is not None and value > meta["max"]:
                raise ConfigError(f"{self.__class__.__name__}.{name} = {value} is above maximum {meta['max']}")


def check_type(label: str, value: Any, hint: Any) -> None:
    """Raise ConfigError unless value matches the field's type hint. An int is accepted for a float."""
    if hint is None:
        return
    if hint is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
    elif hint is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif hint in (bool, str):
        ok = isinstance(value, hint)
    elif isinstance(hint, type) and issubclass(hint, Enum):
        ok = isinstance(value, hint)
    elif get_origin(hint) is tuple:
        if not isinstance(value, tuple):
            raise ConfigError(f"{label} must be a tuple, got {type(value).__name__}")
        args = get_args(hint)
        if len(args) == 2 and args[1] is Ellipsis:
            args = (args[0],) * len(value)
        elif len(value) != len(args):
            raise ConfigError(f"{label} needs {len(args)} components, got {len(value)}")
        for item, item_hint in zip(value, args):
            check_type(label, item, item_hint)
        return
    else:
        return
    if not ok:
        raise ConfigError(f"{label} must be {hint.__name__}, got {type(value).__name__} {value!r}")
