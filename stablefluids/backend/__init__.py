"""Compute backends.

The cpu backend (numpy) runs anywhere and is what the tests use. The OpenGL
backend lives in `backend.gl` and needs a current GL context, so it is not
imported here.
"""

import logging
from typing import Any

from ..Exceptions import KernelLoadError
from .CommandSink import (
    CommandSink, KernelSource,
    OPERATOR_PROGRAMS, DISPLAY_PROGRAMS, PROGRAM_NAMES, VERTEX_PROGRAM,
)


def load_programs(sink: CommandSink, source: KernelSource, names: tuple[str, ...] = PROGRAM_NAMES,
                  timeout: float | None = 30.0) -> dict[str, Any]:
    """Load every named program plus the vertex stage and compile them on sink.

    Blocks until the asynchronous load has finished.

    Raises:
        KernelLoadError: If a program is missing or fails to compile.
    """
    future = source.load(tuple(names) + (VERTEX_PROGRAM,))
    try:
        sources: dict[str, Any] = future.result(timeout=timeout)
    except KernelLoadError:
        raise
    except Exception as e:
        raise KernelLoadError(f"Loading kernel programs failed: {e}") from e

    missing = [name for name in names if sources.get(name) is None]
    if missing:
        raise KernelLoadError(f"Missing kernel programs: {', '.join(missing)}")

    vertex_source = sources.get(VERTEX_PROGRAM)
    programs: dict[str, Any] = {}
    for name in names:
        programs[name] = sink.compile(name, sources[name], vertex_source)
    logging.info(f"Loaded {len(programs)} kernel programs: {', '.join(programs)}")
    return programs


__all__ = [
    "CommandSink", "KernelSource", "load_programs",
    "OPERATOR_PROGRAMS", "DISPLAY_PROGRAMS", "PROGRAM_NAMES", "VERTEX_PROGRAM",
]
