"""Asynchronous program loading and the GLSL program files."""

from __future__ import annotations

import pytest

from stablefluids.Exceptions import KernelLoadError
from stablefluids.backend import load_programs, PROGRAM_NAMES, VERTEX_PROGRAM
from stablefluids.backend.cpu import NumpySink, NumpyKernelSource, KERNELS


def test_load_programs_compiles_every_name():
    programs = load_programs(NumpySink(), NumpyKernelSource())
    assert set(programs) == set(PROGRAM_NAMES)


def test_missing_kernel_is_reported():
    kernels = {name: kernel for name, kernel in KERNELS.items() if name != "gradient"}
    with pytest.raises(KernelLoadError, match="gradient"):
        load_programs(NumpySink(), NumpyKernelSource(kernels))


def test_non_callable_kernel_is_rejected():
    kernels = dict(KERNELS, splat="not a kernel")
    with pytest.raises(KernelLoadError):
        load_programs(NumpySink(), NumpyKernelSource(kernels))


def test_shader_library_has_every_program():
    pytest.importorskip("OpenGL.GL")
    from stablefluids.backend.gl import ShaderLibrary

    library = ShaderLibrary()
    try:
        sources = library.load(PROGRAM_NAMES + (VERTEX_PROGRAM,)).result(timeout=5.0)
    finally:
        library.close()

    for name in PROGRAM_NAMES + (VERTEX_PROGRAM,):
        assert sources[name] is not None, name
        assert sources[name].startswith("#version 330")


def test_shader_library_missing_file(tmp_path):
    pytest.importorskip("OpenGL.GL")
    from stablefluids.backend.gl import ShaderLibrary

    (tmp_path / "advect.frag").write_text("#version 330\nvoid main() {}\n")
    library = ShaderLibrary(tmp_path)
    try:
        sources = library.load(("advect", "jacobi")).result(timeout=5.0)
    finally:
        library.close()
    assert sources["advect"].startswith("#version 330")
    assert sources["jacobi"] is None


def test_reload_debounce_is_per_file():
    pytest.importorskip("OpenGL.GL")
    from watchdog.events import FileModifiedEvent
    from stablefluids.backend.gl.ShaderLibrary import FileModifiedHandler

    now = [10.0]
    changed: list[str] = []
    handler = FileModifiedHandler(changed.append, clock=lambda: now[0])

    handler.on_modified(FileModifiedEvent("shaders/advect.frag"))
    handler.on_modified(FileModifiedEvent("shaders/advect.frag"))
    now[0] += 0.1
    handler.on_modified(FileModifiedEvent("shaders/jacobi.frag"))
    now[0] += 1.0
    handler.on_modified(FileModifiedEvent("shaders/advect.frag"))

    assert changed == ["shaders/advect.frag", "shaders/jacobi.frag", "shaders/advect.frag"]
