"""Command sink backed by OpenGL render-to-texture passes.

Every dispatch is a full-screen quad drawn into the target framebuffer.
OpenGL executes commands in submission order, so no explicit fences are
needed between dependent passes. Requires a current GL context.
"""

from __future__ import annotations

import logging
from typing import Any

from OpenGL.GL import *  # type: ignore

from ...Exceptions import BackendError
from ..CommandSink import CommandSink
from .Fbo import Fbo
from .Shader import Shader
from .Texture import Texture, draw_quad


def uniform_name(name: str) -> str:
    """grid_size -> uGridSize"""
    return "u" + "".join(part.capitalize() for part in name.split("_"))


class GLSink(CommandSink):

    def __init__(self) -> None:
        self.screen_viewport: tuple[int, int, int, int] = (0, 0, 1, 1)
        self.programs: dict[str, Shader] = {}

    def allocate(self, width: int, height: int, components: int) -> Fbo:
        fbo = Fbo()
        fbo.allocate(width, height, components)
        return fbo

    def deallocate(self, buffer: Fbo) -> None:
        buffer.deallocate()

    def compile(self, name: str, source: Any, vertex_source: Any = None) -> Shader:
        shader = Shader(name, source, vertex_source)
        shader.allocate()
        self.programs[name] = shader
        return shader

    def dispatch(self, program: Shader, inputs: dict[str, Texture], output: Fbo | None,
                 params: dict[str, Any]) -> None:
        if not program.allocated or not program.shader_program:
            raise BackendError(f"{program.shader_name}: shader not allocated")
        for name, texture in inputs.items():
            if not texture.allocated:
                raise BackendError(f"{program.shader_name}: input '{name}' not allocated")
        if output is not None and not output.allocated:
            raise BackendError(f"{program.shader_name}: output not allocated")

        if output is None:
            glBindFramebuffer(GL_FRAMEBUFFER, 0)
            glViewport(*self.screen_viewport)
        else:
            output.begin()

        glUseProgram(program.shader_program)

        for unit, (name, texture) in enumerate(inputs.items()):
            glActiveTexture(GL_TEXTURE0 + unit)
            glBindTexture(GL_TEXTURE_2D, texture.tex_id)
            glUniform1i(program.get_uniform_loc(uniform_name(name)), unit)

        for name, value in params.items():
            self._set_uniform(program, uniform_name(name), value)

        draw_quad()

        # Cleanup
        for unit in reversed(range(len(inputs))):
            glActiveTexture(GL_TEXTURE0 + unit)
            glBindTexture(GL_TEXTURE_2D, 0)
        glUseProgram(0)
        if output is not None:
            output.end()

    def clear(self, buffer: Fbo) -> None:
        buffer.clear()

    @staticmethod
    def _set_uniform(program: Shader, name: str, value: Any) -> None:
        location = program.get_uniform_loc(name)
        if location < 0:
            return
        if isinstance(value, bool):
            glUniform1i(location, int(value))
        elif isinstance(value, (int, float)):
            glUniform1f(location, float(value))
        elif isinstance(value, (tuple, list)) and 1 <= len(value) <= 4:
            values = [float(v) for v in value]
            (glUniform1f, glUniform2f, glUniform3f, glUniform4f)[len(values) - 1](location, *values)
        else:
            raise BackendError(f"{program.shader_name}: unsupported uniform value for {name}: {value!r}")

    # HOT RELOAD
    def mark_reload(self, name: str) -> None:
        """Called from the file watcher thread."""
        shader = self.programs.get(name)
        if shader is not None:
            shader.need_reload = True

    def reload_pending(self, library) -> None:
        """Recompile every shader marked for reload. Must run on the GL thread."""
        for name, shader in self.programs.items():
            if not shader.need_reload:
                continue
            source = library.read(name)
            if source is None:
                logging.error(f"{name}: shader file disappeared, keeping previous program")
                shader.need_reload = False
                continue
            shader.reload(source)

    def deallocate_programs(self) -> None:
        for shader in self.programs.values():
            shader.deallocate()
        self.programs.clear()
