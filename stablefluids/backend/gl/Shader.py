from OpenGL.GL import * # type: ignore
from OpenGL.GL import shaders
import logging
import threading

from ...Exceptions import KernelLoadError


class Shader():
    """A vertex + fragment program compiled from source strings.

    A failed first compile raises, so a solver is never built on a broken
    program. A failed hot-reload keeps the previous program and logs.
    """

    # Full-screen pass used when no vertex stage is supplied
    GENERIC_VERTEX_SHADER = """#version 330

layout(location = 0) in vec2 position;
out vec2 texCoord;

void main() {
    texCoord = position * 0.5 + 0.5;
    gl_Position = vec4(position, 0.0, 1.0);
}
"""

    def __init__(self, name: str, fragment_source: str, vertex_source: str | None = None) -> None:
        self.allocated: bool = False
        self.shader_name: str = name
        self.fragment_source: str = fragment_source
        self.vertex_source: str = vertex_source or self.GENERIC_VERTEX_SHADER
        self.shader_program: shaders.ShaderProgram | None = None
        self.need_reload: bool = False
        self._uniform_cache: dict[str, int] = {}
        self._reload_lock = threading.Lock()

    def allocate(self) -> None:
        """Compile and link. Safe to call multiple times.

        Raises:
            KernelLoadError: If compiling or linking fails.
        """
        if self.allocated:
            return
        self.shader_program = self._compile(self.vertex_source, self.fragment_source)
        self._uniform_cache.clear()
        self.allocated = True

    def deallocate(self) -> None:
        self.allocated = False
        if self.shader_program is not None:
            glDeleteProgram(self.shader_program)
        self.shader_program = None
        self._uniform_cache.clear()

    def reload(self, fragment_source: str) -> bool:
        """Recompile with new fragment source. Returns True on success."""
        with self._reload_lock:
            self.need_reload = False
            try:
                program = self._compile(self.vertex_source, fragment_source)
            except KernelLoadError as e:
                logging.error(f"{self.shader_name} reload failed, keeping previous program: {e}")
                return False

            if self.shader_program is not None:
                glDeleteProgram(self.shader_program)
            self.shader_program = program
            self.fragment_source = fragment_source
            self._uniform_cache.clear()
            self.allocated = True
            logging.info(f"{self.shader_name} reloaded successfully")
            return True

    def get_uniform_loc(self, name: str) -> int:
        """Cached uniform location; -1 when the uniform is unused."""
        location = self._uniform_cache.get(name)
        if location is None:
            location = glGetUniformLocation(self.shader_program, name)
            self._uniform_cache[name] = location
        return location

    def _compile(self, vertex_source: str, fragment_source: str) -> shaders.ShaderProgram:
        try:
            vertex_shader = shaders.compileShader(vertex_source, GL_VERTEX_SHADER)
        except shaders.ShaderCompilationError as e:
            raise KernelLoadError(f"{self.shader_name} VERTEX SHADER ERROR: {e}") from e

        try:
            fragment_shader = shaders.compileShader(fragment_source, GL_FRAGMENT_SHADER)
        except shaders.ShaderCompilationError as e:
            raise KernelLoadError(f"{self.shader_name} FRAGMENT SHADER ERROR: {e}") from e

        try:
            return shaders.compileProgram(vertex_shader, fragment_shader)
        except (shaders.ShaderValidationError, RuntimeError) as e:
            raise KernelLoadError(f"{self.shader_name} PROGRAM LINKING ERROR: {e}") from e
