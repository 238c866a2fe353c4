"""GLFW window driving the simulation: one solver step and one display pass per frame."""

from __future__ import annotations

import logging
import time
from threading import Thread, Lock, current_thread
from typing import Optional

import glfw
import OpenGL.GL as gl

from ..Display import Display
from ..Settings import Settings
from ..Solver import Solver
from ..backend import load_programs
from ..backend.gl import GLSink, ShaderLibrary
from ..gui.ControlSurface import ControlSurface
from ..input.Mouse import Mouse, Button
from .FpsCounter import FpsCounter


class FluidWindow():
    def __init__(self, settings: Settings, library: ShaderLibrary | None = None) -> None:
        self.settings: Settings = settings
        config = settings.window

        self.window_width: int = config.width
        self.window_height: int = config.height
        self.framebuffer_width: int = config.width
        self.framebuffer_height: int = config.height
        self.window_name: str = config.title
        self.fullscreen: bool = config.fullscreen
        self.v_sync: bool = config.v_sync
        self.frame_interval: None | int = None
        if config.fps > 0:
            self.frame_interval = int((1.0 / config.fps) * 1_000_000_000)
            self.v_sync = False  # Frame pacing is manual

        self.fps = FpsCounter()
        self.main_window: Optional[glfw._GLFWwindow] = None
        self.render_thread: Thread | None = None
        self.callback_lock = Lock()
        self.error: BaseException | None = None

        self.library: ShaderLibrary = library or ShaderLibrary()
        self.mouse: Mouse = Mouse()
        self.sink: GLSink | None = None
        self.solver: Solver | None = None
        self.display: Display | None = None
        self.control: ControlSurface = ControlSurface(
            settings.grid, settings.advect, settings.jacobi, settings.splat, settings.display,
            reset_callback=self._request_reset)
        self._reset_requested: bool = False

    @property
    def is_running(self) -> bool:
        return self.render_thread is not None and self.render_thread.is_alive()

    def start(self) -> None:
        """Start the render thread"""
        if self.render_thread is None or not self.render_thread.is_alive():
            self.render_thread = Thread(target=self.run, daemon=False, name="render")
            self.render_thread.start()

    def stop(self) -> None:
        """Ask the render thread to finish and wait for it"""
        if not self.render_thread or not self.render_thread.is_alive():
            return
        if current_thread() is self.render_thread:
            return

        if self.main_window:
            glfw.set_window_should_close(self.main_window, True)
            glfw.post_empty_event()

        self.render_thread.join(timeout=2.0)
        if self.render_thread.is_alive():
            logging.warning("Render thread didn't stop gracefully")

    def run(self) -> None:
        """Render thread entry point. Any error ends the loop; it is kept in self.error."""
        try:
            self._setup_window()
            self._setup_opengl()
            self.allocate()
            self._main_loop()
        except Exception as e:
            self.error = e
            logging.exception(f"Fluid simulation stopped: {e}")
        finally:
            self.deallocate()
            self._cleanup()

    # SETUP
    def _setup_window(self) -> None:
        if not glfw.init():
            raise RuntimeError("Failed to initialize GLFW")

        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 4)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 1)
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_COMPAT_PROFILE)
        glfw.window_hint(glfw.RESIZABLE, glfw.TRUE)

        monitor = glfw.get_primary_monitor() if self.fullscreen else None
        self.main_window = glfw.create_window(self.window_width, self.window_height, self.window_name, monitor, None)
        if not self.main_window:
            glfw.terminate()
            raise RuntimeError("Failed to create GLFW window")

        glfw.make_context_current(self.main_window)
        glfw.swap_interval(1 if self.v_sync else 0)

        self.window_width, self.window_height = glfw.get_window_size(self.main_window)
        self.framebuffer_width, self.framebuffer_height = glfw.get_framebuffer_size(self.main_window)

        glfw.set_window_size_callback(self.main_window, self.window_size_callback)
        glfw.set_framebuffer_size_callback(self.main_window, self.framebuffer_size_callback)
        glfw.set_key_callback(self.main_window, self.notify_key_callback)
        glfw.set_cursor_pos_callback(self.main_window, self.notify_cursor_pos_callback)
        glfw.set_mouse_button_callback(self.main_window, self.notify_mouse_button_callback)

    def _setup_opengl(self) -> None:
        # Blending would mix dispatch results with stale buffer contents
        gl.glDisable(gl.GL_BLEND)
        gl.glDisable(gl.GL_DEPTH_TEST)
        gl.glClearColor(0.0, 0.0, 0.0, 1.0)

        version = gl.glGetString(gl.GL_VERSION)
        logging.info(f"OpenGL version: {version.decode('utf-8')}")  # type: ignore

    def allocate(self) -> None:
        """Load the kernel programs and build the solver. Fails before the first frame."""
        self.sink = GLSink()
        programs = load_programs(self.sink, self.library)

        settings = self.settings
        self.solver = Solver.make(
            settings.grid, (self.window_width, self.window_height), self.sink, programs,
            settings.advect, settings.jacobi, settings.splat)
        self.display = Display(programs, settings.display)

        if settings.window.hot_reload:
            self.library.watch(self.sink.mark_reload)

    def deallocate(self) -> None:
        if self.sink is None:
            return
        if self.solver is not None:
            self.solver.deallocate(self.sink)
            self.solver = None
        self.sink.deallocate_programs()
        self.library.close()
        self.sink = None

    def _cleanup(self) -> None:
        try:
            if self.main_window:
                glfw.destroy_window(self.main_window)
                self.main_window = None
            glfw.terminate()
        except Exception as e:
            logging.error(f"Error cleaning up GLFW: {e}")

    # LOOP
    def _main_loop(self) -> None:
        next_frame_time = time.time_ns()
        while not glfw.window_should_close(self.main_window):
            self.draw()
            glfw.swap_buffers(self.main_window)
            self.fps.tick()
            glfw.set_window_title(self.main_window, f'{self.window_name} - FPS: {self.fps.get_fps()} (Min: {self.fps.get_min_fps()})')
            glfw.poll_events()

            if not self.v_sync and self.frame_interval:
                next_frame_time += self.frame_interval
                remaining: int = next_frame_time - time.time_ns()
                if remaining > 0:
                    time.sleep(remaining / 1_000_000_000)
                elif -remaining > self.frame_interval:
                    # Behind schedule: resynchronise instead of trying to catch up
                    next_frame_time = time.time_ns()

    def draw(self) -> None:
        """One frame. Errors propagate so that stepping stops instead of skipping a frame."""
        assert self.sink is not None and self.solver is not None and self.display is not None

        self.sink.reload_pending(self.library)
        if self._reset_requested:
            self._reset_requested = False
            self.solver.reset(self.sink)

        self.solver.window_size = (self.window_width, self.window_height)
        self.solver.step(self.sink, self.mouse)

        gl.glBindFramebuffer(gl.GL_FRAMEBUFFER, 0)
        gl.glViewport(0, 0, self.framebuffer_width, self.framebuffer_height)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT)
        self.sink.screen_viewport = self._screen_viewport()
        self.display.render(self.sink, self.solver.slabs)

    def _screen_viewport(self) -> tuple[int, int, int, int]:
        """Framebuffer region for the display pass, magnified about the centre by grid.scale."""
        scale = self.settings.grid.scale
        width = int(self.framebuffer_width * scale)
        height = int(self.framebuffer_height * scale)
        return ((self.framebuffer_width - width) // 2, (self.framebuffer_height - height) // 2, width, height)

    def _request_reset(self) -> None:
        # Key callbacks run inside poll_events, outside draw()
        self._reset_requested = True

    # CALLBACKS
    def window_size_callback(self, window, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self.window_width = width
        self.window_height = height

    def framebuffer_size_callback(self, window, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self.framebuffer_width = width
        self.framebuffer_height = height

    def notify_key_callback(self, window, key, scancode, action, mods) -> None:
        if action != glfw.PRESS and action != glfw.REPEAT:
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(self.main_window, True)
            return
        if 32 <= key <= 126:
            with self.callback_lock:
                self.control.on_key(bytes([key]))

    def notify_cursor_pos_callback(self, window, xpos, ypos) -> None:
        self.mouse.move(xpos, ypos)

    def notify_mouse_button_callback(self, window, button, action, mods) -> None:
        pressed = action == glfw.PRESS
        if button == glfw.MOUSE_BUTTON_LEFT:
            self.mouse.button(Button.LEFT_DOWN if pressed else Button.LEFT_UP)
        elif button == glfw.MOUSE_BUTTON_MIDDLE:
            self.mouse.button(Button.MIDDLE_DOWN if pressed else Button.MIDDLE_UP)
        elif button == glfw.MOUSE_BUTTON_RIGHT:
            self.mouse.button(Button.RIGHT_DOWN if pressed else Button.RIGHT_UP)
