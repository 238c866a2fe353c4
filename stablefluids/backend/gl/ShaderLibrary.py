"""Shader source provider with asynchronous loading and hot-reload."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..CommandSink import VERTEX_PROGRAM

DEFAULT_SHADER_DIR = Path(__file__).resolve().parents[2] / "shaders"


class FileModifiedHandler(FileSystemEventHandler):
    DEBOUNCE = 0.5

    def __init__(self, callback: Callable[[str], None], clock: Callable[[], float] = time.time) -> None:
        self.callback = callback
        self.clock = clock
        self.last_modified: dict[str, float] = {}

    def on_modified(self, event) -> None:
        if event.is_directory:
            return
        path = str(event.src_path)
        now = self.clock()
        # Editors fire several events per save; each file debounces on its own
        if now - self.last_modified.get(path, float("-inf")) < self.DEBOUNCE:
            return
        self.last_modified[path] = now
        self.callback(path)


class ShaderLibrary():
    """Reads `<name>.frag` programs and the `basic.vert` vertex stage from a directory.

    Files are read on a worker thread; load() returns a Future that resolves
    to {name: source}, with None for names that have no file.
    """

    VERTEX_SUFFIX = '.vert'
    FRAGMENT_SUFFIX = '.frag'

    def __init__(self, shader_dir: Path | str = DEFAULT_SHADER_DIR) -> None:
        self.shader_dir: Path = Path(shader_dir)
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="shader-loader")
        self._observer: Observer | None = None
        self._lock = threading.Lock()

    def path(self, name: str) -> Path:
        suffix = self.VERTEX_SUFFIX if name == VERTEX_PROGRAM else self.FRAGMENT_SUFFIX
        return self.shader_dir / f"{name}{suffix}"

    def read(self, name: str) -> str | None:
        try:
            return self.path(name).read_text()
        except FileNotFoundError:
            return None

    def load(self, names: tuple[str, ...]) -> Future[dict[str, str | None]]:
        return self._executor.submit(lambda: {name: self.read(name) for name in names})

    def watch(self, callback: Callable[[str], None]) -> None:
        """Call callback(name) whenever a program file in the directory changes."""
        def on_file_changed(file_path: str) -> None:
            path = Path(file_path)
            if path.suffix in (self.VERTEX_SUFFIX, self.FRAGMENT_SUFFIX):
                callback(path.stem)

        with self._lock:
            if self._observer is not None:
                return
            self._observer = Observer()
            self._observer.schedule(FileModifiedHandler(on_file_changed), path=str(self.shader_dir), recursive=False)
            self._observer.start()
        logging.info(f"Watching shader directory: {self.shader_dir}")

    def close(self) -> None:
        with self._lock:
            if self._observer is not None:
                self._observer.stop()
                self._observer.join(timeout=2.0)
                self._observer = None
        self._executor.shutdown(wait=False)
