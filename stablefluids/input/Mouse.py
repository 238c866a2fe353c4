"""Pointer input aggregation.

The window's input callbacks produce Motion samples while a button is held;
the solver drains them once per frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import Lock



class Button(Enum):
    NONE =          0
    LEFT_UP =       1
    LEFT_DOWN =     2
    MIDDLE_UP =     3
    MIDDLE_DOWN =   4
    RIGHT_UP =      5
    RIGHT_DOWN =    6


@dataclass(frozen=True)
class Motion:
    """One pointer sample in window pixels (origin top-left)."""
    position: tuple[float, float]
    drag: tuple[float, float]
    left: bool = False
    right: bool = False


class Mouse():
    """Thread-safe queue of pointer motions.

    Append and drain share one lock, so a motion added while a frame is being
    processed is delivered with the next frame: never lost, never twice.
    """

    def __init__(self) -> None:
        self.position: tuple[float, float] = (0.0, 0.0)
        self.left: bool = False
        self.right: bool = False
        self._motions: list[Motion] = []
        self._lock = Lock()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._motions)

    def add_motion(self, motion: Motion) -> None:
        with self._lock:
            self._motions.append(motion)

    def drain(self) -> list[Motion]:
        """Return all queued motions in arrival order and empty the queue."""
        with self._lock:
            motions, self._motions = self._motions, []
        return motions

    def move(self, x: float, y: float) -> None:
        """Cursor moved to window position (x, y)."""
        with self._lock:
            drag = (x - self.position[0], y - self.position[1])
            self.position = (x, y)
            if self.left or self.right:
                self._motions.append(Motion((x, y), drag, self.left, self.right))

    def button(self, event: Button) -> None:
        """Update button state; presses do not queue a motion by themselves."""
        with self._lock:
            if event == Button.LEFT_DOWN:
                self.left = True
            elif event == Button.LEFT_UP:
                self.left = False
            elif event == Button.RIGHT_DOWN:
                self.right = True
            elif event == Button.RIGHT_UP:
                self.right = False
