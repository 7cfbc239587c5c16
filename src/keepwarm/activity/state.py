"""Coordinator state management.

This module holds the mutable record the activity coordinator drives. It is
separated from the coordinator so diagnostics (CLI, tests) can inspect state
without importing the scheduling code.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class CoordinatorPhase(StrEnum):
    """Phase of the activity coordinator.

    The coordinator can be in one of two phases:
    - IDLE: No coalescing window is open; the next signal reports immediately
    - WINDOW_OPEN: A report was sent for the current window and the timer runs
    """

    IDLE = "idle"
    WINDOW_OPEN = "window_open"


@dataclass
class CoordinatorState:
    """Temporal state of a running activity coordinator.

    Only the coordinator mutates this record, and only from its event loop.

    Attributes:
        timer_armed: True while the coalescing window is open.
        pending_signal: True if activity arrived after the window's report was sent.
        notifying: True while a failure warning is shown to the user.
    """

    timer_armed: bool = False
    pending_signal: bool = False
    notifying: bool = False

    @property
    def phase(self) -> CoordinatorPhase:
        """Current phase derived from the timer flag."""
        return CoordinatorPhase.WINDOW_OPEN if self.timer_armed else CoordinatorPhase.IDLE

    def open_window(self) -> None:
        """Mark a new coalescing window as started."""
        self.timer_armed = True
        self.pending_signal = False

    def close_window(self) -> bool:
        """Close the current window.

        Returns:
            True if activity arrived during the window and a new one should begin.
        """
        self.timer_armed = False
        pending = self.pending_signal
        self.pending_signal = False
        return pending

    def mark_pending(self) -> None:
        """Record activity seen while the window is open."""
        if self.timer_armed:
            self.pending_signal = True

    def snapshot(self) -> dict[str, Any]:
        """Convert to dictionary for logging and display."""
        data = asdict(self)
        data["phase"] = self.phase.value
        return data
