"""Fakes for the coordinator collaborators.

Imported by test modules as ``from fakes import ...``; the test directory is on
sys.path under pytest's default import mode.
"""

import asyncio
from collections.abc import Callable

from keepwarm.exceptions import ActivityReportError


class FakeReporter:
    """Async reporter that fails a set number of times before succeeding.

    Attributes:
        calls: Number of report attempts so far.
        call_times: Virtual time of each attempt, taken from the given clock.
    """

    def __init__(
        self,
        failures: int = 0,
        always_fail: bool = False,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.failures = failures
        self.always_fail = always_fail
        self.clock = clock
        self.calls = 0
        self.call_times: list[float] = []

    async def report_activity(self) -> None:
        self.calls += 1
        if self.clock is not None:
            self.call_times.append(self.clock())
        if self.always_fail or self.calls <= self.failures:
            raise ActivityReportError(f"connection refused (attempt {self.calls})")


class FakeNotifier:
    """Notifier that records warnings and can hold them open until released."""

    def __init__(self) -> None:
        self.warnings: list[tuple[str, str]] = []
        self.lines: list[str] = []
        self.revealed = 0
        self.answer: str | None = None
        self.release: asyncio.Event | None = None

    async def warn(self, message: str, action_label: str) -> str | None:
        self.warnings.append((message, action_label))
        if self.release is not None:
            await self.release.wait()
        return self.answer

    def reveal_logs(self) -> None:
        self.revealed += 1

    def log(self, line: str) -> None:
        self.lines.append(line)


class VirtualSleep:
    """Sleep replacement that advances a virtual clock instead of waiting."""

    def __init__(self) -> None:
        self.now = 0.0
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.now += delay
        await asyncio.sleep(0)

    def clock(self) -> float:
        return self.now


async def wait_until(predicate: Callable[[], bool], attempts: int = 1000) -> None:
    """Yield to the event loop until predicate() holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was not reached")


