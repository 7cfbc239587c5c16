"""Activity coordinator: coalesces activity signals into remote keep-alive pings.

The coordinator receives bursty "user is active" signals and reports to the
workspace service at most once per coalescing window. Failed reports are
retried with a fixed delay; when retries run out the user is warned once per
failure episode and the coordinator carries on as before.

All state lives on one asyncio event loop. The coalescing window is a
``loop.call_later`` timer and each report chain is a background task, so a
chain from an earlier window may still be retrying when a new window opens.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from keepwarm.activity.messages import VIEW_LOGS_ACTION, build_failure_message
from keepwarm.activity.notifier import Notifier
from keepwarm.activity.reporter import ActivityReporter
from keepwarm.activity.state import CoordinatorState
from keepwarm.config import KeepwarmSettings, get_settings
from keepwarm.logging import get_logger

LOG = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _settings_idle_timeout() -> str | None:
    # Read from the environment on every call, not from the cached settings
    try:
        return KeepwarmSettings().idle_timeout
    except ValidationError as exc:
        LOG.warning("idle_timeout_reload_failed", error=str(exc))
        return get_settings().idle_timeout


class ActivityCoordinator:
    """Coalesce activity signals and keep the remote workspace awake.

    Example:
        >>> coordinator = ActivityCoordinator(HTTPActivityReporter(url), ConsoleNotifier())
        >>> coordinator.signal_activity()  # reports now, opens a 60s window
        >>> coordinator.signal_activity()  # coalesced into the next window

    Timing values default to the global settings when not given.
    """

    def __init__(
        self,
        reporter: ActivityReporter,
        notifier: Notifier,
        *,
        coalesce_period: float | None = None,
        retry_delay: float | None = None,
        max_retries: int | None = None,
        idle_timeout_source: Callable[[], str | None] | None = None,
        sleep: SleepFunc = asyncio.sleep,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            reporter: Collaborator that pings the workspace service.
            notifier: Collaborator that warns the user and keeps the log trail.
            coalesce_period: Seconds a window stays open after a report.
            retry_delay: Seconds between failed report attempts.
            max_retries: Retries after the first failed attempt.
            idle_timeout_source: Returns the raw idle timeout; called once per warning.
            sleep: Coroutine used to wait between retries.
            loop: Event loop to schedule on. Bound from the first signal if omitted.
        """
        defaults = get_settings().get_coordinator_config()
        self.coalesce_period: float = (
            defaults["coalesce_period"] if coalesce_period is None else coalesce_period
        )
        self.retry_delay: float = defaults["retry_delay"] if retry_delay is None else retry_delay
        self.max_retries: int = defaults["max_retries"] if max_retries is None else max_retries

        self._reporter = reporter
        self._notifier = notifier
        self._idle_timeout_source = idle_timeout_source or _settings_idle_timeout
        self._sleep = sleep
        self._loop = loop

        self._state = CoordinatorState()
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._stopped = False

    @property
    def state(self) -> CoordinatorState:
        """Current coordinator state."""
        return self._state

    @property
    def in_flight(self) -> int:
        """Number of report chains still running."""
        return len(self._tasks)

    def signal_activity(self) -> None:
        """Record one activity signal.

        Reports immediately when no window is open, otherwise marks the open
        window as having pending activity. Never raises. Must be called on the
        coordinator's event loop thread.
        """
        if self._stopped:
            LOG.debug("activity_signal_ignored", reason="stopped")
            return

        if self._state.timer_armed:
            self._state.mark_pending()
            return

        try:
            loop = self._bind_loop()
        except RuntimeError as exc:
            LOG.warning("activity_signal_dropped", error=str(exc))
            return
        self._begin_window(loop)

    def signal_activity_threadsafe(self) -> None:
        """Record one activity signal from any thread."""
        if self._loop is None or self._loop.is_closed():
            LOG.warning("activity_signal_dropped", error="coordinator has no event loop")
            return
        self._loop.call_soon_threadsafe(self.signal_activity)

    def stop(self) -> None:
        """Cancel the coalescing timer and in-flight report chains.

        Signals received afterwards are ignored.
        """
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        cancelled = 0
        for task in list(self._tasks):
            if task.cancel():
                cancelled += 1
        self._state.close_window()
        LOG.info("activity_coordinator_stopped", cancelled_reports=cancelled)

    async def drain(self) -> None:
        """Wait until every in-flight report chain has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def flush(self) -> None:
        """Close the open window now.

        Activity marked pending in the window is reported at once instead of
        waiting for the timer. Does nothing when no window is open or after
        ``stop()``.
        """
        if self._stopped or self._timer is None:
            return
        self._timer.cancel()
        self._close_window()

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _begin_window(self, loop: asyncio.AbstractEventLoop) -> None:
        task = loop.create_task(self._report_with_retry())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        self._timer = loop.call_later(self.coalesce_period, self._close_window)
        self._state.open_window()
        LOG.debug("activity_window_opened", coalesce_period=self.coalesce_period)

    def _close_window(self) -> None:
        self._timer = None
        if self._state.close_window():
            LOG.debug("activity_window_rearmed")
            self._begin_window(self._bind_loop())
        else:
            LOG.debug("activity_window_closed")

    async def _report_with_retry(self) -> None:
        attempts_left = self.max_retries
        attempt = 0
        while True:
            attempt += 1
            try:
                await self._call_reporter()
            except Exception as exc:  # noqa: BLE001
                if attempts_left > 0:
                    LOG.info(
                        "report_attempt_failed",
                        attempt=attempt,
                        attempts_left=attempts_left,
                        retry_in=self.retry_delay,
                        error=_describe(exc),
                    )
                    self._log_trail(
                        f"Activity tracker: attempt {attempt} failed, "
                        f"retrying in {self.retry_delay:g}s: {_describe(exc)}"
                    )
                    attempts_left -= 1
                    await self._sleep(self.retry_delay)
                    continue

                LOG.warning("report_attempts_exhausted", attempts=attempt, error=_describe(exc))
                self._log_trail(
                    f"Activity tracker: Failed to ping activity service: {_describe(exc)}"
                )
                await self._notify_failure()
                return

            LOG.debug("report_succeeded", attempt=attempt)
            if attempt > 1:
                self._log_trail(f"Activity tracker: ping succeeded after {attempt} attempts")
            return

    async def _call_reporter(self) -> None:
        report = self._reporter.report_activity
        if inspect.iscoroutinefunction(report):
            await report()
            return
        # A plain callable may still return an awaitable
        result = await asyncio.to_thread(report)
        if inspect.isawaitable(result):
            await result

    async def _notify_failure(self) -> None:
        if self._state.notifying:
            LOG.debug("failure_notification_suppressed")
            return

        self._state.notifying = True
        try:
            message = build_failure_message(self._idle_timeout_source())
            choice = await self._notifier.warn(message, VIEW_LOGS_ACTION)
            if choice == VIEW_LOGS_ACTION:
                self._notifier.reveal_logs()
        except Exception as exc:  # noqa: BLE001
            LOG.warning("failure_notification_failed", error=_describe(exc))
        finally:
            self._state.notifying = False

    def _log_trail(self, line: str) -> None:
        try:
            self._notifier.log(line)
        except Exception as exc:  # noqa: BLE001
            LOG.warning("activity_log_failed", error=_describe(exc))
