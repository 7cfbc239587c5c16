"""Tests for the console notifier."""

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from keepwarm.activity.messages import VIEW_LOGS_ACTION
from keepwarm.activity.notifier import ConsoleNotifier, Notifier
from keepwarm.exceptions import NotifierError


@pytest.fixture
def output() -> io.StringIO:
    """Capture console output."""
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Create a plain-text console writing to the capture buffer."""
    return Console(file=output, width=200, color_system=None)


class TestConsoleNotifier:
    """Tests for ConsoleNotifier."""

    def test_satisfies_protocol(self, console: Console) -> None:
        assert isinstance(ConsoleNotifier(console=console), Notifier)

    @pytest.mark.asyncio
    async def test_warn_prints_and_dismisses(
        self, console: Console, output: io.StringIO
    ) -> None:
        notifier = ConsoleNotifier(console=console)

        result = await notifier.warn("Failed to communicate with idling service.", VIEW_LOGS_ACTION)

        assert result is None
        assert "Failed to communicate with idling service." in output.getvalue()

    @pytest.mark.asyncio
    async def test_interactive_warn_returns_action_when_confirmed(self, console: Console) -> None:
        notifier = ConsoleNotifier(console=console, interactive=True)

        with patch("keepwarm.activity.notifier.Confirm.ask", return_value=True) as mock_ask:
            result = await notifier.warn("Service unreachable", VIEW_LOGS_ACTION)

        assert result == VIEW_LOGS_ACTION
        mock_ask.assert_called_once_with("View Logs?", console=console, default=False)

    @pytest.mark.asyncio
    async def test_interactive_warn_declined(self, console: Console) -> None:
        notifier = ConsoleNotifier(console=console, interactive=True)

        with patch("keepwarm.activity.notifier.Confirm.ask", return_value=False):
            result = await notifier.warn("Service unreachable", VIEW_LOGS_ACTION)

        assert result is None

    @pytest.mark.asyncio
    async def test_interactive_warn_without_input_raises(self, console: Console) -> None:
        notifier = ConsoleNotifier(console=console, interactive=True)

        with (
            patch("keepwarm.activity.notifier.Confirm.ask", side_effect=EOFError),
            pytest.raises(NotifierError, match="Could not read answer"),
        ):
            await notifier.warn("Service unreachable", VIEW_LOGS_ACTION)

    def test_log_keeps_trail(self, console: Console) -> None:
        notifier = ConsoleNotifier(console=console)

        notifier.log("Activity tracker: attempt 1 failed")

        assert len(notifier.lines) == 1
        assert notifier.lines[0].endswith("Activity tracker: attempt 1 failed")

    def test_log_trail_is_bounded(self, console: Console) -> None:
        notifier = ConsoleNotifier(console=console, max_lines=2)

        for i in range(5):
            notifier.log(f"line {i}")

        assert [line.split(" ", 1)[1] for line in notifier.lines] == ["line 3", "line 4"]

    def test_reveal_logs_prints_trail(self, console: Console, output: io.StringIO) -> None:
        notifier = ConsoleNotifier(console=console)
        notifier.log("Activity tracker: Failed to ping activity service: refused")

        notifier.reveal_logs()

        text = output.getvalue()
        assert "Activity tracker logs" in text
        assert "Failed to ping activity service: refused" in text

    def test_reveal_logs_when_empty(self, console: Console, output: io.StringIO) -> None:
        ConsoleNotifier(console=console).reveal_logs()

        assert "No log entries" in output.getvalue()
