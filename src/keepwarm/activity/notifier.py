"""User-facing notification surface for the activity coordinator."""

import asyncio
from collections import deque
from datetime import datetime
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm

from keepwarm.exceptions import NotifierError
from keepwarm.logging import get_logger

LOG = get_logger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Protocol for warning the user and keeping a diagnostic trail."""

    async def warn(self, message: str, action_label: str) -> str | None:
        """Show a warning with a single optional action.

        Args:
            message: Warning text.
            action_label: Label of the action the user may choose.

        Returns:
            The action label if chosen, None if the warning was dismissed.
        """
        ...

    def reveal_logs(self) -> None:
        """Bring the diagnostic log surface into view."""
        ...

    def log(self, line: str) -> None:
        """Append a line to the diagnostic trail."""
        ...


class ConsoleNotifier:
    """Notifier that writes to the terminal with rich.

    Log lines are kept in a bounded in-memory trail and printed on
    reveal_logs(). In interactive mode the user is asked whether to view the
    trail after each warning; otherwise warnings are shown and dismissed.
    """

    def __init__(
        self,
        console: Console | None = None,
        interactive: bool = False,
        max_lines: int = 200,
    ) -> None:
        self.console = console or Console(stderr=True)
        self.interactive = interactive
        self.lines: deque[str] = deque(maxlen=max_lines)

    async def warn(self, message: str, action_label: str) -> str | None:
        self.console.print(
            Panel(escape(message), title="⚠ Activity tracker", border_style="yellow")
        )
        if not self.interactive:
            return None

        try:
            chosen = await asyncio.to_thread(
                Confirm.ask, f"{action_label}?", console=self.console, default=False
            )
        except (EOFError, OSError) as exc:
            raise NotifierError(f"Could not read answer to warning: {exc}") from exc
        return action_label if chosen else None

    def reveal_logs(self) -> None:
        body = escape("\n".join(self.lines)) if self.lines else "[dim]No log entries[/dim]"
        self.console.print(Panel(body, title="Activity tracker logs", border_style="cyan"))

    def log(self, line: str) -> None:
        stamp = datetime.now().isoformat(timespec="seconds")
        self.lines.append(f"{stamp} {line}")
        LOG.debug("activity_log_line", line=line)
