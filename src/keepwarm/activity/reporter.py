"""Activity reporter protocol and implementations.

This module defines the ActivityReporter protocol the coordinator calls to
reset the remote inactivity timer, plus an HTTP reporter for the common case
of a single "activity tick" endpoint.
"""

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

import requests

from keepwarm.exceptions import ActivityReportError
from keepwarm.logging import get_logger

LOG = get_logger(__name__)


@runtime_checkable
class ActivityReporter(Protocol):
    """Protocol for telling the workspace service that the user is active.

    Implementations either return normally (the ping was accepted) or raise.
    The method may be a plain function or a coroutine function; synchronous
    reporters are run in a worker thread so they never block the event loop.
    An awaitable returned by a plain function is awaited as the report.

    Example:
        >>> class DevWorkspaceReporter:
        ...     def report_activity(self):
        ...         response = requests.post("http://localhost:3333/activity/tick")
        ...         if not response.ok:
        ...             raise ActivityReportError(f"HTTP {response.status_code}")
    """

    def report_activity(self) -> None | Awaitable[None]:
        """Reset the remote idle-eviction timer.

        Must be safe to call repeatedly.

        Raises:
            Exception: Any failure. The message should be human-readable.
        """
        ...


class HTTPActivityReporter:
    """Activity reporter that calls a single HTTP endpoint.

    Example:
        >>> reporter = HTTPActivityReporter("http://127.0.0.1:3333/activity/tick")
        >>> reporter.report_activity()
    """

    def __init__(
        self,
        url: str,
        method: str = "POST",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize HTTP activity reporter.

        Args:
            url: Endpoint that resets the inactivity timer.
            method: HTTP method for the request (POST, PUT, PATCH, GET).
            timeout: Request timeout in seconds.
            session: Optional requests.Session to reuse connections and headers.
        """
        self.url = url
        self.method = method.upper()
        self.timeout = timeout
        self.session = session or requests.Session()

    def report_activity(self) -> None:
        """Send the activity request.

        Raises:
            ActivityReportError: If the request fails or returns a non-2xx status.
        """
        try:
            response = self.session.request(
                method=self.method,
                url=self.url,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOG.warning("report_activity_failed", url=self.url, error=str(exc))
            raise ActivityReportError(f"Request to {self.url} failed: {exc}") from exc

        LOG.debug(
            "report_activity_result",
            url=self.url,
            success=response.ok,
            status_code=response.status_code,
        )
        if not response.ok:
            raise ActivityReportError(
                f"Activity endpoint {self.url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
