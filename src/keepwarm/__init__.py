"""keepwarm - keep an idle-evicted workspace awake while its user is active.

Bursty activity signals from a local client are coalesced into at most one
ping per period to the workspace service. Failed pings are retried, and the
user is warned once when the service stays unreachable.

Example:
    >>> from keepwarm import ActivityCoordinator, ConsoleNotifier, HTTPActivityReporter
    >>> reporter = HTTPActivityReporter("http://127.0.0.1:3333/activity/tick")
    >>> coordinator = ActivityCoordinator(reporter, ConsoleNotifier())
    >>> coordinator.signal_activity()  # inside a running event loop
"""

from keepwarm.activity import (
    ActivityCoordinator,
    ActivityReporter,
    ConsoleNotifier,
    CoordinatorPhase,
    CoordinatorState,
    HTTPActivityReporter,
    Notifier,
    build_failure_message,
    format_duration,
)
from keepwarm.config import KeepwarmSettings, get_settings
from keepwarm.exceptions import (
    ActivityReportError,
    ConfigurationError,
    KeepwarmError,
    NotifierError,
)

__version__ = "0.3.0"

__all__ = [
    # Version
    "__version__",
    # Coordination
    "ActivityCoordinator",
    "CoordinatorPhase",
    "CoordinatorState",
    # Collaborators
    "ActivityReporter",
    "HTTPActivityReporter",
    "Notifier",
    "ConsoleNotifier",
    # Messages
    "build_failure_message",
    "format_duration",
    # Configuration
    "KeepwarmSettings",
    "get_settings",
    # Exceptions
    "KeepwarmError",
    "ActivityReportError",
    "NotifierError",
    "ConfigurationError",
]
