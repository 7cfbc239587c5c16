"""Activity keep-alive coordination.

This package provides:
- ActivityCoordinator for coalescing activity signals into remote pings
- ActivityReporter protocol and HTTPActivityReporter
- Notifier protocol and ConsoleNotifier
- CoordinatorState for inspecting coordinator state
"""

from keepwarm.activity.coordinator import ActivityCoordinator
from keepwarm.activity.messages import (
    VIEW_LOGS_ACTION,
    build_failure_message,
    format_duration,
)
from keepwarm.activity.notifier import ConsoleNotifier, Notifier
from keepwarm.activity.reporter import ActivityReporter, HTTPActivityReporter
from keepwarm.activity.state import CoordinatorPhase, CoordinatorState

__all__ = [
    # Coordinator
    "ActivityCoordinator",
    # Collaborators
    "ActivityReporter",
    "HTTPActivityReporter",
    "Notifier",
    "ConsoleNotifier",
    # State management
    "CoordinatorPhase",
    "CoordinatorState",
    # Messages
    "VIEW_LOGS_ACTION",
    "build_failure_message",
    "format_duration",
]
