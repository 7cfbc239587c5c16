"""User-facing text for activity reporting failures."""

from keepwarm.config import parse_idle_timeout

VIEW_LOGS_ACTION = "View Logs"

BASE_FAILURE_MESSAGE = "Failed to communicate with idling service."
TERMINATE_SOON = " This development environment may automatically terminate soon."
TERMINATE_IN = " This development environment may automatically terminate in {duration}."
EPHEMERAL_WARNING = (
    " For environments with the ephemeral storage type, you may lose any unsaved work."
    " Please contact an administrator."
)

_UNITS = (("hour", 3600), ("minute", 60), ("second", 1))


def format_duration(total_seconds: int) -> str:
    """Render a number of seconds as hours, minutes and seconds.

    Zero-valued units are omitted and a unit is pluralized only when its value
    is greater than one.

    Example:
        >>> format_duration(3723)
        '1 hour 2 minutes 3 seconds'
        >>> format_duration(90)
        '1 minute 30 seconds'

    Args:
        total_seconds: Non-negative duration in seconds.

    Returns:
        Space-separated duration, or an empty string for zero.
    """
    remaining = max(int(total_seconds), 0)
    parts: list[str] = []
    for unit, size in _UNITS:
        value, remaining = divmod(remaining, size)
        if value > 0:
            parts.append(f"{value} {unit}{'s' if value > 1 else ''}")
    return " ".join(parts)


def build_failure_message(idle_timeout: str | None) -> str:
    """Compose the warning shown when activity reports keep failing.

    Args:
        idle_timeout: Raw "seconds of inactivity before idling" value, or None
            when the environment does not define it. A blank value counts as
            unset.

    Returns:
        Full warning text.
    """
    message = BASE_FAILURE_MESSAGE
    if idle_timeout is None or not idle_timeout.strip():
        message += TERMINATE_SOON
    else:
        seconds = parse_idle_timeout(idle_timeout)
        # Malformed or non-positive timeouts give no estimate at all
        if seconds is not None and seconds > 0:
            message += TERMINATE_IN.format(duration=format_duration(seconds))
    return message + EPHEMERAL_WARNING
