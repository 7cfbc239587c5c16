"""Custom exceptions for keepwarm package."""


class KeepwarmError(Exception):
    """Base exception class for all keepwarm errors."""


class ActivityReportError(KeepwarmError):
    """Raised when the remote activity service rejects or misses a ping.

    Attributes:
        message: Human-readable description of the failure.
        status_code: HTTP status code, when the failure came from a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize ActivityReportError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code of the failed response (optional).
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotifierError(KeepwarmError):
    """Raised when the user-facing notification surface fails."""


class ConfigurationError(KeepwarmError):
    """Raised when settings are missing or invalid."""
