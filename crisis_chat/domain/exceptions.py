"""Errors raised while talking to the analysis backend."""

from typing import Optional


class AnalysisClientError(Exception):
    """Base class for analysis client failures."""


class TransportError(AnalysisClientError):
    """The request never completed (DNS, refused connection, timeout)."""


class ServerError(AnalysisClientError):
    """The backend answered with a non-success status or an unusable body."""

    def __init__(self, status_code: Optional[int], detail: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail or "Unknown error"
        if status_code is None:
            message = f"API returned an invalid response: {self.detail}"
        else:
            message = f"API returned status {status_code}: {self.detail}"
        super().__init__(message)

    @property
    def is_client_error(self) -> bool:
        """Whether the status is in the 4xx range."""
        return self.status_code is not None and 400 <= self.status_code < 500


class ExhaustedError(AnalysisClientError):
    """All attempts failed.

    The message is stable so callers can show it to the user as-is; the last
    underlying failure is kept on ``last_error`` and chained as ``__cause__``.
    """

    summary = "Failed to connect to the analysis backend after multiple retries."

    def __init__(self, attempts: int, last_error: Optional[AnalysisClientError] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(self.summary)
