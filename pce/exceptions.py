"""Exception classes for the PCE SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pce.models import APIResponse


class PCEError(Exception):
    """Base class for every error raised by the PCE SDK.

    Attributes:
        code: Machine-readable error code (e.g. ``"INVALID_METHOD"``
            or ``"HTTP_404"``).
        message: Human-readable error description.
    """

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidMethodError(PCEError):
    """Raised when the HTTP method is not one of GET, POST, PUT or DELETE."""

    def __init__(self, method: str) -> None:
        super().__init__(
            f"invalid http action {method!r}. action must be GET, POST, PUT, or DELETE",
            code="INVALID_METHOD",
        )
        self.method = method


class NetworkError(PCEError):
    """Raised on transport-level failures (DNS, refused connection, TLS)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="NETWORK_ERROR")


class MissingRetryAfterError(PCEError):
    """Raised when an async job response carries no usable ``Retry-After``."""

    def __init__(self, value: str | None) -> None:
        super().__init__(
            f"async job response has no usable Retry-After header (got {value!r})",
            code="MISSING_RETRY_AFTER",
        )
        self.value = value


class DecodeError(PCEError):
    """Raised when a job status or response body cannot be interpreted."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="DECODE_ERROR")


class PollTimeoutError(PCEError):
    """Raised when an async job is still not done after ``max_polls`` polls.

    Attributes:
        job_href: Job-status URL that was being polled.
        polls: Number of poll requests issued.
        last_status: Status reported by the final poll.
    """

    def __init__(self, job_href: str, polls: int, last_status: str) -> None:
        super().__init__(
            f"job {job_href} not done after {polls} polls (last status {last_status!r})",
            code="POLL_TIMEOUT",
        )
        self.job_href = job_href
        self.polls = polls
        self.last_status = last_status


class HTTPStatusError(PCEError):
    """Raised when the final response status code is not 2xx.

    The fully populated response is attached so callers can inspect the
    error detail the PCE places in the body.

    Attributes:
        status: HTTP status code of the response.
        response: The :class:`~pce.models.APIResponse` that failed.
    """

    def __init__(self, response: APIResponse) -> None:
        super().__init__(
            f"http status code of {response.status_code}",
            code=f"HTTP_{response.status_code}",
        )
        self.status = response.status_code
        self.response = response

    def __str__(self) -> str:
        return f"[{self.code}] {self.message} (HTTP {self.status})"
