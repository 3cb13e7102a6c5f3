"""
Exception hierarchy for the Viteset client.

ConfigurationError subclasses are raised synchronously by subscribe().
FetchError subclasses are never raised by the polling loop; they are
delivered to the subscriber inside Update.error.
"""

from typing import Optional


class VitesetError(Exception):
    """Base exception for all Viteset client errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(VitesetError):
    """Invalid client configuration or lifecycle misuse."""


class MissingFieldError(ConfigurationError):
    """A required configuration field is empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"missing {field}")


class AlreadyActiveError(ConfigurationError):
    """subscribe() was called on a client that is active or was canceled."""

    def __init__(self, message: str = "client subscription is already active"):
        super().__init__(message)


class FetchError(VitesetError):
    """A single fetch of the blob failed."""


class TransportError(FetchError):
    """Network or request construction failure."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"transport error: {detail}")


class ProtocolError(FetchError):
    """The server answered with an unexpected HTTP status."""

    def __init__(self, status: int, body: str, expected: int = 200):
        self.status = status
        self.body = body
        self.expected = expected
        super().__init__(
            f"expected status code {expected} but got {status}: `{body}`"
        )


def describe(error: Optional[BaseException]) -> str:
    """Short single-line description for log messages."""
    if error is None:
        return "none"
    return f"{type(error).__name__}: {error}"
