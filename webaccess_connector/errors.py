"""
Errors — Failure taxonomy for Web Access calls.

Every failure reported by the transport or the request orchestrator is one of
these classes. They are delivered inside a RequestFailure rather than raised,
so callers that prefer exceptions use RequestFailure.raise_error().
"""

from .constants import (
    CONNECTION_FAILED,
    HTTP_UNAUTHORIZED,
    INTEGRATED_LOGON_FAILED,
    NOT_LOGGED_IN,
)


class WebAccessError(Exception):
    """Base class for all Web Access failures.

    Attributes:
        status_code: HTTP status of the exchange (0 when no response arrived).
        error_text: Human readable message, already normalized for display.
    """

    def __init__(self, status_code: int, error_text: str):
        super().__init__(error_text)
        self.status_code = status_code
        self.error_text = error_text

    def __repr__(self):
        return f"{type(self).__name__}({self.status_code!r}, {self.error_text!r})"


class TransportError(WebAccessError):
    """The connection failed before any HTTP status was received."""

    def __init__(self, error_text: str = CONNECTION_FAILED):
        super().__init__(0, error_text)


class HttpStatusError(WebAccessError):
    """The service answered with a non-200 status."""


class AuthRequiredError(WebAccessError):
    """A 403 that could not be recovered by an on-demand login."""

    def __init__(self, error_text: str = NOT_LOGGED_IN):
        super().__init__(HTTP_UNAUTHORIZED, error_text)


class MalformedResponseError(WebAccessError):
    """A JSON body was required but could not be parsed."""


class RemoteBusinessError(WebAccessError):
    """The exchange succeeded but the JSON envelope reports a failure."""


class IntegratedLogonError(WebAccessError):
    """The service redirected to its integrated-logon failure page."""

    def __init__(self, status_code: int, error_text: str = INTEGRATED_LOGON_FAILED):
        super().__init__(status_code, error_text)


class ConfigurationError(ValueError):
    """Connection settings are missing or invalid."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
