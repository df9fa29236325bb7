"""
Outcomes — Request descriptors and the Success/Failure result types.

A RequestDescriptor describes one logical call (path, verb, payload, response
requirements). The orchestrator executes it and delivers exactly one outcome:

    RequestSuccess  data, response, status_code, logged_on, logged_off
    RequestFailure  status_code, error_text, error, logged_on, logged_off

logged_on / logged_off report whether that call itself performed a login or a
logout, so a caller can tell "worked first try" from "worked after a silent
re-authentication".
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .constants import RequestVerb
from .errors import WebAccessError


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of one remote call."""

    path: str
    verb: RequestVerb
    payload: Dict[str, Any] = field(default_factory=dict)
    require_json: bool = True
    response_processor: Optional[Callable[[Any, Any], None]] = None


@dataclass
class RequestSuccess:
    data: Any
    response: Any = None
    status_code: int = 200
    logged_on: bool = False
    logged_off: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass
class RequestFailure:
    status_code: int
    error_text: str
    error: Optional[WebAccessError] = None
    logged_on: bool = False
    logged_off: bool = False

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, error: WebAccessError) -> "RequestFailure":
        return cls(status_code=error.status_code, error_text=error.error_text, error=error)

    def raise_error(self):
        """Raise the carried WebAccessError (or a generic one if none was kept)."""
        if self.error is not None:
            raise self.error
        raise WebAccessError(self.status_code, self.error_text)
