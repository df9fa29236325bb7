"""
Web Access Request — Executes one call with on-demand logon.

Every connector operation (query, save, delete, action, logon, logoff) is run
by its own WebAccessRequest. The request is a small state machine:

    IDLE ──go()──> IN_FLIGHT ──200──────────────────────────────> SUCCEEDED
                      │                                              ^
                      ├─403, login on demand, not yet attempted      │
                      │      └─> AUTH_RETRY_PENDING ─logon ok─> IN_FLIGHT (replay)
                      │                             └─logon failed──> FAILED
                      ├─other error / 403 not retriable ───────────> FAILED
                      └─auto log-off armed ─> AUTO_LOG_OFF_PENDING ─> SUCCEEDED | FAILED

Key behaviors:
  - At most one logon per request. The latch is set before the logon call is
    issued, so a replay that is rejected again is reported as "Not Logged In"
    instead of looping.
  - The logon completes fully before the original call is replayed.
  - With auto log-off, the logoff result is ignored: the outcome captured
    before the logoff is what the caller receives, with logged_off=True.
  - The outcome is stamped with logged_on / logged_off just before delivery.
"""

from enum import Enum
from typing import Any, Callable, Optional

from .constants import HTTP_UNAUTHORIZED, LOGOFF_PATH, LOGON_PATH, RequestVerb
from .errors import AuthRequiredError, RemoteBusinessError, WebAccessError
from .outcomes import RequestDescriptor, RequestFailure, RequestSuccess
from .settings import ConnectionInfo
from .transport import WebAccessTransport


class RequestState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    AUTH_RETRY_PENDING = "auth_retry_pending"
    AUTO_LOG_OFF_PENDING = "auto_log_off_pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _logon_rejected(data: Any) -> bool:
    return isinstance(data, dict) and data.get("result") is False


class WebAccessRequest:
    """Runs one RequestDescriptor (or an explicit logon/logoff).

    Attributes:
        connection_info: Shared, read-only connection settings.
        descriptor: The call to execute; None for explicit logon/logoff.
        state: Current RequestState.
        outcome: The delivered RequestSuccess/RequestFailure, once terminal.
    """

    def __init__(
        self,
        connection_info: ConnectionInfo,
        transport: WebAccessTransport,
        descriptor: Optional[RequestDescriptor] = None,
        on_load: Optional[Callable[[RequestSuccess], None]] = None,
        on_error: Optional[Callable[[RequestFailure], None]] = None,
        debug: bool = False,
    ):
        self.connection_info = connection_info
        self.descriptor = descriptor
        self.debug = debug
        self.state = RequestState.IDLE
        self.outcome = None
        self._transport = transport
        self._on_load_callback = on_load
        self._on_error_callback = on_error
        self._login_attempted = False
        self._auto_log_off = False
        self._logged_on = False
        self._logged_off = False
        self._result = None

    def go(self):
        """Issue the described call.

        Returns:
            The final outcome. The bundled transport is synchronous, so the
            outcome (including any logon/replay/logoff) is known on return.

        Raises:
            ValueError: If the request has no descriptor.
            RuntimeError: If the request was already started.
        """
        if self.descriptor is None:
            raise ValueError("WebAccessRequest.go() needs a RequestDescriptor")
        self._start()
        self._send()
        return self.outcome

    def log_on(self, on_demand: bool = False):
        """Log on with the configured credentials.

        Explicit logons (on_demand=False) report to the caller's callbacks.
        On-demand logons replay the descriptor once they succeed.

        Raises:
            ValueError: If on_demand is set but there is no descriptor to replay.
        """
        if on_demand and self.descriptor is None:
            raise ValueError("on-demand logon needs a RequestDescriptor")
        if not on_demand:
            self._start()
        self._login_attempted = True
        self.state = RequestState.AUTH_RETRY_PENDING if on_demand else RequestState.IN_FLIGHT

        form_data = {
            "Ecom_User_ID": self.connection_info.login_user,
            "Ecom_User_Password": self.connection_info.login_password,
        }
        on_load = self._on_demand_logon_loaded if on_demand else self._on_explicit_logon_loaded

        if self.debug:
            kind = "on demand" if on_demand else "explicit"
            print(f"  Logging on ({kind}) as: {self.connection_info.login_user}")

        self._transport.call(
            self.connection_info.base_url + LOGON_PATH,
            RequestVerb.POST,
            form_data,
            on_load,
            self._on_logon_error,
            True,
        )
        return self.outcome

    def log_off(self, on_demand: bool = False):
        """Log off.

        On-demand logoffs ignore their own result and deliver the outcome that
        was captured before them.
        """
        if on_demand:
            self.state = RequestState.AUTO_LOG_OFF_PENDING
            self._logged_off = True
            on_load, on_error = self._log_off_done, self._log_off_done
        else:
            self._start()
            on_load, on_error = self._on_explicit_log_off_loaded, self._on_error

        if self.debug:
            print(f"  Logging off ({'auto' if on_demand else 'explicit'})")

        self._transport.call(
            self.connection_info.base_url + LOGOFF_PATH,
            RequestVerb.POST,
            None,
            on_load,
            on_error,
            False,
        )
        return self.outcome

    @property
    def login_attempted(self) -> bool:
        return self._login_attempted

    def _start(self):
        if self.state != RequestState.IDLE:
            raise RuntimeError(f"WebAccessRequest already used (state: {self.state.value})")

    def _send(self):
        self.state = RequestState.IN_FLIGHT
        descriptor = self.descriptor
        self._transport.call(
            self.connection_info.base_url + descriptor.path,
            descriptor.verb,
            descriptor.payload,
            self._on_load,
            self._on_error,
            descriptor.require_json,
        )

    def _on_load(self, data, response):
        if self.descriptor is not None and self.descriptor.response_processor:
            self.descriptor.response_processor(data, response)

        self._result = RequestSuccess(
            data=data,
            response=response,
            status_code=getattr(response, "status_code", 200),
        )

        if self._auto_log_off:
            self.log_off(on_demand=True)
            return

        self._deliver()

    def _on_error(self, error: WebAccessError):
        if error.status_code == HTTP_UNAUTHORIZED and self.descriptor is not None:
            if not self._login_attempted and self.connection_info.login_on_demand:
                self.log_on(on_demand=True)
                return
            error = AuthRequiredError()

        self._result = RequestFailure.from_error(error)

        if self._auto_log_off:
            self.log_off(on_demand=True)
            return

        self._deliver()

    def _on_demand_logon_loaded(self, data, response):
        if _logon_rejected(data):
            self._on_logon_error(RemoteBusinessError(HTTP_UNAUTHORIZED, str(data.get("message") or "Logon Failed")))
            return

        self._logged_on = True
        if self.connection_info.auto_log_off_on_demand:
            self._auto_log_off = True

        if self.debug:
            print("  Logged on, replaying original call")
        self._send()

    def _on_explicit_logon_loaded(self, data, response):
        if _logon_rejected(data):
            self._on_logon_error(RemoteBusinessError(HTTP_UNAUTHORIZED, str(data.get("message") or "Logon Failed")))
            return
        self._logged_on = True
        self._on_load(data, response)

    def _on_logon_error(self, error: WebAccessError):
        self._result = RequestFailure.from_error(error)
        self._deliver()

    def _on_explicit_log_off_loaded(self, data, response):
        self._logged_off = True
        self._on_load(data, response)

    def _log_off_done(self, *args):
        self._deliver()

    def _deliver(self):
        result = self._result
        result.logged_on = self._logged_on
        result.logged_off = self._logged_off
        self.outcome = result

        if result.ok:
            self.state = RequestState.SUCCEEDED
            if self._on_load_callback:
                self._on_load_callback(result)
        else:
            self.state = RequestState.FAILED
            if self._on_error_callback:
                self._on_error_callback(result)
