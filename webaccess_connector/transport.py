"""
Web Access Transport — Performs the raw HTTP exchange with the service.

This module is responsible for all HTTP communication with Web Access. It owns
a single requests.Session so the session cookie issued by /wd/Logon/Logon.rails
is sent on every later call from the same connector.

Request shape:
    GET   data is form-encoded onto the query string
    POST  data is sent as an application/x-www-form-urlencoded body

    Every request carries:
        Accept: application/json
        X-Requested-With: XMLHttpRequest

Response handling:
    - Any status other than 200 is an error.
    - A 200 whose X-RequestUrl header points at the integrated-logon failure
      page is an error as well.
    - The body is parsed as JSON. If parsing fails and JSON was required the
      call fails with "Invalid Response", otherwise the raw text is passed on.

Error text for failed calls is produced by extract_error_text(), which knows
how the service reports errors both as JSON and as HTML error pages.
"""

import json
from typing import Any, Callable, Dict, Optional

import requests

from .constants import (
    EXCEPTION_MESSAGE_MARKER,
    HTTP_OK,
    INTEGRATED_LOGON_FAILED,
    INTEGRATED_LOGON_FAILED_PATH,
    INVALID_RESPONSE,
    REQUEST_URL_HEADER,
    RequestVerb,
)
from .errors import (
    HttpStatusError,
    IntegratedLogonError,
    MalformedResponseError,
    TransportError,
    WebAccessError,
)


def extract_error_text(status_code: int, status_text: str, body: Optional[str]) -> str:
    """Work out the message to show for a failed exchange.

    Tried in order:
      1. A JSON body with a non-empty "message" field.
      2. A Web Access HTML error page: the text of the last <p>...</p> between
         the "exceptionMessage" marker and the next </div>.
      3. The status text with the numeric status appended, e.g. "Not Found (404)".

    Args:
        status_code: HTTP status of the response.
        status_text: Reason phrase (or a fixed message supplied by the caller).
        body: Raw response body, may be None or empty.

    Returns:
        The error text. Never raises on unexpected input.
    """
    body = body or ""

    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])

    marker_pos = body.find(EXCEPTION_MESSAGE_MARKER)
    if marker_pos > -1:
        div_end = body.find("</div>", marker_pos)
        fragment = body[marker_pos:div_end] if div_end > -1 else body[marker_pos:]
        p_start = fragment.rfind("<p>")
        p_end = fragment.rfind("</p>")
        if -1 < p_start < p_end:
            return fragment[p_start + 3:p_end].strip()

    return f"{status_text} ({status_code})"


def encode_form_data(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Turn a payload mapping into form fields.

    Booleans become "true"/"false" as the service expects; None values are
    dropped.
    """
    if not data:
        return {}
    fields = {}
    for name, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            fields[name] = "true" if value else "false"
        else:
            fields[name] = str(value)
    return fields


class WebAccessTransport:
    """HTTP transport for Web Access calls.

    Attributes:
        timeout: Seconds passed to requests, or None to wait indefinitely.
        debug: If True, print each request and its status.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None, debug: bool = False):
        self._session = session or requests.Session()
        self.timeout = timeout
        self.debug = debug

    def call(
        self,
        url: str,
        verb: RequestVerb,
        data: Optional[Dict[str, Any]],
        on_load: Callable[[Any, requests.Response], None],
        on_error: Callable[[WebAccessError], None],
        require_json: bool = False,
    ):
        """Perform one exchange and report it through on_load or on_error.

        on_load receives (parsed body or raw text, response). on_error receives
        a WebAccessError subclass. Exactly one of them is called.
        """
        try:
            response = self._send(url, verb, encode_form_data(data))
        except requests.RequestException as e:
            if self.debug:
                print(f"  {verb.value} {url} failed: {e}")
            on_error(TransportError())
            return

        if self.debug:
            print(f"  {verb.value} {url} -> {response.status_code}")

        if response.status_code != HTTP_OK:
            on_error(self._http_error(response, response.reason or ""))
            return

        request_url = response.headers.get(REQUEST_URL_HEADER)
        if request_url and INTEGRATED_LOGON_FAILED_PATH in request_url:
            text = extract_error_text(response.status_code, INTEGRATED_LOGON_FAILED, response.text)
            on_error(IntegratedLogonError(response.status_code, text))
            return

        try:
            body = response.json()
        except ValueError:
            if require_json:
                text = extract_error_text(response.status_code, INVALID_RESPONSE, response.text)
                on_error(MalformedResponseError(response.status_code, text))
                return
            body = response.text

        on_load(body, response)

    def _send(self, url: str, verb: RequestVerb, fields: Dict[str, str]) -> requests.Response:
        headers = {
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }
        if verb == RequestVerb.POST:
            headers["Content-type"] = "application/x-www-form-urlencoded"
            return self._session.post(url, data=fields, headers=headers, timeout=self.timeout)
        return self._session.get(url, params=fields, headers=headers, timeout=self.timeout)

    @staticmethod
    def _http_error(response: requests.Response, status_text: str) -> HttpStatusError:
        text = extract_error_text(response.status_code, status_text, response.text)
        return HttpStatusError(response.status_code, text)
