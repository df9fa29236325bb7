"""Shared fixtures: a scripted transport that replays canned responses."""

from unittest.mock import MagicMock

import pytest

from webaccess_connector.settings import ConnectionInfo


def ok(data, status_code=200):
    """A scripted successful exchange."""
    return ("load", data, status_code)


def fail(error):
    """A scripted failed exchange (error is a WebAccessError instance)."""
    return ("error", error, None)


class ScriptedTransport:
    """Stands in for WebAccessTransport.

    Each call pops the next scripted reply and invokes on_load/on_error
    synchronously. Calls are recorded as dicts for assertions.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def call(self, url, verb, data, on_load, on_error, require_json=False):
        self.calls.append({
            "url": url,
            "verb": verb,
            "data": data,
            "require_json": require_json,
        })
        if not self.replies:
            raise AssertionError(f"unexpected call to {url}")
        kind, value, status_code = self.replies.pop(0)
        if kind == "load":
            response = MagicMock()
            response.status_code = status_code
            on_load(value, response)
        else:
            on_error(value)

    @property
    def paths(self):
        return [c["url"].replace(BASE_URL, "") for c in self.calls]


BASE_URL = "https://sd.example.com/WebAccess"


@pytest.fixture
def connection_info():
    return ConnectionInfo(base_url=BASE_URL)


@pytest.fixture
def on_demand_info():
    return ConnectionInfo(
        base_url=BASE_URL,
        login_on_demand=True,
        login_user="svc",
        login_password="secret",
    )


@pytest.fixture
def auto_log_off_info():
    return ConnectionInfo(
        base_url=BASE_URL,
        login_on_demand=True,
        login_user="svc",
        login_password="secret",
        auto_log_off_on_demand=True,
    )
