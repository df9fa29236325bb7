"""
Web Access Connector — The public entry point.

Groups the operations the way the service organises them:

    connector = WebAccessConnector(ConnectionInfo(
        base_url="https://sd.example.com/WebAccess",
        login_on_demand=True,
        login_user="svc_integration",
        login_password="...",
    ))

    outcome = connector.query.run_console_query("IncidentManagement.Incident", "Open Incidents")
    if outcome.ok:
        for row in outcome.data["objects"]:
            ...
    else:
        print(outcome.error_text)

All groups share one transport, so the session cookie obtained by a logon
(explicit or on demand) is reused by every later call.
"""

from typing import Optional

import requests

from .commands import ActionCommands, QueryCommands, RecordCommands, UserCommands
from .errors import ConfigurationError
from .metadata import MetadataCommands
from .settings import ConnectionInfo, debug_enabled, load_settings, validate_settings
from .transport import WebAccessTransport
from .url_parser import parse_query_url


class WebAccessConnector:
    """Client for a Web Access instance.

    Attributes:
        connection_info: Immutable connection settings.
        query: QueryCommands (run_query, run_console_query).
        record: RecordCommands (create/open/update/delete).
        action: ActionCommands (collection/update/windowless/attach-detach).
        metadata: MetadataCommands (modules, objects, attributes).
        user: UserCommands (log_on, log_off).
    """

    parse_query_url = staticmethod(parse_query_url)

    def __init__(
        self,
        connection_info: ConnectionInfo,
        transport: Optional[WebAccessTransport] = None,
        session: Optional[requests.Session] = None,
        debug: bool = False,
    ):
        """Initialize the connector.

        Args:
            connection_info: Base URL and logon settings.
            transport: Transport to use; a WebAccessTransport is created if omitted.
            session: requests.Session for the created transport (ignored when
                     transport is given).
            debug: Enable verbose output.
        """
        self.connection_info = connection_info
        self.debug = debug
        self.transport = transport or WebAccessTransport(
            session=session, timeout=connection_info.timeout, debug=debug
        )

        self.query = QueryCommands(connection_info, self.transport, debug)
        self.record = RecordCommands(connection_info, self.transport, debug)
        self.action = ActionCommands(connection_info, self.transport, self.record, debug)
        self.metadata = MetadataCommands(self.query, debug)
        self.user = UserCommands(connection_info, self.transport, debug)

    @classmethod
    def from_env(cls, env_file: str = "./.env", debug: Optional[bool] = None) -> "WebAccessConnector":
        """Build a connector from a .env file / the environment.

        Raises:
            ConfigurationError: If required settings are missing.
        """
        connection_info = load_settings(env_file, debug=bool(debug))
        errors = validate_settings(connection_info)
        if errors:
            raise ConfigurationError(errors)
        if debug is None:
            debug = debug_enabled()
        return cls(connection_info, debug=debug)
