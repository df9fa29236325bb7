"""
webaccess-connector — Python client for the Web Access record-management service.

Modules:

  connector.py   WebAccessConnector, the public entry point
  commands.py    Query, record, action and user command groups
  metadata.py    Module/object queries and inherited attribute resolution
  request.py     WebAccessRequest, the per-call logon-on-demand state machine
  transport.py   requests-based HTTP exchange and error text extraction
  url_parser.py  parse_query_url()
  outcomes.py    RequestDescriptor, RequestSuccess, RequestFailure
  errors.py      WebAccessError and its subclasses
  settings.py    ConnectionInfo and .env loading
  constants.py   Verbs, endpoint paths and fixed messages
"""

from .constants import VERSION, RequestVerb
from .connector import WebAccessConnector
from .errors import (
    AuthRequiredError,
    ConfigurationError,
    HttpStatusError,
    IntegratedLogonError,
    MalformedResponseError,
    RemoteBusinessError,
    TransportError,
    WebAccessError,
)
from .metadata import MetadataAttribute, MetadataModule, MetadataObject
from .outcomes import RequestDescriptor, RequestFailure, RequestSuccess
from .request import RequestState, WebAccessRequest
from .settings import ConnectionInfo, load_settings, validate_settings
from .transport import WebAccessTransport, extract_error_text
from .url_parser import parse_query_url

__version__ = VERSION
