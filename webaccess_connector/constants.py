"""
Constants — Verbs, endpoint paths and fixed messages for the Web Access service.

Endpoint reference (all paths are relative to the Web Access base URL):
- GET  /query/list.rails              list records matching a query
- GET  /object/open.rails             open one record
- POST /object/save.rails             create or update (is_new flag)
- POST /object/delete.rails           delete one record
- POST /object/invokeFunction.rails   invoke an action
- POST /wd/Logon/Logon.rails          log on (Ecom_User_ID / Ecom_User_Password)
- POST /wd/Logon/Logoff.rails         log off
"""

from enum import Enum

VERSION = "1.1.0"


class RequestVerb(str, Enum):
    """The two HTTP verbs the service needs."""

    GET = "GET"
    POST = "POST"


QUERY_LIST_PATH = "/query/list.rails"
OBJECT_OPEN_PATH = "/object/open.rails"
OBJECT_SAVE_PATH = "/object/save.rails"
OBJECT_DELETE_PATH = "/object/delete.rails"
INVOKE_FUNCTION_PATH = "/object/invokeFunction.rails"
LOGON_PATH = "/wd/Logon/Logon.rails"
LOGOFF_PATH = "/wd/Logon/Logoff.rails"

# Redirect target reported in X-RequestUrl when Windows integrated logon fails
INTEGRATED_LOGON_FAILED_PATH = "Logon/IntegratedLogonFailed.rails"
REQUEST_URL_HEADER = "X-RequestUrl"

HTTP_OK = 200
HTTP_UNAUTHORIZED = 403

NOT_LOGGED_IN = "Not Logged In"
CONNECTION_FAILED = "Connection Failed"
INVALID_RESPONSE = "Invalid Response"
INTEGRATED_LOGON_FAILED = "Integrated Logon Failed"

# Marker the service puts in front of the message on its HTML error pages
EXCEPTION_MESSAGE_MARKER = "exceptionMessage"

# Assumed upper bound for metadata result sets; the service is not paged here.
METADATA_PAGE_SIZE = 999
