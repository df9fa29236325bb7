"""
Command groups — Build request payloads and run them through WebAccessRequest.

  QueryCommands   query.run_query, query.run_console_query
  RecordCommands  record.create_record, create_process_record, open_record,
                  update_record, delete_record
  ActionCommands  action.collection_action, update_action, windowless_action,
                  attach_detach_action
  UserCommands    user.log_on, user.log_off

Every operation accepts optional on_load / on_error callbacks and returns the
outcome (RequestSuccess or RequestFailure).

Save payloads (record and action commands) start from a copy of the caller's
attribute values, then add class_name and is_new:

    {"Title": "Printer down", "class_name": "IncidentManagement.Incident", "is_new": True}
"""

import copy
from typing import Any, Callable, Dict, Optional

from .constants import (
    INVOKE_FUNCTION_PATH,
    OBJECT_DELETE_PATH,
    OBJECT_OPEN_PATH,
    OBJECT_SAVE_PATH,
    QUERY_LIST_PATH,
    RequestVerb,
)
from .outcomes import RequestDescriptor
from .request import WebAccessRequest
from .settings import ConnectionInfo
from .transport import WebAccessTransport

Callback = Optional[Callable[[Any], None]]


def prepare_save_data(class_name: str, is_new: bool,
                      attribute_values: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Copy attribute values and add the class name and is_new flag."""
    save_data = copy.deepcopy(attribute_values) if attribute_values else {}
    save_data["class_name"] = class_name
    save_data["is_new"] = is_new
    return save_data


def correct_object_count(response_data, response=None):
    """Fix the objectCount the service reports as 0 for single-page results.

    Mutates response_data in place. Used as the response processor for
    /query/list.rails.
    """
    if not isinstance(response_data, dict):
        return
    try:
        single_page = float(response_data.get("pageCount")) == 1
    except (TypeError, ValueError):
        single_page = False
    if single_page:
        response_data["objectCount"] = len(response_data.get("objects") or [])


class CommandGroup:
    """Shared plumbing: run a descriptor in a fresh WebAccessRequest."""

    def __init__(self, connection_info: ConnectionInfo, transport: WebAccessTransport,
                 debug: bool = False):
        self.connection_info = connection_info
        self.transport = transport
        self.debug = debug

    def _new_request(self, descriptor=None, on_load: Callback = None,
                     on_error: Callback = None) -> WebAccessRequest:
        return WebAccessRequest(
            self.connection_info,
            self.transport,
            descriptor,
            on_load=on_load,
            on_error=on_error,
            debug=self.debug,
        )

    def _run(self, descriptor: RequestDescriptor, on_load: Callback, on_error: Callback):
        return self._new_request(descriptor, on_load, on_error).go()


class QueryCommands(CommandGroup):

    def run_query(self, query_data: Dict[str, Any], on_load: Callback = None,
                  on_error: Callback = None):
        """Run a query.

        GET /query/list.rails with the query data as parameters, e.g.
        {"class_name": "IncidentManagement.Incident", "query": "Open Incidents"}.

        Successful data is the service's list response:
        {"pageCount": 1, "objectCount": 2, "objects": [...]}
        """
        descriptor = RequestDescriptor(
            path=QUERY_LIST_PATH,
            verb=RequestVerb.GET,
            payload=dict(query_data),
            require_json=True,
            response_processor=correct_object_count,
        )
        return self._run(descriptor, on_load, on_error)

    def run_console_query(self, class_name: str, query_name: str,
                          template_name: Optional[str] = None,
                          page_size: Optional[int] = None,
                          on_load: Callback = None, on_error: Callback = None):
        """Run a query designed in Console.

        Sorting and criteria are applied but columns are not returned. If
        columns are required use a Web Access query or report template.
        """
        query_data = {"class_name": class_name, "query": query_name}
        if template_name:
            query_data["template"] = template_name
        if page_size:
            query_data["page_size"] = page_size
        return self.run_query(query_data, on_load=on_load, on_error=on_error)


class RecordCommands(CommandGroup):

    def create_record(self, class_name: str, attribute_values: Optional[Dict[str, Any]] = None,
                      on_load: Callback = None, on_error: Callback = None):
        """Save a new record."""
        save_data = prepare_save_data(class_name, True, attribute_values)
        return self.save(save_data, on_load, on_error)

    def create_process_record(self, class_name: str,
                              attribute_values: Optional[Dict[str, Any]] = None,
                              lifecycle_name: Optional[str] = None,
                              template_name: Optional[str] = None,
                              on_load: Callback = None, on_error: Callback = None):
        """Save a new process record, optionally naming the lifecycle and template."""
        save_data = prepare_save_data(class_name, True, attribute_values)
        if lifecycle_name:
            save_data["lifecycle_name"] = lifecycle_name
        if template_name:
            save_data["object_template_name"] = template_name
        return self.save(save_data, on_load, on_error)

    def open_record(self, class_name: str, key: str,
                    on_load: Callback = None, on_error: Callback = None):
        descriptor = RequestDescriptor(
            path=OBJECT_OPEN_PATH,
            verb=RequestVerb.GET,
            payload={"class_name": class_name, "key": key},
        )
        return self._run(descriptor, on_load, on_error)

    def update_record(self, class_name: str, key: str,
                      attribute_values: Optional[Dict[str, Any]] = None,
                      on_load: Callback = None, on_error: Callback = None):
        save_data = prepare_save_data(class_name, False, attribute_values)
        save_data["key"] = key
        return self.save(save_data, on_load, on_error)

    def delete_record(self, class_name: str, key: str,
                      on_load: Callback = None, on_error: Callback = None):
        descriptor = RequestDescriptor(
            path=OBJECT_DELETE_PATH,
            verb=RequestVerb.POST,
            payload={"class_name": class_name, "key": key},
        )
        return self._run(descriptor, on_load, on_error)

    def save(self, save_data: Dict[str, Any], on_load: Callback = None,
             on_error: Callback = None):
        """POST a prepared payload to /object/save.rails."""
        descriptor = RequestDescriptor(
            path=OBJECT_SAVE_PATH,
            verb=RequestVerb.POST,
            payload=save_data,
        )
        return self._run(descriptor, on_load, on_error)


class ActionCommands(CommandGroup):
    """Process actions.

    Collection and update actions go through /object/save.rails like a
    normal save; windowless and attach/detach actions use
    /object/invokeFunction.rails.
    """

    def __init__(self, connection_info: ConnectionInfo, transport: WebAccessTransport,
                 records: RecordCommands, debug: bool = False):
        super().__init__(connection_info, transport, debug)
        self._records = records

    def collection_action(self, process_class_name: str, process_key: str,
                          action_name: str, collection_class_name: str,
                          attribute_values: Optional[Dict[str, Any]] = None,
                          on_load: Callback = None, on_error: Callback = None):
        """Add a collection item (e.g. a note) to a process record via an action."""
        action_data = prepare_save_data(collection_class_name, True, attribute_values)
        action_data["parent_class_name"] = process_class_name
        action_data["parent_key"] = process_key
        action_data["parent_function_name"] = action_name
        return self._records.save(action_data, on_load, on_error)

    def update_action(self, class_name: str, key: str, action_name: str,
                      attribute_values: Optional[Dict[str, Any]] = None,
                      on_load: Callback = None, on_error: Callback = None):
        action_data = prepare_save_data(class_name, False, attribute_values)
        action_data["key"] = key
        action_data["function_name"] = action_name
        return self._records.save(action_data, on_load, on_error)

    def windowless_action(self, class_name: str, key: str, action_name: str,
                          on_load: Callback = None, on_error: Callback = None):
        """Invoke an action that has no window. The response need not be JSON."""
        action_data = {
            "class_name": class_name,
            "key": key,
            "function_name": action_name,
            "is_new": False,
        }
        return self._invoke_function(action_data, on_load, on_error, require_json=False)

    def attach_detach_action(self, class_name: str, key: str, action_name: str,
                             linked_class_name: str, linked_key: str,
                             on_load: Callback = None, on_error: Callback = None):
        """Attach or detach a linked record (parent/child, module-to-module)."""
        action_data = {
            "class_name": class_name,
            "key": key,
            "function_name": action_name,
            "child_class_name": linked_class_name,
            "child_key": linked_key,
            "is_new": False,
        }
        return self._invoke_function(action_data, on_load, on_error, require_json=True)

    def _invoke_function(self, action_data, on_load, on_error, require_json):
        descriptor = RequestDescriptor(
            path=INVOKE_FUNCTION_PATH,
            verb=RequestVerb.POST,
            payload=action_data,
            require_json=require_json,
        )
        return self._run(descriptor, on_load, on_error)


class UserCommands(CommandGroup):
    """Explicit logon/logoff. Not needed when login on demand is configured."""

    def log_on(self, on_load: Callback = None, on_error: Callback = None):
        return self._new_request(on_load=on_load, on_error=on_error).log_on()

    def log_off(self, on_load: Callback = None, on_error: Callback = None):
        return self._new_request(on_load=on_load, on_error=on_error).log_off()
