"""Tests for webaccess_connector.commands (payload shapes and query post-processing)."""

from conftest import ScriptedTransport, ok, fail
from webaccess_connector.commands import (
    ActionCommands,
    QueryCommands,
    RecordCommands,
    UserCommands,
    correct_object_count,
    prepare_save_data,
)
from webaccess_connector.constants import RequestVerb
from webaccess_connector.errors import HttpStatusError


def _groups(info, replies):
    transport = ScriptedTransport(replies)
    records = RecordCommands(info, transport)
    return {
        "transport": transport,
        "query": QueryCommands(info, transport),
        "record": records,
        "action": ActionCommands(info, transport, records),
        "user": UserCommands(info, transport),
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def test_prepare_save_data_copies_values():
    values = {"Title": "Printer down", "Nested": {"a": 1}}
    data = prepare_save_data("IncidentManagement.Incident", True, values)
    assert data == {
        "Title": "Printer down",
        "Nested": {"a": 1},
        "class_name": "IncidentManagement.Incident",
        "is_new": True,
    }
    data["Nested"]["a"] = 2
    assert values == {"Title": "Printer down", "Nested": {"a": 1}}


def test_prepare_save_data_without_values():
    assert prepare_save_data("X.Y", False) == {"class_name": "X.Y", "is_new": False}


def test_correct_object_count_single_page():
    data = {"pageCount": 1, "objectCount": 0, "objects": [{}, {}, {}]}
    correct_object_count(data)
    assert data["objectCount"] == 3


def test_correct_object_count_string_page_count():
    data = {"pageCount": "1", "objectCount": 0, "objects": [{}]}
    correct_object_count(data)
    assert data["objectCount"] == 1


def test_correct_object_count_leaves_multi_page_alone():
    data = {"pageCount": 4, "objectCount": 350, "objects": [{}] * 100}
    correct_object_count(data)
    assert data["objectCount"] == 350


# ---------------------------------------------------------------------------
# Query commands
# ---------------------------------------------------------------------------

def test_run_query_corrects_count(connection_info):
    groups = _groups(connection_info, [ok({"pageCount": 1, "objectCount": 0, "objects": [{}, {}]})])
    outcome = groups["query"].run_query({"class_name": "IncidentManagement.Incident", "query": "Open"})
    assert outcome.ok
    assert outcome.data["objectCount"] == 2
    call = groups["transport"].calls[0]
    assert call["verb"] == RequestVerb.GET
    assert call["url"].endswith("/query/list.rails")


def test_run_console_query_payload(connection_info):
    groups = _groups(connection_info, [ok({"pageCount": 1, "objects": []})])
    groups["query"].run_console_query("IncidentManagement.Incident", "Open", template_name="Grid", page_size=25)
    assert groups["transport"].calls[0]["data"] == {
        "class_name": "IncidentManagement.Incident",
        "query": "Open",
        "template": "Grid",
        "page_size": 25,
    }


def test_run_console_query_minimal_payload(connection_info):
    groups = _groups(connection_info, [ok({"pageCount": 1, "objects": []})])
    groups["query"].run_console_query("IncidentManagement.Incident", "Open")
    assert groups["transport"].calls[0]["data"] == {
        "class_name": "IncidentManagement.Incident",
        "query": "Open",
    }


def test_run_query_error_goes_to_on_error(connection_info):
    groups = _groups(connection_info, [fail(HttpStatusError(500, "Query not found"))])
    loaded, errored = [], []
    outcome = groups["query"].run_query({"class_name": "X"}, on_load=loaded.append, on_error=errored.append)
    assert errored == [outcome]
    assert loaded == []


# ---------------------------------------------------------------------------
# Record commands
# ---------------------------------------------------------------------------

def test_create_record(connection_info):
    groups = _groups(connection_info, [ok({"key": "1"})])
    groups["record"].create_record("IncidentManagement.Incident", {"Title": "Down"})
    call = groups["transport"].calls[0]
    assert call["url"].endswith("/object/save.rails")
    assert call["verb"] == RequestVerb.POST
    assert call["data"] == {"Title": "Down", "class_name": "IncidentManagement.Incident", "is_new": True}


def test_create_process_record(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["record"].create_process_record(
        "IncidentManagement.Incident", {"Title": "Down"},
        lifecycle_name="Incident", template_name="Printer",
    )
    data = groups["transport"].calls[0]["data"]
    assert data["lifecycle_name"] == "Incident"
    assert data["object_template_name"] == "Printer"
    assert data["is_new"] is True


def test_open_record(connection_info):
    groups = _groups(connection_info, [ok({"key": "k1"})])
    outcome = groups["record"].open_record("IncidentManagement.Incident", "k1")
    call = groups["transport"].calls[0]
    assert call["url"].endswith("/object/open.rails")
    assert call["verb"] == RequestVerb.GET
    assert call["data"] == {"class_name": "IncidentManagement.Incident", "key": "k1"}
    assert outcome.data == {"key": "k1"}


def test_update_record(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["record"].update_record("IncidentManagement.Incident", "k1", {"Title": "Fixed"})
    assert groups["transport"].calls[0]["data"] == {
        "Title": "Fixed",
        "class_name": "IncidentManagement.Incident",
        "is_new": False,
        "key": "k1",
    }


def test_delete_record(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["record"].delete_record("IncidentManagement.Incident", "k1")
    call = groups["transport"].calls[0]
    assert call["url"].endswith("/object/delete.rails")
    assert call["verb"] == RequestVerb.POST
    assert call["data"] == {"class_name": "IncidentManagement.Incident", "key": "k1"}


# ---------------------------------------------------------------------------
# Action commands
# ---------------------------------------------------------------------------

def test_collection_action(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["action"].collection_action(
        "IncidentManagement.Incident", "k1", "Add Note",
        "IncidentManagement.Note", {"Text": "called user"},
    )
    call = groups["transport"].calls[0]
    assert call["url"].endswith("/object/save.rails")
    assert call["data"] == {
        "Text": "called user",
        "class_name": "IncidentManagement.Note",
        "is_new": True,
        "parent_class_name": "IncidentManagement.Incident",
        "parent_key": "k1",
        "parent_function_name": "Add Note",
    }


def test_update_action(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["action"].update_action("IncidentManagement.Incident", "k1", "Resolve", {"Resolution": "Rebooted"})
    assert groups["transport"].calls[0]["data"] == {
        "Resolution": "Rebooted",
        "class_name": "IncidentManagement.Incident",
        "is_new": False,
        "key": "k1",
        "function_name": "Resolve",
    }


def test_windowless_action_does_not_require_json(connection_info):
    groups = _groups(connection_info, [ok("")])
    outcome = groups["action"].windowless_action("IncidentManagement.Incident", "k1", "Close")
    call = groups["transport"].calls[0]
    assert call["url"].endswith("/object/invokeFunction.rails")
    assert call["require_json"] is False
    assert call["data"] == {
        "class_name": "IncidentManagement.Incident",
        "key": "k1",
        "function_name": "Close",
        "is_new": False,
    }
    assert outcome.ok


def test_attach_detach_action(connection_info):
    groups = _groups(connection_info, [ok({})])
    groups["action"].attach_detach_action(
        "IncidentManagement.Incident", "k1", "Attach CI", "CI.Computer", "c9",
    )
    call = groups["transport"].calls[0]
    assert call["require_json"] is True
    assert call["data"]["child_class_name"] == "CI.Computer"
    assert call["data"]["child_key"] == "c9"
    assert call["data"]["function_name"] == "Attach CI"


# ---------------------------------------------------------------------------
# User commands
# ---------------------------------------------------------------------------

def test_user_log_on_and_log_off(on_demand_info):
    groups = _groups(on_demand_info, [ok({"result": True}), ok("")])
    logon = groups["user"].log_on()
    logoff = groups["user"].log_off()
    assert logon.logged_on is True
    assert logoff.logged_off is True
    assert groups["transport"].paths == ["/wd/Logon/Logon.rails", "/wd/Logon/Logoff.rails"]
