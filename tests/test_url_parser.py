"""Tests for webaccess_connector.url_parser.parse_query_url."""

from webaccess_connector.url_parser import parse_query_url


def test_full_url():
    result = parse_query_url("https://host/app?class_name=Incident&query=MyQuery&page_size=50")
    assert result == {
        "webAccessUrl": "https://host/app",
        "queryData": {"class_name": "Incident", "query": "MyQuery", "page_size": 50},
    }


def test_full_url_with_command_path():
    result = parse_query_url(
        "http://sd.example.com/WebAccess/query/list.rails?class_name=IncidentManagement.Incident"
    )
    assert result["webAccessUrl"] == "http://sd.example.com/WebAccess"
    assert result["queryData"] == {"class_name": "IncidentManagement.Incident"}


def test_scheme_detection_is_case_insensitive():
    result = parse_query_url("HTTPS://host/app/query/list.rails?class_name=X")
    assert result["webAccessUrl"] == "HTTPS://host/app"


def test_relative_url():
    result = parse_query_url("/WebAccess/query/list.rails?class_name=Incident&query=Open")
    assert result["webAccessUrl"] == "/WebAccess"
    assert result["queryData"] == {"class_name": "Incident", "query": "Open"}


def test_bare_query_string_has_no_url():
    result = parse_query_url("class_name=Incident&attributes=Title,Status&cns=Status-e-0&c0=Open")
    assert "webAccessUrl" not in result
    assert result["queryData"] == {
        "class_name": "Incident",
        "attributes": "Title,Status",
        "cns": "Status-e-0",
        "c0": "Open",
    }


def test_query_dropped_when_attributes_present():
    result = parse_query_url("class_name=Incident&query=Q&attributes=Title")
    assert "query" not in result["queryData"]
    assert result["queryData"]["attributes"] == "Title"


def test_missing_class_name():
    assert parse_query_url("foo=bar") is None


def test_empty_input():
    assert parse_query_url("") is None


def test_percent_decoding():
    result = parse_query_url("class_name=Incident%20Management.Incident&query=Open%20%26%20New")
    assert result["queryData"]["class_name"] == "Incident Management.Incident"
    assert result["queryData"]["query"] == "Open & New"


def test_plus_is_not_a_space():
    result = parse_query_url("class_name=A+B")
    assert result["queryData"]["class_name"] == "A+B"


def test_numeric_coercion():
    result = parse_query_url("class_name=X&cns=Priority-e-0_a_Score-e-1&c0=3&c1=2.5")
    data = result["queryData"]
    assert data["c0"] == 3
    assert isinstance(data["c0"], int)
    assert data["c1"] == 2.5


def test_non_finite_values_stay_strings():
    result = parse_query_url("class_name=X&cns=A-e-0&c0=Infinity&c1=NaN")
    assert result["queryData"]["c0"] == "Infinity"
    assert result["queryData"]["c1"] == "NaN"


def test_criteria_run_stops_at_first_gap():
    result = parse_query_url("class_name=X&cns=a&c0=one&c1=two&c3=four")
    data = result["queryData"]
    assert data["c0"] == "one"
    assert data["c1"] == "two"
    assert "c3" not in data


def test_criteria_values_ignored_without_cns():
    result = parse_query_url("class_name=X&c0=one")
    assert result["queryData"] == {"class_name": "X"}


def test_sort_by_is_forwarded():
    result = parse_query_url("class_name=X&sort_by=Title")
    assert result["queryData"]["sort_by"] == "Title"


def test_unknown_keys_are_dropped():
    result = parse_query_url("class_name=X&template=Grid&foo=bar")
    assert result["queryData"] == {"class_name": "X"}


def test_value_split_on_first_equals():
    result = parse_query_url("class_name=X&cns=Name-e-0&c0=a=b")
    assert result["queryData"]["c0"] == "a=b"
