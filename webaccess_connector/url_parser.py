"""
Query URL parser — Turns a Web Access query URL back into query data.

Accepts any of:
    https://sd.example.com/WebAccess/query/list.rails?class_name=...&query=...
    /WebAccess/query/list.rails?class_name=...
    class_name=...&attributes=...

and returns:
    {
      "webAccessUrl": "https://sd.example.com/WebAccess",   # only for URLs
      "queryData": {"class_name": "...", "query": "...", ...}
    }

or None when there is no class_name. The queryData can be passed straight to
QueryCommands.run_query().
"""

import math
import re
from typing import Any, Dict, Optional
from urllib.parse import unquote

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Keys copied into queryData when present (query is handled separately)
_PASSTHROUGH_KEYS = ("attributes", "page_size", "sort_by")


def _coerce_value(value: str) -> Any:
    """Return value as int/float when it is a finite decimal number."""
    if _NUMBER_RE.match(value):
        number = float(value)
        if math.isfinite(number):
            return int(number) if number.is_integer() else number
    return value


def _present(params: Dict[str, Any], name: str) -> bool:
    return params.get(name) not in (None, "")


def _split_base_url(query_string: str, first_pair: str, qmark_pos: int) -> Optional[str]:
    path = first_pair[:qmark_pos]
    if query_string[:4].lower() == "http":
        return "/".join(path.split("/")[:4])
    if query_string.startswith("/"):
        end = path.find("/", 1)
        return path if end == -1 else path[:end]
    return None


def parse_query_url(query_string: str) -> Optional[Dict[str, Any]]:
    """Parse a query URL (or bare query string) into query design data.

    Rules:
      - "http..." inputs: webAccessUrl is the first four "/"-separated parts
        before the "?" (scheme, empty, host, application).
      - "/..." inputs: webAccessUrl is everything up to the next "/".
      - Names and values are percent-decoded; numeric values become numbers.
      - Only class_name, query (dropped when attributes is given), attributes,
        page_size, sort_by, cns and the run c0, c1, ... are kept.

    Note that sort_by is ignored by Web Access but forwarded anyway.

    Returns:
        The parsed dict, or None if class_name is missing.
    """
    if not query_string:
        return None

    pairs = query_string.split("&")
    result = {"queryData": {}}

    qmark_pos = pairs[0].find("?")
    if qmark_pos > -1:
        base_url = _split_base_url(query_string, pairs[0], qmark_pos)
        if base_url is not None:
            result["webAccessUrl"] = base_url
        pairs[0] = pairs[0][qmark_pos + 1:]

    params = {}
    for pair in pairs:
        if not pair:
            continue
        name, _, value = pair.partition("=")
        params[unquote(name)] = _coerce_value(unquote(value))

    if not _present(params, "class_name"):
        return None

    query_data = result["queryData"]
    query_data["class_name"] = params["class_name"]

    if _present(params, "query") and not _present(params, "attributes"):
        query_data["query"] = params["query"]

    for name in _PASSTHROUGH_KEYS:
        if _present(params, name):
            query_data[name] = params[name]

    if _present(params, "cns"):
        query_data["cns"] = params["cns"]
        index = 0
        while _present(params, f"c{index}"):
            query_data[f"c{index}"] = params[f"c{index}"]
            index += 1

    return result
