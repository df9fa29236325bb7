#!/usr/bin/env python3
"""
Web Access Connector — Command line entry point.

Reads connection settings from a .env file, runs one connector command and
prints the result as JSON.

Usage:
    python run.py modules                                  # List modules
    python run.py objects --module-guid <guid>             # Objects in a module
    python run.py object --class-name IncidentManagement.Incident
    python run.py attributes --guid <class guid>           # Inherited attributes too
    python run.py query --class-name <class> --query <name> [--page-size 50]
    python run.py query --url "https://host/WebAccess/query/list.rails?class_name=..."
    python run.py open --class-name <class> --key <key>
    python run.py parse-url "<url>"                        # Offline, no connection
    python run.py logon | logoff
    python run.py --debug ...                              # Verbose output
    python run.py --env /path ...                          # Use alternate .env file
"""

import argparse
import json
import logging
import sys
from webaccess_connector import VERSION, WebAccessConnector, parse_query_url
from webaccess_connector.errors import ConfigurationError


def _to_jsonable(value):
    if hasattr(value, "to_dict"):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _print_json(value):
    print(json.dumps(value, indent=2, default=_to_jsonable))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Web Access Connector - Query and introspect a Web Access instance"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("modules", help="List modules")

    objects = commands.add_parser("objects", help="List the objects of a module")
    objects.add_argument("--module-guid", required=True)

    obj = commands.add_parser("object", help="Describe one object")
    target = obj.add_mutually_exclusive_group(required=True)
    target.add_argument("--class-name", help="Module.Class name")
    target.add_argument("--guid", help="Object guid")

    attributes = commands.add_parser("attributes", help="List an object's attributes")
    attributes.add_argument("--guid", required=True)

    query = commands.add_parser("query", help="Run a query")
    query.add_argument("--url", help="Query URL copied from Web Access")
    query.add_argument("--class-name")
    query.add_argument("--query", dest="query_name")
    query.add_argument("--page-size", type=int)

    open_record = commands.add_parser("open", help="Open a record")
    open_record.add_argument("--class-name", required=True)
    open_record.add_argument("--key", required=True)

    parse_url = commands.add_parser("parse-url", help="Parse a query URL (offline)")
    parse_url.add_argument("url")

    commands.add_parser("logon", help="Log on with the configured credentials")
    commands.add_parser("logoff", help="Log off")
    return parser


def _run_command(connector: WebAccessConnector, args, parser):
    if args.command == "modules":
        return connector.metadata.get_modules()
    if args.command == "objects":
        return connector.metadata.get_objects_for_module(args.module_guid)
    if args.command == "object":
        return connector.metadata.get_object(class_name=args.class_name, object_guid=args.guid)
    if args.command == "attributes":
        return connector.metadata.get_attributes_for_object(args.guid)
    if args.command == "open":
        return connector.record.open_record(args.class_name, args.key)
    if args.command == "logon":
        return connector.user.log_on()
    if args.command == "logoff":
        return connector.user.log_off()

    # query
    if args.url:
        parsed = parse_query_url(args.url)
        if not parsed:
            parser.error("query URL has no class_name")
        return connector.query.run_query(parsed["queryData"])
    if not args.class_name or not args.query_name:
        parser.error("query needs --url or both --class-name and --query")
    return connector.query.run_console_query(
        args.class_name, args.query_name, page_size=args.page_size
    )


def main():
    """Parse CLI arguments and run one connector command."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"webaccess-connector {VERSION}")
        sys.exit(0)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Enable debug logging for requests/urllib3 if --debug flag is set
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    if args.command == "parse-url":
        parsed = parse_query_url(args.url)
        if parsed is None:
            print("No class_name found in URL")
            sys.exit(1)
        _print_json(parsed)
        return

    try:
        connector = WebAccessConnector.from_env(args.env, debug=args.debug or None)
    except ConfigurationError as e:
        print("\nConfiguration Errors:")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)

    outcome = _run_command(connector, args, parser)

    if not outcome.ok:
        print(f"Error ({outcome.status_code}): {outcome.error_text}")
        sys.exit(1)

    _print_json({
        "data": outcome.data,
        "logged_on": outcome.logged_on,
        "logged_off": outcome.logged_off,
    })


if __name__ == "__main__":
    main()
