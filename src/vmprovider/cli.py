# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Command-line access to a voicemail status database.

Usage:
    vmstatus --db status.db init
    vmstatus --db status.db insert source_package=com.example configuration_state=0
    vmstatus --db status.db query --where "configuration_state = 0" --sort "_id DESC"
    vmstatus --db status.db update content://com.android.voicemail/status/1 data_channel_state=1
    vmstatus --db status.db delete content://com.android.voicemail/status/1
    vmstatus type content://com.android.voicemail/status/1

The tool acts as a caller with full access to every source package.
"""

from __future__ import annotations

import argparse
import json
import logging
import sqlite3
import sys
from collections.abc import Sequence

from vmprovider.contract import STATUS_CONTENT_URI
from vmprovider.core.config import ProviderSettings
from vmprovider.core.logging_config import setup_logging
from vmprovider.provider.content_provider import VoicemailStatusProvider
from vmprovider.provider.helper import CallerIdentity
from vmprovider.storage.database import DatabaseHelper

CLI_PACKAGE = "vmstatus-cli"


def _parse_value(raw: str) -> object:
    if raw.lower() == "null":
        return None
    try:
        return int(raw)
    except ValueError:
        return raw


def _parse_assignments(pairs: Sequence[str]) -> dict[str, object]:
    values: dict[str, object] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(f"Expected column=value, got {pair!r}")
        key, raw = pair.split("=", 1)
        values[key.strip()] = _parse_value(raw)
    return values


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _open_provider(args: argparse.Namespace) -> tuple[DatabaseHelper, VoicemailStatusProvider]:
    settings: ProviderSettings = args.settings
    helper = DatabaseHelper(args.db, settings=settings)
    identity = CallerIdentity(package=args.package, has_own_access=True, has_full_access=True)
    return helper, VoicemailStatusProvider(helper, calling_identity=lambda: identity)


def cmd_init(args: argparse.Namespace) -> int:
    with DatabaseHelper(args.db, settings=args.settings) as helper:
        helper.get_writable_database()
    _emit({"database": args.db, "status": "ready"})
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    helper, provider = _open_provider(args)
    with helper:
        cursor = provider.query(
            args.uri,
            args.projection or None,
            args.where,
            args.args or None,
            args.sort,
        )
        rows = cursor.to_records() if cursor is not None else []
        if cursor is not None:
            cursor.close()
    _emit(rows)
    return 0


def cmd_insert(args: argparse.Namespace) -> int:
    helper, provider = _open_provider(args)
    with helper:
        new_uri = provider.insert(args.uri, _parse_assignments(args.values))
    _emit({"uri": new_uri})
    return 0 if new_uri is not None else 1


def cmd_update(args: argparse.Namespace) -> int:
    helper, provider = _open_provider(args)
    with helper:
        count = provider.update(
            args.uri, _parse_assignments(args.values), args.where, args.args or None
        )
    _emit({"updated": count})
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    helper, provider = _open_provider(args)
    with helper:
        count = provider.delete(args.uri, args.where, args.args or None)
    _emit({"deleted": count})
    return 0


def cmd_type(args: argparse.Namespace) -> int:
    helper, provider = _open_provider(args)
    with helper:
        print(provider.get_type(args.uri))
    return 0


def _build_parser(settings: ProviderSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("vmstatus", description="Voicemail status store tool")
    parser.add_argument("--db", default=settings.database_path, help="Database file")
    parser.add_argument("--package", default=CLI_PACKAGE, help="Calling package name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("init", help="Create the database and schema")
    sp.set_defaults(func=cmd_init)

    sp = sub.add_parser("query", help="Print matching status rows as JSON")
    sp.add_argument("uri", nargs="?", default=STATUS_CONTENT_URI)
    sp.add_argument("--projection", nargs="+", default=[])
    sp.add_argument("--where")
    sp.add_argument("--args", nargs="+", default=[])
    sp.add_argument("--sort")
    sp.set_defaults(func=cmd_query)

    sp = sub.add_parser("insert", help="Insert one status row")
    sp.add_argument("values", nargs="+", help="column=value pairs")
    sp.add_argument("--uri", default=STATUS_CONTENT_URI)
    sp.set_defaults(func=cmd_insert)

    sp = sub.add_parser("update", help="Update status rows")
    sp.add_argument("uri")
    sp.add_argument("values", nargs="+", help="column=value pairs")
    sp.add_argument("--where")
    sp.add_argument("--args", nargs="+", default=[])
    sp.set_defaults(func=cmd_update)

    sp = sub.add_parser("delete", help="Delete status rows")
    sp.add_argument("uri")
    sp.add_argument("--where")
    sp.add_argument("--args", nargs="+", default=[])
    sp.set_defaults(func=cmd_delete)

    sp = sub.add_parser("type", help="Print the MIME type of a URI")
    sp.add_argument("uri")
    sp.set_defaults(func=cmd_type)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = ProviderSettings.from_env()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)
    args.settings = settings

    level = logging.DEBUG if args.verbose else logging.WARNING
    if settings.log_dir is not None:
        setup_logging(console_level=level, log_dir=settings.log_dir)
    else:
        logging.basicConfig(level=level, format="%(levelname)-8s | %(name)s | %(message)s")

    try:
        return int(args.func(args))
    except (ValueError, PermissionError, NotImplementedError, sqlite3.Error) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
