"""Command line interface for inspecting and editing a settings file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from . import __version__
from .config import ENV_SD_ROOT, SETTINGS_FILE, default_sd_root
from .record import ENUM_DOMAINS, TEXT_CAPACITY, SettingsRecord
from .storage import LocalStorage
from .store import SettingsStore

logger = logging.getLogger(__name__)

_MASK = "********"


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_value(name: str, text: str) -> Any:
    """Turn a command line string into a value for ``SettingsRecord.set``.

    Enum fields accept a member name (case-insensitive) or an integer.
    """
    if name in TEXT_CAPACITY:
        return text

    domain = ENUM_DOMAINS.get(name)
    if domain is not None:
        key = text.strip().upper()
        if key in domain.__members__:
            return int(domain[key])

    try:
        return int(text, 0)
    except ValueError:
        choices = ""
        if domain is not None:
            choices = " (one of: " + ", ".join(domain.__members__) + ")"
        raise ValueError(f"invalid value for {name}: {text!r}{choices}") from None


def _format_value(record: SettingsRecord, name: str) -> str:
    value = record.get(name)
    if name == "opds_password" and value:
        return _MASK
    if name in ENUM_DOMAINS and hasattr(value, "name"):
        return f"{int(value)} ({value.name})"
    if isinstance(value, str):
        return repr(value)
    return str(value)


def _print_record(record: SettingsRecord, as_json: bool) -> None:
    if as_json:
        settings = record.to_dict()
        if settings.get("opds_password"):
            settings["opds_password"] = _MASK
        payload = {"settings": settings, "derived": record.derived_values()}
        print(json.dumps(payload, indent=2, sort_keys=False))
        return

    width = max(len(n) for n in record.field_names())
    for name in record.field_names():
        print(f"{name:<{width}}  {_format_value(record, name)}")
    print()
    for key, value in record.derived_values().items():
        print(f"{key:<{width}}  {value}")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Inspect and edit CrossPoint reader settings.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument(
        "--root",
        type=Path,
        default=None,
        help=f"Directory standing in for the SD card root (default: ${ENV_SD_ROOT} or {default_sd_root()})",
    )
    ap.add_argument("--file", default=SETTINGS_FILE, help="Settings path on the card")
    ap.add_argument("-v", "--verbose", action="count", default=0)

    sub = ap.add_subparsers(dest="command", required=True)

    p_show = sub.add_parser("show", help="Print every setting and the values derived from them")
    p_show.add_argument("--json", action="store_true")

    p_set = sub.add_parser("set", help="Change one setting and save")
    p_set.add_argument("name", choices=SettingsRecord.field_names())
    p_set.add_argument("value")

    sub.add_parser("reset", help="Overwrite the file with default settings")

    args = ap.parse_args(argv)
    _configure_logging(args.verbose)

    storage = LocalStorage(root=args.root) if args.root is not None else LocalStorage()
    store = SettingsStore(storage=storage, path=args.file)

    if args.command == "reset":
        if not store.reset():
            print(f"Failed to write {args.file}", file=sys.stderr)
            return 1
        print(f"Wrote default settings to {args.file}")
        return 0

    loaded = store.load()
    if not loaded:
        logger.warning("Could not load %s; using defaults", args.file)
        if store.last_backup:
            print(f"Unreadable {args.file} backed up to {store.last_backup}", file=sys.stderr)

    if args.command == "show":
        _print_record(store.record, as_json=args.json)
        return 0 if loaded else 1

    # set
    try:
        value = parse_value(args.name, args.value)
        store.record.set(args.name, value)
    except (TypeError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    if not store.save():
        print(f"Failed to write {args.file}", file=sys.stderr)
        return 1
    print(f"{args.name} = {_format_value(store.record, args.name)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
