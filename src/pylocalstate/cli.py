"""Command-line access to a configured store.

Usage
-----
::

    pylocalstate get name
    pylocalstate set name '"New Test1"'
    pylocalstate rm name
    pylocalstate list

Store selection follows :meth:`LocalStateConfig.from_env`; ``--backend``,
``--path`` and ``--namespace`` override it.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from pylocalstate.config import LocalStateConfig
from pylocalstate.exceptions import LocalStateError, StoreError
from pylocalstate.stores import open_store
from pylocalstate.stores.base import KeyValueStore

_logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pylocalstate", description="Inspect and edit a pylocalstate store.")
    parser.add_argument("--backend", choices=["memory", "file", "sqlite"], help="Store backend")
    parser.add_argument("--path", help="File or database path")
    parser.add_argument("--namespace", help="Key namespace")
    parser.add_argument("--verbose", "-v", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)
    get = sub.add_parser("get", help="Print the decoded value of KEY as JSON")
    get.add_argument("key")
    put = sub.add_parser("set", help="Store a JSON value under KEY")
    put.add_argument("key")
    put.add_argument("value", help="JSON text, e.g. '\"text\"' or '{\"a\": 1}'")
    rm = sub.add_parser("rm", help="Remove KEY")
    rm.add_argument("key")
    sub.add_parser("list", help="List stored keys")
    return parser


def _run(args: argparse.Namespace, store: KeyValueStore, config: LocalStateConfig) -> int:
    codec = config.codec()

    if args.command == "get":
        raw = store.get(args.key)
        if raw is None:
            print(f"{args.key}: no record", file=sys.stderr)
            return 1
        print(json.dumps(codec.decode(raw), indent=2, ensure_ascii=False))
        return 0

    if args.command == "set":
        try:
            value = json.loads(args.value)
        except json.JSONDecodeError as exc:
            print(f"Invalid JSON value: {exc.msg}", file=sys.stderr)
            return 2
        store.set(args.key, codec.encode(value))
        return 0

    if args.command == "rm":
        store.remove(args.key)
        return 0

    list_keys = getattr(store, "keys", None)
    if list_keys is None:
        raise StoreError(f"{type(store).__name__} cannot enumerate keys", operation="keys")
    for key in sorted(list_keys()):
        print(key)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LocalStateConfig.from_env(backend=args.backend, path=args.path, namespace=args.namespace)
        store = open_store(config)
    except LocalStateError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        return _run(args, store, config)
    except LocalStateError as exc:
        _logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()
