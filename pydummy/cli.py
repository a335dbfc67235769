# pydummy/cli.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence
import argparse
import logging
import pprint
import sys as _sys

from .config import builder_from_config, get_effective_config, project_root
from .errors import PydummyError
from .imports import resolve_attr
from .logconf import configure_logger


def _render(obj: Any) -> str:
    """Dataclasses and classes with their own __repr__ print as-is, others as vars()."""
    if type(obj).__repr__ is object.__repr__ and hasattr(obj, "__dict__"):
        return f"{type(obj).__qualname__} {pprint.pformat(vars(obj))}"
    return pprint.pformat(obj)


def _run_create(args: argparse.Namespace) -> None:
    log = logging.getLogger("pydummy.cli.create")
    start = Path(args.project_dir) if args.project_dir else None

    eff = get_effective_config("builder", start)
    if args.max_depth is not None:
        eff["max_depth"] = args.max_depth
    eff["interest"] = list(eff.get("interest") or []) + list(args.interest or [])
    eff["additional_sys_path"] = list(eff.get("additional_sys_path") or []) + list(
        args.additional_sys_path or []
    )
    builder = builder_from_config(eff, project_root(start))

    try:
        target = resolve_attr(args.target)
    except (ImportError, AttributeError) as exc:
        raise PydummyError(f"cannot resolve target {args.target!r}: {exc}") from exc
    log.info("creating %s", args.target)
    print(_render(builder.create(target)))


def add_create_subparser(subparsers) -> None:
    p = subparsers.add_parser("create", help="build a placeholder instance and print it")
    p.add_argument("target", help="fully-qualified class, e.g. 'pkg.mod.Class'")
    p.add_argument("--interest", nargs="*", default=None, metavar="class",
                   help="classes used to satisfy abstract parameters")
    p.add_argument("--additional-sys-path", dest="additional_sys_path", nargs="*", default=None,
                   help="extra import roots; relative paths are resolved under the project root")
    p.add_argument("--max-depth", dest="max_depth", type=int, default=None)
    p.add_argument("--project-dir", dest="project_dir", default=None,
                   help="where to start looking for .pydummy/config.*")
    p.set_defaults(handler=_run_create)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="pydummy")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_create_subparser(subparsers)

    args = parser.parse_args(argv)
    configure_logger("DEBUG" if args.verbose else "WARNING")
    try:
        args.handler(args)
    except PydummyError as exc:
        logger = configure_logger(name="pydummy")
        logger.error("%s", exc)
        _sys.exit(1)


if __name__ == "__main__":
    main()
