# pydummy/imports.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Union
import importlib
import os
import sys

Pathish = Union[str, os.PathLike[str], Path]


def resolve_attr(fq: str) -> Any:
    """
    Resolve a fully-qualified attribute: 'pkg.mod.Class' or 'pkg.mod.Outer.Inner'.
    Imports the longest importable module prefix and getattr through the remainder.
    """
    parts = fq.split(".")
    for i in range(len(parts), 0, -1):
        mod_name = ".".join(parts[:i])
        try:
            obj = importlib.import_module(mod_name)
        except ImportError:
            continue
        rest = parts[i:]
        break
    else:
        raise ImportError(f"Cannot import any prefix of {fq!r}")
    for name in rest:
        obj = getattr(obj, name)
    return obj


def normalize_roots(project_root: Path, roots: Iterable[Pathish] | None) -> List[str]:
    """
    Absolute, de-duplicated import roots. Relative entries are anchored on
    `project_root`; entries that are not existing directories are dropped.
    """
    seen: set[str] = set()
    out: list[str] = []
    for raw in roots or []:
        p = Path(raw).expanduser()
        abs_p = p if p.is_absolute() else (project_root / p)
        try:
            abs_p = abs_p.resolve()
        except OSError:
            pass
        if not abs_p.is_dir():
            continue
        s = abs_p.as_posix()
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def prepend_sys_path(roots: Iterable[Pathish]) -> None:
    """
    Prepend sys.path with the given roots, preserving input order and
    avoiding duplicates.
    """
    for s in reversed([str(r) for r in roots]):
        if s not in sys.path:
            sys.path.insert(0, s)
