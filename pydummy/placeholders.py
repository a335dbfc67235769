# pydummy/placeholders.py
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, get_args, get_origin
import collections.abc as cabc
import enum
import types
import typing

__all__ = [
    "OPTIONAL",
    "MISSING",
    "DummyEnum",
    "PLACEHOLDERS",
    "simple_type_of",
    "lookup_placeholder",
]


class _Marker:
    """Named sentinel; identity is the only thing that matters."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


# Descriptor shared by every `X | None` / `Optional[X]` annotation.
OPTIONAL = _Marker("Optional")

# Returned by lookups that found nothing (None is a real placeholder value).
MISSING = _Marker("missing")


class DummyEnum(enum.Enum):
    """
    The one value used for *every* Enum-typed parameter.

    The declared enum class is deliberately ignored: picking "some" member of
    the real enum would look meaningful while being arbitrary. Register the
    member you need with `ObjectBuilder.using(...)` instead.
    """

    dummy = enum.auto()


# ----------------------------- Placeholder table -----------------------------

PLACEHOLDERS: Mapping[Any, Any] = MappingProxyType(
    {
        int: 1,
        float: 1.0,
        bool: False,
        str: "dummy",
        bytes: b"",
        OPTIONAL: None,
        enum.Enum: DummyEnum.dummy,
        set: set(),
        cabc.Set: frozenset(),
        frozenset: frozenset(),
        dict: {},
        cabc.Mapping: {},
        list: [],
        tuple: (),
        cabc.Sequence: (),
    }
)

# Containers handed out as copies so two built objects never share state.
_MUTABLE = (list, dict, set)


# ----------------------------- Descriptor reduction --------------------------

def _is_union(origin: Any) -> bool:
    return origin is typing.Union or origin is types.UnionType


def simple_type_of(annotation: Any) -> Any:
    """
    Reduce a parameter annotation to the key used in `PLACEHOLDERS`:
      - Annotated[X, ...]        -> reduction of X
      - X | None / Optional[X]   -> OPTIONAL
      - list[int], Sequence[str] -> list, collections.abc.Sequence (generic origin)
      - any Enum subclass        -> enum.Enum
      - plain classes            -> themselves
    Anything else (other unions, Any, Callable, unresolved strings) yields MISSING.
    """
    origin = get_origin(annotation)
    if origin is typing.Annotated:
        return simple_type_of(get_args(annotation)[0])

    if annotation is None or annotation is type(None):
        return OPTIONAL

    if _is_union(origin):
        return OPTIONAL if type(None) in get_args(annotation) else MISSING

    if origin is not None:
        return origin if isinstance(origin, type) else MISSING

    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            return enum.Enum
        return annotation
    return MISSING


def lookup_placeholder(annotation: Any, placeholders: Mapping[Any, Any] = PLACEHOLDERS) -> Any:
    """
    Exact-descriptor lookup: no subtype matching, so an `int` subclass (other
    than bool, which has its own entry) gets no placeholder. Returns MISSING
    when the annotation has no entry.
    """
    key = simple_type_of(annotation)
    if key is MISSING or key not in placeholders:
        return MISSING
    value = placeholders[key]
    if type(value) in _MUTABLE:
        return type(value)()
    return value
