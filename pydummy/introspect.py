# pydummy/introspect.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, get_args, get_origin
import inspect
import logging
import typing
import types

from .placeholders import MISSING

__all__ = [
    "Parameter",
    "Constructor",
    "list_constructors",
    "concrete_class_of",
    "is_abstract_type",
    "is_instance",
    "is_subtype",
]

_log = logging.getLogger("pydummy.introspect")

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


# ----------------------------- Constructor model -----------------------------

@dataclass(frozen=True)
class Parameter:
    """One constructor parameter. `annotation`/`default` are MISSING when absent."""
    name: str
    kind: inspect._ParameterKind
    annotation: Any = MISSING
    default: Any = MISSING

    @property
    def keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY


@dataclass(frozen=True)
class Constructor:
    owner: type
    factory: Callable[..., Any]
    parameters: tuple[Parameter, ...]

    def invoke(self, args: tuple, kwargs: dict) -> Any:
        return self.factory(*args, **kwargs)

    def __repr__(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"<Constructor {self.owner.__qualname__}({params})>"


def _resolve_one(func: Any, name: str, ann: Any, localns: dict[str, Any]) -> Any:
    """Resolve a single annotation in the namespace of the function that declares it."""
    def shim() -> None:
        pass

    shim.__annotations__ = {name: ann}
    try:
        return typing.get_type_hints(
            shim, globalns=getattr(func, "__globals__", {}), localns=localns
        )[name]
    except (NameError, TypeError, AttributeError, SyntaxError) as exc:
        _log.debug("cannot resolve annotation %r of %r: %s", ann, name, exc)
        return ann


def _type_hints_for_class(cls: type) -> dict[str, Any]:
    """
    Resolve constructor hints for `cls`, handling forward references.
    Each function is resolved in its own module (an inherited `__init__` keeps
    the globals of the base class that defines it). `__new__` hints are read
    first so that `__init__` wins on name clashes. When get_type_hints fails,
    annotations are resolved one by one; the unresolvable ones stay strings.
    """
    localns = {cls.__name__: cls}

    hints: dict[str, Any] = {}
    for name in ("__new__", "__init__"):
        func = getattr(cls, name, None)
        if func is None or func in (object.__new__, object.__init__):
            continue
        func = inspect.unwrap(func)
        try:
            hints.update(typing.get_type_hints(func, localns=localns))
        except (NameError, TypeError, AttributeError, SyntaxError) as exc:
            _log.debug("get_type_hints(%s.%s) failed: %s", cls.__qualname__, name, exc)
            raw = dict(getattr(func, "__annotations__", {}) or {})
            hints.update({k: _resolve_one(func, k, v, localns) for k, v in raw.items()})
    hints.pop("return", None)
    return hints


def list_constructors(cls: type) -> list[Constructor]:
    """
    Enumerate the public constructors of `cls` in their natural order.

    A Python class exposes at most one: its call signature. The list is empty
    when `__init__` is explicitly disabled (`__init__ = None`) or when Python
    has no signature for the class (some builtins and extension types).
    """
    if getattr(cls, "__init__", object.__init__) is None:
        return []
    try:
        sig = inspect.signature(cls)
    except (ValueError, TypeError) as exc:
        _log.debug("no signature for %s: %s", cls.__qualname__, exc)
        return []

    hints = _type_hints_for_class(cls)
    params: list[Parameter] = []
    for p in sig.parameters.values():
        if p.kind in _VARIADIC:
            continue
        ann = hints.get(p.name, p.annotation)
        params.append(
            Parameter(
                name=p.name,
                kind=p.kind,
                annotation=MISSING if ann is inspect.Parameter.empty else ann,
                default=MISSING if p.default is inspect.Parameter.empty else p.default,
            )
        )
    return [Constructor(owner=cls, factory=cls, parameters=tuple(params))]


# ----------------------------- Type predicates -------------------------------

def _is_union(origin: Any) -> bool:
    return origin is typing.Union or origin is types.UnionType


def concrete_class_of(tp: Any) -> Optional[type]:
    """
    The runtime class behind an annotation: `Box[int]` -> Box, `Box` -> Box.
    None for unions, Any, Callable, unresolved forward references...
    """
    if tp is Any:
        return None
    origin = get_origin(tp)
    if origin is typing.Annotated:
        return concrete_class_of(get_args(tp)[0])
    if origin is not None:
        return origin if isinstance(origin, type) else None
    return tp if isinstance(tp, type) else None


def is_abstract_type(tp: Any) -> bool:
    """Abstract base classes (pending abstract methods) and typing.Protocol classes."""
    cls = concrete_class_of(tp)
    if cls is None:
        return False
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def is_instance(obj: Any, tp: Any) -> bool:
    """
    Runtime "obj satisfies tp":
      - Any accepts everything,
      - unions accept an instance of any member,
      - parameterized generics are checked against their origin,
      - non-runtime-checkable protocols fall back to a nominal MRO check.
    """
    if tp is Any:
        return True
    origin = get_origin(tp)
    if origin is typing.Annotated:
        return is_instance(obj, get_args(tp)[0])
    if _is_union(origin):
        return any(is_instance(obj, a) for a in get_args(tp))
    cls = concrete_class_of(tp)
    if cls is None:
        return False
    try:
        return isinstance(obj, cls)
    except TypeError:
        return cls in type(obj).__mro__


def is_subtype(candidate: type, tp: Any) -> bool:
    """True if `candidate` can stand where `tp` is expected (tp.isAssignableFrom(candidate))."""
    if tp is Any:
        return True
    origin = get_origin(tp)
    if origin is typing.Annotated:
        return is_subtype(candidate, get_args(tp)[0])
    if _is_union(origin):
        return any(is_subtype(candidate, a) for a in get_args(tp))
    cls = concrete_class_of(tp)
    if cls is None:
        return False
    try:
        return issubclass(candidate, cls)
    except TypeError:
        return cls in candidate.__mro__
