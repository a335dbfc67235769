# pydummy/builder.py
"""
Build "good enough" instances for tests.

Objects are as simple as possible:
  - int: 1, float: 1.0, bool: False, str: "dummy"
  - list / Sequence / tuple: empty
  - set / Set / frozenset: empty
  - dict / Mapping: empty
  - Optional[...]: None
  - nested classes: built recursively with the same rules

Enums are never correct: every Enum parameter gets `DummyEnum.dummy`. When the
real member matters, register it with `using(...)`. Complete the object
afterwards (e.g. `dataclasses.replace`) with the values the test cares about.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, TypeVar
import enum
import logging
import typing

from .errors import (
    NoConstructorAvailable,
    RecursionLimitExceeded,
    UnresolvableAbstractType,
    UnresolvableParameter,
)
from .introspect import (
    Constructor,
    Parameter,
    concrete_class_of,
    is_abstract_type,
    is_instance,
    is_subtype,
    list_constructors,
)
from .placeholders import MISSING, PLACEHOLDERS, lookup_placeholder, simple_type_of

__all__ = ["ObjectBuilder", "ObjectCache"]

T = TypeVar("T")

_log = logging.getLogger("pydummy.builder")


class ObjectBuilder:
    """
    Recursive constructor-based builder.

    `classes` is the interest set: classes registered with `add_class`, used to
    satisfy abstract types by building the first registered subclass.
    """

    placeholders: Mapping[Any, Any] = PLACEHOLDERS

    def __init__(self, *, max_depth: Optional[int] = None) -> None:
        self.classes: list[type] = []
        self.max_depth = max_depth
        self._depth = 0

    def using(self, *objects: Any) -> "ObjectCache":
        cache = ObjectCache(max_depth=self.max_depth)
        cache.classes.extend(self.classes)
        cache.using(*objects)
        return cache

    def add_class(self, cls: type) -> "ObjectBuilder":
        if not isinstance(cls, type):
            raise TypeError(f"add_class expects a class, got {cls!r}")
        self.classes.append(cls)
        return self

    def create(self, cls: type[T]) -> T:
        return self._internal_create(cls)

    def has_custom_impl(self, tp: Any) -> bool:
        return False

    # ------------------------------------------------------------------ #

    def _get_impl(self, tp: Any) -> Any:
        for candidate in self.classes:
            if candidate is not tp and is_subtype(candidate, tp):
                _log.debug("building %s for %r (interest set)", candidate.__qualname__, tp)
                return self._internal_create(candidate)
        raise UnresolvableAbstractType(tp)

    def _needs_impl(self, tp: Any) -> bool:
        return concrete_class_of(tp) is None or is_abstract_type(tp) or self.has_custom_impl(tp)

    def _internal_create(self, tp: Any) -> Any:
        if self._needs_impl(tp):
            return self._get_impl(tp)
        # Only constructor hops count: registered objects are returned as-is.
        if self.max_depth is not None and self._depth > self.max_depth:
            raise RecursionLimitExceeded(tp, self.max_depth)
        self._depth += 1
        try:
            cons = self.get_best_constructor(concrete_class_of(tp))
            return self.create_instance(cons)
        finally:
            self._depth -= 1

    def get_best_constructor(self, cls: type[T]) -> Constructor:
        # First enumerated constructor; no arity or type preference.
        found = list_constructors(cls)
        if not found:
            raise NoConstructorAvailable(cls)
        return found[0]

    def create_instance(self, constructor: Constructor) -> Any:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param in constructor.parameters:
            value = self._resolve_parameter(constructor, param)
            if param.keyword_only:
                kwargs[param.name] = value
            else:
                args.append(value)
        _log.debug("invoking %r", constructor)
        return constructor.invoke(tuple(args), kwargs)

    def _resolve_parameter(self, constructor: Constructor, param: Parameter) -> Any:
        if param.annotation is MISSING:
            if param.default is MISSING:
                raise UnresolvableParameter(constructor.owner, param.name)
            return param.default
        value = lookup_placeholder(param.annotation, self.placeholders)
        if value is not MISSING:
            return value
        if isinstance(param.annotation, (str, typing.ForwardRef)):
            raise UnresolvableParameter(
                constructor.owner, param.name, f"unresolved forward reference {param.annotation!r}"
            )
        return self._internal_create(param.annotation)


class ObjectCache(ObjectBuilder):
    """
    Builder that keeps implementations to be picked for future creations.
    Whenever a type is abstract, or one of the registered objects satisfies it,
    the first suitable object is returned as-is.
    """

    def __init__(self, *, max_depth: Optional[int] = None) -> None:
        super().__init__(max_depth=max_depth)
        self.implementations: list[Any] = []

    def using(self, *objects: Any) -> "ObjectCache":
        self.implementations.extend(objects)
        return self

    def _get_impl(self, tp: Any) -> Any:
        for impl in self.implementations:
            if is_instance(impl, tp):
                _log.debug("using registered %r for %r", impl, tp)
                return impl
        return super()._get_impl(tp)

    def has_custom_impl(self, tp: Any) -> bool:
        return any(is_instance(impl, tp) for impl in self.implementations)

    def _resolve_parameter(self, constructor: Constructor, param: Parameter) -> Any:
        # The enum placeholder is the one a registered object may replace.
        if (
            param.annotation is not MISSING
            and simple_type_of(param.annotation) is enum.Enum
            and self.has_custom_impl(param.annotation)
        ):
            return self._get_impl(param.annotation)
        return super()._resolve_parameter(constructor, param)
