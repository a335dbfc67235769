from __future__ import annotations

from typing import Any


class PydummyError(Exception):
    """Base exception for pydummy."""


class ConfigError(PydummyError):
    pass


class UnsupportedConstruction(PydummyError):
    """
    Raised when the builder cannot produce an instance of the requested type.
    Subclasses tell *why*; callers that do not care can catch this one.
    """

    def __init__(self, message: str, *, target: Any = None) -> None:
        self.target = target
        super().__init__(message)


class UnresolvableAbstractType(UnsupportedConstruction):
    """
    Abstract class, protocol or otherwise non-constructible annotation with no
    registered implementation and no matching interest-set candidate.
    """

    def __init__(self, target: Any) -> None:
        super().__init__(f"don't know how to instantiate {_describe(target)}", target=target)


class NoConstructorAvailable(UnsupportedConstruction):
    def __init__(self, target: Any) -> None:
        super().__init__(f"no constructors for {_describe(target)}", target=target)


class UnresolvableParameter(UnsupportedConstruction):
    """
    A constructor parameter the builder cannot type: unannotated without a
    default, or annotated with a forward reference that does not resolve.
    """

    def __init__(self, target: Any, parameter: str, reason: str = "no annotation and no default") -> None:
        self.parameter = parameter
        self.reason = reason
        super().__init__(
            f"cannot resolve parameter {parameter!r} of {_describe(target)}: {reason}",
            target=target,
        )


class RecursionLimitExceeded(UnsupportedConstruction):
    def __init__(self, target: Any, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"nesting deeper than max_depth={max_depth} while building {_describe(target)}",
            target=target,
        )


def _describe(tp: Any) -> str:
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)
