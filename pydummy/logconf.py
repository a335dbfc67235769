from __future__ import annotations

import logging

_FORMAT = "[pydummy] %(levelname)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    """Accept either a logging constant or its name ("debug", "WARNING", ...)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logger(level: int | str = logging.INFO, name: str = "pydummy") -> logging.Logger:
    """
    Attach a single stream handler to the package root logger (idempotent) and
    return the logger named `name`, usually a `pydummy.<module>` child.
    """
    root = logging.getLogger("pydummy")
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    root.setLevel(_coerce_level(level))
    return logging.getLogger(name)
