# pydummy/pytest_plugin.py
"""
pytest integration, registered through the `pytest11` entry point.

    def test_order_total(object_builder):
        order = object_builder.using(FakeClock()).create(Order)

    def test_shortcut(dummy):
        customer = dummy(Customer)
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from .builder import ObjectBuilder
from .config import load_builder


@pytest.fixture
def object_builder(request: pytest.FixtureRequest) -> ObjectBuilder:
    """A fresh builder configured from the layered config around the test's rootdir."""
    return load_builder(start=Path(str(request.config.rootpath)))


@pytest.fixture
def dummy(object_builder: ObjectBuilder) -> Callable[[type], Any]:
    return object_builder.create
