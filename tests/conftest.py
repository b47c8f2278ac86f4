from __future__ import annotations

import pytest

from pline2ifc.core.models import Segment
from tests.utils_segments import line


@pytest.fixture
def two_segments() -> list[Segment]:
    """Segment A (0,0)->(10,0) and segment B (10,0)->(10,5)."""
    return [line(0, (0.0, 0.0), (10.0, 0.0)), line(1, (10.0, 0.0), (10.0, 5.0))]


@pytest.fixture
def model():
    pytest.importorskip("ifcopenshell")
    from pline2ifc.generation.model_store import BuildingModel

    return BuildingModel.create("TestProject")


@pytest.fixture
def fresh_singleton():
    from pline2ifc.generation import model_store

    model_store.reset_instance()
    yield
    model_store.reset_instance()
