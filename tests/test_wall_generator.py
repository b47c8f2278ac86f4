from __future__ import annotations

import pytest

pytest.importorskip("ifcopenshell")
import ifcopenshell.util.element
import ifcopenshell.util.placement

from pline2ifc.core.exceptions import InvalidState
from pline2ifc.core.models import Point2D, SegmentKind
from pline2ifc.generation.model_store import BuildingModel
from pline2ifc.generation.wall_generator import WallGenerator, generate_walls
from pline2ifc.parsers.polyline_extractor import PolylineData
from tests.utils_segments import arc, degenerate, line


def _location_and_direction(wall):
    matrix = ifcopenshell.util.placement.get_local_placement(wall.ObjectPlacement)
    location = (matrix[0][3], matrix[1][3], matrix[2][3])
    direction = (matrix[0][0], matrix[1][0])
    return location, direction


def test_two_segments_create_two_walls_on_one_storey(model, two_segments) -> None:
    result = generate_walls(model, two_segments)

    assert len(result.walls) == 2
    assert result.skipped == []

    storey = model.default_storey
    assert all(ifcopenshell.util.element.get_container(w) == storey for w in result.walls)

    (loc_a, dir_a), (loc_b, dir_b) = [_location_and_direction(w) for w in result.walls]
    assert loc_a == pytest.approx((5.0, 0.0, 0.0))
    assert dir_a == pytest.approx((1.0, 0.0))
    assert loc_b == pytest.approx((10.0, 2.5, 0.0))
    assert dir_b == pytest.approx((0.0, 1.0))

    profiles = [w.Representation.Representations[0].Items[0].SweptArea for w in result.walls]
    assert [p.XDim for p in profiles] == pytest.approx([10.0, 5.0])
    assert all(p.YDim == pytest.approx(0.5) for p in profiles)
    depths = [w.Representation.Representations[0].Items[0].Depth for w in result.walls]
    assert depths == pytest.approx([2.0, 2.0])


def test_n_line_segments_create_n_walls(model) -> None:
    segments = [line(i, (float(i), 0.0), (float(i + 1), 1.0)) for i in range(6)]

    result = generate_walls(model, segments)

    assert len(result.walls) == 6
    assert len(model.walls) == 6


def test_arcs_and_degenerate_segments_leave_model_unchanged(model) -> None:
    before = len(list(model.ifc_file))

    result = generate_walls(model, [arc(0, (0.0, 0.0), (4.0, 0.0)), degenerate(1, (4.0, 0.0))])

    assert result.walls == []
    assert [s.kind for s in result.skipped] == [SegmentKind.ARC, SegmentKind.DEGENERATE]
    assert len(list(model.ifc_file)) == before


def test_generate_from_polyline(model) -> None:
    polyline = PolylineData(
        points=[Point2D(x=0, y=0), Point2D(x=4, y=0), Point2D(x=4, y=3)],
        is_closed=True,
        layer="WALLS",
        bulges=[0.0, 0.0, 0.0],
    )

    result = WallGenerator(model).generate(polyline)

    assert len(result.walls) == 3
    assert len(result.placements) == 3
    assert result.placements[2].length == pytest.approx(5.0)


def test_explicit_storey(model, two_segments) -> None:
    from pline2ifc.generation.hierarchy_builder import create_storey

    upper = create_storey(model, "Level 1", 3.0, model.buildings[0])

    result = generate_walls(model, two_segments, storey=upper)

    assert all(ifcopenshell.util.element.get_container(w) == upper for w in result.walls)


def test_generate_without_storey_raises(two_segments) -> None:
    bare = BuildingModel.create("NoStorey", with_defaults=False)

    with pytest.raises(InvalidState):
        generate_walls(bare, two_segments)
