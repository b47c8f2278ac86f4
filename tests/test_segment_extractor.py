from __future__ import annotations

import pytest

from pline2ifc.core.models import SegmentKind, SkippedSegment, WallPlacement
from pline2ifc.geometry.segment_extractor import SegmentExtractor, extract_segments
from tests.utils_segments import arc, degenerate, line


def test_two_line_segments_produce_two_placements(two_segments) -> None:
    results = extract_segments(two_segments)

    assert len(results) == 2
    wall_a, wall_b = results
    assert isinstance(wall_a, WallPlacement)
    assert isinstance(wall_b, WallPlacement)

    assert (wall_a.location.x, wall_a.location.y, wall_a.location.z) == pytest.approx((5.0, 0.0, 0.0))
    assert (wall_a.direction.x, wall_a.direction.y) == pytest.approx((1.0, 0.0))
    assert wall_a.length == pytest.approx(10.0)
    assert wall_a.width == pytest.approx(0.5)
    assert wall_a.height == pytest.approx(2.0)

    assert (wall_b.location.x, wall_b.location.y, wall_b.location.z) == pytest.approx((10.0, 2.5, 0.0))
    assert (wall_b.direction.x, wall_b.direction.y) == pytest.approx((0.0, 1.0))
    assert wall_b.length == pytest.approx(5.0)


def test_direction_is_unit_vector() -> None:
    (placement,) = extract_segments([line(0, (1.0, 1.0), (4.0, 5.0))])

    assert placement.direction.magnitude() == pytest.approx(1.0)
    assert (placement.direction.x, placement.direction.y) == pytest.approx((0.6, 0.8))
    assert placement.length == pytest.approx(5.0)


def test_arc_segments_are_skipped_not_converted() -> None:
    results = extract_segments([arc(0, (0.0, 0.0), (10.0, 0.0))])

    assert len(results) == 1
    skipped = results[0]
    assert isinstance(skipped, SkippedSegment)
    assert skipped.kind == SegmentKind.ARC
    assert skipped.segment_index == 0
    assert skipped.radius == pytest.approx(5.0)
    assert (skipped.center.x, skipped.center.y) == pytest.approx((5.0, 0.0))
    assert (skipped.end.x, skipped.end.y) == pytest.approx((10.0, 0.0))


def test_degenerate_and_zero_length_lines_are_skipped() -> None:
    results = extract_segments([
        degenerate(0, (3.0, 3.0)),
        line(1, (2.0, 2.0), (2.0, 2.0)),
    ])

    assert [type(r) for r in results] == [SkippedSegment, SkippedSegment]
    assert all(r.kind == SegmentKind.DEGENERATE for r in results)


def test_mixed_segments_keep_order(two_segments) -> None:
    segments = [two_segments[0], arc(1, (10.0, 0.0), (10.0, 5.0)), line(2, (10.0, 5.0), (0.0, 5.0))]

    results = SegmentExtractor().extract(segments)

    assert [r.segment_index for r in results] == [0, 1, 2]
    assert [isinstance(r, WallPlacement) for r in results] == [True, False, True]


def test_wall_dimensions_are_configurable(two_segments) -> None:
    extractor = SegmentExtractor(wall_width=0.2, wall_height=3.0)

    results = extractor.extract(two_segments)

    assert all(r.width == pytest.approx(0.2) for r in results)
    assert all(r.height == pytest.approx(3.0) for r in results)
