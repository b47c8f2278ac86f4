from __future__ import annotations

from pline2ifc.core.models import Point2D, Segment, SegmentKind


def line(index: int, start: tuple[float, float], end: tuple[float, float]) -> Segment:
    return Segment(
        index=index,
        kind=SegmentKind.LINE,
        start=Point2D(x=start[0], y=start[1]),
        end=Point2D(x=end[0], y=end[1]),
    )


def arc(index: int, start: tuple[float, float], end: tuple[float, float]) -> Segment:
    """Semicircle (bulge 1) from start to end."""
    p1 = Point2D(x=start[0], y=start[1])
    p2 = Point2D(x=end[0], y=end[1])
    return Segment(
        index=index,
        kind=SegmentKind.ARC,
        start=p1,
        end=p2,
        bulge=1.0,
        center=Point2D(x=(p1.x + p2.x) / 2.0, y=(p1.y + p2.y) / 2.0),
        radius=p1.distance_to(p2) / 2.0,
    )


def degenerate(index: int, at: tuple[float, float]) -> Segment:
    point = Point2D(x=at[0], y=at[1])
    return Segment(index=index, kind=SegmentKind.DEGENERATE, start=point, end=point)
