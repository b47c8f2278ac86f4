"""
Polyline extraction from DXF files.

Extracts LWPOLYLINE and POLYLINE entities and splits them into ordered
line / arc / degenerate segments.
"""

from typing import List, Optional
from loguru import logger
import ezdxf
from ezdxf.math import bulge_to_arc

from pline2ifc.core.models import Point2D, Segment, SegmentKind


class PolylineData:
    """Extracted polyline data from DXF."""

    def __init__(
        self,
        points: List[Point2D],
        is_closed: bool,
        layer: str,
        bulges: Optional[List[float]] = None,
        start_widths: Optional[List[float]] = None,
        end_widths: Optional[List[float]] = None,
        handle: Optional[str] = None,
    ):
        """
        Initialize polyline data.

        Args:
            points: List of vertices
            is_closed: Whether polyline forms a closed loop
            layer: DXF layer name
            bulges: Bulge of the segment starting at each vertex (0 = straight)
            start_widths: Start width of the segment starting at each vertex
            end_widths: End width of the segment starting at each vertex
            handle: DXF entity handle
        """
        self.points = points
        self.is_closed = is_closed
        self.layer = layer
        self.bulges = bulges or [0.0] * len(points)
        self.start_widths = start_widths or [0.0] * len(points)
        self.end_widths = end_widths or [0.0] * len(points)
        self.handle = handle

    def segment_count(self) -> int:
        if len(self.points) < 2:
            return 0
        return len(self.points) if self.is_closed else len(self.points) - 1

    def segments(self) -> List[Segment]:
        """
        Split polyline into ordered segments.

        Segment i joins vertex i to vertex i+1; a closed polyline adds the
        segment from the last vertex back to the first.

        Returns:
            List of Segment objects
        """
        segments = []

        for i in range(self.segment_count()):
            start = self.points[i]
            end = self.points[(i + 1) % len(self.points)]
            bulge = self.bulges[i]

            segment = Segment(
                index=i,
                kind=SegmentKind.LINE,
                start=start,
                end=end,
                bulge=bulge,
                start_width=self.start_widths[i],
                end_width=self.end_widths[i],
            )

            if start == end:
                segment.kind = SegmentKind.DEGENERATE
            elif bulge != 0.0:
                center, _, _, radius = bulge_to_arc((start.x, start.y), (end.x, end.y), bulge)
                segment.kind = SegmentKind.ARC
                segment.center = Point2D(x=center.x, y=center.y)
                segment.radius = radius

            segments.append(segment)

        return segments

    def perimeter(self) -> float:
        """Calculate perimeter length along segment chords."""
        return sum(segment.length() for segment in self.segments())

    def __str__(self) -> str:
        return (f"Polyline({self.handle or '?'}, layer={self.layer}, "
                f"vertices={len(self.points)}, closed={self.is_closed})")


def polyline_from_entity(entity) -> Optional[PolylineData]:
    """
    Build PolylineData from an LWPOLYLINE or POLYLINE entity.

    Args:
        entity: ezdxf LWPolyline or Polyline

    Returns:
        PolylineData, or None for unsupported entity types
    """
    dxftype = entity.dxftype()

    if dxftype == "LWPOLYLINE":
        # format xyseb: x, y, start width, end width, bulge
        vertices = list(entity.get_points("xyseb"))
        return PolylineData(
            points=[Point2D(x=v[0], y=v[1]) for v in vertices],
            is_closed=entity.closed,
            layer=entity.dxf.layer,
            bulges=[v[4] for v in vertices],
            start_widths=[v[2] for v in vertices],
            end_widths=[v[3] for v in vertices],
            handle=entity.dxf.handle,
        )

    if dxftype == "POLYLINE":
        if not entity.is_2d_polyline:
            logger.debug(f"Skipping 3D polyline/mesh {entity.dxf.handle}")
            return None
        vertices = list(entity.vertices)
        return PolylineData(
            points=[Point2D(x=v.dxf.location.x, y=v.dxf.location.y) for v in vertices],
            is_closed=entity.is_closed,
            layer=entity.dxf.layer,
            bulges=[v.dxf.bulge for v in vertices],
            start_widths=[v.dxf.start_width for v in vertices],
            end_widths=[v.dxf.end_width for v in vertices],
            handle=entity.dxf.handle,
        )

    return None


def extract_polylines(
    doc: ezdxf.document.Drawing,
    layers: Optional[List[str]] = None,
    min_points: int = 2,
) -> List[PolylineData]:
    """
    Extract polylines from DXF document.

    Args:
        doc: ezdxf Drawing object
        layers: List of layer names to extract from (None = all layers)
        min_points: Minimum number of points to consider

    Returns:
        List of PolylineData objects
    """
    msp = doc.modelspace()
    polylines = []

    for entity in msp.query("LWPOLYLINE POLYLINE"):
        if layers and entity.dxf.layer not in layers:
            continue

        polyline = polyline_from_entity(entity)
        if polyline is None or len(polyline.points) < min_points:
            continue

        polylines.append(polyline)

    logger.debug(
        f"Extracted {len(polylines)} polylines "
        f"from {len(layers) if layers else 'all'} layer(s)"
    )

    return polylines
