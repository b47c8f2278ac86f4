"""
Wall parameter extraction from polyline segments.

Straight segments become wall placements (midpoint, direction, length).
Arc and degenerate segments are reported and skipped; arcs never produce
walls.
"""

from typing import Iterable, List, Optional
from loguru import logger

from pline2ifc.core.config import Config
from pline2ifc.core.models import (
    Point3D,
    Segment,
    SegmentKind,
    SegmentResult,
    SkippedSegment,
    Vector3D,
    WallPlacement,
)


class SegmentExtractor:
    """Converts an ordered sequence of segments into per-segment results."""

    def __init__(
        self,
        wall_width: float = 0.5,
        wall_height: float = 2.0,
        min_length: float = 1e-9,
    ):
        """
        Initialize segment extractor.

        Args:
            wall_width: Width given to every generated wall
            wall_height: Extrusion height given to every generated wall
            min_length: Line segments not longer than this are degenerate
        """
        self.wall_width = wall_width
        self.wall_height = wall_height
        self.min_length = min_length

    @classmethod
    def from_config(cls, config: Config) -> "SegmentExtractor":
        return cls(
            wall_width=config.get_geometry_default("wall_width", 0.5),
            wall_height=config.get_geometry_default("wall_height", 2.0),
            min_length=config.get_geometry_default("min_segment_length", 1e-9),
        )

    def extract(self, segments: Iterable[Segment]) -> List[SegmentResult]:
        """
        Process segments in order.

        Args:
            segments: Ordered polyline segments

        Returns:
            One WallPlacement or SkippedSegment per input segment, same order
        """
        results: List[SegmentResult] = []

        for segment in segments:
            if segment.kind == SegmentKind.LINE:
                placement = self._line_to_wall(segment)
                if placement is not None:
                    results.append(placement)
                    continue
                results.append(self._skip_degenerate(segment))
            elif segment.kind == SegmentKind.ARC:
                results.append(self._skip_arc(segment))
            else:
                results.append(self._skip_degenerate(segment))

        walls = sum(1 for r in results if isinstance(r, WallPlacement))
        logger.debug(
            f"Extracted {walls} wall placements from {len(results)} segments"
        )

        return results

    def _line_to_wall(self, segment: Segment) -> Optional[WallPlacement]:
        length = segment.length()
        if length <= self.min_length:
            return None

        dx = segment.end.x - segment.start.x
        dy = segment.end.y - segment.start.y

        return WallPlacement(
            segment_index=segment.index,
            location=Point3D(
                x=(segment.start.x + segment.end.x) / 2.0,
                y=(segment.start.y + segment.end.y) / 2.0,
                z=0.0,
            ),
            direction=Vector3D(x=dx / length, y=dy / length, z=0.0),
            length=length,
            width=self.wall_width,
            height=self.wall_height,
        )

    def _skip_arc(self, segment: Segment) -> SkippedSegment:
        lines = [
            f"Segment {segment.index} - Arc -",
            f"Start width: {segment.start_width}",
            f"End width:   {segment.end_width}",
            f"Bulge:       {segment.bulge}",
            f"Start point: ({segment.start.x}, {segment.start.y})",
            f"End point:   ({segment.end.x}, {segment.end.y})",
            f"Radius:      {segment.radius}",
        ]
        if segment.center is not None:
            lines.append(f"Center:      ({segment.center.x}, {segment.center.y})")

        for line in lines:
            logger.warning(line)

        return SkippedSegment(
            segment_index=segment.index,
            kind=SegmentKind.ARC,
            reason="arc segments are not converted to walls",
            start=segment.start,
            end=segment.end,
            center=segment.center,
            radius=segment.radius,
        )

    def _skip_degenerate(self, segment: Segment) -> SkippedSegment:
        logger.warning(f"Segment {segment.index} : zero length segment")
        logger.warning(f"Start width: {segment.start_width}")
        logger.warning(f"End width:   {segment.end_width}")
        logger.warning(f"Bulge:       {segment.bulge}")

        return SkippedSegment(
            segment_index=segment.index,
            kind=SegmentKind.DEGENERATE,
            reason="zero length segment",
            start=segment.start,
            end=segment.end,
        )


def extract_segments(
    segments: Iterable[Segment],
    wall_width: float = 0.5,
    wall_height: float = 2.0,
) -> List[SegmentResult]:
    """
    Convenience function to turn segments into wall placements.

    Args:
        segments: Ordered polyline segments
        wall_width: Wall width for every straight segment
        wall_height: Wall height for every straight segment

    Returns:
        List of WallPlacement / SkippedSegment results
    """
    extractor = SegmentExtractor(wall_width=wall_width, wall_height=wall_height)
    return extractor.extract(segments)
