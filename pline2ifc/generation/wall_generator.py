"""
Wall generation from polyline segments.

Runs the segment extractor and creates one wall per straight segment on a
storey. Each wall is its own transaction: a failure part way through leaves
the walls created before it in place.
"""

from typing import Iterable, List, Optional, Union
from loguru import logger

from pline2ifc.core.config import Config, get_default_config
from pline2ifc.core.exceptions import InvalidState
from pline2ifc.core.models import Segment, SegmentResult, SkippedSegment, WallPlacement
from pline2ifc.generation.hierarchy_builder import create_wall
from pline2ifc.generation.model_store import BuildingModel
from pline2ifc.geometry.segment_extractor import SegmentExtractor
from pline2ifc.parsers.polyline_extractor import PolylineData


class GenerationResult:
    """Walls created and segments skipped for one polyline."""

    def __init__(self):
        self.results: List[SegmentResult] = []
        self.walls: List = []

    @property
    def skipped(self) -> List[SkippedSegment]:
        return [r for r in self.results if isinstance(r, SkippedSegment)]

    @property
    def placements(self) -> List[WallPlacement]:
        return [r for r in self.results if isinstance(r, WallPlacement)]

    def __str__(self) -> str:
        return f"GenerationResult(walls={len(self.walls)}, skipped={len(self.skipped)})"


class WallGenerator:
    """Creates walls in a model from polyline geometry."""

    def __init__(
        self,
        model: BuildingModel,
        config: Optional[Config] = None,
        extractor: Optional[SegmentExtractor] = None,
    ):
        """
        Initialize wall generator.

        Args:
            model: Model receiving the walls
            config: Geometry and material defaults (defaults to bundled config)
            extractor: Segment extractor; built from config when omitted
        """
        self.model = model
        self.config = config or get_default_config()
        self.extractor = extractor or SegmentExtractor.from_config(self.config)
        self.material = self.config.get_material_defaults()

    def generate(
        self,
        source: Union[PolylineData, Iterable[Segment]],
        storey=None,
    ) -> GenerationResult:
        """
        Create a wall for every straight segment.

        Args:
            source: Polyline or ordered segments
            storey: Target storey (default: the model's first storey)

        Returns:
            GenerationResult with walls in segment order

        Raises:
            InvalidState: If no storey is given and the model has none
        """
        storey = storey if storey is not None else self.model.default_storey
        if storey is None:
            raise InvalidState("Cannot generate walls: model has no storey")

        segments = source.segments() if isinstance(source, PolylineData) else list(source)
        logger.info(f"Generating walls from {len(segments)} segments")

        result = GenerationResult()
        result.results = self.extractor.extract(segments)

        for placement in result.placements:
            wall = create_wall(
                self.model,
                placement.location.x,
                placement.location.y,
                placement.direction.x,
                placement.direction.y,
                placement.direction.z,
                placement.length,
                placement.width,
                placement.height,
                storey,
                material=self.material,
            )
            result.walls.append(wall)

        if result.skipped:
            logger.warning(f"Skipped {len(result.skipped)} segment(s) without walls")

        logger.success(f"Generated {len(result.walls)} walls")

        return result


def generate_walls(
    model: BuildingModel,
    source: Union[PolylineData, Iterable[Segment]],
    storey=None,
    wall_width: float = 0.5,
    wall_height: float = 2.0,
) -> GenerationResult:
    """
    Convenience function to create walls from a polyline.

    Args:
        model: Model receiving the walls
        source: Polyline or ordered segments
        storey: Target storey (default: the model's first storey)
        wall_width: Wall width
        wall_height: Wall height

    Returns:
        GenerationResult
    """
    generator = WallGenerator(
        model,
        extractor=SegmentExtractor(wall_width=wall_width, wall_height=wall_height),
    )
    return generator.generate(source, storey=storey)
