"""
Core data models for pline2ifc.

All models use Pydantic for validation and serialization.
"""

import math
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field, field_validator


class SegmentKind(str, Enum):
    """Types of polyline segments supplied by the drawing."""
    LINE = "line"
    ARC = "arc"
    DEGENERATE = "degenerate"  # zero length / coincident vertices


class ElementCompositionType(str, Enum):
    """IFC element composition tag for spatial elements."""
    ELEMENT = "ELEMENT"
    COMPLEX = "COMPLEX"
    PARTIAL = "PARTIAL"


class LayerSetDirection(str, Enum):
    """Axis along which material layers are stacked."""
    AXIS1 = "AXIS1"
    AXIS2 = "AXIS2"
    AXIS3 = "AXIS3"


class DirectionSense(str, Enum):
    """Sense of the layer set direction."""
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"


class Point2D(BaseModel):
    """2D point in drawing space."""
    x: float
    y: float

    def distance_to(self, other: "Point2D") -> float:
        """Calculate Euclidean distance to another point."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def __hash__(self) -> int:
        return hash((round(self.x, 6), round(self.y, 6)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return False
        return abs(self.x - other.x) < 1e-6 and abs(self.y - other.y) < 1e-6


class Point3D(BaseModel):
    """3D point in model space."""
    x: float
    y: float
    z: float = 0.0


class Vector3D(BaseModel):
    """Direction ratios in model space."""
    x: float
    y: float
    z: float = 0.0

    def magnitude(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)


class Segment(BaseModel):
    """
    One segment of an ordered polyline.

    Segment ``index`` joins vertex ``index`` to the next vertex. Arc segments
    additionally carry their center and radius.
    """
    index: int
    kind: SegmentKind
    start: Point2D
    end: Point2D
    bulge: float = 0.0
    start_width: float = 0.0
    end_width: float = 0.0
    center: Optional[Point2D] = None
    radius: Optional[float] = None

    def length(self) -> float:
        """Chord length between start and end."""
        return self.start.distance_to(self.end)


class WallPlacement(BaseModel):
    """Wall parameters derived from a straight polyline segment."""
    segment_index: int
    location: Point3D  # segment midpoint, z = 0
    direction: Vector3D  # unit vector along the segment
    length: float
    width: float
    height: float

    def __str__(self) -> str:
        return (f"WallPlacement(segment={self.segment_index}, "
                f"at=({self.location.x:.3f}, {self.location.y:.3f}), "
                f"length={self.length:.3f})")


class SkippedSegment(BaseModel):
    """A segment that produced no wall, with the diagnostic explaining why."""
    segment_index: int
    kind: SegmentKind
    reason: str
    start: Optional[Point2D] = None
    end: Optional[Point2D] = None
    center: Optional[Point2D] = None  # arcs only
    radius: Optional[float] = None  # arcs only


# Result of processing one segment: either a wall request or a skip
SegmentResult = Union[WallPlacement, SkippedSegment]


class EditorCredentials(BaseModel):
    """Ownership metadata attached to a model at creation."""
    developers_name: str = "xbim developer"
    application_name: str = "app"
    application_id: str = "app.exe"
    application_version: str = "1.0"
    editors_family_name: str = "team"
    editors_given_name: str = "x"
    editors_organisation_name: str = "y"


class MaterialLayerDefaults(BaseModel):
    """Material layer set usage applied to every generated wall."""
    material_name: str = "some material"
    layer_thickness: float = Field(default=10.0, ge=0.0)
    offset: float = 150.0
    direction: LayerSetDirection = LayerSetDirection.AXIS2
    direction_sense: DirectionSense = DirectionSense.NEGATIVE


class ValidationReport(BaseModel):
    """Outcome of validating (and possibly saving) a model."""
    project_name: str
    schema_version: str
    file_path: Optional[str] = None
    report_path: Optional[str] = None
    violations: List[str] = Field(default_factory=list)
    saved: bool = False

    @field_validator('violations')
    @classmethod
    def strip_blank(cls, v: List[str]) -> List[str]:
        return [msg for msg in v if msg.strip()]

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def is_valid(self) -> bool:
        """Model is valid iff there are no violations."""
        return self.violation_count == 0
