"""
pline2ifc - Polyline to IFC wall model builder

Builds a minimal IFC4 building hierarchy (Project, Building, Storey,
Wall, Space) from 2D polyline segments and writes it as <project>.ifc.
"""

__version__ = "0.1.0"

from pline2ifc.core.exceptions import InvalidState, ModelValidationError, TransactionAborted
from pline2ifc.generation.model_store import BuildingModel, get_or_create, reset_instance
from pline2ifc.generation.hierarchy_builder import (
    create_building,
    create_storey,
    create_wall,
    create_space,
)
from pline2ifc.generation.persister import SavePolicy, validate_and_save, validate_model
from pline2ifc.generation.wall_generator import WallGenerator, generate_walls
from pline2ifc.geometry.segment_extractor import SegmentExtractor, extract_segments
from pline2ifc.parsers.dxf_parser import parse_dxf
from pline2ifc.parsers.polyline_extractor import extract_polylines

__all__ = [
    "InvalidState",
    "ModelValidationError",
    "TransactionAborted",
    "BuildingModel",
    "get_or_create",
    "reset_instance",
    "create_building",
    "create_storey",
    "create_wall",
    "create_space",
    "SavePolicy",
    "validate_and_save",
    "validate_model",
    "WallGenerator",
    "generate_walls",
    "SegmentExtractor",
    "extract_segments",
    "parse_dxf",
    "extract_polylines",
]
