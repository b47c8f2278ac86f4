"""
DXF file parser using ezdxf library.

Loads a drawing and exposes the polylines that describe wall runs, with
fail-fast checks on the input.
"""

from pathlib import Path
from typing import List, Optional

try:
    import ezdxf
    from ezdxf.document import Drawing
except ImportError:
    raise ImportError(
        "ezdxf is required for DXF parsing. Install with: pip install ezdxf"
    )
from loguru import logger

from pline2ifc.core.config import Config, get_default_config
from pline2ifc.parsers.polyline_extractor import (
    PolylineData,
    extract_polylines,
    polyline_from_entity,
)


class DXFParser:
    """Parser for DXF files with fail-fast validation."""

    def __init__(self, file_path: Optional[str] = None, config: Optional[Config] = None):
        """
        Initialize DXF parser.

        Args:
            file_path: Path to DXF file
            config: Layer mapping configuration (defaults to bundled config)
        """
        self.file_path = Path(file_path) if file_path else None
        self.config = config or get_default_config()
        self.doc: Optional[Drawing] = None

    @classmethod
    def from_document(cls, doc: Drawing, config: Optional[Config] = None) -> "DXFParser":
        """Wrap an already loaded (or in-memory) ezdxf document."""
        parser = cls(config=config)
        parser.doc = doc
        return parser

    def parse(self) -> "DXFParser":
        """
        Load the DXF file.

        Raises:
            FileNotFoundError: If DXF file doesn't exist
            ezdxf.DXFError: If file is not valid DXF
        """
        logger.info(f"Parsing DXF file: {self.file_path}")

        if self.file_path is None or not self.file_path.exists():
            raise FileNotFoundError(f"DXF file not found: {self.file_path}")

        try:
            self.doc = ezdxf.readfile(str(self.file_path))
        except ezdxf.DXFError as e:
            logger.error(f"Failed to parse DXF file: {e}")
            raise

        logger.debug(f"Loaded {len(self.get_layer_names())} layers, units={self.get_units()}")
        return self

    def get_units(self) -> str:
        """Get drawing units from DXF header."""
        assert self.doc is not None

        # $INSUNITS: 1=inches, 2=feet, 4=mm, 5=cm, 6=m, 14=decimeters
        insunits = self.doc.header.get("$INSUNITS", 4)

        units_map = {
            1: "inches",
            2: "feet",
            4: "mm",
            5: "cm",
            6: "m",
            14: "dm",
        }

        return units_map.get(insunits, "mm")

    def get_layer_names(self) -> List[str]:
        """Get all layer names in the drawing."""
        assert self.doc is not None
        return [layer.dxf.name for layer in self.doc.layers]

    def get_wall_layers(self) -> List[str]:
        """Layers whose names match the configured wall patterns."""
        return [
            name for name in self.get_layer_names()
            if self.config.matches_layer_pattern(name, "walls")
        ]

    def get_polylines(self, layers: Optional[List[str]] = None) -> List[PolylineData]:
        """
        Extract polylines from the given layers (default: configured wall layers).

        Args:
            layers: Explicit layer names, bypassing the configured patterns

        Returns:
            List of PolylineData objects
        """
        assert self.doc is not None

        if layers is None:
            layers = self.get_wall_layers()
            if not layers:
                logger.warning("No layer matches the configured wall patterns")
                return []

        return extract_polylines(self.doc, layers=layers)

    def get_polyline(self, handle: str) -> PolylineData:
        """
        Get a single polyline by its entity handle.

        Raises:
            ValueError: If the handle does not name a polyline
        """
        assert self.doc is not None

        entity = self.doc.entitydb.get(handle.upper())
        polyline = polyline_from_entity(entity) if entity is not None else None
        if polyline is None:
            raise ValueError(f"A Polyline must be selected (handle {handle})")

        return polyline


def parse_dxf(file_path: str, config: Optional[Config] = None) -> DXFParser:
    """
    Parse DXF file and check it holds polylines to convert.

    Args:
        file_path: Path to DXF file
        config: Layer mapping configuration

    Returns:
        DXFParser instance with parsed document

    Raises:
        FileNotFoundError: If file doesn't exist
        ezdxf.DXFError: If file is not valid DXF
        ValueError: If the drawing has no polylines
    """
    parser = DXFParser(file_path, config=config).parse()

    if not extract_polylines(parser.doc):
        raise ValueError(
            f"DXF file {file_path} contains no LWPOLYLINE/POLYLINE entities.\n\n"
            f"Unable to proceed. Please draw the walls as polylines and try again."
        )

    return parser
