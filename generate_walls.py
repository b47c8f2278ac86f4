#!/usr/bin/env python
"""
Generate IFC walls from the polylines of a DXF drawing.

Usage:
    python generate_walls.py input.dxf [output_dir] [polyline_handle]

Example:
    python generate_walls.py drawings/plan.dxf out/
    python generate_walls.py drawings/plan.dxf out/ 2F

Environment:
    PLINE2IFC_CONFIG        Path to a JSON config (default: bundled config)
    PLINE2IFC_SAVE_REPORT   If set, always write the IFC file plus a validation report
    PLINE2IFC_LOG_LEVEL     Loguru level for diagnostics (default: WARNING)
"""

import os
import sys
from pathlib import Path
from loguru import logger

from pline2ifc.core.config import get_default_config, load_config
from pline2ifc.generation.model_store import BuildingModel
from pline2ifc.generation.persister import SavePolicy, validate_and_save
from pline2ifc.generation.wall_generator import WallGenerator
from pline2ifc.parsers.dxf_parser import parse_dxf


def main():
    if len(sys.argv) < 2:
        print("Usage: python generate_walls.py input.dxf [output_dir] [polyline_handle]")
        print()
        print("Examples:")
        print("  python generate_walls.py drawings/plan.dxf")
        print("  python generate_walls.py drawings/plan.dxf out/ 2F")
        return 1

    dxf_file = sys.argv[1]
    output_dir = sys.argv[2] if len(sys.argv) >= 3 else str(Path(dxf_file).parent)
    handle = sys.argv[3] if len(sys.argv) >= 4 else None

    logger.remove()
    logger.add(sys.stderr, level=os.environ.get("PLINE2IFC_LOG_LEVEL", "WARNING"))

    config_path = os.environ.get("PLINE2IFC_CONFIG")
    config = load_config(config_path) if config_path else get_default_config()
    policy = (
        SavePolicy.SAVE_WITH_REPORT
        if os.environ.get("PLINE2IFC_SAVE_REPORT")
        else SavePolicy.VALIDATE_THEN_SAVE
    )

    print("=" * 60)
    print("pline2ifc - DXF polylines to IFC walls")
    print("=" * 60)
    print(f"Input:  {dxf_file}")
    print(f"Output: {output_dir}")
    print()

    try:
        print("[1/4] Parsing DXF file...")
        parser = parse_dxf(dxf_file, config=config)
        if handle:
            polylines = [parser.get_polyline(handle)]
        else:
            polylines = parser.get_polylines()
        print(f"      [OK] Units: {parser.get_units()}")
        print(f"      [OK] Polylines: {len(polylines)}")
        print()

        print("[2/4] Creating IFC model...")
        project_name = config.get_project_setting("name") or Path(dxf_file).stem
        model = BuildingModel.create(
            project_name,
            credentials=config.get_credentials(),
            building_name=config.get_project_setting("building_name", "Default building"),
            storey_name=config.get_project_setting("storey_name", "Default storey"),
            storey_elevation=config.get_project_setting("storey_elevation", 0.0),
        )
        print(f"      [OK] Project: {project_name}")
        print()

        print("[3/4] Creating walls...")
        generator = WallGenerator(model, config=config)
        walls = 0
        skipped = 0
        for polyline in polylines:
            result = generator.generate(polyline)
            walls += len(result.walls)
            skipped += len(result.skipped)
            for skip in result.skipped:
                print(f"      Segment {skip.segment_index} ({polyline.handle}): {skip.reason}")
        print(f"      [OK] Walls: {walls}")
        print(f"      [OK] Skipped segments: {skipped}")
        print()

        print("[4/4] Validating and saving...")
        report = validate_and_save(model, output_dir=output_dir, policy=policy)
        print(f"      [{'OK' if report.is_valid else 'FAIL'}] Violations: {report.violation_count}")
        if report.saved:
            print(f"      [OK] Wrote {report.file_path}")
        if report.report_path:
            print(f"      [OK] Report {report.report_path}")
        print()

    except Exception as e:
        print()
        print("=" * 60)
        print("ERROR!")
        print("=" * 60)
        print(f"Failed to process DXF file: {e}")
        print()
        print("Common issues:")
        print("  - No polylines -> Draw walls as LWPOLYLINE entities")
        print("  - Wrong layer names -> Check DXF layers match config")
        print("  - File not found -> Check file path is correct")
        return 1

    return 0 if report.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
