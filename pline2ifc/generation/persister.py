"""
Schema validation and persistence of building models.

Models are validated before they are written. Depending on the save policy
an invalid model is either not written at all, or written together with a
JSON validation report. A failed validation is always reported.
"""

from enum import Enum
from pathlib import Path
from typing import List, Union
from loguru import logger

import ifcopenshell
import ifcopenshell.validate

from pline2ifc.core.exceptions import ModelValidationError
from pline2ifc.core.models import ValidationReport
from pline2ifc.generation.model_store import BuildingModel


class SavePolicy(str, Enum):
    """What to write after validation."""
    VALIDATE_THEN_SAVE = "validate_then_save"  # write the IFC file only when valid
    SAVE_WITH_REPORT = "save_with_report"  # always write IFC file and JSON report


def validate_model(model: Union[BuildingModel, ifcopenshell.file]) -> List[str]:
    """
    Run IfcOpenShell schema validation, including EXPRESS WHERE rules.

    Args:
        model: BuildingModel or raw IfcOpenShell file

    Returns:
        Violation messages (empty when valid)
    """
    ifc_file = model.ifc_file if isinstance(model, BuildingModel) else model

    json_log = ifcopenshell.validate.json_logger()
    ifcopenshell.validate.validate(ifc_file, json_log, express_rules=True)

    violations = []
    for statement in json_log.statements:
        if isinstance(statement, dict):
            if statement.get("level", "error") != "error":
                continue
            violations.append(str(statement.get("message", statement)))
        else:
            violations.append(str(statement))

    return violations


def validate_file(file_path: Union[str, Path]) -> List[str]:
    """
    Re-open a written IFC file and validate it.

    Args:
        file_path: Path to .ifc file

    Returns:
        Violation messages (empty when valid)
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"IFC file not found: {path}")

    return validate_model(ifcopenshell.open(str(path)))


def validate_and_save(
    model: BuildingModel,
    output_dir: Union[str, Path] = ".",
    policy: SavePolicy = SavePolicy.VALIDATE_THEN_SAVE,
    strict: bool = False,
) -> ValidationReport:
    """
    Validate the model, then write <project-name>.ifc according to policy.

    Args:
        model: Model to validate and save
        output_dir: Directory receiving the output
        policy: Save policy
        strict: Raise ModelValidationError when the model is invalid

    Returns:
        ValidationReport

    Raises:
        ModelValidationError: If strict and the model has violations
    """
    logger.info(f"Validating IFC model: {model.project_name}")

    output_dir = Path(output_dir)
    report = ValidationReport(
        project_name=model.project_name,
        schema_version=model.schema,
        violations=validate_model(model),
    )

    if report.is_valid:
        logger.success("IFC model passed schema validation")
    else:
        logger.error(
            f"IFC model has {report.violation_count} schema violation(s)"
        )
        for violation in report.violations:
            logger.error(f"  - {violation}")

    if report.is_valid or policy == SavePolicy.SAVE_WITH_REPORT:
        output_dir.mkdir(parents=True, exist_ok=True)
        report.file_path = str(write_model(model, output_dir / model.file_name))
        report.saved = True
    else:
        logger.warning(f"Not writing {model.file_name}: model is invalid")

    if policy == SavePolicy.SAVE_WITH_REPORT:
        report_path = output_dir / f"{model.project_name}.validation.json"
        report.report_path = str(report_path)
        report_path.write_text(report.model_dump_json(indent=2))
        logger.info(f"Wrote validation report: {report_path}")

    if strict and not report.is_valid:
        raise ModelValidationError(report)

    return report


def write_model(model: BuildingModel, output_path: Union[str, Path]) -> Path:
    """
    Write IFC file to disk.

    Args:
        model: Model to serialize
        output_path: Path to output .ifc file

    Returns:
        Path written
    """
    output_file = Path(output_path)
    model.ifc_file.write(str(output_file))

    file_size_kb = output_file.stat().st_size / 1024

    logger.success(
        f"Wrote IFC file: {output_file.absolute()} ({file_size_kb:.1f} KB)"
    )
    return output_file
