from __future__ import annotations

import json

import pytest

ifcopenshell = pytest.importorskip("ifcopenshell")

from pline2ifc.core.exceptions import ModelValidationError
from pline2ifc.generation.hierarchy_builder import create_building, create_storey, create_wall
from pline2ifc.generation.model_store import BuildingModel
from pline2ifc.generation.persister import (
    SavePolicy,
    validate_and_save,
    validate_file,
    validate_model,
)
from pline2ifc.generation.wall_generator import generate_walls


def _broken(model):
    # GlobalId is mandatory on every rooted entity
    model.ifc_file.create_entity("IfcWall", Name="No GlobalId")
    return model


def test_hierarchy_model_round_trips_without_violations(tmp_path) -> None:
    model = BuildingModel.create("RoundTrip", with_defaults=False)
    building = create_building(model, "Main")
    storey = create_storey(model, "Ground", 0.0, building)
    for i in range(3):
        create_wall(model, float(i), 0.0, 1.0, 0.0, 0.0, 2.0, 0.5, 2.0, storey)

    report = validate_and_save(model, output_dir=tmp_path)

    assert report.is_valid, report.violations
    assert report.violation_count == 0
    assert report.saved
    assert (tmp_path / "RoundTrip.ifc").exists()
    assert validate_file(tmp_path / "RoundTrip.ifc") == []


def test_saved_file_reopens_with_same_walls(model, two_segments, tmp_path) -> None:
    generate_walls(model, two_segments)

    report = validate_and_save(model, output_dir=tmp_path)

    reopened = ifcopenshell.open(report.file_path)
    assert len(reopened.by_type("IfcWallStandardCase")) == 2
    assert reopened.by_type("IfcProject")[0].Name == "TestProject"


def test_invalid_model_is_not_saved_by_default(model, tmp_path) -> None:
    report = validate_and_save(_broken(model), output_dir=tmp_path)

    assert not report.is_valid
    assert report.violation_count > 0
    assert not report.saved
    assert not (tmp_path / "TestProject.ifc").exists()


def test_save_with_report_writes_both(model, tmp_path) -> None:
    report = validate_and_save(
        _broken(model), output_dir=tmp_path, policy=SavePolicy.SAVE_WITH_REPORT
    )

    assert report.saved
    assert (tmp_path / "TestProject.ifc").exists()

    payload = json.loads((tmp_path / "TestProject.validation.json").read_text())
    assert payload["project_name"] == "TestProject"
    assert len(payload["violations"]) == report.violation_count


def test_strict_validation_raises(model, tmp_path) -> None:
    with pytest.raises(ModelValidationError) as excinfo:
        validate_and_save(_broken(model), output_dir=tmp_path, strict=True)

    assert excinfo.value.report.violation_count > 0


def test_validate_model_accepts_raw_file(model) -> None:
    assert validate_model(model.ifc_file) == validate_model(model)


def test_validate_file_missing(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        validate_file(tmp_path / "missing.ifc")


def test_where_rule_violations_are_reported(model) -> None:
    assert validate_model(model) == []

    # ChangeAction ADDED without LastModifiedDate breaks the IfcOwnerHistory rule
    model.owner_history.LastModifiedDate = None

    assert validate_model(model) != []
