"""
Spatial hierarchy construction: Building, Storey, Wall and Space.

Every operation runs in its own transaction on the given BuildingModel, so
a half-built entity (e.g. a wall profile without its placement) is never
committed.
"""

from typing import Iterable, List, Optional, Union
from loguru import logger

import ifcopenshell.api

from pline2ifc.core.exceptions import InvalidState
from pline2ifc.core.models import ElementCompositionType, MaterialLayerDefaults
from pline2ifc.generation.model_store import BuildingModel


def create_building(model: BuildingModel, name: str):
    """
    Create a building at the origin and attach it to the project.

    Args:
        model: Target model
        name: Building name

    Returns:
        The new IfcBuilding

    Raises:
        InvalidState: If the model has no IfcProject
    """
    project = model.project
    if project is None:
        raise InvalidState(f"Cannot create building '{name}': model has no IfcProject")

    f = model.ifc_file

    with model.transaction("Create Building"):
        building = model.new_rooted("IfcBuilding", name)
        building.CompositionType = ElementCompositionType.ELEMENT.value

        placement = f.create_entity(
            "IfcAxis2Placement3D",
            Location=f.create_entity("IfcCartesianPoint", Coordinates=(0.0, 0.0, 0.0)),
        )
        building.ObjectPlacement = f.create_entity("IfcLocalPlacement", RelativePlacement=placement)

        rel = ifcopenshell.api.run(
            "aggregate.assign_object",
            f,
            relating_object=project,
            products=[building],
        )
        model.stamp(rel)

    logger.debug(f"Created building '{name}'")
    return building


def create_storey(model: BuildingModel, name: str, elevation: float, building):
    """
    Create a storey and add it to the building's spatial decomposition.

    Args:
        model: Target model
        name: Storey name (e.g., "Level 1")
        elevation: Elevation relative to the building origin
        building: Owning IfcBuilding

    Returns:
        The new IfcBuildingStorey
    """
    if building is None:
        raise InvalidState(f"Cannot create storey '{name}' without a building")

    with model.transaction("Create Building Storey"):
        storey = model.new_rooted("IfcBuildingStorey", name)
        storey.Elevation = float(elevation)

        rel = ifcopenshell.api.run(
            "aggregate.assign_object",
            model.ifc_file,
            relating_object=building,
            products=[storey],
        )
        model.stamp(rel)

    logger.debug(f"Created storey '{name}' at elevation {elevation}")
    return storey


def create_wall(
    model: BuildingModel,
    pos_x: float,
    pos_y: float,
    dir_x: float,
    dir_y: float,
    dir_z: float,
    length: float,
    width: float,
    height: float,
    storey,
    name: str = "A standard wall",
    material: Optional[MaterialLayerDefaults] = None,
):
    """
    Create a standard wall as a rectangular profile extruded upwards.

    The profile sits at the local origin; pos_x/pos_y only position the
    wall's own placement. dir_z is accepted for symmetry but the reference
    direction is always horizontal (dir_x, dir_y, 0).

    Args:
        model: Target model
        pos_x: Placement X
        pos_y: Placement Y
        dir_x: Reference direction X
        dir_y: Reference direction Y
        dir_z: Unused
        length: Profile XDim
        width: Profile YDim
        height: Extrusion depth along +Z
        storey: Containing IfcBuildingStorey
        name: Wall name
        material: Material layer set usage settings

    Returns:
        The new IfcWallStandardCase

    Raises:
        InvalidState: If storey is None or the model has no representation context
    """
    if storey is None:
        raise InvalidState("Cannot create wall: no storey to contain it")

    context = model.context
    if context is None:
        raise InvalidState("Cannot create wall: model has no geometric representation context")

    if length <= 0 or height <= 0:
        logger.warning(
            f"Creating degenerate wall '{name}' (length={length}, height={height})"
        )

    material = material or MaterialLayerDefaults()
    f = model.ifc_file

    with model.transaction("Create Wall"):
        # Rectangular footprint, anchored at the profile's own origin
        profile = f.create_entity(
            "IfcRectangleProfileDef",
            ProfileType="AREA",
            Position=f.create_entity(
                "IfcAxis2Placement2D",
                Location=f.create_entity("IfcCartesianPoint", Coordinates=(0.0, 0.0)),
            ),
            XDim=float(length),
            YDim=float(width),
        )

        # Sweep the footprint up by the wall height
        body = f.create_entity(
            "IfcExtrudedAreaSolid",
            SweptArea=profile,
            Position=f.create_entity(
                "IfcAxis2Placement3D",
                Location=f.create_entity("IfcCartesianPoint", Coordinates=(0.0, 0.0, 0.0)),
            ),
            ExtrudedDirection=f.create_entity("IfcDirection", DirectionRatios=(0.0, 0.0, 1.0)),
            Depth=float(height),
        )

        shape = f.create_entity(
            "IfcShapeRepresentation",
            ContextOfItems=context,
            RepresentationIdentifier="Body",
            RepresentationType="SweptSolid",
            Items=[body],
        )
        representation = f.create_entity("IfcProductDefinitionShape", Representations=[shape])

        axis_placement = f.create_entity(
            "IfcAxis2Placement3D",
            Location=f.create_entity(
                "IfcCartesianPoint", Coordinates=(float(pos_x), float(pos_y), 0.0)
            ),
            Axis=f.create_entity("IfcDirection", DirectionRatios=(0.0, 0.0, 1.0)),
            RefDirection=f.create_entity(
                "IfcDirection", DirectionRatios=(float(dir_x), float(dir_y), 0.0)
            ),
        )

        wall = model.new_rooted("IfcWallStandardCase", name)
        wall.Representation = representation
        wall.ObjectPlacement = f.create_entity("IfcLocalPlacement", RelativePlacement=axis_placement)

        # IfcWallStandardCase relies on an IfcMaterialLayerSetUsage
        _assign_layer_set_usage(model, wall, material)

        rel = ifcopenshell.api.run(
            "spatial.assign_container",
            f,
            relating_structure=storey,
            products=[wall],
        )
        model.stamp(rel)

    logger.debug(
        f"Created wall '{name}' at ({pos_x:.3f}, {pos_y:.3f}) "
        f"length={length:.3f} width={width} height={height}"
    )
    return wall


def _assign_layer_set_usage(model: BuildingModel, wall, material: MaterialLayerDefaults):
    """
    Associate the wall with a layer set usage matching the settings.

    Walls with identical settings share one usage and one association
    relation.
    """
    f = model.ifc_file

    for rel in f.by_type("IfcRelAssociatesMaterial"):
        usage = rel.RelatingMaterial
        if usage.is_a("IfcMaterialLayerSetUsage") and _usage_matches(usage, material):
            rel.RelatedObjects = list(rel.RelatedObjects) + [wall]
            return usage

    layer = f.create_entity(
        "IfcMaterialLayer",
        Material=f.create_entity("IfcMaterial", Name=material.material_name),
        LayerThickness=float(material.layer_thickness),
    )
    layer_set = f.create_entity("IfcMaterialLayerSet", MaterialLayers=[layer])
    usage = f.create_entity(
        "IfcMaterialLayerSetUsage",
        ForLayerSet=layer_set,
        LayerSetDirection=material.direction.value,
        DirectionSense=material.direction_sense.value,
        OffsetFromReferenceLine=float(material.offset),
    )

    rel = model.new_rooted("IfcRelAssociatesMaterial")
    rel.RelatedObjects = [wall]
    rel.RelatingMaterial = usage
    return usage


def _usage_matches(usage, material: MaterialLayerDefaults) -> bool:
    layers = usage.ForLayerSet.MaterialLayers
    if len(layers) != 1:
        return False

    layer = layers[0]
    layer_name = layer.Material.Name if layer.Material else None

    return (
        usage.LayerSetDirection == material.direction.value
        and usage.DirectionSense == material.direction_sense.value
        and abs(usage.OffsetFromReferenceLine - material.offset) < 1e-9
        and abs(layer.LayerThickness - material.layer_thickness) < 1e-9
        and layer_name == material.material_name
    )


def create_space(
    model: BuildingModel,
    storey,
    walls: Iterable,
    name: str,
    description: Optional[str] = None,
    long_name: Optional[str] = None,
    composition_type: Union[ElementCompositionType, str] = ElementCompositionType.ELEMENT,
):
    """
    Create a space bounded by the given walls.

    One IfcRelSpaceBoundary is created per wall. walls is consumed by a
    single forward iteration, so generators are accepted; an empty sequence
    yields a space without boundaries.

    Args:
        model: Target model
        storey: Owning IfcBuildingStorey
        walls: Bounding walls
        name: Space name
        description: Space description
        long_name: Space long name
        composition_type: ELEMENT, COMPLEX or PARTIAL

    Returns:
        The new IfcSpace
    """
    if storey is None:
        raise InvalidState(f"Cannot create space '{name}' without a storey")

    composition = ElementCompositionType(composition_type).value

    with model.transaction(f"Create Space: {name}"):
        space = model.new_rooted("IfcSpace", name)
        space.Description = description
        space.LongName = long_name
        space.CompositionType = composition

        count = 0
        for wall in walls:
            boundary = model.new_rooted("IfcRelSpaceBoundary")
            boundary.RelatingSpace = space
            boundary.RelatedBuildingElement = wall
            boundary.PhysicalOrVirtualBoundary = "PHYSICAL"
            boundary.InternalOrExternalBoundary = "NOTDEFINED"
            count += 1

        rel = ifcopenshell.api.run(
            "aggregate.assign_object",
            model.ifc_file,
            relating_object=storey,
            products=[space],
        )
        model.stamp(rel)

    logger.debug(f"Created space '{name}' with {count} boundaries")
    return space


def space_boundaries(space) -> List:
    """Space boundary relations of a space."""
    return list(space.BoundedBy or [])


def contained_elements(storey) -> List:
    """Elements contained in a storey."""
    return [
        element
        for rel in (storey.ContainsElements or [])
        for element in rel.RelatedElements
    ]
