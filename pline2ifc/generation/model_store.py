"""
In-memory IFC4 building model with transactional mutation.

A BuildingModel owns one IfcOpenShell file. Every structural change runs
inside a transaction that is committed as a whole or rolled back as a whole.
Mutation is single-writer: a second transaction while one is in flight is
rejected.
"""

import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional
from loguru import logger

try:
    import ifcopenshell
    import ifcopenshell.api
except ImportError:
    raise ImportError(
        "IfcOpenShell is required for IFC generation. "
        "Install with: pip install ifcopenshell"
    )

from pline2ifc.core.exceptions import InvalidState, TransactionAborted
from pline2ifc.core.models import EditorCredentials


SCHEMA_VERSION = "IFC4"
VIEW_DEFINITION = "ViewDefinition [CoordinationView]"


class BuildingModel:
    """
    Handle on one IFC building model.

    Create a fully initialised model with BuildingModel.create(); wrapping an
    arbitrary file with the constructor performs no initialisation.
    """

    def __init__(
        self,
        ifc_file: ifcopenshell.file,
        project_name: str,
        credentials: Optional[EditorCredentials] = None,
    ):
        """
        Wrap an IFC file.

        Args:
            ifc_file: IfcOpenShell file holding the instances
            project_name: Project name, also used for the output file name
            credentials: Ownership metadata for new entities
        """
        self.ifc_file = ifc_file
        self.project_name = project_name
        self.credentials = credentials or EditorCredentials()
        self.owner_history = None
        self.default_names = ("Default building", "Default storey", 0.0)
        self._active_transaction: Optional[str] = None
        self._state_lock = threading.Lock()

    @classmethod
    def create(
        cls,
        project_name: str = "TestProject",
        credentials: Optional[EditorCredentials] = None,
        with_defaults: bool = True,
        building_name: str = "Default building",
        storey_name: str = "Default storey",
        storey_elevation: float = 0.0,
    ) -> "BuildingModel":
        """
        Create and initialise a new model.

        Args:
            project_name: Name of the IfcProject
            credentials: Ownership metadata (defaults to EditorCredentials())
            with_defaults: Also create a default building and storey
            building_name: Name of the default building
            storey_name: Name of the default storey
            storey_elevation: Elevation of the default storey

        Returns:
            Initialised BuildingModel
        """
        model = cls(cls._new_file(), project_name, credentials)
        model.default_names = (building_name, storey_name, storey_elevation)
        model._initialise()

        if with_defaults:
            model._create_defaults(*model.default_names)

        return model

    @staticmethod
    def _new_file() -> ifcopenshell.file:
        ifc_file = ifcopenshell.api.run("project.create_file", version=SCHEMA_VERSION)
        # Needed to avoid a header error in viewers expecting a view definition
        ifc_file.header.file_description.description = (VIEW_DEFINITION,)
        return ifc_file

    def _initialise(self) -> None:
        """Create owner history, project, units and the shared context."""
        logger.info(f"Creating {SCHEMA_VERSION} project: {self.project_name}")

        with self.transaction("Initialise Model"):
            self.owner_history = self._create_owner_history()

            project = self.new_rooted("IfcProject", self.project_name)

            # SI units: millimetres, square metres, cubic metres
            ifcopenshell.api.run("unit.assign_unit", self.ifc_file)

            # Single geometric representation context shared by all shapes
            ifcopenshell.api.run(
                "context.add_context",
                self.ifc_file,
                context_type="Model",
            )

        logger.success(f"Created IFC project structure for {project.Name}")

    def _create_defaults(self, building_name: str, storey_name: str, storey_elevation: float) -> None:
        # Local import: the hierarchy builder depends on this module
        from pline2ifc.generation.hierarchy_builder import create_building, create_storey

        building = create_building(self, building_name)
        create_storey(self, storey_name, storey_elevation, building)

    def _create_owner_history(self):
        creds = self.credentials
        f = self.ifc_file

        person = f.create_entity(
            "IfcPerson",
            FamilyName=creds.editors_family_name,
            GivenName=creds.editors_given_name,
        )
        organisation = f.create_entity("IfcOrganization", Name=creds.editors_organisation_name)
        user = f.create_entity(
            "IfcPersonAndOrganization",
            ThePerson=person,
            TheOrganization=organisation,
        )
        developer = f.create_entity("IfcOrganization", Name=creds.developers_name)
        application = f.create_entity(
            "IfcApplication",
            ApplicationDeveloper=developer,
            Version=creds.application_version,
            ApplicationFullName=creds.application_name,
            ApplicationIdentifier=creds.application_id,
        )

        # An ADDED change action is only valid together with a LastModifiedDate
        now = int(time.time())
        return f.create_entity(
            "IfcOwnerHistory",
            OwningUser=user,
            OwningApplication=application,
            State="READWRITE",
            ChangeAction="ADDED",
            LastModifiedDate=now,
            CreationDate=now,
        )

    def new_rooted(self, ifc_class: str, name: Optional[str] = None):
        """
        Create a rooted entity (GlobalId + owner history).

        Args:
            ifc_class: IFC class name
            name: Value for the Name attribute

        Returns:
            The new entity
        """
        element = ifcopenshell.api.run(
            "root.create_entity",
            self.ifc_file,
            ifc_class=ifc_class,
            name=name,
        )
        return self.stamp(element)

    def stamp(self, element):
        """Attach this model's owner history to a rooted entity."""
        if element is not None and self.owner_history is not None:
            element.OwnerHistory = self.owner_history
        return element

    @contextmanager
    def transaction(self, label: str) -> Iterator["BuildingModel"]:
        """
        Run a block of changes atomically.

        Changes are committed when the block exits normally. Any exception
        rolls back every entity created or edited in the block; a
        TransactionAborted is swallowed after the rollback, anything else is
        re-raised.

        Args:
            label: Human readable transaction name

        Raises:
            InvalidState: If another transaction is already in flight
        """
        with self._state_lock:
            if self._active_transaction is not None:
                raise InvalidState(
                    f"Cannot start transaction '{label}' while "
                    f"'{self._active_transaction}' is in progress"
                )
            self._active_transaction = label

        self.ifc_file.begin_transaction()
        logger.debug(f"Begin transaction: {label}")

        try:
            yield self
        except TransactionAborted:
            self._rollback(label)
            logger.warning(f"Transaction aborted: {label}")
        except BaseException:
            self._rollback(label)
            logger.error(f"Transaction failed and was rolled back: {label}")
            raise
        else:
            self.ifc_file.end_transaction()
            logger.debug(f"Committed transaction: {label}")
        finally:
            with self._state_lock:
                self._active_transaction = None

    def _rollback(self, label: str) -> None:
        # Closing the transaction pushes it onto the undo stack; undo reverts it
        self.ifc_file.end_transaction()
        self.ifc_file.undo()
        logger.debug(f"Rolled back transaction: {label}")

    def run_in_transaction(self, label: str, body: Callable[["BuildingModel"], Any]) -> Any:
        """
        Execute body(model) inside a transaction and return its result.

        Args:
            label: Transaction name
            body: Callable receiving this model

        Returns:
            Whatever body returns (None if it aborted)
        """
        result = None
        with self.transaction(label):
            result = body(self)
        return result

    @property
    def in_transaction(self) -> bool:
        return self._active_transaction is not None

    @property
    def file_name(self) -> str:
        return f"{self.project_name}.ifc"

    @property
    def schema(self) -> str:
        return self.ifc_file.schema

    @property
    def project(self):
        projects = self.ifc_file.by_type("IfcProject")
        return projects[0] if projects else None

    @property
    def context(self):
        contexts = self.ifc_file.by_type("IfcGeometricRepresentationContext")
        return contexts[0] if contexts else None

    @property
    def buildings(self) -> List:
        return list(self.ifc_file.by_type("IfcBuilding"))

    @property
    def storeys(self) -> List:
        return list(self.ifc_file.by_type("IfcBuildingStorey"))

    @property
    def default_storey(self):
        storeys = self.storeys
        return storeys[0] if storeys else None

    @property
    def walls(self) -> List:
        return list(self.ifc_file.by_type("IfcWall"))

    @property
    def spaces(self) -> List:
        return list(self.ifc_file.by_type("IfcSpace"))

    def reset(self, with_defaults: bool = True) -> None:
        """
        Discard all content and start again from a freshly initialised file.

        Raises:
            InvalidState: If called while a transaction is in flight
        """
        if self.in_transaction:
            raise InvalidState("Cannot reset a model during a transaction")

        logger.info(f"Resetting model {self.project_name}")
        self.ifc_file = self._new_file()
        self.owner_history = None
        self._initialise()

        if with_defaults:
            self._create_defaults(*self.default_names)

    def __str__(self) -> str:
        return (f"BuildingModel({self.project_name}, {len(self.storeys)} storeys, "
                f"{len(self.walls)} walls, {len(self.spaces)} spaces)")


# Process-wide model, created on first use
_instance: Optional[BuildingModel] = None
_lock = threading.Lock()


def get_or_create(
    project_name: str = "TestProject",
    credentials: Optional[EditorCredentials] = None,
) -> BuildingModel:
    """
    Get the process-wide model, creating it exactly once.

    Concurrent first callers all receive the same instance. Arguments only
    take effect on the call that actually creates the model.

    Returns:
        The shared BuildingModel
    """
    global _instance
    # Fast path without locking once the model exists
    if _instance is None:
        with _lock:
            if _instance is None:
                _instance = BuildingModel.create(project_name, credentials=credentials)
    return _instance


def reset_instance() -> None:
    """Drop the process-wide model; the next get_or_create() builds a new one."""
    global _instance
    with _lock:
        _instance = None
