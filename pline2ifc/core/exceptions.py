"""
Exception types raised by pline2ifc.

Unsupported geometry is never an exception; it is reported as a
SkippedSegment instead.
"""


class Pline2IfcError(Exception):
    """Base class for all pline2ifc errors."""


class InvalidState(Pline2IfcError):
    """
    A precondition on the model does not hold.

    Raised when an operation needs an entity that does not exist yet
    (no project, no storey, no representation context) or when a second
    transaction is started while one is already in flight.
    """


class TransactionAborted(Pline2IfcError):
    """Raise inside a transaction body to discard its changes."""


class ModelValidationError(Pline2IfcError):
    """Strict validation found schema violations."""

    def __init__(self, report):
        self.report = report
        super().__init__(
            f"IFC model '{report.project_name}' has "
            f"{report.violation_count} schema violation(s)"
        )
