"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
None of them are retried: the same inputs fail the same way.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CapacityError(ValidationError):
    """Stock cannot shrink below the quantity committed to projects."""


class OverAllocationError(ValidationError):
    """A reservation exceeds what the structure has available."""


class DuplicateAllocationError(ValidationError):
    """The structure is already allocated to the project."""


class BelowDispatchedError(ValidationError):
    """A line quantity cannot shrink below what has already left."""


class HasDispatchesError(ValidationError):
    """A line cannot be removed while dispatch records reference it."""


class InsufficientRemainingError(ValidationError):
    """A dispatch asks for more than the line has left to hand over."""


class ProjectStateError(ValidationError):
    """The project status does not allow the requested operation."""
