class DeskPetError(Exception):
    """Base class for expected failures inside the pet engine."""


class ValidationFailure(DeskPetError):
    """Reference to an unknown item, achievement, task or interaction."""


class PreconditionFailure(DeskPetError):
    """An interaction cannot run right now (no stock, too tired, locked)."""


class PersistenceFailure(DeskPetError):
    """The save store could not read or write a snapshot."""


class InvariantViolation(DeskPetError):
    """A value escaped its allowed range. Clamping repairs it."""
