##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
Module of all Brew Guide-specific exception types.

Read paths in the persistence layer never raise these; they log and return an
empty result instead. Write paths wrap whatever went wrong underneath in one of
the domain errors below so callers can show a single human-readable message.
"""

# Pylint complains that these exceptions are no different from Exception
# but we don't care, we just need new names for exceptions here
# pylint: disable=W0235

__all__ = (
    "BrewGuideError",
    "EntityNotFoundError",
    "ValidationError",
    "StorageBackendError",
    "MigrationError",
    "BackendNotSupportedError",
    "EquipmentError",
    "EquipmentNotFoundError",
    "MethodError",
    "MethodNotFoundError",
    "CoffeeBeanError",
    "BrewingNoteError",
)


class BrewGuideError(Exception):
    """
    Base class for every error raised by Brew Guide.

    Attributes:
        message: A human-readable description of what failed.
        cause: The underlying exception, if there was one.
    """

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


class EntityNotFoundError(BrewGuideError):
    """
    Exception to signal that an update or delete targeted an id that
    does not exist.
    """


class ValidationError(BrewGuideError):
    """
    Exception to signal that an entity is missing a required field or
    conflicts with an existing one.
    """


class StorageBackendError(BrewGuideError):
    """
    Exception to signal that the underlying storage engine failed to
    read or write (quota, I/O, serialization).
    """


class MigrationError(BrewGuideError):
    """
    Exception to signal that a migration pass could not run at all.
    Failures of individual legacy keys are logged, not raised.
    """


class BackendNotSupportedError(BrewGuideError):
    """
    Exception to signal that the requested key-value backend is not supported.
    """

    def __init__(self, message: str):
        super().__init__(message)


class EquipmentError(BrewGuideError):
    """
    Exception for failed custom equipment writes.
    """


class EquipmentNotFoundError(EquipmentError, EntityNotFoundError):
    """
    Exception to signal that a custom equipment id does not exist.
    """


class MethodError(BrewGuideError):
    """
    Exception for failed custom method writes.
    """


class MethodNotFoundError(MethodError, EntityNotFoundError):
    """
    Exception to signal that a method id does not exist for an equipment.
    """


class CoffeeBeanError(BrewGuideError):
    """
    Exception for failed coffee bean writes.
    """


class BrewingNoteError(BrewGuideError):
    """
    Exception for failed brewing note writes.
    """
