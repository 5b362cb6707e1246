"""
Rabbitry Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each failure the service can
       report.
How:   Each exception carries a client-safe `message` and an optional
       `context` dict that is logged but never returned. The handlers in
       `rabbitry.main` map each class to an HTTP status.
Who:   Raised by BreedDao and BreedService; caught by the global handlers.

Exception Hierarchy:
    RabbitryError (base)
    ├── BreedNotFoundError   → 404 Not Found
    ├── DuplicateNameError   → 409 Conflict
    ├── DeleteFailedError    → 500 Internal Server Error
    └── DatabaseError        → 500 Internal Server Error

Request validation failures are FastAPI's own `RequestValidationError`,
mapped to 400 in `rabbitry.main`.
"""

from typing import Any, Dict, Optional


class RabbitryError(Exception):
    """
    Base exception for all Rabbitry application errors.

    Attributes:
        message:  Error description safe to return in an API response
        context:  Extra debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BreedNotFoundError(RabbitryError):
    """
    Raised when a breed ID does not exist.

    When:    GET, PUT or DELETE against an unknown breed ID.
    HTTP:    404 Not Found

    The data layer returns None / False for a missing row; BreedService
    converts that into this exception.
    """

    def __init__(self, breed_id: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["breed_id"] = breed_id
        super().__init__(message=f"Unknown breed with ID={breed_id}", context=ctx)
        self.breed_id = breed_id


class DuplicateNameError(RabbitryError):
    """
    Raised when a breed name collides with an existing row.

    HTTP:    409 Conflict

    The driver's IntegrityError text names constraints and tables, so the
    message is always the generic "Duplicate key"; the attempted name is kept
    in context for the server log.
    """

    def __init__(self, name: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        if name is not None:
            ctx["name"] = name
        super().__init__(message="Duplicate key", context=ctx)


class DeleteFailedError(RabbitryError):
    """
    Raised when a delete removed no row even though the breed was just read.

    HTTP:    500 Internal Server Error

    Distinct from BreedNotFoundError: existence was already confirmed in the
    same transaction, so this points at a concurrent delete or a storage fault.
    """

    def __init__(self, breed_id: int, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["breed_id"] = breed_id
        super().__init__(message=f"Unable to delete breed with ID={breed_id}", context=ctx)
        self.breed_id = breed_id


class DatabaseError(RabbitryError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost, statement error, deadlock and so on.
    HTTP:    500 Internal Server Error

    The client only ever sees the generic message; SQL text and driver
    details go to the server log through `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
