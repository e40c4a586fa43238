from typing import Any, List, Optional
from uuid import UUID

from fastapi import status


class DomainError(Exception):
    """Base class for every failure the engine reports to a caller.

    Each error carries the HTTP-style status class it maps to and an optional
    list of detail entries rendered into the ``errors`` field of the envelope.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class InvalidIdentifier(DomainError):
    default_message = "Invalid identifier"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid {field}", errors=[{"field": field}])


class ValidationFailed(DomainError):
    default_message = "Validation failed"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field} cannot be empty", errors=[{"field": field}])


class InvalidSortField(DomainError):
    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Cannot sort by {field}", errors=[{"field": field}])


class InvalidPage(DomainError):
    default_message = "page and page_size must be positive"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, message: Optional[str] = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class TargetNotFound(NotFound):
    pass


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to modify this resource"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class SelfReferenceNotAllowed(Conflict):
    default_message = "You cannot subscribe to your own channel"


class UploadFailed(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error uploading file"


class StorageUnavailable(DomainError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable"

    def __init__(self, message: Optional[str] = None, pending_cleanup: Optional[UUID] = None):
        # set when a video row is already gone but its dependents are not
        self.pending_cleanup = pending_cleanup
        super().__init__(message)
