# app/core/exceptions.py
"""
Application exception hierarchy.

Every exception raised by services and repositories derives from
BaseAppException, which carries the HTTP status code and a machine
readable error code used by the registered exception handlers.
"""

from typing import Optional

from fastapi import status


class BaseAppException(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    default_detail: str = "An unexpected error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        resource_type: Optional[str] = None,
    ):
        self.detail = detail or self.default_detail
        self.resource_type = resource_type
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        body = {"error": self.error_code, "detail": self.detail}
        if self.resource_type:
            body["resource_type"] = self.resource_type
        return body


class ResourceNotFound(BaseAppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    default_detail = "The requested resource was not found."


class ResourceAlreadyExists(BaseAppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "already_exists"
    default_detail = "A resource with this identifier already exists."


class BadRequestException(BaseAppException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "bad_request"
    default_detail = "The request could not be processed."


class ValidationError(BaseAppException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "validation_error"
    default_detail = "The request data is invalid."


class ConcurrencyConflict(BaseAppException):
    """
    Raised when a version-checked write matched no row.

    The row was modified by another writer after it was loaded. It is not
    retried and reaches the client as a server error.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "concurrency_conflict"
    default_detail = "The resource was modified by another request."


class IntegrityConflict(BaseAppException):
    """The store rejected a write because of a constraint violation."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "integrity_error"
    default_detail = "The database rejected the write."


class InternalServerError(BaseAppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_error"
