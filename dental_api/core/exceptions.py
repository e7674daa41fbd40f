from enum import Enum
from typing import List, Optional

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INFRA = "infra"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INFRA: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Expected failure of a service operation, translated to HTTP at the edge."""

    kind: ErrorKind = ErrorKind.INFRA

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class InvalidInputError(ServiceError):
    kind = ErrorKind.VALIDATION


class AuthenticationError(ServiceError):
    kind = ErrorKind.UNAUTHORIZED


class AuthorizationError(ServiceError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT


class StoreError(ServiceError):
    """The document store or a lock backend failed."""
    kind = ErrorKind.INFRA
