from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence
from fastapi import status


@dataclass(frozen=True)
class FieldError:
    """A single field that failed validation and why."""
    field: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class BaseAPIException(Exception):
    """
    Base class for every error the service raises on purpose.
    Keeps the JSON error envelope consistent for clients.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class NotFoundError(BaseAPIException):
    """404: no live record with the requested id"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

# =========================================================
# 2. STUDENT DOMAIN ERRORS
# =========================================================

class ValidationError(BaseAPIException):
    """
    400: client data breaks one or more field constraints.
    Raised before anything reaches the database.
    """
    def __init__(self, errors: Sequence[FieldError], message: str = "Input validation failed"):
        self.errors: List[FieldError] = list(errors)
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[error.to_dict() for error in self.errors]
        )

    @property
    def fields(self) -> List[str]:
        return [error.field for error in self.errors]


class StorageError(BaseAPIException):
    """
    500: the database failed (connectivity, IO, unexpected constraint).
    Not retried, the caller decides.
    """
    def __init__(self, message: str = "Storage failure"):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class DuplicateKeyError(Exception):
    """
    A unique column collided with a live record.

    Only the store raises this; the repository turns it into a ValidationError
    so it never reaches HTTP clients as its own kind.
    """
    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {field}: {value!r}")
