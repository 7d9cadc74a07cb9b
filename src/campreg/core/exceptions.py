"""Custom exception hierarchy for the camp registration backend.

Every business-rule violation raised by the services is a subclass of
``CampRegBaseError`` and carries a machine-checkable ``error_code`` (an
``ErrorKind``) together with the HTTP status the boundary layer maps it to.

The hierarchy is designed to be:
- Specific and descriptive
- Easy to catch and handle at appropriate levels
- Consistent in structure and naming
"""

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Machine-checkable error kinds."""

    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_FIELD = "MISSING_FIELD"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_AMKA = "DUPLICATE_AMKA"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    OWNERSHIP_MISMATCH = "OWNERSHIP_MISMATCH"
    INELIGIBLE_PERIOD = "INELIGIBLE_PERIOD"
    IMMUTABLE_FIELD_CHANGE = "IMMUTABLE_FIELD_CHANGE"
    ACCESS_DENIED = "ACCESS_DENIED"
    REFERENTIAL_CONFLICT = "REFERENTIAL_CONFLICT"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"


class CampRegBaseError(Exception):
    """Base exception for all camp registration business errors.

    Subclasses fix ``kind`` and ``status_code``; callers only supply the
    human-readable message and optional details.
    """

    kind: ClassVar[ErrorKind]
    status_code: ClassVar[int] = 400

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def error_code(self) -> ErrorKind:
        return self.kind

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


# ==============================================================================
# Input Exceptions
# ==============================================================================


class InvalidFormatError(CampRegBaseError):
    """Raised when input fails a structural rule before any lookup."""

    kind = ErrorKind.INVALID_FORMAT

    def __init__(
        self, message: str, *, field_name: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.field_name = field_name


class MissingFieldError(CampRegBaseError):
    """Raised when a mandatory combination of fields is absent."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message, details={"fields": fields or []})
        self.fields = fields or []


# ==============================================================================
# Lookup Exceptions
# ==============================================================================


class NotFoundError(CampRegBaseError):
    """Raised when a referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        super().__init__(f"{entity} not found", details={"id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


# ==============================================================================
# Uniqueness Exceptions
# ==============================================================================


class DuplicateAmkaError(CampRegBaseError):
    """Raised when an AMKA is already held by another record."""

    kind = ErrorKind.DUPLICATE_AMKA
    status_code = 409

    def __init__(self, message: str, *, amka: str | None = None) -> None:
        super().__init__(message, details={"amka": amka})
        self.amka = amka


class DuplicateUsernameError(CampRegBaseError):
    """Raised when a username is already taken."""

    kind = ErrorKind.DUPLICATE_USERNAME
    status_code = 409

    def __init__(self, username: str) -> None:
        super().__init__(
            f"User with username {username} already exists",
            details={"username": username},
        )
        self.username = username


class DuplicateRegistrationError(CampRegBaseError):
    """Raised when a camper is already registered for a period."""

    kind = ErrorKind.DUPLICATE_REGISTRATION
    status_code = 409

    def __init__(self, camper_id: str, camp_period: str) -> None:
        super().__init__(
            "Registration already exists for this camper and period",
            details={"camper": camper_id, "camp_period": camp_period},
        )
        self.camper_id = camper_id
        self.camp_period = camp_period


# ==============================================================================
# Business Rule Exceptions
# ==============================================================================


class OwnershipMismatchError(CampRegBaseError):
    """Raised when a camper is registered by a user who is not its parent."""

    kind = ErrorKind.OWNERSHIP_MISMATCH

    def __init__(self, camper_id: str, user_id: str | None) -> None:
        super().__init__(
            "Camper does not belong to this user",
            details={"camper": camper_id, "user": user_id},
        )
        self.camper_id = camper_id
        self.user_id = user_id


class IneligiblePeriodError(CampRegBaseError):
    """Raised when a camp period is not offered for the camp type."""

    kind = ErrorKind.INELIGIBLE_PERIOD

    def __init__(self, camp_type: str, camp_period: str) -> None:
        super().__init__(
            "This camp period is not available for selected camp type",
            details={"camp_type": camp_type, "camp_period": camp_period},
        )
        self.camp_type = camp_type
        self.camp_period = camp_period


class ImmutableFieldChangeError(CampRegBaseError):
    """Raised when an update touches a field fixed at creation."""

    kind = ErrorKind.IMMUTABLE_FIELD_CHANGE

    def __init__(self, message: str, *, fields: list[str]) -> None:
        super().__init__(message, details={"fields": fields})
        self.fields = fields


class ReferentialConflictError(CampRegBaseError):
    """Raised when a delete is blocked by dependent records."""

    kind = ErrorKind.REFERENTIAL_CONFLICT
    status_code = 409


# ==============================================================================
# Authentication and Authorization Exceptions
# ==============================================================================


class AuthenticationError(CampRegBaseError):
    """Raised when the caller cannot be authenticated."""

    kind = ErrorKind.AUTHENTICATION_FAILED
    status_code = 401


class AccessDeniedError(CampRegBaseError):
    """Raised when access to a resource is denied."""

    kind = ErrorKind.ACCESS_DENIED
    status_code = 403

    def __init__(self, resource: str, user_id: str | None = None) -> None:
        message = f"Access denied to {resource}"
        if user_id:
            message += f" for user {user_id}"
        super().__init__(message, details={"resource": resource})
        self.resource = resource
        self.user_id = user_id


# ==============================================================================
# Storage Exceptions
# ==============================================================================


class StorageError(Exception):
    """Raised when the document store fails for infrastructure reasons."""


class UniqueConstraintViolation(StorageError):
    """Raised by a document store when a write would break a unique index."""

    def __init__(self, collection: str, fields: tuple[str, ...], value: Any) -> None:
        super().__init__(
            f"Unique constraint on {collection}({', '.join(fields)}) violated"
        )
        self.collection = collection
        self.fields = fields
        self.value = value


def create_amka_format_error(amka: Any) -> InvalidFormatError:
    """Create the standard error for a malformed AMKA."""
    return InvalidFormatError(
        "AMKA must be exactly 11 digits",
        field_name="amka",
        details={"value": amka},
    )
