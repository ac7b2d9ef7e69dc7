"""Domain error codes for the offers module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    OFFER_NOT_FOUND = "OFFER_NOT_FOUND"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DUPLICATE_APPLICATION = "DUPLICATE_APPLICATION"
    OFFER_CLOSED = "OFFER_CLOSED"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class OfferNotFoundError(DomainError):
    """Raised when an offer is not found."""

    def __init__(self, offer_id: str) -> None:
        super().__init__(
            code=ErrorCode.OFFER_NOT_FOUND,
            message="Offer not found",
        )
        self.offer_id = offer_id


class ApplicationNotFoundError(DomainError):
    """Raised when an application is not found on an offer."""

    def __init__(self, application_id: str) -> None:
        super().__init__(
            code=ErrorCode.APPLICATION_NOT_FOUND,
            message="Application not found",
        )
        self.application_id = application_id


class ForbiddenError(DomainError):
    """Raised when the actor lacks the role or ownership an action requires."""

    def __init__(self, message: str = "Not allowed to perform this action") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class InvalidTransitionError(DomainError):
    """Raised when a status precondition is violated."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_TRANSITION, message=message)


class DuplicateApplicationError(DomainError):
    """Raised when a musician applies twice to the same offer."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_APPLICATION,
            message="Already applied to this offer",
        )


class OfferClosedError(DomainError):
    """Raised when applying to an offer that is not open."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.OFFER_CLOSED,
            message="Offer is not accepting applications",
        )


class NotEligibleError(DomainError):
    """Raised when rating an application that was never accepted."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_ELIGIBLE,
            message="Only accepted applications can be rated",
        )


class ValidationError(DomainError):
    """Raised when a field is missing or out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "resource") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )


class ConcurrentModificationError(DomainError):
    """Raised when an offer was saved by someone else since it was loaded."""

    def __init__(self, offer_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_MODIFICATION,
            message="Offer was modified concurrently, reload and retry",
        )
        self.offer_id = offer_id
