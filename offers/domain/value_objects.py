"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class OfferId:
    """Unique identifier for an Offer."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ApplicationId:
    """Unique identifier for an Application."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Identifier of a musician or organizer, issued by the identity provider."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Score:
    """Rating score, from 1 to 5 inclusive."""

    value: int

    MIN = 1
    MAX = 5

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Score must be an integer")
        if not self.MIN <= self.value <= self.MAX:
            raise ValueError(f"Score must be between {self.MIN} and {self.MAX}")


class Role(Enum):
    MUSICIAN = "musician"
    ORGANIZER = "organizer"


class OfferStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class ApplicationStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller of a lifecycle operation."""

    user_id: UserId
    role: Role

    @property
    def is_musician(self) -> bool:
        return self.role is Role.MUSICIAN

    @property
    def is_organizer(self) -> bool:
        return self.role is Role.ORGANIZER
