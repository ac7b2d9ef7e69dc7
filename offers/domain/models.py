"""Domain models representing persisted state.

An Offer is the aggregate root: its applications are embedded and are only
ever loaded, mutated and saved together with it.
Django ORM models are in offers/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime

from offers.domain.value_objects import (
    ApplicationId,
    ApplicationStatus,
    OfferId,
    OfferStatus,
    UserId,
)


@dataclass
class Application:
    """A musician's submission against an offer.

    ``score``, ``comment`` and ``rated`` hold the organizer's rating of the
    musician. The ``organizer_*`` fields hold the musician's rating of the
    event and its organizer.
    """

    id: ApplicationId
    musician_id: UserId
    motivation: str
    submitted_at: datetime
    status: ApplicationStatus = ApplicationStatus.PENDING
    score: int | None = None
    comment: str | None = None
    rated: bool = False
    organizer_score: int | None = None
    organizer_comment: str | None = None
    organizer_rated: bool = False

    @property
    def is_pending(self) -> bool:
        return self.status is ApplicationStatus.PENDING

    @property
    def is_accepted(self) -> bool:
        return self.status is ApplicationStatus.ACCEPTED


@dataclass
class Offer:
    """Domain representation of an Offer and its applications."""

    id: OfferId
    organizer_id: UserId
    title: str
    description: str
    created_at: datetime
    genre: str = ""
    location: str = ""
    event_date: datetime | None = None
    status: OfferStatus = OfferStatus.OPEN
    close_date: datetime | None = None
    has_accepted: bool = False
    applications: list[Application] = field(default_factory=list)
    version: int = 0

    def find_application(self, application_id: ApplicationId) -> Application | None:
        for application in self.applications:
            if application.id == application_id:
                return application
        return None

    def find_application_by_musician(self, musician_id: UserId) -> Application | None:
        for application in self.applications:
            if application.musician_id == musician_id:
                return application
        return None

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.organizer_id == user_id
