from offers.domain.models import Application, Offer
from offers.domain.value_objects import (
    Actor,
    ApplicationId,
    ApplicationStatus,
    OfferId,
    OfferStatus,
    Role,
    Score,
    UserId,
)

__all__ = [
    "Offer",
    "Application",
    "OfferId",
    "ApplicationId",
    "UserId",
    "Score",
    "Role",
    "OfferStatus",
    "ApplicationStatus",
    "Actor",
]
