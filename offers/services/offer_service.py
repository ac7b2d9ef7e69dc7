"""Offer service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every mutating call loads one offer, runs one lifecycle step on it and saves
it once. Conflicting concurrent saves surface as ConcurrentModificationError;
nothing is retried here.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from offers.domain import lifecycle
from offers.domain.errors import (
    ApplicationNotFoundError,
    ConcurrentModificationError,
    ForbiddenError,
    InvalidIdError,
    OfferNotFoundError,
    ValidationError,
)
from offers.domain.models import Application, Offer
from offers.domain.value_objects import (
    Actor,
    ApplicationId,
    ApplicationStatus,
    OfferId,
    OfferStatus,
    UserId,
)
from offers.stores.interfaces import OfferStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MusicianApplication:
    """An application seen from the musician's side, with its offer."""

    offer: Offer
    application: Application


@dataclass(frozen=True)
class ReceivedRating:
    """A rating an organizer gave a musician for one offer."""

    offer_id: OfferId
    offer_title: str
    organizer_id: UserId
    score: int
    comment: str | None


@dataclass(frozen=True)
class PastEvent:
    """An organizer's finished event with the musicians who played it."""

    offer: Offer
    musician_ids: list[UserId]


@dataclass(frozen=True)
class OrganizerRating:
    """A rating a musician gave an organizer for one offer."""

    offer_id: OfferId
    offer_title: str
    musician_id: UserId
    score: int
    comment: str | None


def _by_event_date(offers: list[Offer]) -> list[Offer]:
    # Dated events first, latest first; undated ones by creation time.
    return sorted(
        offers,
        key=lambda o: (o.event_date is not None, o.event_date or o.created_at),
        reverse=True,
    )


def _parse_offer_id(value: str) -> OfferId:
    try:
        return OfferId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError("offer")


def _parse_application_id(value: str) -> ApplicationId:
    try:
        return ApplicationId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError("application")


def _parse_user_id(value: str) -> UserId:
    try:
        return UserId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdError("user")


class OfferService:
    """Service for offer and application operations."""

    def __init__(
        self, store: OfferStore, clock: Callable[[], datetime] = timezone.now
    ) -> None:
        self._store = store
        self._clock = clock

    def _load(self, offer_id: OfferId) -> Offer:
        offer = self._store.get_offer(offer_id)
        if offer is None:
            raise OfferNotFoundError(str(offer_id))
        return offer

    def _save(self, offer: Offer) -> Offer:
        try:
            return self._store.save_offer(offer)
        except ConcurrentModificationError:
            logger.warning("Concurrent modification of offer %s", offer.id)
            raise

    # Offers

    def list_offers(
        self,
        genre: str | None = None,
        location: str | None = None,
        status: str | None = None,
    ) -> list[Offer]:
        """Return offers, optionally filtered.

        Raises:
            ValidationError: If ``status`` is not a known offer status.
        """
        parsed_status = None
        if status:
            try:
                parsed_status = OfferStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown offer status: {status}")
        return self._store.list_offers(
            genre=genre or None, location=location or None, status=parsed_status
        )

    def get_offer(self, offer_id: str) -> Offer:
        """Return an offer by ID.

        Raises:
            InvalidIdError: If the offer_id is not a valid UUID.
            OfferNotFoundError: If the offer does not exist.
        """
        return self._load(_parse_offer_id(offer_id))

    def create_offer(
        self,
        actor: Actor,
        title: str,
        description: str,
        event_date: datetime | None = None,
        genre: str = "",
        location: str = "",
    ) -> Offer:
        """Publish a new open offer owned by ``actor``.

        Raises:
            ForbiddenError: If the actor is not an organizer.
            ValidationError: If title or description is blank.
        """
        if not actor.is_organizer:
            raise ForbiddenError("Only organizers can publish offers")
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not description or not description.strip():
            raise ValidationError("Description is required")

        offer = Offer(
            id=OfferId.new(),
            organizer_id=actor.user_id,
            title=title.strip(),
            description=description,
            created_at=self._clock(),
            event_date=event_date,
            genre=genre or "",
            location=location or "",
        )
        offer = self._save(offer)
        logger.info("Offer %s created by organizer %s", offer.id, actor.user_id)
        return offer

    def update_offer(self, offer_id: str, actor: Actor, **changes) -> Offer:
        offer = self._load(_parse_offer_id(offer_id))
        lifecycle.update_offer_details(offer, actor, **changes)
        return self._save(offer)

    def delete_offer(self, offer_id: str, actor: Actor) -> None:
        """Delete an offer together with its applications.

        Raises:
            InvalidIdError, OfferNotFoundError, ForbiddenError
        """
        parsed = _parse_offer_id(offer_id)
        offer = self._load(parsed)
        if not actor.is_organizer or not offer.is_owned_by(actor.user_id):
            raise ForbiddenError("Only the organizer of this offer can do that")
        if not self._store.delete_offer(parsed):
            raise OfferNotFoundError(str(parsed))
        logger.info("Offer %s deleted by organizer %s", parsed, actor.user_id)

    def set_offer_status(
        self,
        offer_id: str,
        actor: Actor,
        new_status: str,
        close_date: datetime | None = None,
    ) -> Offer:
        offer = self._load(_parse_offer_id(offer_id))
        previous = offer.status
        lifecycle.set_offer_status(
            offer, actor, new_status, now=self._clock(), close_date=close_date
        )
        offer = self._save(offer)
        logger.info(
            "Offer %s status %s -> %s", offer.id, previous.value, offer.status.value
        )
        return offer

    # Applications

    def submit_application(
        self, offer_id: str, actor: Actor, motivation: str = ""
    ) -> Application:
        """Apply to an offer as ``actor``.

        Raises:
            InvalidIdError: If the offer_id is not a valid UUID.
            OfferNotFoundError: If the offer does not exist.
            ForbiddenError: If the actor is not a musician.
            OfferClosedError: If the offer is not open.
            DuplicateApplicationError: If the musician already applied.
        """
        offer = self._load(_parse_offer_id(offer_id))
        application = lifecycle.submit_application(
            offer, actor, motivation, now=self._clock()
        )
        self._save(offer)
        logger.info(
            "Musician %s applied to offer %s (application %s)",
            actor.user_id,
            offer.id,
            application.id,
        )
        return application

    def list_applications_for_offer(
        self, offer_id: str, actor: Actor
    ) -> list[Application]:
        offer = self._load(_parse_offer_id(offer_id))
        if not actor.is_organizer or not offer.is_owned_by(actor.user_id):
            raise ForbiddenError("Only the organizer of this offer can do that")
        return list(offer.applications)

    def accept_application(
        self,
        offer_id: str,
        application_id: str,
        actor: Actor,
        close_offer: bool = False,
    ) -> Offer:
        offer = self._load(_parse_offer_id(offer_id))
        target = _parse_application_id(application_id)
        pending_before = {a.id for a in offer.applications if a.is_pending}
        lifecycle.accept_application(
            offer, target, actor, close_offer=close_offer, now=self._clock()
        )
        offer = self._save(offer)
        logger.info(
            "Application %s accepted on offer %s, %d sibling(s) rejected",
            target,
            offer.id,
            len(pending_before) - 1,
        )
        return offer

    def reject_application(
        self, offer_id: str, application_id: str, actor: Actor
    ) -> Offer:
        offer = self._load(_parse_offer_id(offer_id))
        target = _parse_application_id(application_id)
        lifecycle.reject_application(offer, target, actor)
        offer = self._save(offer)
        logger.info("Application %s rejected on offer %s", target, offer.id)
        return offer

    def decide_application(
        self,
        offer_id: str,
        application_id: str,
        actor: Actor,
        decision: str,
        close_offer: bool = False,
    ) -> Offer:
        """Accept or reject an application from a requested status value.

        Raises:
            ValidationError: If ``decision`` is neither accepted nor rejected.
        """
        if decision == ApplicationStatus.ACCEPTED.value:
            return self.accept_application(
                offer_id, application_id, actor, close_offer=close_offer
            )
        if decision == ApplicationStatus.REJECTED.value:
            return self.reject_application(offer_id, application_id, actor)
        raise ValidationError("Status must be 'accepted' or 'rejected'")

    def cancel_application(self, application_id: str, actor: Actor) -> None:
        """Withdraw a pending application, located by its id alone.

        Raises:
            InvalidIdError: If the application_id is not a valid UUID.
            ApplicationNotFoundError: If no offer holds the application.
            ForbiddenError: If the actor is not the applicant.
            InvalidTransitionError: If the application is not pending.
        """
        target = _parse_application_id(application_id)
        offer_id = self._store.find_offer_id_for_application(target)
        if offer_id is None:
            raise ApplicationNotFoundError(str(target))
        offer = self._store.get_offer(offer_id)
        if offer is None:
            raise ApplicationNotFoundError(str(target))
        lifecycle.cancel_application(offer, target, actor)
        self._save(offer)
        logger.info("Application %s cancelled on offer %s", target, offer.id)

    def rate_application(
        self,
        offer_id: str,
        application_id: str,
        actor: Actor,
        score: int,
        comment: str | None = None,
    ) -> Application:
        offer = self._load(_parse_offer_id(offer_id))
        target = _parse_application_id(application_id)
        application = lifecycle.rate_application(
            offer, actor, score, comment, application_id=target
        )
        self._save(offer)
        logger.info(
            "Application %s on offer %s rated %d", target, offer.id, application.score
        )
        return application

    def rate_musician(
        self,
        offer_id: str,
        musician_id: str,
        actor: Actor,
        score: int,
        comment: str | None = None,
    ) -> Application:
        """Rate the application a musician holds on an offer."""
        offer = self._load(_parse_offer_id(offer_id))
        musician = _parse_user_id(musician_id)
        application = lifecycle.rate_application(
            offer, actor, score, comment, musician_id=musician
        )
        self._save(offer)
        logger.info("Musician %s rated %d on offer %s", musician, score, offer.id)
        return application

    def list_applications_for_musician(
        self, musician_id: str, actor: Actor
    ) -> list[MusicianApplication]:
        """Return a musician's own applications across offers.

        Raises:
            InvalidIdError: If the musician_id is not a valid UUID.
            ForbiddenError: If the actor is someone else.
        """
        musician = _parse_user_id(musician_id)
        if actor.user_id != musician:
            raise ForbiddenError("Cannot view another musician's applications")
        result = []
        for offer in self._store.list_offers_for_musician(musician):
            application = offer.find_application_by_musician(musician)
            if application is not None:
                result.append(MusicianApplication(offer=offer, application=application))
        return result

    def list_ratings_for_musician(self, musician_id: str) -> list[ReceivedRating]:
        musician = _parse_user_id(musician_id)
        ratings = []
        for offer in self._store.list_offers_for_musician(musician):
            application = offer.find_application_by_musician(musician)
            if application is None or not application.rated:
                continue
            ratings.append(
                ReceivedRating(
                    offer_id=offer.id,
                    offer_title=offer.title,
                    organizer_id=offer.organizer_id,
                    score=application.score,
                    comment=application.comment,
                )
            )
        return ratings

    def rate_organizer(
        self,
        offer_id: str,
        actor: Actor,
        score: int,
        comment: str | None = None,
    ) -> Application:
        """Rate the event and its organizer as an accepted musician.

        Raises:
            InvalidIdError: If the offer_id is not a valid UUID.
            OfferNotFoundError: If the offer does not exist.
            ValidationError: If the score is outside 1-5.
            ForbiddenError: If the actor is not a musician.
            NotEligibleError: If the musician was not accepted on the offer.
        """
        offer = self._load(_parse_offer_id(offer_id))
        application = lifecycle.rate_organizer(offer, actor, score, comment)
        self._save(offer)
        logger.info(
            "Organizer %s rated %d by musician %s on offer %s",
            offer.organizer_id,
            application.organizer_score,
            actor.user_id,
            offer.id,
        )
        return application

    def check_rated(self, offer_id: str, rated_id: str, actor: Actor) -> bool:
        """Return whether ``actor`` already rated ``rated_id`` on an offer."""
        offer = self._load(_parse_offer_id(offer_id))
        return lifecycle.has_rated(offer, actor, _parse_user_id(rated_id))

    def list_ratings_for_organizer(self, organizer_id: str) -> list[OrganizerRating]:
        organizer = _parse_user_id(organizer_id)
        ratings = []
        for offer in self._store.list_offers_for_organizer(organizer):
            for application in offer.applications:
                if not application.organizer_rated:
                    continue
                ratings.append(
                    OrganizerRating(
                        offer_id=offer.id,
                        offer_title=offer.title,
                        musician_id=application.musician_id,
                        score=application.organizer_score,
                        comment=application.organizer_comment,
                    )
                )
        return ratings

    # History

    def organizer_history(self, actor: Actor) -> list[PastEvent]:
        """Return the actor's closed or already held events, latest first.

        Raises:
            ForbiddenError: If the actor is not an organizer.
        """
        if not actor.is_organizer:
            raise ForbiddenError("Only organizers have an event history")
        now = self._clock()
        past = [
            offer
            for offer in self._store.list_offers_for_organizer(actor.user_id)
            if offer.status is OfferStatus.CLOSED
            or (offer.event_date is not None and offer.event_date < now)
        ]
        return [
            PastEvent(
                offer=offer,
                musician_ids=[a.musician_id for a in offer.applications if a.is_accepted],
            )
            for offer in _by_event_date(past)
        ]

    def musician_history(self, actor: Actor) -> list[MusicianApplication]:
        """Return the offers the actor was accepted on, latest event first.

        Raises:
            ForbiddenError: If the actor is not a musician.
        """
        if not actor.is_musician:
            raise ForbiddenError("Only musicians have a gig history")
        result = []
        for offer in _by_event_date(self._store.list_offers_for_musician(actor.user_id)):
            application = offer.find_application_by_musician(actor.user_id)
            if application is not None and application.is_accepted:
                result.append(MusicianApplication(offer=offer, application=application))
        return result
