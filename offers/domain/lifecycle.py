"""Offer lifecycle: the offer/application state machine.

Every function mutates a loaded Offer aggregate in memory and leaves
``has_accepted`` consistent with the applications' statuses. Persisting the
result is the caller's job.

Application:  PENDING -> ACCEPTED | REJECTED | (removed by applicant)
              ACCEPTED applications can be rated in both directions.
Offer:        OPEN -> CLOSED | CANCELLED
"""

from datetime import datetime

from offers.domain.errors import (
    ApplicationNotFoundError,
    DuplicateApplicationError,
    ForbiddenError,
    InvalidTransitionError,
    NotEligibleError,
    OfferClosedError,
    ValidationError,
)
from offers.domain.models import Application, Offer
from offers.domain.value_objects import (
    Actor,
    ApplicationId,
    ApplicationStatus,
    OfferStatus,
    Score,
    UserId,
)

EDITABLE_FIELDS = ("title", "description", "event_date", "genre", "location")


def recompute_has_accepted(offer: Offer) -> None:
    offer.has_accepted = any(a.is_accepted for a in offer.applications)


def _require_organizer(offer: Offer, actor: Actor) -> None:
    if not actor.is_organizer or not offer.is_owned_by(actor.user_id):
        raise ForbiddenError("Only the organizer of this offer can do that")


def _require_not_cancelled(offer: Offer) -> None:
    if offer.status is OfferStatus.CANCELLED:
        raise InvalidTransitionError("Offer is cancelled, its applications can no longer change")


def _pending_application(offer: Offer, application_id: ApplicationId) -> Application:
    application = offer.find_application(application_id)
    if application is None:
        raise ApplicationNotFoundError(str(application_id))
    if not application.is_pending:
        raise InvalidTransitionError(
            f"Application is {application.status.value}, only pending applications can change status"
        )
    return application


def _valid_score(score: int) -> Score:
    try:
        return Score(score)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def submit_application(
    offer: Offer, actor: Actor, motivation: str, now: datetime
) -> Application:
    """Append a pending application from ``actor`` to an open offer.

    Raises:
        ForbiddenError: If the actor is not a musician.
        OfferClosedError: If the offer is not OPEN.
        DuplicateApplicationError: If the musician already applied.
    """
    if not actor.is_musician:
        raise ForbiddenError("Only musicians can apply to offers")
    if offer.status is not OfferStatus.OPEN:
        raise OfferClosedError()
    if offer.find_application_by_musician(actor.user_id) is not None:
        raise DuplicateApplicationError()

    application = Application(
        id=ApplicationId.new(),
        musician_id=actor.user_id,
        motivation=motivation or "",
        submitted_at=now,
    )
    offer.applications.append(application)
    recompute_has_accepted(offer)
    return application


def accept_application(
    offer: Offer,
    application_id: ApplicationId,
    actor: Actor,
    close_offer: bool,
    now: datetime,
) -> Offer:
    """Accept one application and reject every other pending one.

    Applications that were already accepted or rejected keep their status.
    ``close_offer`` only closes an OPEN offer; a CLOSED offer keeps its close date.

    Raises:
        ForbiddenError: If the actor is not the offer's organizer.
        ApplicationNotFoundError: If the application is not on this offer.
        InvalidTransitionError: If the application is not pending or the
            offer is cancelled.
    """
    _require_organizer(offer, actor)
    _require_not_cancelled(offer)
    target = _pending_application(offer, application_id)

    target.status = ApplicationStatus.ACCEPTED
    for application in offer.applications:
        if application is not target and application.is_pending:
            application.status = ApplicationStatus.REJECTED

    recompute_has_accepted(offer)
    if close_offer and offer.status is OfferStatus.OPEN:
        offer.status = OfferStatus.CLOSED
        offer.close_date = now
    return offer


def reject_application(
    offer: Offer, application_id: ApplicationId, actor: Actor
) -> Offer:
    """Reject a single pending application.

    Raises:
        ForbiddenError: If the actor is not the offer's organizer.
        ApplicationNotFoundError: If the application is not on this offer.
        InvalidTransitionError: If the application is not pending or the
            offer is cancelled.
    """
    _require_organizer(offer, actor)
    _require_not_cancelled(offer)
    target = _pending_application(offer, application_id)
    target.status = ApplicationStatus.REJECTED
    recompute_has_accepted(offer)
    return offer


def cancel_application(
    offer: Offer, application_id: ApplicationId, actor: Actor
) -> None:
    """Withdraw a pending application on behalf of the musician who sent it.

    Raises:
        ApplicationNotFoundError: If the application is not on this offer.
        ForbiddenError: If the actor is not the applicant.
        InvalidTransitionError: If the application is not pending.
    """
    application = offer.find_application(application_id)
    if application is None:
        raise ApplicationNotFoundError(str(application_id))
    if application.musician_id != actor.user_id:
        raise ForbiddenError("Only the applicant can cancel this application")
    if not application.is_pending:
        raise InvalidTransitionError("Only pending applications can be cancelled")

    offer.applications.remove(application)
    recompute_has_accepted(offer)


def rate_application(
    offer: Offer,
    actor: Actor,
    score: int,
    comment: str | None = None,
    *,
    application_id: ApplicationId | None = None,
    musician_id: UserId | None = None,
) -> Application:
    """Record the organizer's rating of an accepted application.

    The target is given either by application id or by musician id.
    Rating again overwrites the previous score and comment.

    Raises:
        ValidationError: If the score is outside 1-5 or no target is given.
        ForbiddenError: If the actor is not the offer's organizer.
        ApplicationNotFoundError: If no application matches the target.
        NotEligibleError: If the application was never accepted.
    """
    valid_score = _valid_score(score)
    if (application_id is None) == (musician_id is None):
        raise ValidationError("Give exactly one of application_id or musician_id")

    _require_organizer(offer, actor)

    if application_id is not None:
        application = offer.find_application(application_id)
        missing = str(application_id)
    else:
        application = offer.find_application_by_musician(musician_id)
        missing = str(musician_id)
    if application is None:
        raise ApplicationNotFoundError(missing)
    if not application.is_accepted:
        raise NotEligibleError()

    application.score = valid_score.value
    application.comment = comment
    application.rated = True
    recompute_has_accepted(offer)
    return application


def rate_organizer(
    offer: Offer, actor: Actor, score: int, comment: str | None = None
) -> Application:
    """Record an accepted musician's rating of the event and its organizer.

    The rating is stored on the musician's own application. Rating again
    overwrites the previous score and comment.

    Raises:
        ValidationError: If the score is outside 1-5.
        ForbiddenError: If the actor is not a musician.
        NotEligibleError: If the musician holds no accepted application here.
    """
    valid_score = _valid_score(score)
    if not actor.is_musician:
        raise ForbiddenError("Only musicians can rate an organizer")

    application = offer.find_application_by_musician(actor.user_id)
    if application is None or not application.is_accepted:
        raise NotEligibleError()

    application.organizer_score = valid_score.value
    application.organizer_comment = comment
    application.organizer_rated = True
    return application


def has_rated(offer: Offer, actor: Actor, rated_id: UserId) -> bool:
    """Report whether ``actor`` already rated ``rated_id`` for this offer.

    The offer's organizer rates musicians and a musician rates the organizer.
    Any other pairing has never rated.
    """
    if actor.is_organizer and offer.is_owned_by(actor.user_id):
        application = offer.find_application_by_musician(rated_id)
        return application is not None and application.rated
    if actor.is_musician and offer.is_owned_by(rated_id):
        application = offer.find_application_by_musician(actor.user_id)
        return application is not None and application.organizer_rated
    return False


def set_offer_status(
    offer: Offer,
    actor: Actor,
    new_status: OfferStatus | str,
    now: datetime,
    close_date: datetime | None = None,
) -> Offer:
    """Override the offer status directly. Applications are left as they are.

    Raises:
        ForbiddenError: If the actor is not the offer's organizer.
        ValidationError: If ``new_status`` is not a known offer status.
    """
    _require_organizer(offer, actor)
    try:
        status = OfferStatus(new_status)
    except ValueError as e:
        raise ValidationError(f"Unknown offer status: {new_status}") from e

    offer.status = status
    if status is OfferStatus.CLOSED:
        offer.close_date = close_date or now
    elif close_date is not None:
        offer.close_date = close_date
    recompute_has_accepted(offer)
    return offer


def update_offer_details(offer: Offer, actor: Actor, **changes) -> Offer:
    """Change descriptive fields of an open offer. ``None`` values are ignored.

    Raises:
        ForbiddenError: If the actor is not the offer's organizer.
        InvalidTransitionError: If the offer is closed or cancelled.
        ValidationError: If an unknown field is given or the title is blank.
    """
    _require_organizer(offer, actor)
    if offer.status is not OfferStatus.OPEN:
        raise InvalidTransitionError(f"Offer is {offer.status.value} and can no longer be edited")

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown offer fields: {', '.join(sorted(unknown))}")
    if "title" in changes and changes["title"] is not None and not changes["title"].strip():
        raise ValidationError("Title cannot be blank")

    for name, value in changes.items():
        if value is not None:
            setattr(offer, name, value)
    return offer
