"""Django ORM implementation of the OfferStore."""

from django.db import OperationalError, transaction

from offers import models
from offers.domain import (
    Application,
    ApplicationId,
    ApplicationStatus,
    Offer,
    OfferId,
    OfferStatus,
    UserId,
)
from offers.domain.errors import ConcurrentModificationError
from offers.stores.interfaces import OfferStore


def _to_domain_application(record: models.Application) -> Application:
    return Application(
        id=ApplicationId(record.id),
        musician_id=UserId(record.musician_id),
        motivation=record.motivation,
        submitted_at=record.submitted_at,
        status=ApplicationStatus(record.status),
        score=record.score,
        comment=record.comment,
        rated=record.rated,
        organizer_score=record.organizer_score,
        organizer_comment=record.organizer_comment,
        organizer_rated=record.organizer_rated,
    )


def _to_domain_offer(record: models.Offer) -> Offer:
    return Offer(
        id=OfferId(record.id),
        organizer_id=UserId(record.organizer_id),
        title=record.title,
        description=record.description,
        created_at=record.created_at,
        genre=record.genre,
        location=record.location,
        event_date=record.event_date,
        status=OfferStatus(record.status),
        close_date=record.close_date,
        has_accepted=record.has_accepted,
        applications=[_to_domain_application(a) for a in record.applications.all()],
        version=record.version,
    )


def _copy_offer_fields(record: models.Offer, offer: Offer) -> None:
    record.organizer_id = offer.organizer_id.value
    record.title = offer.title
    record.description = offer.description
    record.event_date = offer.event_date
    record.genre = offer.genre
    record.location = offer.location
    record.status = offer.status.value
    record.created_at = offer.created_at
    record.close_date = offer.close_date
    record.has_accepted = offer.has_accepted


class DjangoOfferStore(OfferStore):
    """Relational offer store using Django ORM."""

    def _queryset(self):
        return models.Offer.objects.prefetch_related("applications")

    def get_offer(self, offer_id: OfferId) -> Offer | None:
        record = self._queryset().filter(pk=offer_id.value).first()
        if record is None:
            return None
        return _to_domain_offer(record)

    def save_offer(self, offer: Offer) -> Offer:
        try:
            self._save_locked(offer)
        except OperationalError as e:
            # SQLite reports a lost write lock as "database is locked".
            if "locked" not in str(e).lower():
                raise
            raise ConcurrentModificationError(str(offer.id)) from e
        return offer

    def _save_locked(self, offer: Offer) -> None:
        with transaction.atomic():
            record = (
                models.Offer.objects.select_for_update()
                .filter(pk=offer.id.value)
                .first()
            )
            if record is None:
                if offer.version != 0:
                    raise ConcurrentModificationError(str(offer.id))
                record = models.Offer(id=offer.id.value, version=1)
            elif record.version != offer.version:
                raise ConcurrentModificationError(str(offer.id))
            else:
                record.version += 1

            _copy_offer_fields(record, offer)
            record.save()
            self._sync_applications(record, offer.applications)

        offer.version = record.version

    def _sync_applications(
        self, record: models.Offer, applications: list[Application]
    ) -> None:
        keep = [a.id.value for a in applications]
        # Removals first: (offer, musician) is unique.
        models.Application.objects.filter(offer=record).exclude(pk__in=keep).delete()

        existing = {
            a.pk: a for a in models.Application.objects.filter(offer=record)
        }
        # Accepted row last: at most one accepted row per offer at any point.
        ordered = sorted(
            enumerate(applications),
            key=lambda item: item[1].status is ApplicationStatus.ACCEPTED,
        )
        for position, application in ordered:
            row = existing.get(application.id.value) or models.Application(
                id=application.id.value, offer=record
            )
            row.musician_id = application.musician_id.value
            row.motivation = application.motivation
            row.submitted_at = application.submitted_at
            row.status = application.status.value
            row.score = application.score
            row.comment = application.comment
            row.rated = application.rated
            row.organizer_score = application.organizer_score
            row.organizer_comment = application.organizer_comment
            row.organizer_rated = application.organizer_rated
            row.position = position
            row.save()

    def delete_offer(self, offer_id: OfferId) -> bool:
        record = models.Offer.objects.filter(pk=offer_id.value).first()
        if record is None:
            return False
        record.delete()
        return True

    def list_offers(
        self,
        genre: str | None = None,
        location: str | None = None,
        status: OfferStatus | None = None,
    ) -> list[Offer]:
        queryset = self._queryset()
        if genre:
            queryset = queryset.filter(genre=genre)
        if location:
            queryset = queryset.filter(location=location)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [_to_domain_offer(r) for r in queryset.order_by("-created_at")]

    def list_offers_for_musician(self, musician_id: UserId) -> list[Offer]:
        queryset = (
            self._queryset()
            .filter(applications__musician_id=musician_id.value)
            .distinct()
            .order_by("-created_at")
        )
        return [_to_domain_offer(r) for r in queryset]

    def list_offers_for_organizer(self, organizer_id: UserId) -> list[Offer]:
        queryset = self._queryset().filter(organizer_id=organizer_id.value)
        return [_to_domain_offer(r) for r in queryset.order_by("-created_at")]

    def find_offer_id_for_application(
        self, application_id: ApplicationId
    ) -> OfferId | None:
        offer_pk = (
            models.Application.objects.filter(pk=application_id.value)
            .values_list("offer_id", flat=True)
            .first()
        )
        if offer_pk is None:
            return None
        return OfferId(offer_pk)
