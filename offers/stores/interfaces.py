"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. An offer is always
loaded and saved as a whole, applications included.
"""

from abc import ABC, abstractmethod

from offers.domain import ApplicationId, Offer, OfferId, OfferStatus, UserId


class OfferStore(ABC):
    """Interface for offer persistence operations."""

    @abstractmethod
    def get_offer(self, offer_id: OfferId) -> Offer | None:
        """Return an offer with its applications, or None if not found."""
        ...

    @abstractmethod
    def save_offer(self, offer: Offer) -> Offer:
        """Insert or replace the whole offer aggregate.

        Raises:
            ConcurrentModificationError: If the stored version no longer
                matches ``offer.version``, or the backend could not
                take the write lock.
        """
        ...

    @abstractmethod
    def delete_offer(self, offer_id: OfferId) -> bool:
        """Delete an offer and its applications. Return False if it was absent."""
        ...

    @abstractmethod
    def list_offers(
        self,
        genre: str | None = None,
        location: str | None = None,
        status: OfferStatus | None = None,
    ) -> list[Offer]:
        """Return offers matching the filters, ordered by created_at descending."""
        ...

    @abstractmethod
    def list_offers_for_musician(self, musician_id: UserId) -> list[Offer]:
        """Return offers the musician has applied to, newest first."""
        ...

    @abstractmethod
    def list_offers_for_organizer(self, organizer_id: UserId) -> list[Offer]:
        """Return offers published by the organizer, newest first."""
        ...

    @abstractmethod
    def find_offer_id_for_application(
        self, application_id: ApplicationId
    ) -> OfferId | None:
        """Return the id of the offer holding an application."""
        ...
