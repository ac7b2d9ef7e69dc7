from offers.handlers.views import (
    ApplicationCancelView,
    ApplicationRatingView,
    MusicianApplicationListView,
    MusicianHistoryView,
    MusicianRatingListView,
    OfferApplicationDetailView,
    OfferApplicationListView,
    OfferDetailView,
    OfferListView,
    OfferStatusView,
    OrganizerHistoryView,
    OrganizerRatingListView,
    OrganizerRatingView,
    RatingCheckView,
)

__all__ = [
    "OfferListView",
    "OfferDetailView",
    "OfferStatusView",
    "OfferApplicationListView",
    "OfferApplicationDetailView",
    "ApplicationRatingView",
    "ApplicationCancelView",
    "MusicianApplicationListView",
    "MusicianRatingListView",
    "OrganizerRatingView",
    "RatingCheckView",
    "OrganizerRatingListView",
    "OrganizerHistoryView",
    "MusicianHistoryView",
]
