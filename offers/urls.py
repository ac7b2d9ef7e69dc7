from django.urls import path

from offers.handlers import (
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

urlpatterns = [
    path("offers", OfferListView.as_view(), name="offer-list"),
    path("offers/<str:offer_id>", OfferDetailView.as_view(), name="offer-detail"),
    path(
        "offers/<str:offer_id>/status",
        OfferStatusView.as_view(),
        name="offer-status",
    ),
    path(
        "offers/<str:offer_id>/applications",
        OfferApplicationListView.as_view(),
        name="offer-application-list",
    ),
    path(
        "offers/<str:offer_id>/applications/<str:application_id>",
        OfferApplicationDetailView.as_view(),
        name="offer-application-detail",
    ),
    path(
        "offers/<str:offer_id>/applications/<str:application_id>/rating",
        ApplicationRatingView.as_view(),
        name="application-rating",
    ),
    path(
        "offers/<str:offer_id>/organizer-rating",
        OrganizerRatingView.as_view(),
        name="organizer-rating",
    ),
    path(
        "offers/<str:offer_id>/ratings/check/<str:user_id>",
        RatingCheckView.as_view(),
        name="rating-check",
    ),
    path(
        "applications/<str:application_id>",
        ApplicationCancelView.as_view(),
        name="application-cancel",
    ),
    path(
        "musicians/<str:musician_id>/applications",
        MusicianApplicationListView.as_view(),
        name="musician-application-list",
    ),
    path(
        "musicians/<str:musician_id>/ratings",
        MusicianRatingListView.as_view(),
        name="musician-rating-list",
    ),
    path(
        "organizers/<str:organizer_id>/ratings",
        OrganizerRatingListView.as_view(),
        name="organizer-rating-list",
    ),
    path("history/organizer", OrganizerHistoryView.as_view(), name="organizer-history"),
    path("history/musician", MusicianHistoryView.as_view(), name="musician-history"),
]
