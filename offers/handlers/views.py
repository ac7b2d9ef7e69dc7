"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses (see handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from offers.cache import OFFER_LIST_KEY, cache_timeout, offer_detail_key
from offers.domain import Actor
from offers.handlers.serializers import (
    ApplicationDecisionSerializer,
    ApplicationSerializer,
    ApplicationSubmitSerializer,
    MusicianApplicationSerializer,
    MusicianEventSerializer,
    OfferCreateSerializer,
    OfferSerializer,
    OfferStatusSerializer,
    OfferUpdateSerializer,
    OrganizerRatingSerializer,
    PastEventSerializer,
    RatingSerializer,
    ReceivedRatingSerializer,
)
from offers.services.offer_service import OfferService
from offers.stores.django_store import DjangoOfferStore


def get_offer_service() -> OfferService:
    return OfferService(DjangoOfferStore())


def current_actor(request: Request) -> Actor:
    return request.user.actor


class OfferListView(APIView):
    """Handler for GET/POST /api/offers"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request: Request) -> Response:
        filters = {
            key: request.query_params.get(key)
            for key in ("genre", "location", "status")
            if request.query_params.get(key)
        }
        if not filters:
            data = cache.get(OFFER_LIST_KEY)
            if data is not None:
                return Response(data)

        offers = get_offer_service().list_offers(**filters)
        data = OfferSerializer(offers, many=True).data
        if not filters:
            cache.set(OFFER_LIST_KEY, data, cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer = OfferCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = get_offer_service().create_offer(
            current_actor(request), **serializer.validated_data
        )
        return Response(OfferSerializer(offer).data, status=status.HTTP_201_CREATED)


class OfferDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/offers/{offer_id}"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request: Request, offer_id: str) -> Response:
        key = offer_detail_key(offer_id)
        data = cache.get(key)
        if data is None:
            offer = get_offer_service().get_offer(offer_id)
            data = OfferSerializer(offer).data
            cache.set(key, data, cache_timeout())
        return Response(data)

    def patch(self, request: Request, offer_id: str) -> Response:
        serializer = OfferUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        offer = get_offer_service().update_offer(
            offer_id, current_actor(request), **serializer.validated_data
        )
        return Response(OfferSerializer(offer).data)

    def delete(self, request: Request, offer_id: str) -> Response:
        get_offer_service().delete_offer(offer_id, current_actor(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class OfferStatusView(APIView):
    """Handler for PUT /api/offers/{offer_id}/status"""

    permission_classes = [IsAuthenticated]

    def put(self, request: Request, offer_id: str) -> Response:
        serializer = OfferStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = get_offer_service().set_offer_status(
            offer_id,
            current_actor(request),
            serializer.validated_data["status"],
            close_date=serializer.validated_data.get("close_date"),
        )
        return Response(OfferSerializer(offer).data)


class OfferApplicationListView(APIView):
    """Handler for GET/POST /api/offers/{offer_id}/applications"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, offer_id: str) -> Response:
        applications = get_offer_service().list_applications_for_offer(
            offer_id, current_actor(request)
        )
        return Response(ApplicationSerializer(applications, many=True).data)

    def post(self, request: Request, offer_id: str) -> Response:
        serializer = ApplicationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = get_offer_service().submit_application(
            offer_id, current_actor(request), serializer.validated_data["motivation"]
        )
        return Response(
            ApplicationSerializer(application).data, status=status.HTTP_201_CREATED
        )


class OfferApplicationDetailView(APIView):
    """Handler for PUT /api/offers/{offer_id}/applications/{application_id}"""

    permission_classes = [IsAuthenticated]

    def put(self, request: Request, offer_id: str, application_id: str) -> Response:
        serializer = ApplicationDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = get_offer_service().decide_application(
            offer_id,
            application_id,
            current_actor(request),
            serializer.validated_data["status"],
            close_offer=serializer.validated_data["close_offer"],
        )
        return Response(OfferSerializer(offer).data)


class ApplicationRatingView(APIView):
    """Handler for POST /api/offers/{offer_id}/applications/{application_id}/rating"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, offer_id: str, application_id: str) -> Response:
        serializer = RatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = get_offer_service().rate_application(
            offer_id,
            application_id,
            current_actor(request),
            serializer.validated_data["score"],
            serializer.validated_data.get("comment"),
        )
        return Response(ApplicationSerializer(application).data)


class ApplicationCancelView(APIView):
    """Handler for DELETE /api/applications/{application_id}"""

    permission_classes = [IsAuthenticated]

    def delete(self, request: Request, application_id: str) -> Response:
        get_offer_service().cancel_application(application_id, current_actor(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class MusicianApplicationListView(APIView):
    """Handler for GET /api/musicians/{musician_id}/applications"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, musician_id: str) -> Response:
        items = get_offer_service().list_applications_for_musician(
            musician_id, current_actor(request)
        )
        return Response(MusicianApplicationSerializer(items, many=True).data)


class MusicianRatingListView(APIView):
    """Handler for GET /api/musicians/{musician_id}/ratings"""

    permission_classes = [AllowAny]

    def get(self, request: Request, musician_id: str) -> Response:
        ratings = get_offer_service().list_ratings_for_musician(musician_id)
        return Response(ReceivedRatingSerializer(ratings, many=True).data)


class OrganizerRatingView(APIView):
    """Handler for POST /api/offers/{offer_id}/organizer-rating"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, offer_id: str) -> Response:
        serializer = RatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = get_offer_service().rate_organizer(
            offer_id,
            current_actor(request),
            serializer.validated_data["score"],
            serializer.validated_data.get("comment"),
        )
        return Response(ApplicationSerializer(application).data)


class RatingCheckView(APIView):
    """Handler for GET /api/offers/{offer_id}/ratings/check/{user_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, offer_id: str, user_id: str) -> Response:
        rated = get_offer_service().check_rated(offer_id, user_id, current_actor(request))
        return Response({"rated": rated})


class OrganizerRatingListView(APIView):
    """Handler for GET /api/organizers/{organizer_id}/ratings"""

    permission_classes = [AllowAny]

    def get(self, request: Request, organizer_id: str) -> Response:
        ratings = get_offer_service().list_ratings_for_organizer(organizer_id)
        return Response(OrganizerRatingSerializer(ratings, many=True).data)


class OrganizerHistoryView(APIView):
    """Handler for GET /api/history/organizer"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        events = get_offer_service().organizer_history(current_actor(request))
        return Response(PastEventSerializer(events, many=True).data)


class MusicianHistoryView(APIView):
    """Handler for GET /api/history/musician"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        events = get_offer_service().musician_history(current_actor(request))
        return Response(MusicianEventSerializer(events, many=True).data)
