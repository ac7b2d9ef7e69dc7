"""Pytest configuration and shared fixtures."""

import copy
import uuid
from datetime import datetime, timezone

import pytest
from django.conf import settings
from jose import jwt
from rest_framework.test import APIClient

from offers.domain import (
    Actor,
    ApplicationId,
    Offer,
    OfferId,
    OfferStatus,
    Role,
    UserId,
)
from offers.domain.errors import ConcurrentModificationError
from offers.stores.interfaces import OfferStore

NOW = datetime(2026, 5, 1, 20, 0, tzinfo=timezone.utc)


class InMemoryOfferStore(OfferStore):
    """OfferStore keeping deep copies, so unsaved mutations never leak in."""

    def __init__(self) -> None:
        self.offers: dict[OfferId, Offer] = {}
        self.saves = 0

    def get_offer(self, offer_id):
        offer = self.offers.get(offer_id)
        return copy.deepcopy(offer) if offer is not None else None

    def save_offer(self, offer):
        stored = self.offers.get(offer.id)
        stored_version = stored.version if stored is not None else 0
        if stored_version != offer.version:
            raise ConcurrentModificationError(str(offer.id))
        offer.version = stored_version + 1
        self.offers[offer.id] = copy.deepcopy(offer)
        self.saves += 1
        return offer

    def delete_offer(self, offer_id):
        return self.offers.pop(offer_id, None) is not None

    def list_offers(self, genre=None, location=None, status=None):
        result = [
            o
            for o in self.offers.values()
            if (genre is None or o.genre == genre)
            and (location is None or o.location == location)
            and (status is None or o.status is status)
        ]
        result.sort(key=lambda o: o.created_at, reverse=True)
        return copy.deepcopy(result)

    def list_offers_for_musician(self, musician_id):
        return [
            copy.deepcopy(o)
            for o in self.offers.values()
            if o.find_application_by_musician(musician_id) is not None
        ]

    def list_offers_for_organizer(self, organizer_id):
        result = [o for o in self.offers.values() if o.organizer_id == organizer_id]
        result.sort(key=lambda o: o.created_at, reverse=True)
        return copy.deepcopy(result)

    def find_offer_id_for_application(self, application_id: ApplicationId):
        for offer in self.offers.values():
            if offer.find_application(application_id) is not None:
                return offer.id
        return None


def make_actor(role: Role) -> Actor:
    return Actor(user_id=UserId(uuid.uuid4()), role=role)


def make_offer(organizer: Actor, **overrides) -> Offer:
    fields = dict(
        id=OfferId.new(),
        organizer_id=organizer.user_id,
        title="Jazz trio for wedding",
        description="Three sets, acoustic",
        created_at=NOW,
        genre="jazz",
        location="Santiago",
        status=OfferStatus.OPEN,
    )
    fields.update(overrides)
    return Offer(**fields)


def token_for(actor: Actor) -> str:
    return jwt.encode(
        {"sub": str(actor.user_id), "role": actor.role.value},
        settings.AUTH_TOKEN_SECRET,
        algorithm=settings.AUTH_TOKEN_ALGORITHM,
    )


@pytest.fixture
def organizer() -> Actor:
    return make_actor(Role.ORGANIZER)


@pytest.fixture
def other_organizer() -> Actor:
    return make_actor(Role.ORGANIZER)


@pytest.fixture
def musician() -> Actor:
    return make_actor(Role.MUSICIAN)


@pytest.fixture
def second_musician() -> Actor:
    return make_actor(Role.MUSICIAN)


@pytest.fixture
def third_musician() -> Actor:
    return make_actor(Role.MUSICIAN)


@pytest.fixture
def offer(organizer: Actor) -> Offer:
    return make_offer(organizer)


@pytest.fixture
def memory_store() -> InMemoryOfferStore:
    return InMemoryOfferStore()


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def client_for():
    """Return an APIClient authenticated as the given actor."""

    def build(actor: Actor) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_for(actor)}")
        return client

    return build


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()
