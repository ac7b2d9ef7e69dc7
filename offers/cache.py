"""Cache keys for public offer reads."""

from uuid import UUID

from django.conf import settings
from django.core.cache import cache

OFFER_LIST_KEY = "offers:list"


def offer_detail_key(offer_id) -> str:
    # Same key for every spelling of one UUID.
    try:
        offer_id = UUID(str(offer_id))
    except ValueError:
        pass
    return f"offers:{offer_id}"


def cache_timeout() -> int:
    return getattr(settings, "OFFERS_CACHE_TIMEOUT", 60)


def invalidate_offer(offer_id) -> None:
    cache.delete_many([OFFER_LIST_KEY, offer_detail_key(offer_id)])
