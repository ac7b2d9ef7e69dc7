"""Django signals for cache invalidation.

Invalidation runs once the surrounding transaction commits, so a reader
cannot re-cache rows that are about to be rolled back.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from offers.cache import invalidate_offer
from offers.models import Application, Offer


@receiver([post_save, post_delete], sender=Offer)
def invalidate_offer_cache(sender, instance, **kwargs):
    """Invalidate caches when an offer is saved or deleted."""
    offer_id = instance.pk
    transaction.on_commit(lambda: invalidate_offer(offer_id))


@receiver([post_save, post_delete], sender=Application)
def invalidate_application_cache(sender, instance, **kwargs):
    """Invalidate the owning offer's caches when an application changes."""
    offer_id = instance.offer_id
    transaction.on_commit(lambda: invalidate_offer(offer_id))
