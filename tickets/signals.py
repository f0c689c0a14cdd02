"""Django signals for cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from tickets.models import Event, Ticket

ACTIVE_EVENTS_KEY = "events:active"

# Sent by DjangoTicketStore after an F() counter update, which skips post_save.
event_counters_changed = Signal()


def event_cache_key(event_id: str) -> str:
    return f"events:{event_id}"


def _invalidate_event(event_id: str) -> None:
    cache.delete_many([ACTIVE_EVENTS_KEY, event_cache_key(event_id)])


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    _invalidate_event(instance.pk)


@receiver([post_save, post_delete], sender=Ticket)
def invalidate_ticket_event_cache(sender, instance, **kwargs):
    """A ticket write can change what its event reports."""
    _invalidate_event(instance.event_id)


@receiver(event_counters_changed)
def invalidate_event_counters_cache(sender, event_id, **kwargs):
    """Invalidate caches when sold/scanned counters move."""
    _invalidate_event(event_id)
