"""Django ORM implementation of the TicketStore."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from tickets import models
from tickets.domain import Counter, Event, Ticket
from tickets.domain.errors import DuplicateTicketError, StoreUnavailableError
from tickets.signals import event_counters_changed
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as exc:
        logger.exception("Ticket store operation failed")
        raise StoreUnavailableError() from exc


def _to_event(row: models.Event) -> Event:
    return Event(
        id=row.id,
        name=row.name,
        owner=row.owner,
        created_at=row.created_at,
        expires_at=row.expires_at,
        sold=Counter(row.sold),
        scanned=Counter(row.scanned),
    )


def _to_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=row.id,
        event_id=row.event_id,
        address=row.address,
        purchased_at=row.purchased_at,
        scanned=row.scanned,
        scanned_at=row.scanned_at,
    )


class DjangoTicketStore(TicketStore):
    """Relational store using Django ORM."""

    def get_event(self, event_id: str) -> Event | None:
        with _store_errors():
            row = models.Event.objects.filter(pk=event_id).first()
        return _to_event(row) if row else None

    def list_active_events(self, now: datetime) -> list[Event]:
        with _store_errors():
            rows = models.Event.objects.filter(expires_at__gt=now).order_by("expires_at")
            return [_to_event(row) for row in rows]

    def list_events_owned_by(self, owner: str) -> list[Event]:
        with _store_errors():
            rows = models.Event.objects.filter(owner=owner.lower()).order_by("-created_at")
            return [_to_event(row) for row in rows]

    def create_event(self, name: str, expires_at: datetime, owner: str) -> Event:
        with _store_errors():
            row = models.Event.objects.create(
                name=name, expires_at=expires_at, owner=owner.lower()
            )
        return _to_event(row)

    def increment_event_counters(self, event_id: str, sold: int = 0, scanned: int = 0) -> None:
        if sold < 0 or scanned < 0:
            raise ValueError("Counters only move forward")
        with _store_errors():
            # Single UPDATE with F() so concurrent gates never lose an increment.
            updated = models.Event.objects.filter(pk=event_id).update(
                sold=F("sold") + sold, scanned=F("scanned") + scanned
            )
        if updated:
            # QuerySet.update bypasses post_save.
            event_counters_changed.send(sender=models.Event, event_id=event_id)

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        with _store_errors():
            row = models.Ticket.objects.filter(pk=ticket_id).first()
        return _to_ticket(row) if row else None

    def find_ticket(self, event_id: str, address: str) -> Ticket | None:
        with _store_errors():
            row = models.Ticket.objects.filter(
                event_id=event_id, address=address.lower()
            ).first()
        return _to_ticket(row) if row else None

    def list_tickets_for_address(self, address: str) -> list[Ticket]:
        with _store_errors():
            rows = models.Ticket.objects.filter(address=address.lower()).order_by("purchased_at")
            return [_to_ticket(row) for row in rows]

    def create_ticket(self, event_id: str, address: str, ticket_id: str | None = None) -> Ticket:
        fields = {"event_id": event_id, "address": address.lower()}
        if ticket_id is not None:
            fields["id"] = ticket_id
        try:
            # create() forces an INSERT, so a taken id fails the same way as
            # a taken (event, address) pair.
            with _store_errors(), transaction.atomic():
                row = models.Ticket.objects.create(**fields)
        except IntegrityError as exc:
            raise DuplicateTicketError(event_id, fields["address"]) from exc
        return _to_ticket(row)

    def mark_ticket_scanned(self, ticket_id: str) -> bool:
        with _store_errors():
            # Conditional UPDATE: the WHERE clause is the compare, the row count the swap result.
            updated = models.Ticket.objects.filter(pk=ticket_id, scanned=False).update(
                scanned=True, scanned_at=timezone.now()
            )
        return updated == 1
