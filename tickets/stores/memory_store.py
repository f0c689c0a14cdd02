"""In-process TicketStore guarded by a single lock.

Used by the test suite and for running a gate without a database.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from tickets.domain import Counter, Event, Ticket
from tickets.domain.errors import DuplicateTicketError
from tickets.stores.interfaces import TicketStore


class InMemoryTicketStore(TicketStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: dict[str, Event] = {}
        self._tickets: dict[str, Ticket] = {}
        self._holders: dict[tuple[str, str], str] = {}

    def get_event(self, event_id: str) -> Event | None:
        with self._lock:
            return self._events.get(event_id)

    def list_active_events(self, now: datetime) -> list[Event]:
        with self._lock:
            active = [e for e in self._events.values() if e.is_active(now)]
        return sorted(active, key=lambda e: e.expires_at)

    def list_events_owned_by(self, owner: str) -> list[Event]:
        owner = owner.lower()
        with self._lock:
            owned = [e for e in self._events.values() if e.owner == owner]
        return sorted(owned, key=lambda e: e.created_at, reverse=True)

    def create_event(self, name: str, expires_at: datetime, owner: str) -> Event:
        event = Event(
            id=uuid.uuid4().hex,
            name=name,
            owner=owner.lower(),
            created_at=datetime.now(timezone.utc),
            expires_at=expires_at,
        )
        with self._lock:
            self._events[event.id] = event
        return event

    def increment_event_counters(self, event_id: str, sold: int = 0, scanned: int = 0) -> None:
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                return
            self._events[event_id] = replace(
                event,
                sold=event.sold.incremented(sold),
                scanned=event.scanned.incremented(scanned),
            )

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        with self._lock:
            return self._tickets.get(ticket_id)

    def find_ticket(self, event_id: str, address: str) -> Ticket | None:
        with self._lock:
            ticket_id = self._holders.get((event_id, address.lower()))
            return self._tickets.get(ticket_id) if ticket_id else None

    def list_tickets_for_address(self, address: str) -> list[Ticket]:
        address = address.lower()
        with self._lock:
            return [t for t in self._tickets.values() if t.address == address]

    def create_ticket(self, event_id: str, address: str, ticket_id: str | None = None) -> Ticket:
        address = address.lower()
        ticket = Ticket(
            id=ticket_id or uuid.uuid4().hex,
            event_id=event_id,
            address=address,
            purchased_at=datetime.now(timezone.utc),
        )
        with self._lock:
            key = (event_id, address)
            if ticket.id in self._tickets or key in self._holders:
                raise DuplicateTicketError(event_id, address)
            self._tickets[ticket.id] = ticket
            self._holders[key] = ticket.id
        return ticket

    def mark_ticket_scanned(self, ticket_id: str) -> bool:
        with self._lock:
            ticket = self._tickets.get(ticket_id)
            if ticket is None or ticket.scanned:
                return False
            self._tickets[ticket_id] = replace(
                ticket, scanned=True, scanned_at=datetime.now(timezone.utc)
            )
            return True
