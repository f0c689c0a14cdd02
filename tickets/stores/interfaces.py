"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from tickets.domain import Event, Ticket


class TicketStore(ABC):
    """Interface for event and ticket persistence operations."""

    @abstractmethod
    def get_event(self, event_id: str) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def list_active_events(self, now: datetime) -> list[Event]:
        """Return events with expires_at > now, ordered by expires_at ascending."""
        ...

    @abstractmethod
    def list_events_owned_by(self, owner: str) -> list[Event]:
        """Return events created by owner, ordered by created_at descending."""
        ...

    @abstractmethod
    def create_event(self, name: str, expires_at: datetime, owner: str) -> Event:
        """Create an event with zeroed counters and a store-assigned ID."""
        ...

    @abstractmethod
    def increment_event_counters(self, event_id: str, sold: int = 0, scanned: int = 0) -> None:
        """Add to the event counters. Additive, never absolute; unknown IDs are ignored."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: str) -> Ticket | None:
        """Return a ticket by ID, or None if not found."""
        ...

    @abstractmethod
    def find_ticket(self, event_id: str, address: str) -> Ticket | None:
        """Return the ticket held by address for event_id, or None."""
        ...

    @abstractmethod
    def list_tickets_for_address(self, address: str) -> list[Ticket]:
        """Return all tickets held by address."""
        ...

    @abstractmethod
    def create_ticket(self, event_id: str, address: str, ticket_id: str | None = None) -> Ticket:
        """Create an unscanned ticket. Does not touch event counters.

        Raises:
            DuplicateTicketError: If ticket_id or the (event_id, address) pair exists.
        """
        ...

    @abstractmethod
    def mark_ticket_scanned(self, ticket_id: str) -> bool:
        """Atomically set scanned from false to true.

        Returns True only for the single call that performed the transition.
        """
        ...
