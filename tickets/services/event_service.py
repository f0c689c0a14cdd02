"""Event service - catalog business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from datetime import datetime

from tickets.domain import Address, Event
from tickets.domain.errors import EventNotFoundError, InvalidAddressError, InvalidEventError
from tickets.services.clock import WindowClock
from tickets.stores.interfaces import TicketStore


def canonical_address(value: str) -> str:
    """Raises InvalidAddressError if value is not an account address."""
    try:
        return Address.parse(value).value
    except ValueError:
        raise InvalidAddressError() from None


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: TicketStore, clock: WindowClock | None = None) -> None:
        self._store = store
        self._clock = clock or WindowClock()

    def create_event(self, name: str, expires_at: datetime, owner: str) -> Event:
        """Create an event owned by ``owner``.

        Raises:
            InvalidEventError: If the name is blank or expires_at is not in the future.
            InvalidAddressError: If owner is not a valid address.
        """
        name = name.strip()
        if not name:
            raise InvalidEventError("Event name is required")
        if expires_at.tzinfo is None:
            raise InvalidEventError("Expiry must include a timezone")
        if expires_at <= self._clock.now():
            raise InvalidEventError("Expiry must be in the future")
        return self._store.create_event(name, expires_at, canonical_address(owner))

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def list_active_events(self) -> list[Event]:
        return self._store.list_active_events(self._clock.now())

    def list_events_owned_by(self, owner: str) -> list[Event]:
        return self._store.list_events_owned_by(canonical_address(owner))
