"""Domain models representing persisted and transient state.

These are pure domain objects with no API input rules.
Django ORM models are in tickets/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from tickets.domain.value_objects import Counter


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: str
    name: str
    owner: str
    created_at: datetime
    expires_at: datetime
    sold: Counter = Counter(0)
    scanned: Counter = Counter(0)

    def is_active(self, now: datetime) -> bool:
        """expires_at is exclusive: an event expiring exactly now is over."""
        return self.expires_at > now


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: str
    event_id: str
    address: str
    purchased_at: datetime
    scanned: bool = False
    scanned_at: datetime | None = None

    @property
    def token_id(self) -> str:
        return self.id


@dataclass(frozen=True)
class SignatureRecord:
    """A holder's signature over one ticket message, cached for reuse."""

    address: str
    token_id: str
    signature: str


@dataclass(frozen=True)
class CredentialPayload:
    """Decoded QR payload. Never persisted."""

    address: str
    token_id: str
    signature: str
    event_id: str
    window: int
