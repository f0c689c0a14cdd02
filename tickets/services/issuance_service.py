"""Issuance flow - one holder's tickets, signatures and rotating credentials.

Per (holder, event)::

    NO_TICKET --acquire_ticket--> UNSIGNED --sign--> SIGNING --> READY
                                     ^                  |
                                     +-- SIGN_FAILED <--+

READY is terminal for the session: the cached signature is re-encoded with
each new window and the holder is never asked to sign twice.
"""

import logging
import threading
from concurrent.futures import Future
from enum import Enum

from tickets.domain import Address, SignatureRecord, Ticket
from tickets.domain.errors import (
    DuplicateTicketError,
    EventExpiredError,
    EventNotFoundError,
    InvalidAddressError,
    SignatureDeclinedError,
    TicketAlreadyUsedError,
    TicketNotFoundError,
)
from tickets.services.clock import WindowClock
from tickets.services.credentials import build_message, encode
from tickets.services.signing import Signer
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class IssuanceState(Enum):
    NO_TICKET = "NO_TICKET"
    UNSIGNED = "UNSIGNED"
    SIGNING = "SIGNING"
    READY = "READY"
    SIGN_FAILED = "SIGN_FAILED"


def issue_ticket(
    store: TicketStore, clock: WindowClock, event_id: str, address: str
) -> tuple[Ticket, bool]:
    """Return the holder's ticket for an event, creating it if needed.

    The bool is True when this call created the ticket. Only creation moves
    the event's sold counter.

    Raises:
        EventNotFoundError: If the event does not exist.
        EventExpiredError: If the event has ended.
    """
    existing = store.find_ticket(event_id, address)
    if existing is not None:
        return existing, False

    event = store.get_event(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    if not event.is_active(clock.now()):
        raise EventExpiredError(event_id)

    try:
        ticket = store.create_ticket(event_id, address)
    except DuplicateTicketError:
        # A concurrent issuance won; the uniqueness constraint kept one record.
        ticket = store.find_ticket(event_id, address)
        if ticket is None:
            raise
        return ticket, False

    store.increment_event_counters(event_id, sold=1)
    logger.info("Issued ticket %s for event %s to %s", ticket.id, event_id, address)
    return ticket, True


class HolderSession:
    """In-memory session state for one holder address.

    Holds the signature cache, keyed by event id, and coalesces concurrent
    sign requests so at most one is in flight per event.
    """

    def __init__(
        self,
        address: str,
        store: TicketStore,
        signer: Signer,
        clock: WindowClock | None = None,
    ) -> None:
        try:
            self.address = Address.parse(address).value
        except ValueError:
            raise InvalidAddressError() from None
        self._store = store
        self._signer = signer
        self._clock = clock or WindowClock()
        self._lock = threading.Lock()
        self._signatures: dict[str, SignatureRecord] = {}
        self._in_flight: dict[str, Future] = {}
        self._failed: set[str] = set()

    def state(self, event_id: str) -> IssuanceState:
        with self._lock:
            if event_id in self._signatures:
                return IssuanceState.READY
            if event_id in self._in_flight:
                return IssuanceState.SIGNING
            failed = event_id in self._failed
        if self._store.find_ticket(event_id, self.address) is None:
            return IssuanceState.NO_TICKET
        return IssuanceState.SIGN_FAILED if failed else IssuanceState.UNSIGNED

    def tickets(self) -> list[Ticket]:
        return self._store.list_tickets_for_address(self.address)

    def acquire_ticket(self, event_id: str) -> Ticket:
        ticket, _ = issue_ticket(self._store, self._clock, event_id, self.address)
        return ticket

    def sign(self, event_id: str) -> SignatureRecord:
        """Return the cached signature record, signing at most once.

        Callers arriving while a request is in flight wait on it and get the
        same record or the same failure.

        Raises:
            TicketNotFoundError: If the holder has no ticket for the event.
            SignatureDeclinedError: If the signer refused; the pair stays retryable.
        """
        with self._lock:
            record = self._signatures.get(event_id)
            if record is not None:
                return record
            future = self._in_flight.get(event_id)
            leader = future is None
            if leader:
                future = Future()
                self._in_flight[event_id] = future
                self._failed.discard(event_id)

        if not leader:
            return future.result()

        try:
            record = self._request_signature(event_id)
        except Exception as exc:
            with self._lock:
                del self._in_flight[event_id]
                self._failed.add(event_id)
            future.set_exception(exc)
            raise

        with self._lock:
            self._signatures[event_id] = record
            del self._in_flight[event_id]
        future.set_result(record)
        return record

    def credential(self, event_id: str) -> str:
        """Encode the cached signature for the current rotation window.

        Raises:
            TicketAlreadyUsedError: If the ticket has been scanned.
        """
        record = self.sign(event_id)
        ticket = self._store.get_ticket(record.token_id)
        if ticket is not None and ticket.scanned:
            raise TicketAlreadyUsedError(ticket.id)
        return encode(record, event_id, self._clock.current_window())

    def _request_signature(self, event_id: str) -> SignatureRecord:
        ticket = self._store.find_ticket(event_id, self.address)
        if ticket is None:
            raise TicketNotFoundError(event_id, self.address)
        message = build_message(self.address, ticket.token_id, event_id)
        try:
            signature = self._signer.sign(message)
        except SignatureDeclinedError:
            logger.info("Holder %s declined to sign for event %s", self.address, event_id)
            raise
        return SignatureRecord(
            address=self.address, token_id=ticket.token_id, signature=signature
        )
