"""Tests for ticket issuance and the holder signing flow.

Run with: pytest tests/test_issuance.py -v
"""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from tickets.domain import Verdict
from tickets.domain.errors import (
    EventExpiredError,
    EventNotFoundError,
    InvalidAddressError,
    SignatureDeclinedError,
    TicketAlreadyUsedError,
    TicketNotFoundError,
)
from tickets.services import HolderSession, IssuanceState, VerificationService, issue_ticket
from tickets.services.signing import Signer


class CountingSigner(Signer):
    """Wraps a real signer and counts requests."""

    def __init__(self, inner, gate: threading.Event | None = None) -> None:
        self.inner = inner
        self.gate = gate
        self.calls = 0
        self.decline_next = False
        self.started = threading.Event()

    @property
    def address(self) -> str:
        return self.inner.address

    def sign(self, message: str) -> str:
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.decline_next:
            self.decline_next = False
            raise SignatureDeclinedError()
        return self.inner.sign(message)


@pytest.fixture
def signer(holder):
    return CountingSigner(holder)


@pytest.fixture
def session(holder, store, signer, clock):
    return HolderSession(holder.address, store, signer, clock)


class TestIssueTicket:
    """Tests for issue_ticket."""

    def test_creates_ticket_and_counts_sale(self, store, clock, event, holder):
        """First issuance creates the ticket and bumps sold."""
        ticket, created = issue_ticket(store, clock, event.id, holder.address)
        assert created is True
        assert ticket.event_id == event.id
        assert ticket.address == holder.address
        assert store.get_event(event.id).sold.value == 1

    def test_is_idempotent_per_holder(self, store, clock, event, holder):
        """A second call returns the same ticket without a second sale."""
        first, _ = issue_ticket(store, clock, event.id, holder.address)
        second, created = issue_ticket(store, clock, event.id, holder.address)
        assert created is False
        assert second.id == first.id
        assert store.get_event(event.id).sold.value == 1

    def test_unknown_event_raises(self, store, clock, holder):
        """Issuing for a missing event is an error."""
        with pytest.raises(EventNotFoundError):
            issue_ticket(store, clock, "missing", holder.address)

    def test_expired_event_raises(self, store, clock, holder, manual_time, event):
        """Tickets are not issued once the event has ended."""
        manual_time.advance(2 * 3600)
        with pytest.raises(EventExpiredError):
            issue_ticket(store, clock, event.id, holder.address)

    def test_concurrent_issuance_keeps_one_record(self, store, clock, event, holder):
        """Racing issuances converge on a single ticket."""
        n = 8
        barrier = threading.Barrier(n)

        def acquire(_):
            barrier.wait()
            return issue_ticket(store, clock, event.id, holder.address)

        with ThreadPoolExecutor(max_workers=n) as pool:
            results = list(pool.map(acquire, range(n)))

        assert len({ticket.id for ticket, _ in results}) == 1
        assert sum(created for _, created in results) == 1
        assert store.get_event(event.id).sold.value == 1


class TestHolderSession:
    """Tests for HolderSession."""

    def test_invalid_address_rejected(self, store, signer, clock):
        """Sessions only exist for well-formed addresses."""
        with pytest.raises(InvalidAddressError):
            HolderSession("0x123", store, signer, clock)

    def test_address_is_canonicalized(self, holder, store, signer, clock):
        """Mixed-case input becomes the lowercase address."""
        mixed = "0x" + holder.address[2:].upper()
        assert HolderSession(mixed, store, signer, clock).address == holder.address

    def test_state_transitions(self, session, event):
        """NO_TICKET, then UNSIGNED, then READY."""
        assert session.state(event.id) is IssuanceState.NO_TICKET
        session.acquire_ticket(event.id)
        assert session.state(event.id) is IssuanceState.UNSIGNED
        session.sign(event.id)
        assert session.state(event.id) is IssuanceState.READY

    def test_tickets_lists_holdings(self, session, store, event, clock, holder):
        """tickets() returns every ticket held by the address."""
        second = store.create_event("Second", clock.now() + timedelta(hours=2), holder.address)
        session.acquire_ticket(event.id)
        session.acquire_ticket(second.id)
        assert {t.event_id for t in session.tickets()} == {event.id, second.id}

    def test_sign_without_ticket_raises(self, session, event):
        """There is nothing to sign before a ticket is acquired."""
        with pytest.raises(TicketNotFoundError):
            session.sign(event.id)

    def test_signs_once_per_event(self, session, signer, event):
        """Repeated sign calls reuse the cached record."""
        session.acquire_ticket(event.id)
        first = session.sign(event.id)
        second = session.sign(event.id)
        assert first == second
        assert signer.calls == 1

    def test_rotation_never_re_signs(self, session, signer, event, manual_time):
        """Later windows re-encode the cached signature."""
        session.acquire_ticket(event.id)
        first = json.loads(session.credential(event.id))
        manual_time.advance(30)
        second = json.loads(session.credential(event.id))
        assert second["window"] == first["window"] + 1
        assert second["signature"] == first["signature"]
        assert signer.calls == 1

    def test_credential_uses_current_window(self, session, event, clock):
        """The encoded window is the clock's current window."""
        ticket = session.acquire_ticket(event.id)
        data = json.loads(session.credential(event.id))
        assert data["window"] == clock.current_window()
        assert data["tokenId"] == ticket.id
        assert data["eventId"] == event.id
        assert data["address"] == session.address

    def test_decline_then_retry(self, session, signer, event):
        """A declined request leaves the pair retryable."""
        session.acquire_ticket(event.id)
        signer.decline_next = True
        with pytest.raises(SignatureDeclinedError):
            session.sign(event.id)
        assert session.state(event.id) is IssuanceState.SIGN_FAILED
        session.sign(event.id)
        assert session.state(event.id) is IssuanceState.READY
        assert signer.calls == 2

    def test_concurrent_sign_requests_coalesce(self, holder, store, clock, event):
        """Callers arriving mid-request share one signature."""
        gate = threading.Event()
        slow = CountingSigner(holder, gate=gate)
        session = HolderSession(holder.address, store, slow, clock)
        session.acquire_ticket(event.id)

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(session.sign, event.id)]
            assert slow.started.wait(timeout=5)
            assert session.state(event.id) is IssuanceState.SIGNING
            futures += [pool.submit(session.sign, event.id) for _ in range(3)]
            gate.set()
            records = [f.result(timeout=5) for f in futures]

        assert slow.calls == 1
        assert all(record == records[0] for record in records)

    def test_used_ticket_has_no_credential(self, session, store, event, clock):
        """Once scanned, the holder is told the ticket is used."""
        session.acquire_ticket(event.id)
        payload = session.credential(event.id)
        result = VerificationService(store, clock).verify(payload, event.id)
        assert result.verdict is Verdict.GRANTED
        with pytest.raises(TicketAlreadyUsedError):
            session.credential(event.id)

    def test_credential_passes_the_gate(self, session, store, event, clock):
        """A session credential verifies end to end."""
        session.acquire_ticket(event.id)
        result = VerificationService(store, clock).verify(session.credential(event.id), event.id)
        assert result.granted
