"""Gate verification - the anti-replay state machine.

Stages run strictly in order and each short-circuits to a terminal verdict:

1. parse          -> REJECTED (MALFORMED_PAYLOAD)
2. event match    -> REJECTED (WRONG_EVENT)
3. event liveness -> REJECTED (UNKNOWN_EVENT / EVENT_EXPIRED)
4. ticket lookup  -> ALREADY_USED, or REJECTED (TICKET_MISMATCH)
5. freshness      -> EXPIRED_WINDOW
6. signature      -> REJECTED (BAD_SIGNATURE)
7. materialize    (create the ticket if it did not exist yet)
8. commit         -> GRANTED, or ALREADY_USED if another gate won the race

Expected protocol conditions never raise. Only store failures escape, as
StoreUnavailableError.
"""

import logging

from tickets.domain import (
    CredentialPayload,
    RejectReason,
    Ticket,
    Verdict,
    VerificationResult,
)
from tickets.domain.errors import DuplicateTicketError, MalformedPayloadError
from tickets.services.clock import WindowClock
from tickets.services.credentials import build_message, decode
from tickets.services.signing import verify_signature
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)

WINDOW_TOLERANCE = 1


class VerificationService:
    """Runs one scan to a terminal verdict and commits the result."""

    def __init__(
        self,
        store: TicketStore,
        clock: WindowClock | None = None,
        window_tolerance: int = WINDOW_TOLERANCE,
    ) -> None:
        self._store = store
        self._clock = clock or WindowClock()
        self._tolerance = window_tolerance

    def verify(self, raw_payload: str, active_event_id: str) -> VerificationResult:
        try:
            payload = decode(raw_payload)
        except MalformedPayloadError as exc:
            logger.info("Scan rejected at gate %s: %s", active_event_id, exc)
            return VerificationResult(Verdict.REJECTED, RejectReason.MALFORMED_PAYLOAD)

        result = self._check(payload, active_event_id)
        self._log(result)
        return result

    def _check(self, payload: CredentialPayload, active_event_id: str) -> VerificationResult:
        def outcome(verdict: Verdict, reason: RejectReason | None = None, window_diff=None):
            return VerificationResult(
                verdict=verdict,
                reason=reason,
                address=payload.address,
                token_id=payload.token_id,
                event_id=payload.event_id,
                window_diff=window_diff,
            )

        if payload.event_id != active_event_id:
            return outcome(Verdict.REJECTED, RejectReason.WRONG_EVENT)

        event = self._store.get_event(payload.event_id)
        if event is None:
            return outcome(Verdict.REJECTED, RejectReason.UNKNOWN_EVENT)
        if not event.is_active(self._clock.now()):
            return outcome(Verdict.REJECTED, RejectReason.EVENT_EXPIRED)

        ticket = self._store.get_ticket(payload.token_id) if payload.token_id else None
        if ticket is not None:
            if ticket.scanned:
                return outcome(Verdict.ALREADY_USED)
            if not _belongs_to(ticket, payload):
                return outcome(Verdict.REJECTED, RejectReason.TICKET_MISMATCH)

        window_diff = abs(self._clock.current_window() - payload.window)
        if window_diff > self._tolerance:
            return outcome(Verdict.EXPIRED_WINDOW, window_diff=window_diff)

        message = build_message(payload.address, payload.token_id, payload.event_id)
        signed = payload.token_id and verify_signature(
            payload.address, message, payload.signature
        )
        if not signed:
            return outcome(Verdict.REJECTED, RejectReason.BAD_SIGNATURE, window_diff)

        if ticket is None and not self._materialize(payload):
            return outcome(Verdict.REJECTED, RejectReason.TICKET_MISMATCH, window_diff)

        if not self._store.mark_ticket_scanned(payload.token_id):
            return outcome(Verdict.ALREADY_USED, window_diff=window_diff)
        self._store.increment_event_counters(payload.event_id, scanned=1)
        return outcome(Verdict.GRANTED, window_diff=window_diff)

    def _materialize(self, payload: CredentialPayload) -> bool:
        """Create the ticket the signature just proved ownership of.

        Losing a creation race to a concurrent gate is fine: the commit's
        compare-and-set decides which scan is granted. Returns False when the
        holder already holds a different ticket for this event, or when the
        token id was taken by another holder in the meantime.
        """
        try:
            self._store.create_ticket(
                payload.event_id, payload.address, ticket_id=payload.token_id
            )
        except DuplicateTicketError:
            logger.info(
                "Ticket %s materialized concurrently for event %s",
                payload.token_id,
                payload.event_id,
            )
            existing = self._store.get_ticket(payload.token_id)
            return existing is not None and _belongs_to(existing, payload)
        self._store.increment_event_counters(payload.event_id, sold=1)
        return True

    def _log(self, result: VerificationResult) -> None:
        context = (result.token_id, result.event_id, result.address)
        if result.verdict is Verdict.ALREADY_USED:
            logger.warning(
                "Security alarm: reused ticket %s at event %s (holder %s)", *context
            )
        elif result.reason is RejectReason.BAD_SIGNATURE:
            logger.warning(
                "Possible forgery: bad signature for ticket %s at event %s (holder %s)",
                *context,
            )
        elif result.verdict is Verdict.EXPIRED_WINDOW:
            logger.info(
                "Stale credential for ticket %s at event %s, %s windows old",
                result.token_id,
                result.event_id,
                result.window_diff,
            )
        elif result.verdict is Verdict.REJECTED:
            logger.info(
                "Scan rejected (%s) for ticket %s at event %s",
                result.reason.value,
                result.token_id,
                result.event_id,
            )
        else:
            logger.info("Access granted: ticket %s at event %s (holder %s)", *context)


def _belongs_to(ticket: Ticket, payload: CredentialPayload) -> bool:
    return ticket.event_id == payload.event_id and ticket.address == payload.address
