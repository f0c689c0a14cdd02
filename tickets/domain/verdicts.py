"""Gate verdicts and the discriminated result of one verification."""

from dataclasses import dataclass
from enum import Enum


class Verdict(Enum):
    GRANTED = "GRANTED"
    ALREADY_USED = "ALREADY_USED"
    EXPIRED_WINDOW = "EXPIRED_WINDOW"
    REJECTED = "REJECTED"


class RejectReason(Enum):
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    WRONG_EVENT = "WRONG_EVENT"
    UNKNOWN_EVENT = "UNKNOWN_EVENT"
    EVENT_EXPIRED = "EVENT_EXPIRED"
    TICKET_MISMATCH = "TICKET_MISMATCH"
    BAD_SIGNATURE = "BAD_SIGNATURE"


# Operator-facing text. ALREADY_USED must discourage entry.
VERDICT_MESSAGES = {
    Verdict.GRANTED: "Access granted",
    Verdict.ALREADY_USED: "Ticket already used. Do not admit.",
    Verdict.EXPIRED_WINDOW: "Code expired, likely a screenshot. Ask the holder to refresh.",
}

REJECT_MESSAGES = {
    RejectReason.MALFORMED_PAYLOAD: "Invalid ticket data",
    RejectReason.WRONG_EVENT: "Ticket is for a different event",
    RejectReason.UNKNOWN_EVENT: "Unknown event",
    RejectReason.EVENT_EXPIRED: "Event has ended",
    RejectReason.TICKET_MISMATCH: "Ticket does not belong to this holder",
    RejectReason.BAD_SIGNATURE: "Invalid ticket data",
}


@dataclass(frozen=True)
class VerificationResult:
    """Terminal outcome of a single gate scan."""

    verdict: Verdict
    reason: RejectReason | None = None
    address: str | None = None
    token_id: str | None = None
    event_id: str | None = None
    window_diff: int | None = None

    @property
    def granted(self) -> bool:
        return self.verdict is Verdict.GRANTED

    @property
    def message(self) -> str:
        if self.reason is not None:
            return REJECT_MESSAGES[self.reason]
        return VERDICT_MESSAGES[self.verdict]
