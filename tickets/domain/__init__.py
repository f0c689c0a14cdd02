from tickets.domain.models import CredentialPayload, Event, SignatureRecord, Ticket
from tickets.domain.value_objects import Address, Counter
from tickets.domain.verdicts import RejectReason, Verdict, VerificationResult

__all__ = [
    "Event",
    "Ticket",
    "SignatureRecord",
    "CredentialPayload",
    "Address",
    "Counter",
    "Verdict",
    "RejectReason",
    "VerificationResult",
]
