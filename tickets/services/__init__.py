from tickets.services.clock import WindowClock
from tickets.services.event_service import EventService
from tickets.services.issuance_service import HolderSession, IssuanceState, issue_ticket
from tickets.services.verification_service import VerificationService

__all__ = [
    "WindowClock",
    "EventService",
    "HolderSession",
    "IssuanceState",
    "issue_ticket",
    "VerificationService",
]
