"""Domain error codes for the tickets module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    INVALID_EVENT = "INVALID_EVENT"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    EVENT_EXPIRED = "EVENT_EXPIRED"
    TICKET_ALREADY_USED = "TICKET_ALREADY_USED"
    DUPLICATE_TICKET = "DUPLICATE_TICKET"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    SIGNATURE_DECLINED = "SIGNATURE_DECLINED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class TicketNotFoundError(DomainError):
    """Raised when a holder has no ticket for an event."""

    def __init__(self, event_id: str, address: str) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
        self.event_id = event_id
        self.address = address


class InvalidEventError(DomainError):
    """Raised when event creation input breaks an invariant."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_EVENT, message=reason)


class InvalidAddressError(DomainError):
    """Raised when a holder or owner address is not a valid account address."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ADDRESS,
            message="Invalid address format",
        )


class EventExpiredError(DomainError):
    """Raised when issuing a ticket for an event that has ended."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_EXPIRED, message="Event has ended")
        self.event_id = event_id


class TicketAlreadyUsedError(DomainError):
    """Raised when a credential is requested for a ticket already scanned."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_ALREADY_USED,
            message="Ticket was scanned and cannot be used again",
        )
        self.ticket_id = ticket_id


class DuplicateTicketError(DomainError):
    """Raised by stores when a ticket id or (event, address) pair already exists."""

    def __init__(self, event_id: str, address: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_TICKET,
            message="Ticket already exists",
        )
        self.event_id = event_id
        self.address = address


class MalformedPayloadError(DomainError):
    """Raised when a credential payload cannot be decoded."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.MALFORMED_PAYLOAD, message=reason)


class SignatureDeclinedError(DomainError):
    """Raised by a Signer when the holder's key custody refuses or errors."""

    def __init__(self, reason: str = "Signature request declined") -> None:
        super().__init__(code=ErrorCode.SIGNATURE_DECLINED, message=reason)


class StoreUnavailableError(DomainError):
    """Raised when the ticket store cannot be reached."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message="Ticket store unavailable",
        )
