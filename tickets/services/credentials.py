"""Credential wire format and the signed ticket message.

The payload carried by the QR code is a flat JSON object::

    {"address": ..., "tokenId": ..., "signature": ..., "eventId": ..., "window": ...}

Only the window index travels with the signature, never a timestamp, so one
signature stays usable across rotations while each encoding goes stale.

The signed message is a protocol version tag: changing its field order or
trailing literal invalidates every signature already issued.
"""

import json

from tickets.domain.errors import MalformedPayloadError
from tickets.domain.models import CredentialPayload, SignatureRecord

MESSAGE_PREFIX = "SPOTLIGHT_TICKET"
MESSAGE_SUFFIX = "GIKI_EVENT"

# A QR code holds under 3 KB; anything longer was not scanned from one.
MAX_PAYLOAD_LENGTH = 4096


def build_message(address: str, token_id: str, event_id: str) -> str:
    return f"{MESSAGE_PREFIX}:{address}:{token_id}:{event_id}:{MESSAGE_SUFFIX}"


def encode(record: SignatureRecord, event_id: str, window: int) -> str:
    """Serialize a signature record for one rotation window. Never fails."""
    payload = {
        "address": record.address,
        "tokenId": record.token_id,
        "signature": record.signature,
        "eventId": event_id,
        "window": window,
    }
    return json.dumps(payload, separators=(",", ":"))


def decode(raw: str) -> CredentialPayload:
    """Parse a scanned payload.

    Unknown fields are ignored. Missing ``address`` or ``signature`` and a
    non-integer ``window`` are hard failures.

    Raises:
        MalformedPayloadError: If the payload cannot be decoded.
    """
    if isinstance(raw, str) and len(raw) > MAX_PAYLOAD_LENGTH:
        raise MalformedPayloadError("Payload is too long")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        raise MalformedPayloadError("Payload is not valid JSON")
    if not isinstance(data, dict):
        raise MalformedPayloadError("Payload must be a JSON object")

    address = data.get("address")
    signature = data.get("signature")
    if not isinstance(address, str) or not address.strip():
        raise MalformedPayloadError("Missing address")
    if not isinstance(signature, str) or not signature.strip():
        raise MalformedPayloadError("Missing signature")

    window = data.get("window")
    # bool is an int subclass; true/false is not a window index
    if isinstance(window, bool) or not isinstance(window, int):
        raise MalformedPayloadError("Window must be an integer")

    return CredentialPayload(
        address=address.strip().lower(),
        token_id=_as_text(data.get("tokenId")),
        signature=signature.strip(),
        event_id=_as_text(data.get("eventId")),
        window=window,
    )


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)
