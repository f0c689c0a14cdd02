"""Holder signing and signature verification.

The holder's key custody is external: the core hands a Signer a message and
forwards whatever blob comes back. Verification uses the EIP-191 personal
message scheme, recovering the signer address from the signature and
comparing it with the claimed holder.
"""

import logging
from abc import ABC, abstractmethod

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError

from tickets.domain.errors import SignatureDeclinedError

logger = logging.getLogger(__name__)


class Signer(ABC):
    """Interface for the holder's key custody agent."""

    @abstractmethod
    def sign(self, message: str) -> str:
        """Return a 0x-prefixed hex signature over ``message``.

        Raises:
            SignatureDeclinedError: If the holder refuses or the agent errors.
        """
        ...


class LocalAccountSigner(Signer):
    """Signs with a private key held in process. For development and tests."""

    def __init__(self, private_key: str) -> None:
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address.lower()

    def sign(self, message: str) -> str:
        try:
            signed = self._account.sign_message(encode_defunct(text=message))
        except (ValueError, TypeError) as exc:
            raise SignatureDeclinedError(f"Local signing failed: {exc}") from exc
        return "0x" + bytes(signed.signature).hex()


def recover_signer(message: str, signature: str) -> str | None:
    """Return the lowercase address that produced ``signature``, or None if malformed."""
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
    except (ValueError, TypeError, IndexError, BadSignature, ValidationError):
        logger.debug("Unrecoverable signature for message %r", message)
        return None
    return recovered.lower()


def verify_signature(address: str, message: str, signature: str) -> bool:
    recovered = recover_signer(message, signature)
    return recovered is not None and recovered == address.lower()
