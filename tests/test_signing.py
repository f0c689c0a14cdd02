"""Tests for holder signing and signature recovery.

Run with: pytest tests/test_signing.py -v
"""

import pytest

from tickets.services.credentials import build_message
from tickets.services.signing import LocalAccountSigner, recover_signer, verify_signature


class TestLocalAccountSigner:
    """Tests for LocalAccountSigner."""

    def test_address_is_lowercase(self, holder):
        """The signer reports its address in canonical form."""
        assert holder.address == holder.address.lower()
        assert holder.address.startswith("0x")

    def test_signature_is_hex(self, holder):
        """Signatures are 0x-prefixed 65-byte hex blobs."""
        signature = holder.sign("hello")
        assert signature.startswith("0x")
        assert len(signature) == 2 + 65 * 2

    def test_signing_is_deterministic(self, holder):
        """RFC 6979 signing gives the same blob for the same message."""
        assert holder.sign("hello") == holder.sign("hello")


class TestVerifySignature:
    """Tests for verify_signature and recover_signer."""

    def test_valid_signature_verifies(self, holder):
        """A holder's signature over the message verifies for that holder."""
        message = build_message(holder.address, "T1", "E1")
        assert verify_signature(holder.address, message, holder.sign(message))

    def test_recovers_signer(self, holder):
        """Recovery yields the signer's address."""
        message = build_message(holder.address, "T1", "E1")
        assert recover_signer(message, holder.sign(message)) == holder.address

    def test_checksummed_claim_still_matches(self, holder):
        """Address comparison is case-insensitive."""
        message = "hello"
        mixed = "0x" + holder.address[2:].upper()
        assert verify_signature(mixed, message, holder.sign(message))

    def test_other_signer_fails(self, holder, other_holder):
        """A signature by someone else does not verify for the holder."""
        message = build_message(holder.address, "T1", "E1")
        assert not verify_signature(holder.address, message, other_holder.sign(message))

    @pytest.mark.parametrize("field", ["address", "token", "event"])
    def test_altered_message_fails(self, holder, other_holder, field):
        """Changing any signed field invalidates the signature."""
        signature = holder.sign(build_message(holder.address, "T1", "E1"))
        address, token, event = holder.address, "T1", "E1"
        if field == "address":
            address = other_holder.address
        elif field == "token":
            token = "T2"
        else:
            event = "E2"
        assert not verify_signature(address, build_message(address, token, event), signature)

    @pytest.mark.parametrize(
        "signature",
        ["", "0x", "0xzz", "not-hex", "0x1234", "0x" + "00" * 65, "0x" + "ff" * 70],
    )
    def test_malformed_signature_is_false_not_error(self, holder, signature):
        """Garbage signatures fail verification without raising."""
        assert not verify_signature(holder.address, "hello", signature)
