"""Tests for the receipt verifier adapter."""

from __future__ import annotations

import pytest

from playstore.app.adapters import RSAReceiptVerifier
from playstore.signature import KeyDecodeError, KeyParseError, SignatureDecodeError


def test_verifier_accepts_genuine_receipt(public_key_b64: str, signed_receipt) -> None:
    receipt, signature = signed_receipt
    verifier = RSAReceiptVerifier.from_base64(public_key_b64)

    assert verifier.key_size == 2048
    assert verifier.verify(receipt, signature) is True
    assert verifier.verify(receipt[:-1], signature) is False


def test_key_errors_surface_at_construction() -> None:
    with pytest.raises(KeyDecodeError):
        RSAReceiptVerifier.from_base64("***")
    with pytest.raises(KeyParseError):
        RSAReceiptVerifier.from_base64("AAAAAAAA")


def test_signature_errors_surface_at_verify(public_key_b64: str, signed_receipt) -> None:
    receipt, _ = signed_receipt
    verifier = RSAReceiptVerifier.from_base64(public_key_b64)

    with pytest.raises(SignatureDecodeError):
        verifier.verify(receipt, "!!")


def test_verifier_is_offline(public_key_b64: str) -> None:
    assert RSAReceiptVerifier.from_base64(public_key_b64).requires_online() is False
