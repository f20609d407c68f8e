"""Receipt verifier adapter bound to an app's Play Console public key."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import rsa

from playstore.app.ports.receipt import ReceiptVerifierPort
from playstore.signature import load_public_key, verify_with_key


class RSAReceiptVerifier(ReceiptVerifierPort):
    """Verify SHA1withRSA receipt signatures with a pre-parsed public key.

    The key is decoded and parsed once at construction, so key errors
    (``KeyDecodeError``/``KeyParseError``) surface before any receipt is seen.
    Instances hold only the immutable key and are safe to share across threads.

    Example:
        >>> verifier = RSAReceiptVerifier.from_base64(settings.public_key)
        >>> verifier.verify(purchase_data, signature_b64)
        True
    """

    def __init__(self, public_key: rsa.RSAPublicKey) -> None:
        self._public_key = public_key

    @classmethod
    def from_base64(cls, public_key_b64: str) -> "RSAReceiptVerifier":
        """Build a verifier from the base64 key shown in the Play Console."""
        return cls(load_public_key(public_key_b64))

    @property
    def key_size(self) -> int:
        """Modulus size in bits; valid signatures are ``key_size // 8`` bytes."""
        return self._public_key.key_size

    def verify(self, receipt: bytes, signature_b64: str) -> bool:
        return verify_with_key(self._public_key, receipt, signature_b64)

    def requires_online(self) -> bool:
        return False
