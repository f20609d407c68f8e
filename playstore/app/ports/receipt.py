"""Receipt verifier port interface for offline signature checks."""

from typing import Protocol


class ReceiptVerifierPort(Protocol):
    """Port interface for authenticating purchase receipts.

    Adapters: RSA SHA1withRSA verifier bound to the app's public key.

    Side effects: None (pure computation).
    """

    def verify(self, receipt: bytes, signature_b64: str) -> bool:
        """Verify signature.

        Args:
            receipt: Exact purchase data bytes that were signed
            signature_b64: Base64 detached signature

        Returns:
            True if signature is valid, False if it does not match

        Raises:
            SignatureDecodeError: If the signature is not valid base64
        """
        ...

    def requires_online(self) -> bool:
        """Return True when adapter needs network access.

        Always False for local key verification.
        """
        ...
