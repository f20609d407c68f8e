"""Purchase validation service combining offline and server-side checks.

Two independent paths are exposed:

1. Offline receipt authentication against the app's public key. Always
   available, never touches the network.
2. Authoritative purchase state and lifecycle actions through the Google Play
   Developer API. Gated behind online mode.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from playstore.app.ports import (
    ProductPurchase,
    ProductPurchasesPort,
    ReceiptVerifierPort,
    SubscriptionPurchase,
    SubscriptionPurchasesPort,
)
from playstore.signature import SignatureStructureError, verify_signature
from playstore.utils.hashing import compute_sha256
from playstore.utils.offline import OfflineModeGate

logger = logging.getLogger(__name__)

PortT = TypeVar("PortT", ProductPurchasesPort, SubscriptionPurchasesPort)

PUBLISHER_FEATURE = "Google Play Developer API"
VERIFIER_FEATURE = "Receipt signature verification"


class PublisherNotConfiguredError(RuntimeError):
    """Raised when a Developer API operation is attempted without credentials."""

    pass


class PurchaseService:
    """Validate Google Play purchases offline and against the publisher API."""

    def __init__(
        self,
        offline_gate: OfflineModeGate,
        *,
        receipt_verifier: ReceiptVerifierPort | None = None,
        product_port: ProductPurchasesPort | None = None,
        subscription_port: SubscriptionPurchasesPort | None = None,
    ) -> None:
        """Initialize purchase service.

        Args:
            offline_gate: Gate guarding Developer API calls
            receipt_verifier: Verifier bound to the configured public key
            product_port: Product purchase operations
            subscription_port: Subscription purchase operations
        """
        self._gate = offline_gate
        self._receipt_verifier = receipt_verifier
        self._product_port = product_port
        self._subscription_port = subscription_port

    def verify_receipt(
        self,
        receipt: bytes,
        signature_b64: str,
        *,
        public_key_b64: str | None = None,
    ) -> bool:
        """Authenticate purchase data against its detached signature.

        An explicit ``public_key_b64`` overrides the configured verifier.

        Returns:
            True if the store signed ``receipt``, False otherwise

        Raises:
            SignatureStructureError: If the key or signature cannot be parsed
            PublisherNotConfiguredError: If no public key is available
        """
        fingerprint = compute_sha256(bytes(receipt))[:12]
        try:
            if public_key_b64 is not None:
                valid = verify_signature(public_key_b64, receipt, signature_b64)
            elif self._receipt_verifier is not None:
                self._gate.ensure_supported(
                    feature=VERIFIER_FEATURE,
                    requires_online=self._receipt_verifier.requires_online(),
                )
                valid = self._receipt_verifier.verify(receipt, signature_b64)
            else:
                raise PublisherNotConfiguredError(
                    "No public key configured. Set PLAYSTORE_PUBLIC_KEY or pass a key."
                )
        except SignatureStructureError as exc:
            logger.error("Receipt %s could not be verified: %s", fingerprint, exc)
            raise

        if valid:
            logger.debug("Receipt %s signature valid (%d bytes)", fingerprint, len(receipt))
        else:
            logger.info("Receipt %s signature rejected (%d bytes)", fingerprint, len(receipt))
        return valid

    # ------------------------------------------------------------------
    # Product purchases
    # ------------------------------------------------------------------

    def get_product(self, package_name: str, product_id: str, token: str) -> ProductPurchase:
        return self._products().get_product(package_name, product_id, token)

    def acknowledge_product(
        self,
        package_name: str,
        product_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        self._products().acknowledge_product(
            package_name, product_id, token, developer_payload=developer_payload
        )
        logger.info("Acknowledged product %s for %s", product_id, package_name)

    # ------------------------------------------------------------------
    # Subscription purchases
    # ------------------------------------------------------------------

    def get_subscription(
        self, package_name: str, subscription_id: str, token: str
    ) -> SubscriptionPurchase:
        return self._subscriptions().get_subscription(package_name, subscription_id, token)

    def acknowledge_subscription(
        self,
        package_name: str,
        subscription_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        self._subscriptions().acknowledge_subscription(
            package_name, subscription_id, token, developer_payload=developer_payload
        )
        logger.info("Acknowledged subscription %s for %s", subscription_id, package_name)

    def cancel_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._subscriptions().cancel_subscription(package_name, subscription_id, token)
        logger.info("Cancelled subscription %s for %s", subscription_id, package_name)

    def refund_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._subscriptions().refund_subscription(package_name, subscription_id, token)
        logger.info("Refunded subscription %s for %s", subscription_id, package_name)

    def revoke_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._subscriptions().revoke_subscription(package_name, subscription_id, token)
        logger.info("Revoked subscription %s for %s", subscription_id, package_name)

    def _products(self) -> ProductPurchasesPort:
        return self._checked(self._product_port)

    def _subscriptions(self) -> SubscriptionPurchasesPort:
        return self._checked(self._subscription_port)

    def _checked(self, port: PortT | None) -> PortT:
        """Return ``port`` once the gate accepts it for a Developer API call."""
        if port is None:
            self._gate.require(PUBLISHER_FEATURE)
            raise PublisherNotConfiguredError(
                "No service account configured. Set PLAYSTORE_SERVICE_ACCOUNT_KEY_PATH."
            )
        self._gate.ensure_supported(
            feature=PUBLISHER_FEATURE, requires_online=port.requires_online()
        )
        return port
