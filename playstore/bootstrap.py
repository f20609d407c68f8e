"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from playstore.app import PurchaseService
from playstore.app.adapters import GooglePlayPublisherAdapter, RSAReceiptVerifier
from playstore.app.ports import ReceiptVerifierPort
from playstore.config import Settings, get_settings
from playstore.utils.offline import OfflineModeGate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    offline_gate: OfflineModeGate
    receipt_verifier: ReceiptVerifierPort | None
    publisher: GooglePlayPublisherAdapter | None
    purchase_service: PurchaseService


def _create_publisher(
    settings: Settings, offline_gate: OfflineModeGate
) -> GooglePlayPublisherAdapter | None:
    """Build the Developer API adapter when online and credentials are configured."""

    if not offline_gate.is_online_enabled() or not settings.has_service_account():
        return None

    json_key = settings.get_service_account_json()
    if json_key is None:  # pragma: no cover - guarded by has_service_account
        return None

    return GooglePlayPublisherAdapter.from_service_account_json(
        json_key, timeout=settings.http_timeout_seconds
    )


def _create_receipt_verifier(settings: Settings) -> ReceiptVerifierPort | None:
    """Parse the configured Play Console key, if any."""

    if not settings.public_key:
        return None
    return RSAReceiptVerifier.from_base64(settings.public_key)


def bootstrap_receipt_verification(
    settings: Settings | None = None, *, use_configured_key: bool = True
) -> PurchaseService:
    """Wire only the offline verification path.

    No Developer API adapter is built, so credential problems cannot block
    signature checks. With ``use_configured_key=False`` the configured public
    key is not parsed either; callers then pass a key per call.
    """

    active_settings = settings or get_settings()
    receipt_verifier = _create_receipt_verifier(active_settings) if use_configured_key else None
    return PurchaseService(
        OfflineModeGate.from_settings(active_settings),
        receipt_verifier=receipt_verifier,
    )


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Create the application container with concrete adapters."""

    active_settings = settings or get_settings()
    offline_gate = OfflineModeGate.from_settings(active_settings)

    receipt_verifier = _create_receipt_verifier(active_settings)

    publisher = _create_publisher(active_settings, offline_gate)
    if publisher is None:
        logger.debug("Developer API adapter not configured (online=%s)", offline_gate.online_enabled)

    purchase_service = PurchaseService(
        offline_gate,
        receipt_verifier=receipt_verifier,
        product_port=publisher,
        subscription_port=publisher,
    )

    return ApplicationContainer(
        settings=active_settings,
        offline_gate=offline_gate,
        receipt_verifier=receipt_verifier,
        publisher=publisher,
        purchase_service=purchase_service,
    )
