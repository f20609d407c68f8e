"""Pytest configuration and fixtures."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from playstore.app.ports import ProductPurchase, SubscriptionPurchase
from playstore.config import Settings
from playstore.utils.crypto import encode_bytes

RECEIPT = b'{"orderId":"GPA.1234-5678-9012-34567","packageName":"com.example.app","productId":"gems_100","purchaseTime":1700000000000,"purchaseState":0,"purchaseToken":"opaque-token"}'


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Settings, None, None]:
    """Provide isolated playstore settings scoped to tests."""

    import playstore.config as config_module

    for name in (
        "PLAYSTORE_ONLINE",
        "PLAYSTORE_PUBLIC_KEY",
        "PLAYSTORE_SERVICE_ACCOUNT_KEY_PATH",
        "PLAYSTORE_SERVICE_ACCOUNT_JSON",
        "PLAYSTORE_PACKAGE_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_dir)

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture(scope="session")
def private_key() -> rsa.RSAPrivateKey:
    """RSA-2048 key standing in for the app's Play Console key pair."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_key_b64(private_key: rsa.RSAPrivateKey) -> str:
    """Base64 SubjectPublicKeyInfo, as shown in the Play Console."""
    der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return encode_bytes(der)


@pytest.fixture(scope="session")
def sign(private_key: rsa.RSAPrivateKey) -> Callable[[bytes], str]:
    """Sign bytes the way Google Play does (SHA1withRSA) and base64 the result."""

    def _sign(data: bytes) -> str:
        return encode_bytes(private_key.sign(data, padding.PKCS1v15(), hashes.SHA1()))

    return _sign


@pytest.fixture(scope="session")
def signed_receipt(sign: Callable[[bytes], str]) -> tuple[bytes, str]:
    """A genuine (receipt, signature) pair."""
    return RECEIPT, sign(RECEIPT)


class FakePublisher:
    """Records Developer API calls and returns canned purchase records."""

    def __init__(
        self,
        *,
        product: dict[str, Any] | None = None,
        subscription: dict[str, Any] | None = None,
        error: Exception | None = None,
        online: bool = True,
    ) -> None:
        self.product = product or {"purchaseState": 0, "orderId": "GPA.1"}
        self.subscription = subscription or {"expiryTimeMillis": "1800000000000"}
        self.error = error
        self.online = online
        self.calls: list[tuple[Any, ...]] = []

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def get_product(self, package_name: str, product_id: str, token: str) -> ProductPurchase:
        self._record("get_product", package_name, product_id, token)
        return ProductPurchase.model_validate(self.product)

    def acknowledge_product(
        self,
        package_name: str,
        product_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        self._record("acknowledge_product", package_name, product_id, token, developer_payload)

    def get_subscription(
        self, package_name: str, subscription_id: str, token: str
    ) -> SubscriptionPurchase:
        self._record("get_subscription", package_name, subscription_id, token)
        return SubscriptionPurchase.model_validate(self.subscription)

    def acknowledge_subscription(
        self,
        package_name: str,
        subscription_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        self._record(
            "acknowledge_subscription", package_name, subscription_id, token, developer_payload
        )

    def cancel_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._record("cancel_subscription", package_name, subscription_id, token)

    def refund_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._record("refund_subscription", package_name, subscription_id, token)

    def revoke_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        self._record("revoke_subscription", package_name, subscription_id, token)

    def requires_online(self) -> bool:
        return self.online


@pytest.fixture
def make_publisher() -> Callable[..., FakePublisher]:
    """Factory for in-memory purchase ports."""
    return FakePublisher
