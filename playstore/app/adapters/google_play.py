"""Google Play Developer API adapter for purchase state and lifecycle calls.

Authenticates with a service-account JSON key and talks to the Android
Publisher v3 API through ``googleapiclient``. Each method issues exactly one
request; retries and backoff are left to the caller.

Create the service account at https://console.developers.google.com, grant it
access in the Play Console, and download its JSON key.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from playstore.app.ports.purchases import (
    ProductPurchase,
    ProductPurchasesPort,
    SubscriptionPurchase,
    SubscriptionPurchasesPort,
)

logger = logging.getLogger(__name__)

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"
DEFAULT_TIMEOUT_SECONDS = 10.0


class CredentialsError(ValueError):
    """Raised when a service-account key cannot be loaded."""


class PublisherAPIError(RuntimeError):
    """Raised when a Google Play Developer API call fails."""

    def __init__(self, operation: str, message: str, *, status: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status = status


def _load_credentials(info: dict[str, Any]) -> service_account.Credentials:
    try:
        return service_account.Credentials.from_service_account_info(
            info, scopes=[ANDROID_PUBLISHER_SCOPE]
        )
    except (ValueError, KeyError) as exc:
        raise CredentialsError(f"Invalid service account key: {exc}") from exc


class GooglePlayPublisherAdapter(ProductPurchasesPort, SubscriptionPurchasesPort):
    """Product and subscription purchase operations via the Android Publisher API.

    Example:
        >>> adapter = GooglePlayPublisherAdapter.from_service_account_json(key_bytes)
        >>> purchase = adapter.get_subscription("com.example.app", "monthly", token)
        >>> purchase.expiry_time_millis
        1700000000000
    """

    def __init__(self, service: Any) -> None:
        """Wrap an already built ``androidpublisher`` v3 discovery resource."""
        self._service = service

    @classmethod
    def from_service_account_info(
        cls,
        info: dict[str, Any],
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: httplib2.Http | None = None,
    ) -> "GooglePlayPublisherAdapter":
        """Build an adapter from a parsed service-account key.

        Args:
            info: Parsed service-account JSON key
            timeout: Socket timeout for the default transport (seconds)
            http: Custom transport; ``timeout`` is ignored when given

        Raises:
            CredentialsError: If the key is missing required fields
        """
        credentials = _load_credentials(info)
        transport = http if http is not None else httplib2.Http(timeout=timeout)
        authed_http = google_auth_httplib2.AuthorizedHttp(credentials, http=transport)
        service = build(
            "androidpublisher",
            "v3",
            http=authed_http,
            cache_discovery=False,
        )
        logger.debug(
            "Built androidpublisher client for %s",
            info.get("client_email", "<unknown>"),
        )
        return cls(service)

    @classmethod
    def from_service_account_json(
        cls,
        json_key: bytes | str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: httplib2.Http | None = None,
    ) -> "GooglePlayPublisherAdapter":
        """Build an adapter from the raw JSON key file contents.

        Raises:
            CredentialsError: If the key is not valid JSON or not a service account
        """
        try:
            info = json.loads(json_key)
        except ValueError as exc:
            raise CredentialsError(f"Service account key is not valid JSON: {exc}") from exc
        if not isinstance(info, dict):
            raise CredentialsError("Service account key must be a JSON object")
        return cls.from_service_account_info(info, timeout=timeout, http=http)

    # ------------------------------------------------------------------
    # Product purchases
    # ------------------------------------------------------------------

    def get_product(self, package_name: str, product_id: str, token: str) -> ProductPurchase:
        request = self._service.purchases().products().get(
            packageName=package_name, productId=product_id, token=token
        )
        payload = self._execute("products.get", request)
        return ProductPurchase.model_validate(payload or {})

    def acknowledge_product(
        self,
        package_name: str,
        product_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        request = self._service.purchases().products().acknowledge(
            packageName=package_name,
            productId=product_id,
            token=token,
            body=_acknowledge_body(developer_payload),
        )
        self._execute("products.acknowledge", request)

    # ------------------------------------------------------------------
    # Subscription purchases
    # ------------------------------------------------------------------

    def get_subscription(
        self, package_name: str, subscription_id: str, token: str
    ) -> SubscriptionPurchase:
        request = self._subscriptions().get(
            packageName=package_name, subscriptionId=subscription_id, token=token
        )
        payload = self._execute("subscriptions.get", request)
        return SubscriptionPurchase.model_validate(payload or {})

    def acknowledge_subscription(
        self,
        package_name: str,
        subscription_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        request = self._subscriptions().acknowledge(
            packageName=package_name,
            subscriptionId=subscription_id,
            token=token,
            body=_acknowledge_body(developer_payload),
        )
        self._execute("subscriptions.acknowledge", request)

    def cancel_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        request = self._subscriptions().cancel(
            packageName=package_name, subscriptionId=subscription_id, token=token
        )
        self._execute("subscriptions.cancel", request)

    def refund_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        request = self._subscriptions().refund(
            packageName=package_name, subscriptionId=subscription_id, token=token
        )
        self._execute("subscriptions.refund", request)

    def revoke_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        request = self._subscriptions().revoke(
            packageName=package_name, subscriptionId=subscription_id, token=token
        )
        self._execute("subscriptions.revoke", request)

    def requires_online(self) -> bool:
        return True

    def _subscriptions(self) -> Any:
        return self._service.purchases().subscriptions()

    def _execute(self, operation: str, request: Any) -> Any:
        """Run a prepared request, translating client errors to PublisherAPIError."""
        logger.debug("Calling androidpublisher %s", operation)
        try:
            return request.execute()
        except HttpError as exc:
            status = getattr(exc.resp, "status", None)
            logger.warning("androidpublisher %s returned HTTP %s", operation, status)
            raise PublisherAPIError(
                operation,
                exc.reason,
                status=int(status) if status is not None else None,
            ) from exc
        except (httplib2.HttpLib2Error, OSError) as exc:
            logger.warning("androidpublisher %s transport error: %s", operation, exc)
            raise PublisherAPIError(operation, str(exc)) from exc


def _acknowledge_body(developer_payload: str | None) -> dict[str, str]:
    if developer_payload is None:
        return {}
    return {"developerPayload": developer_payload}
