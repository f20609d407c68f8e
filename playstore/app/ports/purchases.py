"""Purchase port interfaces for the Google Play Developer API.

Operations are split by capability: one-time products and subscriptions.
Every method maps to a single remote call keyed by package name, product or
subscription id, and purchase token.
"""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class _PublisherRecord(BaseModel):
    """Base for purchase records returned by the publisher API.

    Field names follow Python conventions; the API's camelCase names are kept
    as aliases. Fields this package does not model are preserved as extras.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    kind: str | None = None
    order_id: str | None = Field(default=None, alias="orderId")
    developer_payload: str | None = Field(default=None, alias="developerPayload")
    acknowledgement_state: int | None = Field(default=None, alias="acknowledgementState")
    purchase_type: int | None = Field(default=None, alias="purchaseType")
    obfuscated_external_account_id: str | None = Field(
        default=None, alias="obfuscatedExternalAccountId"
    )
    obfuscated_external_profile_id: str | None = Field(
        default=None, alias="obfuscatedExternalProfileId"
    )

    def is_acknowledged(self) -> bool:
        """Return True when the purchase has been acknowledged."""
        return self.acknowledgement_state == 1


class ProductPurchase(_PublisherRecord):
    """State of a one-time in-app product purchase."""

    purchase_time_millis: int | None = Field(default=None, alias="purchaseTimeMillis")
    purchase_state: int | None = Field(default=None, alias="purchaseState")  # 0 purchased, 1 canceled, 2 pending
    consumption_state: int | None = Field(default=None, alias="consumptionState")
    product_id: str | None = Field(default=None, alias="productId")
    purchase_token: str | None = Field(default=None, alias="purchaseToken")
    quantity: int | None = None
    region_code: str | None = Field(default=None, alias="regionCode")
    refundable_quantity: int | None = Field(default=None, alias="refundableQuantity")


class SubscriptionPurchase(_PublisherRecord):
    """State of a subscription purchase."""

    start_time_millis: int | None = Field(default=None, alias="startTimeMillis")
    expiry_time_millis: int | None = Field(default=None, alias="expiryTimeMillis")
    auto_resume_time_millis: int | None = Field(default=None, alias="autoResumeTimeMillis")
    auto_renewing: bool | None = Field(default=None, alias="autoRenewing")
    price_currency_code: str | None = Field(default=None, alias="priceCurrencyCode")
    price_amount_micros: int | None = Field(default=None, alias="priceAmountMicros")
    country_code: str | None = Field(default=None, alias="countryCode")
    payment_state: int | None = Field(default=None, alias="paymentState")
    cancel_reason: int | None = Field(default=None, alias="cancelReason")
    user_cancellation_time_millis: int | None = Field(
        default=None, alias="userCancellationTimeMillis"
    )
    linked_purchase_token: str | None = Field(default=None, alias="linkedPurchaseToken")

    def is_active(self, now_millis: int) -> bool:
        """Return True when the subscription has not expired at ``now_millis``."""
        return self.expiry_time_millis is not None and self.expiry_time_millis > now_millis


class ProductPurchasesPort(Protocol):
    """Port interface for one-time product purchases.

    Adapters: Google Play Developer API (purchases.products).

    Side effects: One network round trip per call.
    """

    def get_product(self, package_name: str, product_id: str, token: str) -> ProductPurchase:
        """Fetch the purchase and consumption status of a product.

        Args:
            package_name: Application package, e.g. ``com.example.app``
            product_id: In-app product SKU
            token: Purchase token supplied by the billing client

        Returns:
            Current purchase record
        """
        ...

    def acknowledge_product(
        self,
        package_name: str,
        product_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        """Acknowledge a product purchase."""
        ...

    def requires_online(self) -> bool:
        """Return True when adapter needs network access."""
        ...


class SubscriptionPurchasesPort(Protocol):
    """Port interface for subscription purchases.

    Adapters: Google Play Developer API (purchases.subscriptions).

    Side effects: One network round trip per call.
    """

    def get_subscription(
        self, package_name: str, subscription_id: str, token: str
    ) -> SubscriptionPurchase:
        """Fetch whether a subscription purchase is valid and its expiry time."""
        ...

    def acknowledge_subscription(
        self,
        package_name: str,
        subscription_id: str,
        token: str,
        *,
        developer_payload: str | None = None,
    ) -> None:
        """Acknowledge a subscription purchase."""
        ...

    def cancel_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        """Cancel a subscription; it stays valid until its expiry time."""
        ...

    def refund_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        """Refund the current period; the subscription stays valid and keeps recurring."""
        ...

    def revoke_subscription(self, package_name: str, subscription_id: str, token: str) -> None:
        """Refund and revoke immediately; access ends and it stops recurring."""
        ...

    def requires_online(self) -> bool:
        """Return True when adapter needs network access."""
        ...
