"""Port interfaces for the playstore application layer.

These protocol interfaces define contracts for adapters.
Application services depend on these ports, never on concrete implementations.
"""

__all__ = [
    "ProductPurchase",
    "ProductPurchasesPort",
    "ReceiptVerifierPort",
    "SubscriptionPurchase",
    "SubscriptionPurchasesPort",
]

from playstore.app.ports.purchases import (
    ProductPurchase,
    ProductPurchasesPort,
    SubscriptionPurchase,
    SubscriptionPurchasesPort,
)
from playstore.app.ports.receipt import ReceiptVerifierPort
