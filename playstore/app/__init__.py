"""Application layer for playstore.

This layer orchestrates purchase validation without direct network I/O.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "PublisherNotConfiguredError",
    "PurchaseService",
]

from playstore.app.purchase_service import PublisherNotConfiguredError, PurchaseService
