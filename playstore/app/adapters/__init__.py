"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .google_play import CredentialsError, GooglePlayPublisherAdapter, PublisherAPIError
from .rsa_verifier import RSAReceiptVerifier

__all__ = [
    "CredentialsError",
    "GooglePlayPublisherAdapter",
    "PublisherAPIError",
    "RSAReceiptVerifier",
]
