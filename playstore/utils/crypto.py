"""Utilities for base64 handling of key and signature material."""

from __future__ import annotations

import base64


def encode_bytes(data: bytes) -> str:
    """Encode binary data as standard, padded base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_bytes(encoded: str | bytes) -> bytes:
    """Decode standard, padded base64 produced by :func:`encode_bytes`.

    ``\\r`` and ``\\n`` are skipped so line-wrapped input decodes. Any other
    character outside the RFC 4648 standard alphabet (the URL-safe ``-`` and
    ``_``, spaces, tabs) is rejected instead of being discarded, and missing
    padding is an error.

    Raises:
        ValueError: If ``encoded`` is not valid standard base64
    """
    if isinstance(encoded, str):
        # Non-ASCII text raises ValueError here as well.
        encoded = encoded.encode("ascii")
    encoded = bytes(encoded).translate(None, b"\r\n")
    return base64.b64decode(encoded, validate=True)
