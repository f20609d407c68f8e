"""Hashing utilities for deterministic receipt hashing."""

import hashlib


def compute_sha1_digest(content: bytes) -> bytes:
    """Compute the raw SHA-1 digest of content in a single pass.

    Google Play signs purchase data with SHA1withRSA, so this digest is fixed
    by the signer and cannot be swapped for a stronger hash.

    Args:
        content: Exact bytes that were signed

    Returns:
        20-byte digest
    """
    return hashlib.sha1(content).digest()


def compute_sha256(content: bytes) -> str:
    """Compute SHA-256 hash of content.

    Args:
        content: Bytes to hash

    Returns:
        Hexadecimal hash string
    """
    return hashlib.sha256(content).hexdigest()
