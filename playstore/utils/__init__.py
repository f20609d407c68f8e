"""Utility modules for common operations."""

from playstore.utils.crypto import decode_bytes, encode_bytes
from playstore.utils.hashing import compute_sha1_digest, compute_sha256
from playstore.utils.offline import OfflineModeGate

__all__ = [
    "compute_sha1_digest",
    "compute_sha256",
    "decode_bytes",
    "encode_bytes",
    "OfflineModeGate",
]
