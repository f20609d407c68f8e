"""Offline verification of Google Play in-app billing signatures.

Google Play signs the purchase JSON (``INAPP_PURCHASE_DATA``) with the app's
private key and hands the client a detached, base64-encoded signature
(``INAPP_DATA_SIGNATURE``). The matching public key is shown in the Play
Console as a base64 X.509 SubjectPublicKeyInfo blob.

The scheme is SHA1withRSA (RSASSA-PKCS1-v1_5 over a SHA-1 digest). SHA-1 is
weak by modern standards but it is what the store signs with; switching to a
different hash makes every genuine signature fail. Keep it.

Verification never touches the network and holds no state, so
:func:`verify_signature` can be called from any number of threads at once.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from playstore.utils.crypto import decode_bytes
from playstore.utils.hashing import compute_sha1_digest


class SignatureStructureError(ValueError):
    """Raised when verification inputs cannot be parsed at all.

    A structural error means validity could not be determined. It is never
    used for a signature that simply does not match.
    """


class KeyDecodeError(SignatureStructureError):
    """The public key is not standard base64."""


class KeyParseError(SignatureStructureError):
    """The decoded public key is not a DER SubjectPublicKeyInfo RSA key."""


class SignatureDecodeError(SignatureStructureError):
    """The signature is not standard base64."""


def load_public_key(public_key_b64: str) -> rsa.RSAPublicKey:
    """Decode and parse a base64 SubjectPublicKeyInfo RSA public key.

    Args:
        public_key_b64: Standard, padded base64 of the DER encoded key

    Returns:
        Parsed RSA public key

    Raises:
        KeyDecodeError: If the key is not valid base64
        KeyParseError: If the bytes are not an RSA SubjectPublicKeyInfo
    """
    try:
        der = decode_bytes(public_key_b64)
    except ValueError as exc:
        raise KeyDecodeError("failed to decode public key") from exc

    try:
        public_key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyParseError("failed to parse public key") from exc

    if not isinstance(public_key, rsa.RSAPublicKey):
        raise KeyParseError("failed to parse public key: not an RSA key")

    # load_der_public_key also accepts bare PKCS#1 keys; only SPKI is valid here.
    spki = public_key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    if spki != der:
        raise KeyParseError("failed to parse public key: not a SubjectPublicKeyInfo")

    return public_key


def verify_with_key(public_key: rsa.RSAPublicKey, receipt: bytes, signature_b64: str) -> bool:
    """Check ``signature_b64`` over ``receipt`` with an already parsed key.

    Raises:
        TypeError: If ``receipt`` is not a bytes-like object
        SignatureDecodeError: If the signature is not valid base64
    """
    if not isinstance(receipt, (bytes, bytearray, memoryview)):
        raise TypeError("receipt must be the exact signed bytes, not text")

    digest = compute_sha1_digest(bytes(receipt))

    try:
        signature = decode_bytes(signature_b64)
    except ValueError as exc:
        raise SignatureDecodeError("failed to decode signature") from exc

    try:
        public_key.verify(signature, digest, padding.PKCS1v15(), Prehashed(hashes.SHA1()))
    except InvalidSignature:
        # Also covers signatures whose length differs from the modulus size.
        return False

    return True


def verify_signature(public_key_b64: str, receipt: bytes, signature_b64: str) -> bool:
    """Verify an in-app billing signature.

    Args:
        public_key_b64: Base64 SubjectPublicKeyInfo of the app's RSA key
        receipt: Exact purchase data bytes that were signed
        signature_b64: Base64 detached signature from the billing client

    Returns:
        True when the signature matches, False when it does not

    Raises:
        KeyDecodeError: If the public key is not valid base64
        KeyParseError: If the public key is unparsable or not RSA
        SignatureDecodeError: If the signature is not valid base64
    """
    public_key = load_public_key(public_key_b64)
    return verify_with_key(public_key, receipt, signature_b64)
