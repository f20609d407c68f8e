"""playstore - Google Play in-app purchase validation.

Offline receipt signature verification plus a thin client for the
Google Play Developer API purchase endpoints.
"""

__version__ = "0.1.0"
__author__ = "playstore Contributors"

from playstore.config import Settings, get_settings
from playstore.signature import (
    KeyDecodeError,
    KeyParseError,
    SignatureDecodeError,
    SignatureStructureError,
    verify_signature,
)

__all__ = [
    "KeyDecodeError",
    "KeyParseError",
    "Settings",
    "SignatureDecodeError",
    "SignatureStructureError",
    "get_settings",
    "verify_signature",
    "__version__",
]
