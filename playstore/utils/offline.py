"""Online mode switch for calls that leave the process.

Receipt signatures are checked locally and never need the network. Developer
API calls do, and stay blocked until online mode is switched on through the
``--online`` flag, ``Settings.online`` or the ``PLAYSTORE_ONLINE`` variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from playstore.config import Settings

ONLINE_ENV_VAR = "PLAYSTORE_ONLINE"
_OFF_VALUES = frozenset({"", "0", "false", "no", "off"})


def env_requests_online() -> bool:
    """Return True when ``PLAYSTORE_ONLINE`` is set to anything but an off value."""
    value = os.getenv(ONLINE_ENV_VAR)
    return value is not None and value.strip().lower() not in _OFF_VALUES


@dataclass(frozen=True, slots=True)
class OfflineModeGate:
    """Decides whether an adapter may reach the Google Play backend."""

    online_enabled: bool

    @classmethod
    def from_settings(cls, settings: "Settings") -> "OfflineModeGate":
        return cls(online_enabled=settings.online or env_requests_online())

    def is_online_enabled(self) -> bool:
        return self.online_enabled

    def require(self, feature: str) -> None:
        """Raise RuntimeError unless online mode is on."""

        if not self.online_enabled:
            raise RuntimeError(
                f"{feature} requires online mode. "
                f"Pass `--online` or set {ONLINE_ENV_VAR}=1."
            )

    def ensure_supported(self, *, feature: str, requires_online: bool) -> None:
        """Check an adapter's ``requires_online()`` answer against the gate."""

        if requires_online:
            self.require(feature)
