"""Host platform detection."""

import os
from enum import Enum
from typing import Mapping, Optional


class HostPlatform(str, Enum):
    """Where the app is running, as far as exporting is concerned."""
    NATIVE = "native"  # Android (Termux): share sheet + clipboard
    WEB = "web"        # Browser or desktop: file download


def detect_platform(
    override: str = "auto",
    environ: Optional[Mapping[str, str]] = None,
) -> HostPlatform:
    """
    Resolve the host platform.

    An explicit override ("native" / "web") wins. Otherwise an Android
    Termux environment counts as native and everything else as web.
    """
    if override != "auto":
        return HostPlatform(override)

    env = os.environ if environ is None else environ
    if "TERMUX_VERSION" in env or "com.termux" in env.get("PREFIX", ""):
        return HostPlatform.NATIVE
    return HostPlatform.WEB
