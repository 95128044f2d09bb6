from __future__ import annotations
import platform
from .types import PlatformKind

def detect_platform(system_name: str | None = None) -> PlatformKind:
    """Maps an OS identification string (default: platform.system()) to a PlatformKind."""
    name = (platform.system() if system_name is None else system_name).lower()
    if "windows" in name:
        return PlatformKind.WINDOWS
    if "linux" in name:
        return PlatformKind.LINUX
    return PlatformKind.UNKNOWN

def resolve_platform(mode: str = "auto") -> PlatformKind:
    # "auto" detects; "windows"/"linux" force the kind (validated by config)
    if mode == "auto":
        return detect_platform()
    return PlatformKind(mode)
