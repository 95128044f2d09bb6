from __future__ import annotations
from ..config import Settings
from .types import CommandSpec, PlatformKind

def _sudo(settings: Settings, *tokens: str) -> CommandSpec:
    if settings.renewal.use_sudo:
        return CommandSpec.of("sudo", *tokens)
    return CommandSpec.of(*tokens)

def renewal_plan(platform: PlatformKind, settings: Settings) -> list[CommandSpec]:
    """
    Ordered lease renewal commands for a platform.

    On Linux the first command is the networkd reconfigure; the dhclient
    release/renew pair that follows is only a fallback for it.
    Unknown platforms get an empty plan.
    """
    dhcp = settings.renewal.mode == "dhcp"
    if platform is PlatformKind.WINDOWS:
        if dhcp:
            return [CommandSpec.of("ipconfig", "/renew"), CommandSpec.of("ipconfig", "/renew6")]
        return [CommandSpec.of("ipconfig", "/renew6")]
    if platform is PlatformKind.LINUX:
        family = ["-4o6"] if dhcp else ["-6"]
        return [
            _sudo(settings, "networkctl", "reconfigure", settings.renewal.interface),
            _sudo(settings, "dhclient", *family, "-r"),
            _sudo(settings, "dhclient", *family),
        ]
    return []

def stops_after_success(platform: PlatformKind, command: CommandSpec) -> bool:
    """True when a successful `command` makes the rest of the renewal plan unnecessary."""
    return platform is PlatformKind.LINUX and "networkctl" in command.tokens

def companion_plan(platform: PlatformKind, settings: Settings) -> list[CommandSpec]:
    if platform is PlatformKind.UNKNOWN:
        return []
    binary = settings.companion.binary
    return [CommandSpec.of(binary, "down"), CommandSpec.of(binary, "up")]
