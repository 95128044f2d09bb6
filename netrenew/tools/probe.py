from __future__ import annotations
import logging, shutil, subprocess
from ..core.types import PlatformKind
from .shell import Runner

log = logging.getLogger(__name__)

class CompanionProbe:
    """Checks whether the companion VPN client (Tailscale) is installed."""

    def __init__(self, platform: PlatformKind, *, service: str = "Tailscale", binary: str = "tailscale",
                 timeout: float = 5.0, runner: Runner = subprocess.run) -> None:
        self.platform = platform
        self.service = service
        self.binary = binary
        self.timeout = timeout
        self.runner = runner

    def is_installed(self) -> bool:
        try:
            if self.platform is PlatformKind.WINDOWS:
                # service registry lookup
                p = self.runner(["sc", "query", self.service], capture_output=True,
                                timeout=self.timeout, check=False)
                return p.returncode == 0
            if self.platform is PlatformKind.LINUX:
                return bool(shutil.which(self.binary))
            return False
        except Exception as e:
            log.info("error checking for %s: %s", self.service, e)
            return False
