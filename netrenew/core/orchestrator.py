from __future__ import annotations
import logging, threading
from dataclasses import dataclass
from ..config import Settings
from ..tools.errors import RenewalBusy
from ..tools.probe import CompanionProbe
from ..tools.shell import CommandExecutor
from .plans import companion_plan, renewal_plan, stops_after_success
from .types import PlanResult, PlatformKind, StepReport

log = logging.getLogger(__name__)

COMPANION_LABEL = "Tailscale: "
COMPANION_SKIPPED = "Tailscale is not installed, skipping restart"
COMPANION_ABSENT = "Tailscale not installed"

class LeaseRenewalOrchestrator:
    def __init__(self, platform: PlatformKind, settings: Settings, executor: CommandExecutor) -> None:
        self.platform = platform
        self.settings = settings
        self.executor = executor

    def renew_lease(self) -> PlanResult:
        result = PlanResult()
        for command in renewal_plan(self.platform, self.settings):
            outcome = self.executor.execute(command, timeout=self.settings.renewal.command_timeout)
            result.steps.append(StepReport(command, outcome))
            if outcome.succeeded and stops_after_success(self.platform, command):
                break
        return result

class CompanionRestartOrchestrator:
    def __init__(self, platform: PlatformKind, settings: Settings, executor: CommandExecutor,
                 probe: CompanionProbe) -> None:
        self.platform = platform
        self.settings = settings
        self.executor = executor
        self.probe = probe

    def restart_companion(self) -> PlanResult:
        if not self.probe.is_installed():
            return PlanResult.skipped(COMPANION_SKIPPED)
        result = PlanResult()
        # stop then start, both always run
        for command in companion_plan(self.platform, self.settings):
            outcome = self.executor.execute(command, timeout=self.settings.companion.command_timeout)
            result.steps.append(StepReport(command, outcome, label=COMPANION_LABEL))
        return result

@dataclass(frozen=True)
class RenewalReport:
    lease: PlanResult
    companion: PlanResult | None

    @property
    def message(self) -> str:
        companion = str(self.companion) if self.companion is not None else COMPANION_ABSENT
        return f"Lease renewal result:\n{self.lease}\n\nTailscale result:\n{companion}"

class RenewalRunner:
    """
    Runs lease renewal followed by the companion restart.

    At most one run is in flight at a time; a concurrent call raises
    RenewalBusy instead of launching overlapping commands.
    """

    def __init__(self, platform: PlatformKind, settings: Settings, executor: CommandExecutor,
                 probe: CompanionProbe) -> None:
        self.probe = probe
        self.lease = LeaseRenewalOrchestrator(platform, settings, executor)
        self.companion = CompanionRestartOrchestrator(platform, settings, executor, probe)
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def run(self) -> RenewalReport:
        if not self._lock.acquire(blocking=False):
            raise RenewalBusy("renewal already in progress")
        try:
            lease = self.lease.renew_lease()
            log.info("lease renewal finished:\n%s", lease)
            companion = self.companion.restart_companion() if self.probe.is_installed() else None
            return RenewalReport(lease, companion)
        finally:
            self._lock.release()
