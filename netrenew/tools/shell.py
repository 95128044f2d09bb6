from __future__ import annotations
import codecs, locale, logging, re, subprocess
from functools import cached_property
from typing import Callable
from ..core.types import CommandOutcome, CommandSpec, PlatformKind

__all__ = ["CommandExecutor", "resolve_decoder", "CODE_PAGES"]

log = logging.getLogger(__name__)

# Windows console code page -> Python codec
CODE_PAGES = {
    936: "gbk",
    65001: "utf-8",
    950: "big5",
}
FALLBACK_ENCODING = "gbk"
PROBE_TIMEOUT = 5.0
DEFAULT_TIMEOUT = 30.0

Runner = Callable[..., subprocess.CompletedProcess]

def _known_codec(name: str | None) -> str | None:
    if not name:
        return None
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None

def resolve_decoder(platform: PlatformKind, runner: Runner = subprocess.run) -> str:
    """
    Returns the codec name used to decode command output.

    Only Windows needs probing: the console code page depends on the locale,
    so `chcp` is asked for it. Never raises; falls back to GBK.
    """
    if platform is not PlatformKind.WINDOWS:
        return "utf-8"
    try:
        p = runner(["chcp"], capture_output=True, timeout=PROBE_TIMEOUT, check=False)
        text = (p.stdout or b"").decode(FALLBACK_ENCODING, errors="replace")
        m = re.search(r"\d+", text)
        code_page = int(m.group(0)) if m else None
        log.debug("detected code page: %s", code_page)
        if code_page in CODE_PAGES:
            return CODE_PAGES[code_page]
        system = _known_codec(locale.getpreferredencoding(False))
        log.debug("using system encoding: %s", system or FALLBACK_ENCODING)
        return system or FALLBACK_ENCODING
    except Exception as e:
        log.debug("cannot detect console code page, using %s: %s", FALLBACK_ENCODING, e)
        return FALLBACK_ENCODING

class CommandExecutor:
    """
    Runs one external command and reports a CommandOutcome.

    stderr is merged into stdout. The outcome succeeds only when the process
    exits within the timeout with code 0; every failure (including launch
    errors and timeouts) comes back as ``succeeded=False`` instead of raising.
    """

    def __init__(self, platform: PlatformKind, *, dry_run: bool = False,
                 runner: Runner = subprocess.run, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.platform = platform
        self.dry_run = dry_run
        self.runner = runner
        self.timeout = timeout

    @cached_property
    def encoding(self) -> str:
        return resolve_decoder(self.platform, self.runner)

    def execute(self, command: CommandSpec, timeout: float | None = None) -> CommandOutcome:
        if self.dry_run:
            log.info("[dry-run] %s", command)
            return CommandOutcome(True, "[dry-run]")
        limit = self.timeout if timeout is None else timeout
        try:
            p = self.runner(
                command.as_list(),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=limit,
                check=False,
            )
            output = (p.stdout or b"").decode(self.encoding, errors="replace").strip()
            outcome = CommandOutcome(p.returncode == 0, output)
        except subprocess.TimeoutExpired:
            outcome = CommandOutcome(False, f"timed out after {limit:g}s")
        except Exception as e:
            log.error("error executing %s", command, exc_info=True)
            outcome = CommandOutcome(False, str(e) or "unknown error executing command")

        log.debug("executed: %s", command)
        log.debug("encoding: %s", self.encoding)
        log.debug("succeeded=%s output: %s", outcome.succeeded, outcome.output)
        return outcome
