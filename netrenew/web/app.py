from __future__ import annotations
import asyncio, hmac, logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from functools import partial
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from ..config import Settings
from ..core.orchestrator import RenewalRunner
from ..core.platform import resolve_platform
from ..core.types import PlatformKind
from ..tools.errors import RenewalBusy
from ..tools.logs import log_event
from ..tools.probe import CompanionProbe
from ..tools.shell import CommandExecutor
from .models import RenewalRequest, RenewalResponse, StatusResponse

log = logging.getLogger(__name__)

def build_components(settings: Settings, platform: PlatformKind | None = None) -> tuple[PlatformKind, CommandExecutor, CompanionProbe]:
    platform = platform or resolve_platform(settings.general.platform)
    executor = CommandExecutor(platform, dry_run=settings.general.dry_run,
                               timeout=settings.renewal.command_timeout)
    probe = CompanionProbe(platform, service=settings.companion.service, binary=settings.companion.binary,
                           timeout=settings.companion.probe_timeout)
    return platform, executor, probe

def create_app(settings: Settings, *, platform: PlatformKind | None = None,
               executor: CommandExecutor | None = None, probe: CompanionProbe | None = None) -> FastAPI:
    detected, default_executor, default_probe = build_components(settings, platform)
    executor = executor or default_executor
    probe = probe or default_probe
    pool = ThreadPoolExecutor(max_workers=settings.server.workers, thread_name_prefix="netrenew")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        pool.shutdown(wait=False)

    app = FastAPI(title="netrenew", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.settings = settings
    app.state.platform = detected
    app.state.probe = probe
    app.state.runner = RenewalRunner(detected, settings, executor, probe)
    app.state.pool = pool

    def _respond(status: int, success: bool, message: str) -> JSONResponse:
        body = RenewalResponse(success=success, message=message, platform=detected.value)
        return JSONResponse(status_code=status, content=body.model_dump())

    async def _offload(fn):
        # blocking process waits and file writes run on the pool, not on the event loop
        return await asyncio.get_running_loop().run_in_executor(pool, fn)

    async def _record(message: str) -> None:
        try:
            await _offload(partial(log_event, settings, message))
        except OSError as e:
            log.warning("cannot write event log: %s", e)

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/", response_class=PlainTextResponse)
    def home() -> str:
        return (
            f"Lease Renewal Service - Platform: {detected.value}\n"
            "Use POST /renew to trigger lease renewal"
        )

    @app.get("/status")
    async def status() -> dict:
        installed = await _offload(probe.is_installed)
        return StatusResponse(platform=detected.value, tailscale_installed=installed).model_dump()

    @app.post("/renew")
    async def renew(request: Request) -> JSONResponse:
        try:
            req = RenewalRequest.model_validate(await request.json())
        except Exception as e:
            log.info("error processing request: %s", e)
            return _respond(500, False, f"error processing request: {e}")

        # the secret is checked on every request and never logged
        if not hmac.compare_digest(req.secret.encode("utf-8"), settings.security.secret.encode("utf-8")):
            log.warning("rejected renewal request from %s: invalid secret",
                        request.client.host if request.client else "?")
            await _record("renew rejected: invalid secret")
            return _respond(401, False, "invalid secret")

        log.info("received renewal request action=%s platform=%s", req.action, detected.value)
        try:
            report = await _offload(app.state.runner.run)
            message = report.message
        except RenewalBusy as e:
            log.info("renewal request refused: %s", e)
            return _respond(409, False, str(e))
        except Exception as e:
            log.error("error processing request", exc_info=True)
            await _record(f"renew failed: {e}")
            return _respond(500, False, f"error processing request: {e}")

        log.info("execution result:\n%s", message)
        await _record(f"renew ok: {message}")
        return _respond(200, True, message)

    return app
