from __future__ import annotations
import argparse, logging
import uvicorn
from ..config import load_settings, uses_default_secret
from ..tools.errors import NetrenewError
from ..tools.logs import setup_logging
from .app import create_app

log = logging.getLogger("netrenew")

def serve(settings, *, host: str | None = None, port: int | None = None, log_level: str = "info") -> None:
    app = create_app(settings)
    log.info("starting lease renewal service")
    log.info("platform: %s", app.state.platform.value)
    log.info("listening on %s:%s", host or settings.server.host, port or settings.server.port)
    if uses_default_secret(settings):
        log.warning("using the default secret; set LEASE_RENEWAL_SECRET before exposing this service")
    uvicorn.run(app, host=host or settings.server.host, port=int(port or settings.server.port), log_level=log_level)

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="netrenew HTTP daemon (FastAPI)")
    parser.add_argument("--config", type=str, default="config", help="Config directory or TOML file (default: ./config)")
    parser.add_argument("--host", type=str, default=None, help="Host (default: server.host / HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: server.port / PORT, 37080)")
    parser.add_argument("--log-level", type=str, default="info", help="debug|info|warning|error")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    try:
        settings = load_settings(args.config)
    except NetrenewError as e:
        print(f"ERR: {e}")
        return 2
    serve(settings, host=args.host, port=args.port, log_level=args.log_level)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
