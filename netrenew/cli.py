from __future__ import annotations
import argparse, logging
from . import __version__
from .config import load_settings
from .core.orchestrator import RenewalRunner
from .core.plans import companion_plan, renewal_plan
from .core.types import join_commands
from .tools.errors import NetrenewError
from .tools.logs import log_event, setup_logging
from .web.app import build_components

log = logging.getLogger(__name__)

def _argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("netrenew", description="netrenew - lease renewal and Tailscale restart daemon")
    ap.add_argument("--config", default="config", help="Config directory or TOML file.")
    ap.add_argument("--log-level", default="warning", help="debug|info|warning|error")
    ap.add_argument("--version", action="store_true", help="Print the version and exit.")
    sub = ap.add_subparsers(dest="command")

    sub.add_parser("status", help="Show platform and Tailscale presence.")
    sub.add_parser("plan", help="Print the commands a renewal would run.")
    renew = sub.add_parser("renew", help="Renew the lease locally and restart Tailscale.")
    renew.add_argument("--dry-run", action="store_true", help="Print commands instead of running them.")
    serve = sub.add_parser("serve", help="Start the HTTP daemon.")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return ap

def build_parser() -> argparse.ArgumentParser:
    return _argparser()

def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if not args.command:
        ap.print_help()
        return 0

    setup_logging(args.log_level)
    overrides = {"dry_run": True} if getattr(args, "dry_run", False) else None
    try:
        settings = load_settings(args.config, overrides)
    except NetrenewError as e:
        print(f"ERR: {e}")
        return 2

    if args.command == "serve":
        from .web.server import serve
        serve(settings, host=args.host, port=args.port, log_level=args.log_level)
        return 0

    platform, executor, probe = build_components(settings)
    if args.command == "status":
        print(f"platform = {platform.value}")
        print(f"tailscale_installed = {probe.is_installed()}")
        return 0

    if args.command == "plan":
        print("=== LEASE RENEWAL ===")
        print(join_commands(renewal_plan(platform, settings)) or "(nothing to run on this platform)")
        print("\n=== TAILSCALE ===")
        print(join_commands(companion_plan(platform, settings)) or "(nothing to run on this platform)")
        return 0

    report = RenewalRunner(platform, settings, executor, probe).run()
    print(report.message)
    try:
        log_event(settings, f"renew (cli): {report.message}")
    except OSError as e:
        log.warning("cannot write event log: %s", e)
    return 0 if report.lease.succeeded else 1

if __name__ == "__main__":
    raise SystemExit(main())
