from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
import tomllib, os
from .tools.errors import ConfigError

PLATFORM_MODES = ["auto", "windows", "linux"]
RENEWAL_MODES = ["ipv6", "dhcp"]
DEFAULT_SECRET = "DEFAULT_SECRET_CHANGE_ME"

@dataclass(frozen=True)
class General:
    platform: str = "auto"
    dry_run: bool = False
    log_dir: str = "data/logs"

@dataclass(frozen=True)
class Server:
    host: str = "0.0.0.0"
    port: int = 37080
    workers: int = 4

@dataclass(frozen=True)
class Security:
    secret: str = DEFAULT_SECRET

@dataclass(frozen=True)
class Renewal:
    interface: str = "eth0"
    mode: str = "ipv6"
    use_sudo: bool = False
    command_timeout: float = 30.0

@dataclass(frozen=True)
class Companion:
    service: str = "Tailscale"
    binary: str = "tailscale"
    command_timeout: float = 15.0
    probe_timeout: float = 5.0

@dataclass(frozen=True)
class Settings:
    general: General = General()
    server: Server = Server()
    security: Security = Security()
    renewal: Renewal = Renewal()
    companion: Companion = Companion()

# env var -> (section, key, cast)
ENV_VARS = {
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "WORKERS": ("server", "workers", int),
    "LEASE_RENEWAL_SECRET": ("security", "secret", str),
    "LINUX_INTERFACE_NAME": ("renewal", "interface", str),
    "RENEWAL_MODE": ("renewal", "mode", str),
    "RENEWAL_USE_SUDO": ("renewal", "use_sudo", lambda v: v.strip().lower() in {"1", "true", "yes", "on"}),
    "PLATFORM_OVERRIDE": ("general", "platform", str),
    "LOG_DIR": ("general", "log_dir", str),
}

def _load_toml_if_exists(path: Path) -> dict:
    if path.is_file():
        with path.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"invalid TOML in {path}: {e}") from None
    return {}

def _read_config_toml(config_path: Path) -> dict:
    """Accepts either a TOML file or a directory holding defaults.toml."""
    if config_path.is_dir():
        return _load_toml_if_exists(config_path / "defaults.toml")
    return _load_toml_if_exists(config_path)

def _filter_for_dataclass(cls, data: dict) -> dict:
    """Keeps only the keys the dataclass knows about."""
    allowed = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in allowed}

def _apply_env(raw: dict, environ) -> None:
    for name, (section, key, cast) in ENV_VARS.items():
        value = environ.get(name)
        if value is None or value == "":
            continue
        try:
            raw.setdefault(section, {})[key] = cast(value)
        except ValueError:
            raise ConfigError(f"invalid value for {name}: {value!r}") from None

# annotation (as a string, see __future__ import) -> accepted value types
_FIELD_TYPES = {"str": (str,), "int": (int,), "float": (int, float), "bool": (bool,)}

def _check_types(s: Settings) -> None:
    for section in fields(s):
        values = getattr(s, section.name)
        for f in fields(values):
            value = getattr(values, f.name)
            expected = _FIELD_TYPES[f.type]
            # bool is an int subclass; only bool fields accept it
            if not isinstance(value, expected) or (isinstance(value, bool) and f.type != "bool"):
                raise ConfigError(f"{section.name}.{f.name} must be {f.type}, got {type(value).__name__}: {value!r}")

def _validate(s: Settings) -> None:
    _check_types(s)
    if s.general.platform not in PLATFORM_MODES:
        raise ConfigError(f"unknown platform override: {s.general.platform!r} (expected one of {PLATFORM_MODES})")
    if s.renewal.mode not in RENEWAL_MODES:
        raise ConfigError(f"unknown renewal mode: {s.renewal.mode!r} (expected one of {RENEWAL_MODES})")
    if not 0 < s.server.port < 65536:
        raise ConfigError(f"port out of range: {s.server.port}")
    if s.server.workers < 1:
        raise ConfigError("workers must be at least 1")
    if min(s.renewal.command_timeout, s.companion.command_timeout, s.companion.probe_timeout) <= 0:
        raise ConfigError("timeouts must be positive")
    if not s.renewal.interface.strip():
        raise ConfigError("renewal interface name is empty")

def load_settings(config: str | None = None, overrides: dict | None = None, *, environ=None) -> Settings:
    """
    Builds the immutable settings once at startup.

    Precedence: config/defaults.toml < environment < overrides.
    ``overrides`` maps "section.key" (or a bare General key) to a value.
    """
    config_path = Path(config) if config else Path("config")
    raw = _read_config_toml(config_path)
    for name in [f.name for f in fields(Settings)]:
        if not isinstance(raw.get(name, {}), dict):
            raise ConfigError(f"[{name}] must be a table in {config_path}")
    _apply_env(raw, os.environ if environ is None else environ)

    for k, v in (overrides or {}).items():
        section, _, key = k.rpartition(".")
        raw.setdefault(section or "general", {})[key] = v

    s = Settings(
        general=General(**_filter_for_dataclass(General, raw.get("general"))),
        server=Server(**_filter_for_dataclass(Server, raw.get("server"))),
        security=Security(**_filter_for_dataclass(Security, raw.get("security"))),
        renewal=Renewal(**_filter_for_dataclass(Renewal, raw.get("renewal"))),
        companion=Companion(**_filter_for_dataclass(Companion, raw.get("companion"))),
    )
    _validate(s)
    return s

def uses_default_secret(settings: Settings) -> bool:
    return settings.security.secret == DEFAULT_SECRET
