from __future__ import annotations

class NetrenewError(Exception):
    """Base for errors raised by netrenew itself."""

class ConfigError(NetrenewError):
    """Invalid configuration value, detected at startup."""

class RenewalBusy(NetrenewError):
    """A renewal is already running; the caller should retry later."""
