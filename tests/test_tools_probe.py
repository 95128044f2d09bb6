import subprocess
from netrenew.core.types import PlatformKind
from netrenew.tools.probe import CompanionProbe

def _runner(returncode=0, exc=None, calls=None):
    def run(cmd, **kwargs):
        if calls is not None:
            calls.append((cmd, kwargs))
        if exc is not None:
            raise exc
        return subprocess.CompletedProcess(cmd, returncode, stdout=b"", stderr=b"")
    return run

def test_windows_queries_service_registry():
    calls = []
    probe = CompanionProbe(PlatformKind.WINDOWS, runner=_runner(0, calls=calls))
    assert probe.is_installed() is True
    cmd, kwargs = calls[0]
    assert cmd == ["sc", "query", "Tailscale"]
    assert kwargs["timeout"] == 5.0

def test_windows_missing_service():
    probe = CompanionProbe(PlatformKind.WINDOWS, runner=_runner(1060))
    assert probe.is_installed() is False

def test_windows_probe_timeout_means_absent():
    probe = CompanionProbe(PlatformKind.WINDOWS, runner=_runner(exc=subprocess.TimeoutExpired(["sc"], 5.0)))
    assert probe.is_installed() is False

def test_linux_path_lookup(monkeypatch):
    monkeypatch.setattr("netrenew.tools.probe.shutil.which", lambda name: "/usr/bin/tailscale" if name == "tailscale" else None)
    assert CompanionProbe(PlatformKind.LINUX).is_installed() is True
    assert CompanionProbe(PlatformKind.LINUX, binary="other").is_installed() is False

def test_linux_lookup_error_means_absent(monkeypatch):
    def boom(name):
        raise OSError("PATH unreadable")
    monkeypatch.setattr("netrenew.tools.probe.shutil.which", boom)
    assert CompanionProbe(PlatformKind.LINUX).is_installed() is False

def test_unknown_platform_is_never_installed():
    calls = []
    assert CompanionProbe(PlatformKind.UNKNOWN, runner=_runner(0, calls=calls)).is_installed() is False
    assert calls == []
