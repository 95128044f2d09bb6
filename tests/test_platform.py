import pytest
from netrenew.core.platform import detect_platform, resolve_platform
from netrenew.core.types import PlatformKind

@pytest.mark.parametrize("name,expected", [
    ("Windows", PlatformKind.WINDOWS),
    ("Windows 11", PlatformKind.WINDOWS),
    ("Linux", PlatformKind.LINUX),
    ("GNU/LINUX", PlatformKind.LINUX),
    ("Darwin", PlatformKind.UNKNOWN),
    ("", PlatformKind.UNKNOWN),
])
def test_detect_platform_substring_match(name, expected):
    assert detect_platform(name) is expected

def test_detect_platform_uses_host(monkeypatch):
    monkeypatch.setattr("netrenew.core.platform.platform.system", lambda: "Linux")
    assert detect_platform() is PlatformKind.LINUX

def test_resolve_platform_override():
    assert resolve_platform("windows") is PlatformKind.WINDOWS
    assert resolve_platform("linux") is PlatformKind.LINUX
