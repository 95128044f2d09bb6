from __future__ import annotations
from pathlib import Path
import pytest
from netrenew.config import Settings, General, Security, Renewal
from netrenew.core.types import CommandOutcome, CommandSpec

SECRET = "s3cret-Value"

class SpyExecutor:
    """Records every command and answers from a {command text: outcome} table."""
    def __init__(self, outcomes: dict[str, CommandOutcome] | None = None, default: CommandOutcome | None = None):
        self.outcomes = dict(outcomes or {})
        self.default = default or CommandOutcome(False, "")
        self.calls: list[str] = []
        self.timeouts: list[float | None] = []

    def execute(self, command: CommandSpec, timeout: float | None = None) -> CommandOutcome:
        self.calls.append(str(command))
        self.timeouts.append(timeout)
        return self.outcomes.get(str(command), self.default)

class FakeProbe:
    def __init__(self, installed: bool):
        self.installed = installed
        self.calls = 0

    def is_installed(self) -> bool:
        self.calls += 1
        return self.installed

def make_settings(tmp_path: Path, **renewal) -> Settings:
    return Settings(
        general=General(log_dir=str(tmp_path / "logs")),
        security=Security(secret=SECRET),
        renewal=Renewal(**renewal),
    )

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)
