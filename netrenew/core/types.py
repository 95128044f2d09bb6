from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

SUCCESS_MARK = "✓"
FAILURE_MARK = "✗"
DEFAULT_FAILURE = "command execution failed"

class PlatformKind(str, Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    UNKNOWN = "unknown"

@dataclass(frozen=True)
class CommandSpec:
    """One external program invocation: program name followed by its arguments."""
    tokens: tuple[str, ...]

    @classmethod
    def of(cls, *tokens: str) -> "CommandSpec":
        return cls(tuple(tokens))

    def as_list(self) -> list[str]:
        return list(self.tokens)

    def __str__(self) -> str:
        return " ".join(self.tokens)

@dataclass(frozen=True)
class CommandOutcome:
    succeeded: bool
    output: str = ""

@dataclass(frozen=True)
class StepReport:
    command: CommandSpec
    outcome: CommandOutcome
    label: str = ""

    @property
    def line(self) -> str:
        if self.outcome.succeeded:
            return f"{SUCCESS_MARK} {self.label}{self.command}"
        detail = self.outcome.output or DEFAULT_FAILURE
        return f"{FAILURE_MARK} {self.label}{self.command}: {detail}"

@dataclass
class PlanResult:
    steps: list[StepReport] = field(default_factory=list)
    # set when the plan was skipped entirely
    notice: str | None = None

    @classmethod
    def skipped(cls, notice: str) -> "PlanResult":
        return cls(notice=notice)

    @property
    def succeeded(self) -> bool:
        return bool(self.steps) and any(s.outcome.succeeded for s in self.steps)

    def lines(self) -> list[str]:
        if self.notice is not None:
            return [self.notice]
        return [s.line for s in self.steps]

    def __str__(self) -> str:
        return "\n".join(self.lines())

def join_commands(commands: Iterable[CommandSpec]) -> str:
    return "\n".join(str(c) for c in commands)
