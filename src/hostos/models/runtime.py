"""
Runtime data models.

This module contains the value types exchanged between the platform detector,
the command runner, the resource monitor and the user directory.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class PlatformKind(Enum):
    """Operating-system family the host is running on."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"


@dataclass(frozen=True)
class CommandInvocation:
    """
    A command line split into argument tokens.

    Tokens are produced by whitespace splitting only; an argument that
    contains whitespace cannot be represented.
    """

    argv: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    """Captured standard output of a finished command, kept verbatim."""

    stdout: str


@dataclass(frozen=True)
class ResourceSnapshot:
    """
    Point-in-time view of host resources.

    Every field is rounded half-up to two decimals. A value of -1 means the
    metric is not available on this platform or runtime.
    """

    memory_usage: float
    available_memory_gb: float
    total_memory_gb: float
    load_average: float
    cpu_usage: float


@dataclass(frozen=True)
class UserAccount:
    """An OS account as reported by the platform's account directory."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ProvisioningStep:
    """One command of a multi-step account creation sequence."""

    description: str
    command: str


@dataclass(frozen=True)
class StepOutcome:
    """Result of executing a single provisioning step."""

    step: ProvisioningStep
    succeeded: bool
    output: str = ""
    error: Optional[str] = None


@dataclass
class ProvisioningReport:
    """
    Record of an account creation attempt.

    Steps run in order and the sequence stops at the first failure, so a
    report can show an earlier step's effect persisting after a later one
    failed. Nothing is rolled back.
    """

    user_name: str
    platform: PlatformKind
    group: str = ""
    group_error: Optional[str] = None
    planned_steps: List[ProvisioningStep] = field(default_factory=list)
    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True only when a group was resolved and every planned step ran."""
        if self.group_error is not None or not self.planned_steps:
            return False
        return len(self.outcomes) == len(self.planned_steps) and all(
            outcome.succeeded for outcome in self.outcomes
        )

    @property
    def partially_applied(self) -> bool:
        """True when at least one step took effect but a later step failed."""
        return (
            any(outcome.succeeded for outcome in self.outcomes)
            and not self.succeeded
        )

    @property
    def failed_step(self) -> Optional[StepOutcome]:
        for outcome in self.outcomes:
            if not outcome.succeeded:
                return outcome
        return None
