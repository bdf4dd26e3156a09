"""
Per-platform account strategies.

Each platform family lists accounts, finds the group of the current user
and spells out account creation in its own way. One strategy is chosen per
UserDirectory through the dispatch table at the bottom of this module.

The Windows parsers follow the layout of `net user` output literally and
are fragile against other layouts; see the notes on each method.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Type

from ..models.config import DEFAULT_PASSWD_PATH
from ..models.runtime import PlatformKind, ProvisioningStep
from ..validation import UnsupportedPlatformParse
from .commands import CommandRunner

logger = logging.getLogger(__name__)


def split_output_lines(output: str) -> List[str]:
    """Split command output on newlines, dropping trailing empty lines."""
    lines = output.split("\n")
    while lines and lines[-1] == "":
        lines.pop()
    return lines


class AccountStrategy(ABC):
    """
    Base class for platform account handling.

    Subclasses list the accounts known to the OS and describe the command
    sequence that creates a new account in a given group.
    """

    platform: PlatformKind

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @abstractmethod
    def list_user_names(self) -> List[str]:
        """
        Return account names in the order the OS reports them.

        Raises:
            OSError: If the account database cannot be read.
            CommandExecutionError: If the listing command fails.
            UnsupportedPlatformParse: If the listing cannot be parsed.
        """

    def group_command(self, current_user: str) -> str:
        """Command line whose output names the current user's group."""
        return "groups"

    def parse_group(self, output: str) -> str:
        """First whitespace-separated token of the group listing, or ""."""
        tokens = output.split()
        return tokens[0] if tokens else ""

    @abstractmethod
    def creation_steps(self, user_name: str, group: str) -> List[ProvisioningStep]:
        """Ordered commands that create `user_name` as a member of `group`."""


class LinuxAccountStrategy(AccountStrategy):
    """Reads the colon-delimited account database and uses `useradd`."""

    platform = PlatformKind.LINUX

    def __init__(self, runner: CommandRunner, passwd_path: Path = DEFAULT_PASSWD_PATH):
        super().__init__(runner)
        self.passwd_path = Path(passwd_path)

    def list_user_names(self) -> List[str]:
        names = []
        with open(self.passwd_path, encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if ":" in line:
                    names.append(line.split(":", 1)[0])
        return names

    def creation_steps(self, user_name: str, group: str) -> List[ProvisioningStep]:
        return [
            ProvisioningStep("create linux user", f"sudo useradd -g {group} {user_name}"),
        ]


class MacAccountStrategy(AccountStrategy):
    """Lists accounts with `dscl` and creates them with `sysadminctl`."""

    platform = PlatformKind.MACOS

    list_command = "dscl . list /users"

    def list_user_names(self) -> List[str]:
        output = self.runner.run(self.list_command).stdout
        if not output:
            return []
        return split_output_lines(output)

    def creation_steps(self, user_name: str, group: str) -> List[ProvisioningStep]:
        # Two separate commands: a failure in the second leaves the account
        # in place without the group membership.
        return [
            ProvisioningStep(
                "create mac user",
                f"sudo sysadminctl -addUser {user_name} -password {user_name}",
            ),
            ProvisioningStep(
                "append user to group",
                f"sudo dseditgroup -o edit -a {user_name} -t user {group}",
            ),
        ]


class WindowsAccountStrategy(AccountStrategy):
    """Parses `net user` tables and creates accounts with `net user /add`."""

    platform = PlatformKind.WINDOWS

    list_command = "net user"
    # Line of `net user <name>` output holding the group memberships.
    group_line_index = 22
    # Rows at the end of `net user` output that are not part of the table.
    summary_rows = 2

    @staticmethod
    def find_table_start(lines: List[str]) -> int:
        """
        Index of the first row after the dashed header separator, or 0.

        A row counts as the separator when it starts with '-' and the
        character at the row's *own line index* is also '-'. This is not a
        column-by-column check: it accepts rows that are not all dashes and
        fails with an IndexError when the separator is shorter than its
        line index.
        """
        for i, line in enumerate(lines):
            if not line:
                continue

            count = 0
            if line[0] == "-":
                for _ in range(len(line)):
                    if line[i] == "-":
                        count += 1

            if count == len(line):
                return i + 1
        return 0

    def list_user_names(self) -> List[str]:
        output = self.runner.run(self.list_command).stdout
        lines = split_output_lines(output)
        try:
            start = self.find_table_start(lines)
        except IndexError as e:
            raise UnsupportedPlatformParse(
                f"Could not locate the account table in '{self.list_command}' output"
            ) from e

        names = []
        for row in lines[start:len(lines) - self.summary_rows]:
            names.extend(row.split())
        return names

    def group_command(self, current_user: str) -> str:
        return f"net user {current_user}"

    def parse_group(self, output: str) -> str:
        """
        Second token of the fixed group-membership line, without a leading '*'.

        Raises:
            UnsupportedPlatformParse: If the output is shorter than expected.
        """
        lines = split_output_lines(output)
        try:
            group = lines[self.group_line_index].split()[1]
        except IndexError as e:
            raise UnsupportedPlatformParse(
                f"Group line {self.group_line_index} missing or malformed in 'net user' output"
            ) from e
        return group[1:] if group.startswith("*") else group

    def creation_steps(self, user_name: str, group: str) -> List[ProvisioningStep]:
        return [
            ProvisioningStep("create windows user", f"net user {user_name} /add"),
            ProvisioningStep(
                "append user to group", f"net localgroup {group} {user_name} /add"
            ),
        ]


# Platforms without a dedicated strategy are handled as Linux.
_STRATEGIES: Dict[PlatformKind, Type[AccountStrategy]] = {
    PlatformKind.LINUX: LinuxAccountStrategy,
    PlatformKind.MACOS: MacAccountStrategy,
    PlatformKind.WINDOWS: WindowsAccountStrategy,
    PlatformKind.OTHER: LinuxAccountStrategy,
}


def create_account_strategy(
    platform: PlatformKind,
    runner: CommandRunner,
    passwd_path: Path = DEFAULT_PASSWD_PATH,
) -> AccountStrategy:
    """Build the account strategy for a platform family."""
    strategy_class = _STRATEGIES[platform]
    logger.debug(f"Using {strategy_class.__name__} for platform {platform.value}")
    if issubclass(strategy_class, LinuxAccountStrategy):
        return strategy_class(runner, passwd_path)
    return strategy_class(runner)
