"""
Command tokenizing and execution.

Commands are given as plain command lines, split on whitespace runs and
handed to a process executor. There is no quoting support and no timeout:
a command that never exits blocks the caller, so callers that need a
deadline must impose one themselves.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from ..models.runtime import CommandInvocation, CommandResult
from ..validation import CommandExecutionError, ErrorSeverity, handle_subprocess_error

logger = logging.getLogger(__name__)


class ProcessExecutor(Protocol):
    """Runs an argv to completion and returns its standard output."""

    def execute(self, argv: Sequence[str]) -> str:
        ...


class SubprocessExecutor:
    """
    Process executor backed by `subprocess.run`.

    A non-zero exit status, a missing executable or any other launch
    failure raises CommandExecutionError.
    """

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = cwd

    def execute(self, argv: Sequence[str]) -> str:
        if not argv:
            raise CommandExecutionError("Cannot execute an empty command", argv)

        logger.debug(f"Executing command: '{' '.join(argv)}'")
        try:
            process = subprocess.run(
                list(argv),
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandExecutionError(f"Command not found: {argv[0]}", argv) from e
        except OSError as e:
            raise CommandExecutionError(
                f"Failed to launch '{argv[0]}': {type(e).__name__}: {e}", argv
            ) from e

        if process.returncode != 0:
            stderr = (process.stderr or "").strip()
            raise CommandExecutionError(
                f"Command '{' '.join(argv)}' exited with status {process.returncode}: {stderr}",
                argv,
                returncode=process.returncode,
                stderr=stderr,
            )
        return process.stdout


def tokenize(command_line: str) -> CommandInvocation:
    """Split a command line on whitespace runs. An empty line gives an empty argv."""
    return CommandInvocation(argv=tuple(command_line.split()))


class CommandRunner:
    """
    Tokenizes command lines and runs them through a process executor.

    Standard output is returned verbatim, without trimming.
    """

    def __init__(self, executor: Optional[ProcessExecutor] = None):
        self.executor = executor if executor is not None else SubprocessExecutor()

    def run(self, command: Union[str, CommandInvocation]) -> CommandResult:
        """
        Run a command line or an already tokenized invocation.

        Raises:
            CommandExecutionError: If the command is empty, cannot be
                launched, or the executor reports a fault.
        """
        invocation = tokenize(command) if isinstance(command, str) else command
        if not invocation.argv:
            raise CommandExecutionError("Cannot execute an empty command", invocation.argv)

        try:
            stdout = self.executor.execute(invocation.argv)
        except CommandExecutionError:
            raise
        except Exception as e:
            handle_subprocess_error(e, str(invocation), severity=ErrorSeverity.ERROR, reraise=False, logger=logger)
            raise CommandExecutionError(
                f"Unexpected error while running '{invocation}': {type(e).__name__}: {e}",
                invocation.argv,
            ) from e
        return CommandResult(stdout=stdout)


_command_runner: Optional[CommandRunner] = None


def get_command_runner() -> CommandRunner:
    """Get the process-wide command runner."""
    global _command_runner
    if _command_runner is None:
        _command_runner = CommandRunner()
    return _command_runner


def run_command(command_line: str) -> str:
    """Run a whitespace-separated command line and return its standard output."""
    return get_command_runner().run(command_line).stdout


def execute_shell(argv: Sequence[str]) -> str:
    """Run an already tokenized command and return its standard output."""
    return get_command_runner().run(CommandInvocation(argv=tuple(argv))).stdout
