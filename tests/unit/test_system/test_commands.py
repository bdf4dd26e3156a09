"""
Unit tests for command tokenizing and execution.
"""

import logging

import pytest
from unittest.mock import Mock, patch

from hostos.models import CommandInvocation, CommandResult
from hostos.system import commands
from hostos.system.commands import CommandRunner, SubprocessExecutor, tokenize
from hostos.validation import CommandExecutionError


@pytest.mark.unit
class TestTokenize:
    """Test cases for whitespace tokenizing."""

    def test_splits_on_whitespace_runs(self):
        assert tokenize("sudo  useradd\t-g staff   alice").argv == (
            "sudo", "useradd", "-g", "staff", "alice",
        )

    def test_empty_line_gives_empty_argv(self):
        assert tokenize("").argv == ()
        assert tokenize("   ").argv == ()

    def test_no_quote_handling(self):
        """Quotes are kept as literal characters of their token."""
        assert tokenize('net user "John Smith"').argv == ("net", "user", '"John', 'Smith"')

    def test_invocation_string_form(self):
        assert str(tokenize("dscl . list /users")) == "dscl . list /users"


@pytest.mark.unit
class TestCommandRunner:
    """Test cases for CommandRunner."""

    def test_run_command_line(self, fake_executor):
        fake_executor.responses["dscl . list /users"] = "root\nalice\n"
        runner = CommandRunner(fake_executor)

        result = runner.run("dscl  .  list /users")

        assert result == CommandResult(stdout="root\nalice\n")
        assert fake_executor.calls == [["dscl", ".", "list", "/users"]]

    def test_run_invocation(self, fake_executor):
        fake_executor.responses["groups"] = "staff admin\n"
        runner = CommandRunner(fake_executor)

        result = runner.run(CommandInvocation(argv=("groups",)))

        assert result.stdout == "staff admin\n"

    def test_output_is_not_trimmed(self, fake_executor):
        fake_executor.responses["echo"] = "  padded \n\n"
        assert CommandRunner(fake_executor).run("echo").stdout == "  padded \n\n"

    def test_empty_command_raises(self, fake_executor):
        with pytest.raises(CommandExecutionError):
            CommandRunner(fake_executor).run("")
        assert fake_executor.calls == []

    def test_executor_error_propagates(self, fake_executor):
        fake_executor.responses["groups"] = CommandExecutionError("boom", ["groups"], returncode=1)

        with pytest.raises(CommandExecutionError) as exc_info:
            CommandRunner(fake_executor).run("groups")
        assert exc_info.value.returncode == 1

    def test_unexpected_executor_error_is_wrapped(self, fake_executor):
        fake_executor.responses["groups"] = RuntimeError("executor crashed")

        with pytest.raises(CommandExecutionError) as exc_info:
            CommandRunner(fake_executor).run("groups")
        assert exc_info.value.argv == ("groups",)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_unexpected_executor_error_is_logged(self, fake_executor, caplog):
        fake_executor.responses["id -gn"] = RuntimeError("executor crashed")

        with caplog.at_level(logging.ERROR, logger="hostos.system.commands"):
            with pytest.raises(CommandExecutionError):
                CommandRunner(fake_executor).run("id -gn")
        assert "Error in subprocess command 'id -gn': executor crashed" in caplog.text

    def test_expected_executor_error_is_not_logged_here(self, fake_executor, caplog):
        fake_executor.responses["groups"] = CommandExecutionError("boom", ["groups"], returncode=1)

        with caplog.at_level(logging.DEBUG, logger="hostos.system.commands"):
            with pytest.raises(CommandExecutionError):
                CommandRunner(fake_executor).run("groups")
        assert "subprocess command" not in caplog.text


@pytest.mark.unit
class TestSubprocessExecutor:
    """Test cases for the subprocess-backed executor."""

    @patch("hostos.system.commands.subprocess.run")
    def test_returns_stdout_on_success(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="staff\n", stderr="")

        assert SubprocessExecutor().execute(["groups"]) == "staff\n"
        args, kwargs = mock_run.call_args
        assert args[0] == ["groups"]
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    @patch("hostos.system.commands.subprocess.run")
    def test_non_zero_exit_raises(self, mock_run):
        mock_run.return_value = Mock(returncode=9, stdout="", stderr="useradd: group 'x' does not exist\n")

        with pytest.raises(CommandExecutionError) as exc_info:
            SubprocessExecutor().execute(["useradd", "-g", "x", "alice"])

        assert exc_info.value.returncode == 9
        assert "does not exist" in exc_info.value.stderr

    @patch("hostos.system.commands.subprocess.run", side_effect=FileNotFoundError("no such file"))
    def test_missing_executable_raises(self, _mock_run):
        with pytest.raises(CommandExecutionError, match="Command not found: dscl"):
            SubprocessExecutor().execute(["dscl", ".", "list", "/users"])

    @patch("hostos.system.commands.subprocess.run", side_effect=PermissionError("denied"))
    def test_launch_failure_raises(self, _mock_run):
        with pytest.raises(CommandExecutionError) as exc_info:
            SubprocessExecutor().execute(["net", "user"])
        assert exc_info.value.returncode is None

    def test_empty_argv_raises(self):
        with pytest.raises(CommandExecutionError):
            SubprocessExecutor().execute([])

    def test_real_command_round_trip(self):
        """Runs the interpreter itself so the test works on any platform."""
        import sys

        output = SubprocessExecutor().execute([sys.executable, "-c", "print('ok')"])
        assert output.strip() == "ok"


@pytest.mark.unit
class TestModuleHelpers:
    """Test cases for the module-level convenience functions."""

    def test_run_command_and_execute_shell_share_runner(self, fake_executor, monkeypatch):
        fake_executor.responses["groups"] = "staff\n"
        monkeypatch.setattr(commands, "_command_runner", CommandRunner(fake_executor))

        assert commands.run_command("groups") == "staff\n"
        assert commands.execute_shell(["groups"]) == "staff\n"
        assert fake_executor.calls == [["groups"], ["groups"]]

    def test_get_command_runner_is_singleton(self, monkeypatch):
        monkeypatch.setattr(commands, "_command_runner", None)
        assert commands.get_command_runner() is commands.get_command_runner()
