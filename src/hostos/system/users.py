"""
OS account listing and provisioning.

UserDirectory answers "which accounts exist" from the OS itself on every
call and creates missing tenant accounts. Nothing is cached, so there is a
window between checking for an account and creating it in which another
actor may create it first.

Public operations never raise: failures are logged (to the process logger
and to the task logger, when given) and reported as an empty list or a
False return.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..models.runtime import (
    PlatformKind,
    ProvisioningReport,
    StepOutcome,
    UserAccount,
)
from ..validation import GroupResolutionError, UnsupportedPlatformParse
from .accounts import AccountStrategy, create_account_strategy
from .commands import CommandRunner, get_command_runner
from .platform import current_platform, current_user_name
from .task_log import TaskLog

logger = logging.getLogger(__name__)


def sudo_prefixed_command(tenant_code: str, command: str, sudo_enable: bool) -> str:
    """
    Prefix `command` so it runs as the tenant's OS user.

    The command is returned unchanged when sudo is disabled or no tenant
    is given.
    """
    if not sudo_enable or not tenant_code:
        return command
    return f"sudo -u {tenant_code} {command}"


class UserDirectory:
    """
    Lists and creates OS accounts using the strategy for one platform.

    Args:
        runner: Command runner used for every external command.
        platform: Platform family; detected from the running OS if omitted.
        passwd_path: Account database read on Linux.
        sudo_enable: Whether tenant commands get a sudo prefix.
        current_user: Name of the user this process runs as.

    `passwd_path` and `sudo_enable` come from the host configuration when
    not given.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        platform: Optional[PlatformKind] = None,
        passwd_path: Optional[Path] = None,
        sudo_enable: Optional[bool] = None,
        current_user: Optional[str] = None,
    ):
        if passwd_path is None or sudo_enable is None:
            from ..config import get_config

            accounts = get_config().accounts
            passwd_path = accounts.passwd_path if passwd_path is None else passwd_path
            sudo_enable = accounts.sudo_enable if sudo_enable is None else sudo_enable

        self.runner = runner if runner is not None else get_command_runner()
        self.platform = platform if platform is not None else current_platform()
        self.sudo_enable = sudo_enable
        self._current_user = current_user
        self.strategy: AccountStrategy = create_account_strategy(
            self.platform, self.runner, Path(passwd_path)
        )

    @property
    def current_user(self) -> str:
        if self._current_user is None:
            self._current_user = current_user_name()
        return self._current_user

    def list_users(self, task_logger: Optional[logging.Logger] = None) -> List[UserAccount]:
        """Accounts known to the OS, in the order it reports them; empty on failure."""
        try:
            names = self.strategy.list_user_names()
        except Exception as e:
            TaskLog(logger, task_logger).error(
                f"Failed to list {self.platform.value} users: {type(e).__name__}: {e}",
                exc_info=e,
            )
            return []
        return [UserAccount(name) for name in names]

    def user_exists(self, user_name: str, task_logger: Optional[logging.Logger] = None) -> bool:
        return any(account.name == user_name for account in self.list_users(task_logger))

    def resolve_group(self, task_logger: Optional[logging.Logger] = None) -> str:
        """
        Group that new accounts are added to: the current user's group.

        Returns "" when the command output cannot be parsed.

        Raises:
            CommandExecutionError: If the group query command fails.
        """
        command = self.strategy.group_command(self.current_user)
        output = self.runner.run(command).stdout
        try:
            return self.strategy.parse_group(output)
        except UnsupportedPlatformParse as e:
            TaskLog(logger, task_logger).error(f"Cannot resolve group from '{command}': {e}")
            return ""

    def provision_user(
        self, user_name: str, task_logger: Optional[logging.Logger] = None
    ) -> ProvisioningReport:
        """
        Create an account and record the outcome of every step.

        Steps run in order and stop at the first failure. Steps that already
        succeeded are not undone, so the report may show a partially created
        account.
        """
        log = TaskLog(logger, task_logger)
        report = ProvisioningReport(user_name=user_name, platform=self.platform)

        try:
            group = self.resolve_group(task_logger)
            if not group:
                raise GroupResolutionError(
                    f"No group found for current user {self.current_user} on {self.platform.value}"
                )
            report.group = group
            report.planned_steps = self.strategy.creation_steps(user_name, group)
        except Exception as e:
            report.group_error = f"{type(e).__name__}: {e}"
            log.error(f"Cannot create user {user_name}: {report.group_error}")
            return report

        log.info(f"create {self.platform.value} os user : {user_name}")
        for step in report.planned_steps:
            log.info(f"{step.description} : {step.command}")
            try:
                result = self.runner.run(step.command)
            except Exception as e:
                report.outcomes.append(
                    StepOutcome(step=step, succeeded=False, error=f"{type(e).__name__}: {e}")
                )
                log.error(f"Step '{step.description}' failed for user {user_name}: {e}", exc_info=e)
                break
            report.outcomes.append(StepOutcome(step=step, succeeded=True, output=result.stdout))

        if report.partially_applied:
            done = [o.step.description for o in report.outcomes if o.succeeded]
            log.warning(
                f"User {user_name} is partially provisioned: completed {done}, "
                f"failed '{report.failed_step.step.description}'; nothing was rolled back"
            )
        return report

    def create_user(self, user_name: str, task_logger: Optional[logging.Logger] = None) -> bool:
        """Create an account in the current user's group. False on any failure."""
        try:
            return self.provision_user(user_name, task_logger).succeeded
        except Exception as e:
            TaskLog(logger, task_logger).error(f"Failed to create user {user_name}: {e}", exc_info=e)
            return False

    def ensure_user(self, user_name: str, task_logger: Optional[logging.Logger] = None) -> bool:
        """
        Create the account unless the OS already reports it.

        Returns:
            True if the account existed or was created.
        """
        if self.user_exists(user_name, task_logger):
            return True

        created = self.create_user(user_name, task_logger)
        TaskLog(logger, task_logger).info(
            f"create user {user_name} {'success' if created else 'fail'}"
        )
        return created

    def sudo_prefixed_command(self, tenant_code: str, command: str) -> str:
        return sudo_prefixed_command(tenant_code, command, self.sudo_enable)


_user_directory: Optional[UserDirectory] = None


def get_user_directory() -> UserDirectory:
    """Get the process-wide user directory for the running platform."""
    global _user_directory
    if _user_directory is None:
        _user_directory = UserDirectory()
    return _user_directory
