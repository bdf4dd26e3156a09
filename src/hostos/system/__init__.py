"""
System interaction for the host OS layer.

This module provides:

- Platform detection and process environment queries
- Command tokenizing and execution through a pluggable process executor
- Resource readings (load, CPU, memory) and admission control
- OS account listing and provisioning with one strategy per platform
"""

# Platform detection
from .platform import (
    classify_platform,
    current_platform,
    current_user_name,
    get_os_name,
    get_process_id,
    is_macos,
    is_windows,
)

# Command execution
from .commands import (
    CommandRunner,
    ProcessExecutor,
    SubprocessExecutor,
    execute_shell,
    get_command_runner,
    run_command,
    tokenize,
)

# Resource monitoring
from .resources import (
    METRIC_UNAVAILABLE,
    MetricsProvider,
    PsutilMetricsProvider,
    ResourceMonitor,
    get_resource_monitor,
    round_half_up,
)

# Account management
from .accounts import AccountStrategy, create_account_strategy
from .users import UserDirectory, get_user_directory, sudo_prefixed_command

__all__ = [
    # Platform
    "classify_platform",
    "current_platform",
    "current_user_name",
    "get_os_name",
    "get_process_id",
    "is_macos",
    "is_windows",
    # Commands
    "CommandRunner",
    "ProcessExecutor",
    "SubprocessExecutor",
    "execute_shell",
    "get_command_runner",
    "run_command",
    "tokenize",
    # Resources
    "METRIC_UNAVAILABLE",
    "MetricsProvider",
    "PsutilMetricsProvider",
    "ResourceMonitor",
    "get_resource_monitor",
    "round_half_up",
    # Accounts
    "AccountStrategy",
    "create_account_strategy",
    "UserDirectory",
    "get_user_directory",
    "sudo_prefixed_command",
]
