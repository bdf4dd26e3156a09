"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`:
resource admission thresholds and account provisioning policy.
"""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PASSWD_PATH = Path("/etc/passwd")
DEFAULT_RESERVED_MEMORY_GB = 0.3


@dataclass(frozen=True)
class ResourceConfig:
    """
    Admission-control thresholds, loaded from `[host.resources]`.
    """

    # Work is rejected when the load average is strictly above this value.
    max_cpu_load_avg: float
    # Work is rejected when available memory (GB) is strictly below this value.
    reserved_memory_gb: float = DEFAULT_RESERVED_MEMORY_GB


@dataclass(frozen=True)
class AccountConfig:
    """
    Account provisioning policy, loaded from `[host.accounts]`.
    """

    # Whether tenant commands are wrapped with `sudo -u <tenant>`.
    sudo_enable: bool = True
    # Colon-delimited account database read on Linux.
    passwd_path: Path = DEFAULT_PASSWD_PATH


@dataclass(frozen=True)
class HostConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    resources: ResourceConfig
    accounts: AccountConfig = field(default_factory=AccountConfig)
