"""
Configuration validation utilities.

This module turns the raw `[host]` table into validated configuration
dataclasses, filling in defaults for anything left out.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import psutil

from ..models.config import (
    DEFAULT_PASSWD_PATH,
    DEFAULT_RESERVED_MEMORY_GB,
    AccountConfig,
    HostConfig,
    ResourceConfig,
)
from ..validation import (
    ValidationError,
    validate_bool,
    validate_non_empty_string,
    validate_positive_float,
)

logger = logging.getLogger(__name__)


def default_max_cpu_load_avg() -> float:
    """Twice the logical CPU count, or 2.0 when the count is unknown."""
    return float((psutil.cpu_count(logical=True) or 1) * 2)


def validate_resource_config(resource_data: Dict[str, Any]) -> ResourceConfig:
    """
    Validate and create a ResourceConfig from the `[host.resources]` table.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(resource_data, dict):
        raise ValidationError("host.resources must be a table", field_name="host.resources")

    max_cpu_load_avg = resource_data.get("max_cpu_load_avg")
    if max_cpu_load_avg is None:
        max_cpu_load_avg = default_max_cpu_load_avg()
        logger.debug(f"host.resources.max_cpu_load_avg not set, using {max_cpu_load_avg}")
    max_cpu_load_avg = validate_positive_float(
        max_cpu_load_avg,
        min_value=0.01,
        field_name="host.resources.max_cpu_load_avg",
    )

    reserved_memory_gb = validate_positive_float(
        resource_data.get("reserved_memory_gb", DEFAULT_RESERVED_MEMORY_GB),
        min_value=0.0,
        field_name="host.resources.reserved_memory_gb",
    )

    return ResourceConfig(
        max_cpu_load_avg=max_cpu_load_avg,
        reserved_memory_gb=reserved_memory_gb,
    )


def validate_account_config(account_data: Dict[str, Any]) -> AccountConfig:
    """
    Validate and create an AccountConfig from the `[host.accounts]` table.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(account_data, dict):
        raise ValidationError("host.accounts must be a table", field_name="host.accounts")

    sudo_enable = validate_bool(
        account_data.get("sudo_enable", True),
        field_name="host.accounts.sudo_enable",
    )
    passwd_path = validate_non_empty_string(
        account_data.get("passwd_path", str(DEFAULT_PASSWD_PATH)),
        field_name="host.accounts.passwd_path",
    )

    return AccountConfig(sudo_enable=sudo_enable, passwd_path=Path(passwd_path))


def validate_host_config(host_data: Dict[str, Any]) -> HostConfig:
    """
    Validate and create a HostConfig from the raw `[host]` table.

    Args:
        host_data: Raw host configuration from TOML

    Returns:
        Validated HostConfig instance

    Raises:
        ValidationError: If validation fails
    """
    return HostConfig(
        resources=validate_resource_config(host_data.get("resources", {})),
        accounts=validate_account_config(host_data.get("accounts", {})),
    )
