"""
hostos: operating-system abstraction layer for a job-execution host.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Error taxonomy, input validation and error handling
- system: Platform detection, command execution, resource readings and
  OS account management

Usage:
    from hostos import get_resource_monitor, get_user_directory

    if get_resource_monitor().check_resource(max_cpu_load_avg=8.0, reserved_memory_gb=0.3):
        get_user_directory().ensure_user("tenant_a", task_logger=task_logger)
"""

# Main interfaces
from .config import clear_config_cache, get_config, set_config_path
from .system import (
    METRIC_UNAVAILABLE,
    CommandRunner,
    ResourceMonitor,
    UserDirectory,
    current_platform,
    get_resource_monitor,
    get_user_directory,
    run_command,
    sudo_prefixed_command,
)

# Model classes for external use
from .models import (
    HostConfig,
    PlatformKind,
    ProvisioningReport,
    ResourceSnapshot,
    UserAccount,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # System
    "METRIC_UNAVAILABLE",
    "CommandRunner",
    "ResourceMonitor",
    "UserDirectory",
    "current_platform",
    "get_resource_monitor",
    "get_user_directory",
    "run_command",
    "sudo_prefixed_command",
    # Models
    "HostConfig",
    "PlatformKind",
    "ProvisioningReport",
    "ResourceSnapshot",
    "UserAccount",
]
