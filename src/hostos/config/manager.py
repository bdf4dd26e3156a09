"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import HostConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_host_config
from .validators import validate_host_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[HostConfig] = None

# Default location of the main configuration file, relative to this module.
# Overridden with set_config_path() by tests or by the embedding host.
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    The cached configuration is dropped so the next get_config() call
    reads from the new location.

    Args:
        config_path: Path to the config.toml file
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = config_path
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> HostConfig:
    """
    Load and validate the host configuration from a TOML file.

    A missing file yields the built-in defaults, so an installed package
    works without a configuration file next to it.

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not config_path.exists():
        logger.warning(f"Host configuration file not found: {config_path}, using built-in defaults")
        return validate_host_config({})

    try:
        host_data = load_host_config(config_path)
        host_config = validate_host_config(host_data)
        logger.info(
            f"Loaded host configuration: max_cpu_load_avg={host_config.resources.max_cpu_load_avg}, "
            f"reserved_memory_gb={host_config.resources.reserved_memory_gb}, "
            f"sudo_enable={host_config.accounts.sudo_enable}"
        )
        return host_config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> HostConfig:
    """
    Get the global host configuration, loading it if necessary.

    Returns:
        The singleton HostConfig instance

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """Check if configuration has been loaded and cached."""
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "sudo_enable": _CONFIG.accounts.sudo_enable if _CONFIG else None,
    }
