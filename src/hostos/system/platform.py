"""
Platform detection and process environment queries.

The platform family is derived from the OS name by prefix: names starting
with "Mac" are macOS, names starting with "Windows" are Windows, and every
other name is treated as Linux.
"""

import functools
import getpass
import logging
import os
import platform

from ..models.runtime import PlatformKind

logger = logging.getLogger(__name__)

# platform.system() values that differ from the conventional OS name.
_OS_NAME_ALIASES = {
    "Darwin": "Mac OS X",
}


def get_os_name() -> str:
    """Return the OS name of the running host, e.g. "Linux" or "Mac OS X"."""
    system = platform.system()
    return _OS_NAME_ALIASES.get(system, system)


def classify_platform(os_name: str) -> PlatformKind:
    """Map an OS name string onto a platform family."""
    if os_name.startswith("Mac"):
        return PlatformKind.MACOS
    if os_name.startswith("Windows"):
        return PlatformKind.WINDOWS
    return PlatformKind.LINUX


@functools.lru_cache(maxsize=None)
def current_platform() -> PlatformKind:
    """Platform family of this process, computed once."""
    kind = classify_platform(get_os_name())
    logger.debug(f"Detected platform: {kind.value}")
    return kind


def is_macos() -> bool:
    return current_platform() is PlatformKind.MACOS


def is_windows() -> bool:
    return current_platform() is PlatformKind.WINDOWS


def get_process_id() -> int:
    return os.getpid()


def current_user_name() -> str:
    """OS user name the current process runs as."""
    return getpass.getuser()
