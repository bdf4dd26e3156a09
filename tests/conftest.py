"""
Pytest configuration and shared fixtures for the hostos test suite.

This module provides fake collaborators (process executor, metrics
provider), configuration files and the other fixtures shared across the
test modules.
"""

import math
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hostos.validation import CommandExecutionError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeExecutor:
    """
    Process executor returning canned output per command line.

    Responses map a space-joined command line to either its stdout, an
    exception to raise, or a callable producing one of those.
    """

    def __init__(self, responses: Optional[Dict[str, object]] = None, default: Optional[str] = None):
        self.responses = dict(responses or {})
        self.default = default
        self.calls: List[List[str]] = []

    def execute(self, argv: Sequence[str]) -> str:
        self.calls.append(list(argv))
        command = " ".join(argv)
        if command in self.responses:
            response = self.responses[command]
        elif self.default is not None:
            response = self.default
        else:
            raise CommandExecutionError(f"Command not found: {argv[0]}", argv)

        if callable(response):
            response = response(list(argv))
        if isinstance(response, Exception):
            raise response
        return response

    def commands(self) -> List[str]:
        return [" ".join(argv) for argv in self.calls]


class FakeMetrics:
    """Metrics provider with fixed readings; an Exception value is raised when read."""

    def __init__(
        self,
        total: Union[int, Exception] = 16 * 1024**3,
        available: Union[int, Exception] = 8 * 1024**3,
        system_load: Union[float, Exception] = 1.0,
        hardware_load: Union[float, Exception] = math.nan,
        cpu: Union[float, Exception] = 0.25,
    ):
        self.total = total
        self.available = available
        self.system_load = system_load
        self.hardware_load = hardware_load
        self.cpu = cpu

    @staticmethod
    def _read(value):
        if isinstance(value, Exception):
            raise value
        return value

    def total_memory(self) -> int:
        return self._read(self.total)

    def available_memory(self) -> int:
        return self._read(self.available)

    def system_load_average(self) -> float:
        return self._read(self.system_load)

    def hardware_load_average(self) -> float:
        return self._read(self.hardware_load)

    def cpu_load(self) -> float:
        return self._read(self.cpu)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_executor():
    """A FakeExecutor with no canned responses."""
    return FakeExecutor()


@pytest.fixture
def fake_metrics():
    """A FakeMetrics with healthy default readings."""
    return FakeMetrics()


@pytest.fixture
def passwd_file(temp_dir):
    """A small colon-delimited account database."""
    path = temp_dir / "passwd"
    path.write_text(
        "root:x:0:0:root:/root:/bin/bash\n"
        "daemon:x:1:1::/usr/sbin:/usr/sbin/nologin\n"
    )
    return path


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_host_config_data():
    """Sample `[host]` table for testing."""
    return {
        "resources": {
            "max_cpu_load_avg": 4.0,
            "reserved_memory_gb": 1.0,
        },
        "accounts": {
            "sudo_enable": False,
            "passwd_path": "/tmp/passwd",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_host_config_data):
    """Write a temporary config.toml for testing."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump({"host": sample_host_config_data}, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration state after each test."""
    from hostos.config import manager

    original_config_path = manager._CONFIG_FILE_PATH

    yield

    manager.set_config_path(original_config_path)
    manager.clear_config_cache()
