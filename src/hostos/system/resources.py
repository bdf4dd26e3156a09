"""
Host resource readings and admission control.

All readings are rounded half-up to two decimals. When a reading cannot be
obtained on the current platform or runtime, METRIC_UNAVAILABLE (-1) is
returned instead of raising, so that it stays distinguishable from a real
zero.
"""

import logging
import math
import os
import threading
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol

import psutil

from ..models.runtime import ResourceSnapshot
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)

METRIC_UNAVAILABLE = -1.0
BYTES_PER_GB = 1024 ** 3

_TWO_PLACES = Decimal("0.01")


def round_half_up(value: float) -> float:
    """
    Round to two decimals, halves away from zero (0.125 -> 0.13).

    The shortest repr of the float is rounded, not its exact binary value, so
    2.675 gives 2.68 where binary-exact formatting would give 2.67.
    """
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


class MetricsProvider(Protocol):
    """Source of raw hardware and OS metrics."""

    def total_memory(self) -> int:
        """Total physical memory in bytes."""

    def available_memory(self) -> int:
        """Available physical memory in bytes."""

    def system_load_average(self) -> float:
        """OS-reported 1-minute load average. May raise when unsupported."""

    def hardware_load_average(self) -> float:
        """Secondary load reading. NaN when unsupported."""

    def cpu_load(self) -> float:
        """Instantaneous system CPU load as a fraction in [0, 1]. NaN when unsupported."""


class PsutilMetricsProvider:
    """MetricsProvider backed by psutil and os.getloadavg."""

    def __init__(self) -> None:
        # The first cpu_percent() call has no reference sample and returns 0.0
        psutil.cpu_percent(interval=None)

    def total_memory(self) -> int:
        return psutil.virtual_memory().total

    def available_memory(self) -> int:
        return psutil.virtual_memory().available

    def system_load_average(self) -> float:
        if not hasattr(os, "getloadavg"):
            raise OSError("os.getloadavg() is not available on this platform")
        return os.getloadavg()[0]

    def hardware_load_average(self) -> float:
        try:
            return psutil.getloadavg()[0]
        except (OSError, AttributeError, psutil.Error) as e:
            logger.debug(f"psutil load average unavailable: {type(e).__name__}: {e}")
            return math.nan

    def cpu_load(self) -> float:
        try:
            return psutil.cpu_percent(interval=None) / 100.0
        except (OSError, psutil.Error) as e:
            logger.debug(f"psutil CPU load unavailable: {type(e).__name__}: {e}")
            return math.nan


def _is_valid_load(value: float) -> bool:
    return math.isfinite(value) and value >= 0


def _rounded(value: float) -> float:
    """round_half_up(), or METRIC_UNAVAILABLE for NaN and infinities."""
    if not math.isfinite(value):
        return METRIC_UNAVAILABLE
    return round_half_up(value)


class ResourceMonitor:
    """
    Reads CPU load and memory figures and makes admission decisions.

    The metrics provider is created lazily on first use. Every call makes a
    fresh query; nothing is cached or smoothed between calls.
    """

    def __init__(self, metrics: Optional[MetricsProvider] = None):
        self._metrics = metrics
        self._lock = threading.Lock()

    @property
    def metrics(self) -> MetricsProvider:
        if self._metrics is None:
            with self._lock:
                if self._metrics is None:
                    self._metrics = PsutilMetricsProvider()
        return self._metrics

    def memory_usage(self) -> float:
        """Fraction of physical memory in use, or -1 if it cannot be read."""
        try:
            total = self.metrics.total_memory()
            available = self.metrics.available_memory()
        except Exception as e:
            handle_error(e, "reading memory usage", ErrorSeverity.WARNING, reraise=False, logger=logger)
            return METRIC_UNAVAILABLE

        if total <= 0:
            logger.warning(f"Total physical memory reported as {total} bytes, memory usage unavailable")
            return METRIC_UNAVAILABLE
        return _rounded((total - available) / total)

    def available_physical_memory_size(self) -> float:
        """Available physical memory in GB."""
        try:
            available = self.metrics.available_memory()
        except Exception as e:
            handle_error(e, "reading available memory", ErrorSeverity.WARNING, reraise=False, logger=logger)
            return METRIC_UNAVAILABLE
        return _rounded(available / BYTES_PER_GB)

    def total_physical_memory_size(self) -> float:
        """Total physical memory in GB."""
        try:
            total = self.metrics.total_memory()
        except Exception as e:
            handle_error(e, "reading total memory", ErrorSeverity.WARNING, reraise=False, logger=logger)
            return METRIC_UNAVAILABLE
        return _rounded(total / BYTES_PER_GB)

    def load_average(self) -> float:
        """
        System load average.

        The OS reading is tried first. If it raises or reports an invalid
        value, the hardware reading is used instead; -1 is returned only
        when neither source gives a usable number.
        """
        try:
            load = self.metrics.system_load_average()
            if _is_valid_load(load):
                return round_half_up(load)
            logger.warning(f"OS load average reported as {load}, trying hardware load average")
        except Exception as e:
            logger.warning(
                f"Failed to read OS load average ({type(e).__name__}: {e}), trying hardware load average"
            )

        try:
            load = self.metrics.hardware_load_average()
        except Exception as e:
            handle_error(e, "reading hardware load average", ErrorSeverity.WARNING, reraise=False, logger=logger)
            return METRIC_UNAVAILABLE

        if not _is_valid_load(load):
            return METRIC_UNAVAILABLE
        return round_half_up(load)

    def cpu_usage(self) -> float:
        """System CPU load as a fraction, or -1 when not reported."""
        try:
            usage = self.metrics.cpu_load()
        except Exception as e:
            handle_error(e, "reading CPU usage", ErrorSeverity.WARNING, reraise=False, logger=logger)
            return METRIC_UNAVAILABLE

        return _rounded(usage)

    def snapshot(self) -> ResourceSnapshot:
        """Take every reading once and return them together."""
        return ResourceSnapshot(
            memory_usage=self.memory_usage(),
            available_memory_gb=self.available_physical_memory_size(),
            total_memory_gb=self.total_physical_memory_size(),
            load_average=self.load_average(),
            cpu_usage=self.cpu_usage(),
        )

    def check_resource(self, max_cpu_load_avg: float, reserved_memory_gb: float) -> bool:
        """
        Decide whether the host can accept new work.

        Args:
            max_cpu_load_avg: Reject when the load average is above this.
            reserved_memory_gb: Reject when available memory (GB) is below this.

        Returns:
            False to reject new work, True to accept it.
        """
        load_average = self.load_average()
        available_memory = self.available_physical_memory_size()

        if load_average > max_cpu_load_avg or available_memory < reserved_memory_gb:
            logger.warning(
                f"Current cpu load average {load_average} is too high or available memory "
                f"{available_memory}G is too low, under max_cpu_load_avg={max_cpu_load_avg} "
                f"and reserved_memory_gb={reserved_memory_gb}G"
            )
            return False
        return True

    def check_configured_resource(self) -> bool:
        """check_resource() with the thresholds from the host configuration."""
        from ..config import get_config

        resources = get_config().resources
        return self.check_resource(resources.max_cpu_load_avg, resources.reserved_memory_gb)


_resource_monitor: Optional[ResourceMonitor] = None


def get_resource_monitor() -> ResourceMonitor:
    """Get the process-wide resource monitor."""
    global _resource_monitor
    if _resource_monitor is None:
        _resource_monitor = ResourceMonitor()
    return _resource_monitor
