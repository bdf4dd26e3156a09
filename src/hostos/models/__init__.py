"""
Data models for the host OS abstraction layer.

Configuration Models:
- Admission-control thresholds
- Account provisioning policy

Runtime Models:
- Platform family and command invocations
- Resource snapshots
- User accounts and provisioning reports
"""

# Configuration models
from .config import AccountConfig, HostConfig, ResourceConfig

# Runtime models
from .runtime import (
    CommandInvocation,
    CommandResult,
    PlatformKind,
    ProvisioningReport,
    ProvisioningStep,
    ResourceSnapshot,
    StepOutcome,
    UserAccount,
)

__all__ = [
    # Configuration
    "AccountConfig",
    "HostConfig",
    "ResourceConfig",
    # Runtime
    "CommandInvocation",
    "CommandResult",
    "PlatformKind",
    "ProvisioningReport",
    "ProvisioningStep",
    "ResourceSnapshot",
    "StepOutcome",
    "UserAccount",
]
