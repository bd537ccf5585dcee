"""Puppet provisioner: install Puppet, upload modules and run it remotely."""

from puppet_provisioner.errors import (
    ConfigurationError,
    ProvisionerError,
    RemoteExecutionError,
    RemoteStartError,
    TransferError,
)
from puppet_provisioner.models import ProvisionerConfig, ProvisioningResult, ProvisioningStep
from puppet_provisioner.services import AsyncSSHChannel, Provisioner

__all__ = [
    "AsyncSSHChannel",
    "ConfigurationError",
    "Provisioner",
    "ProvisionerConfig",
    "ProvisionerError",
    "ProvisioningResult",
    "ProvisioningStep",
    "RemoteExecutionError",
    "RemoteStartError",
    "TransferError",
]
