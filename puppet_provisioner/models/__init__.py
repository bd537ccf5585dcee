"""Data models for the Puppet provisioner."""

from puppet_provisioner.models.command import RemoteCommand
from puppet_provisioner.models.config import DEFAULT_MODULES_PATH, ProvisionerConfig
from puppet_provisioner.models.result import ProvisioningResult, ProvisioningStep
from puppet_provisioner.models.upload import UploadTask, remote_dir_name

__all__ = [
    "DEFAULT_MODULES_PATH",
    "ProvisionerConfig",
    "ProvisioningResult",
    "ProvisioningStep",
    "RemoteCommand",
    "UploadTask",
    "remote_dir_name",
]
