"""Services for the Puppet provisioner."""

from puppet_provisioner.services.channel import AsyncSSHChannel
from puppet_provisioner.services.provisioner import (
    REMOTE_MANIFEST_PATH,
    REMOTE_MODULE_PATH,
    REMOTE_STAGING_PATH,
    Provisioner,
)
from puppet_provisioner.services.runner import (
    create_remote_directory,
    drain_lines,
    run_command,
)
from puppet_provisioner.services.uploader import (
    iter_upload_tasks,
    remote_path_for,
    upload_directory,
    upload_file,
)

__all__ = [
    "AsyncSSHChannel",
    "Provisioner",
    "REMOTE_MANIFEST_PATH",
    "REMOTE_MODULE_PATH",
    "REMOTE_STAGING_PATH",
    "create_remote_directory",
    "drain_lines",
    "iter_upload_tasks",
    "remote_path_for",
    "run_command",
    "upload_directory",
    "upload_file",
]
