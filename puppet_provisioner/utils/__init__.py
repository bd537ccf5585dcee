"""Utilities for the Puppet provisioner.

Logging helpers live in puppet_provisioner.utils.console.
"""

from puppet_provisioner.utils.shell import (
    apply_command,
    build_command,
    install_command,
    mkdir_command,
    quote_path,
)

__all__ = [
    "apply_command",
    "build_command",
    "install_command",
    "mkdir_command",
    "quote_path",
]
