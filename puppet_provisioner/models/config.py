"""Provisioner option models."""

from dataclasses import dataclass, field

DEFAULT_MODULES_PATH = "modules"


@dataclass
class ProvisionerConfig:
    """Decoded provisioner options."""

    # Local module directories, uploaded in this order
    modules_paths: list[str] = field(
        default_factory=lambda: [DEFAULT_MODULES_PATH]
    )
    # Run remote commands without the elevation prefix
    prevent_sudo: bool = False
    # Assume Puppet is already present on the machine
    skip_install: bool = False
    # Optional local manifest applied by the Puppet run
    manifest_file: str | None = None

    @property
    def elevate(self) -> bool:
        """Whether remote commands get the elevation prefix."""
        return not self.prevent_sudo
