"""Configuration module for the Puppet provisioner.

- Settings: Process-wide environment variable configuration
- decode_options / validate_config: Per-run options from the orchestrator
"""

from puppet_provisioner.config.options import decode_options, validate_config
from puppet_provisioner.config.settings import Settings

__all__ = ["Settings", "decode_options", "validate_config"]
