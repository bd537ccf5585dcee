"""Application settings from environment variables."""

import logging
import os
from dataclasses import dataclass, field

from puppet_provisioner.utils.shell import DEFAULT_ELEVATION_PREFIX

logger = logging.getLogger(__name__)

_ENV_PREFIX = "PUPPET_PROVISIONER_"


@dataclass
class Settings:
    """Process-wide settings read from the environment.

    Per-run options come from the orchestrator's payload instead
    (see ProvisionerConfig).
    """

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    # Remote commands
    elevation_prefix: str = field(default=DEFAULT_ELEVATION_PREFIX)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from PUPPET_PROVISIONER_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        settings = cls(
            log_level=os.getenv(f"{_ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool(f"{_ENV_PREFIX}LOG_COLORS", True),
            elevation_prefix=os.getenv(
                f"{_ENV_PREFIX}ELEVATION_PREFIX", DEFAULT_ELEVATION_PREFIX
            ).strip(),
        )
        logger.debug(
            "Settings loaded: log_level=%s, log_colors=%s, elevation_prefix=%r",
            settings.log_level,
            settings.log_colors,
            settings.elevation_prefix,
        )
        return settings

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable name
            default: Value when unset

        Returns:
            Parsed boolean
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("true", "1", "yes", "on")
