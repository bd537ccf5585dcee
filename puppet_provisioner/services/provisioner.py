"""Puppet provisioning sequence.

Steps run strictly in order and the first failure ends the run:

1. validate   local module paths (all problems reported together)
2. install    ``gem install puppet`` unless skip_install is set
3. stage      create the remote module root
4. upload     each module path in configured order, then the manifest
5. execute    ``puppet apply`` against the uploaded modules

Nothing is retried and nothing already created remotely is rolled back.
"""

import logging
import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from puppet_provisioner.config import Settings, decode_options, validate_config
from puppet_provisioner.errors import ProvisionerError
from puppet_provisioner.models import (
    ProvisionerConfig,
    ProvisioningResult,
    ProvisioningStep,
    remote_dir_name,
)
from puppet_provisioner.protocols import OutputSink, RemoteChannel
from puppet_provisioner.services.runner import create_remote_directory, run_command
from puppet_provisioner.services.uploader import (
    remote_path_for,
    upload_directory,
    upload_file,
)
from puppet_provisioner.utils.shell import apply_command, build_command, install_command

logger = logging.getLogger(__name__)

REMOTE_STAGING_PATH = "/tmp/provision/puppet"
REMOTE_MODULE_PATH = f"{REMOTE_STAGING_PATH}/modules"
REMOTE_MANIFEST_PATH = f"{REMOTE_STAGING_PATH}/manifest"


class Provisioner:
    """Install Puppet, upload modules and run Puppet on one machine.

    Example:
        provisioner = Provisioner()
        provisioner.prepare({"modules_paths": ["modules"]})
        result = await provisioner.provision(ConsoleSink(), channel)
    """

    def __init__(
        self,
        config: ProvisionerConfig | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the provisioner.

        Args:
            config: Already-decoded options (prepare() replaces them)
            settings: Process settings (defaults to environment)
        """
        self.config = config or ProvisionerConfig()
        self.settings = settings or Settings.from_env()

    def prepare(self, *raws: Mapping[str, Any] | None) -> ProvisionerConfig:
        """Decode and validate option mappings from the orchestrator.

        Args:
            *raws: Option mappings, later ones overriding earlier ones

        Returns:
            The validated configuration

        Raises:
            ConfigurationError: On bad option types or local paths
        """
        config = decode_options(*raws)
        validate_config(config)
        self.config = config
        return config

    def command(self, base: str) -> str:
        """Apply the elevation prefix unless prevent_sudo is set."""
        return build_command(
            base,
            elevate=self.config.elevate,
            prefix=self.settings.elevation_prefix,
        )

    def remote_module_dirs(self) -> list[str]:
        """Remote directories the configured module paths are uploaded to."""
        return [
            remote_path_for(remote_dir_name(p), Path(), REMOTE_MODULE_PATH)
            for p in self.config.modules_paths
        ]

    def remote_manifest(self) -> str | None:
        """Remote path of the uploaded manifest, if one is configured."""
        if self.config.manifest_file is None:
            return None
        return posixpath.join(
            REMOTE_MANIFEST_PATH, Path(self.config.manifest_file).name
        )

    async def provision(
        self,
        sink: OutputSink,
        channel: RemoteChannel,
    ) -> ProvisioningResult:
        """Run the full provisioning sequence.

        Args:
            sink: Receives progress messages and remote output
            channel: Connected channel to the machine

        Returns:
            Succeeded, or Failed with the step and first error
        """
        step = ProvisioningStep.VALIDATE
        try:
            validate_config(self.config)

            if self.config.skip_install:
                logger.info("Skipping Puppet installation")
            else:
                step = ProvisioningStep.INSTALL
                sink.say("Installing Puppet")
                await run_command(channel, self.command(install_command()), sink)

            step = ProvisioningStep.STAGE
            await create_remote_directory(channel, REMOTE_MODULE_PATH, sink)

            step = ProvisioningStep.UPLOAD
            for path in self.config.modules_paths:
                sink.say(f"Copying module path: {path}")
                await upload_directory(channel, path, REMOTE_MODULE_PATH, sink)

            manifest = self.remote_manifest()
            if manifest is not None:
                sink.say(f"Uploading manifest: {self.config.manifest_file}")
                await create_remote_directory(channel, REMOTE_MANIFEST_PATH, sink)
                await upload_file(channel, self.config.manifest_file, manifest)

            step = ProvisioningStep.EXECUTE
            sink.say("Beginning Puppet run")
            command = self.command(
                apply_command(self.remote_module_dirs(), manifest)
            )
            await run_command(channel, command, sink)
        except ProvisionerError as e:
            result = ProvisioningResult.failed(step, e)
            logger.error("Provisioning failed at step %s: %s", step.value, e)
            sink.error(result.message)
            return result

        logger.info("Provisioning completed")
        return ProvisioningResult.succeeded()
