"""Provisioning error taxonomy."""


class ProvisionerError(Exception):
    """Base class for every failure that terminates a provisioning run."""


class ConfigurationError(ProvisionerError):
    """Invalid provisioner options, detected before any remote action."""

    def __init__(self, errors: list[str]):
        """Initialize configuration error.

        Args:
            errors: Every problem found, one message per offending option/path
        """
        self.errors = list(errors)
        lines = "\n".join(f"* {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} error(s) occurred:\n\n{lines}")


class RemoteStartError(ProvisionerError):
    """The remote channel could not start a command."""

    def __init__(self, command: str, original_error: Exception):
        """Initialize start error.

        Args:
            command: Command line that could not be started
            original_error: Exception raised by the channel
        """
        self.command = command
        self.original_error = original_error
        super().__init__(f"Failed executing command: {original_error}")


class RemoteExecutionError(ProvisionerError):
    """A remote command ran but exited with a non-zero status."""

    def __init__(self, command: str, exit_status: int):
        self.command = command
        self.exit_status = exit_status
        super().__init__(
            f"Command exited with non-zero exit status: {exit_status}"
        )


class TransferError(ProvisionerError):
    """Creating a remote directory or uploading a file failed."""

    def __init__(self, path: str, original_error: Exception):
        """Initialize transfer error.

        Args:
            path: Local or remote path the failing operation was working on
            original_error: Underlying cause
        """
        self.path = path
        self.original_error = original_error
        super().__init__(f"Transfer of {path} failed: {original_error}")
