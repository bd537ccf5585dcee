"""Remote command data models."""

from dataclasses import dataclass


@dataclass
class RemoteCommand:
    """A command run on the remote machine.

    exit_status stays None until the process has been waited on.
    """

    command: str
    exit_status: int | None = None

    @property
    def succeeded(self) -> bool:
        """True once the command has exited with status 0."""
        return self.exit_status == 0
