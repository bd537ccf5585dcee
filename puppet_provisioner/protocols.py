"""Protocol interfaces for the collaborators supplied by the host orchestrator.

The provisioner never creates a remote channel or a reporting sink; it
only consumes objects satisfying these protocols.

Usage Example:

    from puppet_provisioner.protocols import RemoteChannel

    async def my_function(channel: RemoteChannel):
        '''Function depends on protocol, not concrete implementation.'''
        process = await channel.start("uname -a")
        status = await process.wait()

    # Can pass the asyncssh adapter
    from puppet_provisioner.services.channel import AsyncSSHChannel
    await my_function(AsyncSSHChannel(conn))

    # Or an in-memory fake for testing
    class FakeChannel:
        async def start(self, command):
            return FakeProcess(...)

        async def upload(self, remote_path, fileobj):
            ...

    await my_function(FakeChannel())
"""

from typing import Any, BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class LineReader(Protocol):
    """A stream of remote output readable one line at a time."""

    async def readline(self) -> str | bytes:
        """Read the next line, delimiter included.

        Returns:
            The line, a trailing partial line at EOF, or an empty
            str/bytes once the stream is exhausted.
        """
        ...


@runtime_checkable
class RemoteProcess(Protocol):
    """A command started on the remote machine.

    Both output streams must reach EOF once the exit status is available.
    """

    stdout: Any
    stderr: Any

    async def wait(self) -> int | None:
        """Wait for the remote process to exit.

        Returns:
            Exit status, or None if the remote side never reported one
        """
        ...


@runtime_checkable
class RemoteChannel(Protocol):
    """Command execution and file transfer on the provisioned machine.

    Example implementation:
        class MyChannel:
            async def start(self, command: str) -> RemoteProcess:
                # Launch command, expose stdout/stderr/wait()
                return process

            async def upload(self, remote_path: str, fileobj: BinaryIO) -> None:
                # Write fileobj's full contents to remote_path
                pass
    """

    async def start(self, command: str) -> RemoteProcess:
        """Start a command on the remote machine.

        Args:
            command: Shell command line

        Returns:
            Handle streaming the command's output

        Raises:
            Exception: Any channel-specific error if the command cannot start
        """
        ...

    async def upload(self, remote_path: str, fileobj: BinaryIO) -> None:
        """Upload the full contents of a local file object.

        Args:
            remote_path: Destination path on the remote machine
            fileobj: Local file opened for binary reading

        Raises:
            Exception: Any channel-specific error if the transfer fails
        """
        ...


@runtime_checkable
class OutputSink(Protocol):
    """Operator-facing reporting sink.

    Implementations must accept calls from concurrent drain tasks and
    keep each call's text intact.
    """

    def say(self, message: str) -> None:
        """Report a progress message."""
        ...

    def message(self, line: str) -> None:
        """Report one line of remote command output."""
        ...

    def error(self, message: str) -> None:
        """Report a terminal failure."""
        ...


__all__ = [
    "LineReader",
    "OutputSink",
    "RemoteChannel",
    "RemoteProcess",
]
