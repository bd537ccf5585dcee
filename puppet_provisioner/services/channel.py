"""RemoteChannel adapter for an existing asyncssh connection."""

import logging
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    import asyncssh

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 64 * 1024


class AsyncSSHProcess:
    """RemoteProcess view of an asyncssh client process."""

    def __init__(self, process: "asyncssh.SSHClientProcess") -> None:
        self._process = process
        self.stdout = process.stdout
        self.stderr = process.stderr

    async def wait(self) -> int | None:
        """Wait for exit; signals are reported as negative statuses."""
        completed = await self._process.wait(check=False)
        returncode: int | None = completed.returncode
        return returncode


class AsyncSSHChannel:
    """Run commands and upload files over a connected SSH session.

    The connection is owned by the caller; this adapter never opens or
    closes it.
    """

    def __init__(
        self,
        conn: "asyncssh.SSHClientConnection",
        chunk_size: int = UPLOAD_CHUNK_SIZE,
    ) -> None:
        """Wrap a connection.

        Args:
            conn: Connected asyncssh client connection
            chunk_size: Bytes read from local files per SFTP write
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        self._conn = conn
        self.chunk_size = chunk_size

    async def start(self, command: str) -> AsyncSSHProcess:
        """Start a command with stdin closed and text-decoded output."""
        process = await self._conn.create_process(
            command, encoding="utf-8", errors="replace"
        )
        process.stdin.write_eof()
        return AsyncSSHProcess(process)

    async def upload(self, remote_path: str, fileobj: BinaryIO) -> None:
        """Stream a local file object to remote_path over SFTP."""
        written = 0
        async with self._conn.start_sftp_client() as sftp:
            async with sftp.open(remote_path, "wb") as remote_file:
                while chunk := fileobj.read(self.chunk_size):
                    await remote_file.write(chunk)
                    written += len(chunk)
        logger.debug("SFTP wrote %d bytes to %s", written, remote_path)
