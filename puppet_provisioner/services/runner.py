"""Remote command execution with live output streaming.

Each command gets two drain tasks, one per output stream, running
alongside the wait for the exit status on the same event loop. Lines are
forwarded to the sink as soon as they arrive, so a long Puppet run is
visible while it is still going. The exit status does not end the drains:
whatever the streams still hold is flushed to the sink before the result
is returned.
"""

import asyncio
import logging

from puppet_provisioner.errors import (
    RemoteExecutionError,
    RemoteStartError,
    TransferError,
)
from puppet_provisioner.models import RemoteCommand
from puppet_provisioner.protocols import LineReader, OutputSink, RemoteChannel
from puppet_provisioner.utils.shell import mkdir_command

logger = logging.getLogger(__name__)

# Reported when the remote side closes without sending an exit status
UNKNOWN_EXIT_STATUS = -1


def _decode(line: str | bytes) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8", errors="replace")
    return line


def _deliver(sink: OutputSink, line: str) -> None:
    """Send one line to the sink; a failing sink never stops the drain."""
    try:
        sink.message(line)
    except Exception as e:
        logger.warning("Output sink rejected line %r: %s", line, e)


async def _cancel_drains(drains: tuple[asyncio.Task[int], ...]) -> None:
    """Stop any drain still running and wait for it to finish."""
    for task in drains:
        task.cancel()
    await asyncio.gather(*drains, return_exceptions=True)


async def drain_lines(
    reader: LineReader | None,
    sink: OutputSink,
    stream_name: str,
) -> int:
    """Forward every line of a stream to the sink until EOF.

    Args:
        reader: Stream to read (None means the stream is not attached)
        sink: Reporting sink
        stream_name: "stdout" or "stderr", for the diagnostic log

    Returns:
        Number of lines forwarded
    """
    if reader is None:
        return 0

    count = 0
    while True:
        raw = await reader.readline()
        if not raw:
            break
        line = _decode(raw).rstrip()
        logger.debug("[%s] %s", stream_name, line)
        _deliver(sink, line)
        count += 1
    return count


async def run_command(
    channel: RemoteChannel,
    command: str,
    sink: OutputSink,
) -> RemoteCommand:
    """Run a command remotely, streaming its output to the sink.

    Args:
        channel: Remote channel supplied by the orchestrator
        command: Shell command line
        sink: Receives every stdout/stderr line, trailing whitespace removed

    Returns:
        The completed command (exit status 0)

    Raises:
        RemoteStartError: If the channel cannot start the command
        RemoteExecutionError: If the command exits non-zero (all output is
            delivered before this is raised), or if the process or one of
            its output streams is lost (status UNKNOWN_EXIT_STATUS)
    """
    remote = RemoteCommand(command=command)
    logger.info("Executing command: %s", command)

    try:
        process = await channel.start(command)
    except Exception as e:
        logger.error("Failed to start command %r: %s", command, e)
        raise RemoteStartError(command, e) from e

    stdout_task = asyncio.create_task(
        drain_lines(getattr(process, "stdout", None), sink, "stdout")
    )
    stderr_task = asyncio.create_task(
        drain_lines(getattr(process, "stderr", None), sink, "stderr")
    )

    drains = (stdout_task, stderr_task)

    try:
        exit_status = await process.wait()
    except BaseException as e:
        await _cancel_drains(drains)
        if not isinstance(e, Exception):
            raise
        logger.error("Lost command %r while waiting for exit: %s", command, e)
        raise RemoteExecutionError(command, UNKNOWN_EXIT_STATUS) from e

    # The exit status may arrive before the last lines were read
    try:
        stdout_lines, stderr_lines = await asyncio.gather(*drains)
    except BaseException as e:
        await _cancel_drains(drains)
        if not isinstance(e, Exception):
            raise
        logger.error("Lost output of command %r: %s", command, e)
        raise RemoteExecutionError(command, UNKNOWN_EXIT_STATUS) from e

    if exit_status is None:
        logger.warning("No exit status reported for %r", command)
        exit_status = UNKNOWN_EXIT_STATUS

    remote.exit_status = exit_status
    logger.info(
        "Command exited with status %d (%d stdout lines, %d stderr lines)",
        exit_status,
        stdout_lines,
        stderr_lines,
    )

    if exit_status != 0:
        raise RemoteExecutionError(command, exit_status)

    return remote


async def create_remote_directory(
    channel: RemoteChannel,
    path: str,
    sink: OutputSink,
) -> None:
    """Create a remote directory, including missing parents.

    Args:
        channel: Remote channel
        path: Remote directory path
        sink: Receives any output of the mkdir command

    Raises:
        TransferError: If the directory could not be created
    """
    logger.info("Creating remote directory: %s", path)
    try:
        await run_command(channel, mkdir_command(path), sink)
    except (RemoteStartError, RemoteExecutionError) as e:
        raise TransferError(path, e) from e
