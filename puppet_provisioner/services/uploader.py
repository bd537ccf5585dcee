"""Recursive local-to-remote directory upload."""

import logging
import os
import posixpath
from collections.abc import Iterator
from pathlib import Path

from puppet_provisioner.errors import TransferError
from puppet_provisioner.models import UploadTask, remote_dir_name
from puppet_provisioner.protocols import OutputSink, RemoteChannel
from puppet_provisioner.services.runner import create_remote_directory

logger = logging.getLogger(__name__)


def remote_path_for(root_name: str, relative: Path, remote_root: str) -> str:
    """Map a local entry to its remote path.

    The local root's own name is kept as the first segment, so uploading
    ``site/modules`` puts ``site/modules/ntp/init.pp`` at
    ``<remote_root>/modules/ntp/init.pp``.

    Args:
        root_name: Name of the directory the walk started from
        relative: Entry path relative to that directory
        remote_root: Remote directory receiving the tree

    Returns:
        POSIX remote path
    """
    return posixpath.join(remote_root.rstrip("/") or "/", root_name, *relative.parts)


def iter_upload_tasks(local_root: Path | str, remote_root: str) -> Iterator[UploadTask]:
    """Walk a local tree depth-first, yielding one task per entry.

    A directory is yielded before its contents; siblings are visited in
    name order. Symlinks are followed.

    Args:
        local_root: Local directory to walk
        remote_root: Remote directory receiving the tree

    Yields:
        UploadTask for the root itself, then every entry below it
    """
    root = Path(local_root)
    root_name = remote_dir_name(root)
    yield UploadTask(
        local_path=root,
        remote_path=remote_path_for(root_name, Path(), remote_root),
        is_dir=True,
    )

    def walk(directory: Path) -> Iterator[UploadTask]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            path = directory / entry.name
            is_dir = entry.is_dir()
            yield UploadTask(
                local_path=path,
                remote_path=remote_path_for(
                    root_name, path.relative_to(root), remote_root
                ),
                is_dir=is_dir,
            )
            if is_dir:
                yield from walk(path)

    yield from walk(root)


async def upload_file(
    channel: RemoteChannel,
    local_path: Path | str,
    remote_path: str,
) -> int:
    """Stream one local file to the remote machine.

    Args:
        channel: Remote channel
        local_path: File to read
        remote_path: Destination path

    Returns:
        Size of the local file in bytes

    Raises:
        TransferError: If the file cannot be opened or the upload fails
    """
    local = Path(local_path)
    try:
        with local.open("rb") as fileobj:
            size = os.fstat(fileobj.fileno()).st_size
            await channel.upload(remote_path, fileobj)
    except Exception as e:
        logger.error("Upload of %s to %s failed: %s", local, remote_path, e)
        raise TransferError(str(local), e) from e

    logger.debug("Uploaded %s -> %s (%d bytes)", local, remote_path, size)
    return size


async def upload_directory(
    channel: RemoteChannel,
    local_root: Path | str,
    remote_root: str,
    sink: OutputSink,
) -> int:
    """Replay a local directory tree on the remote machine.

    The first failure stops the walk; nothing already created or uploaded
    is removed.

    Args:
        channel: Remote channel
        local_root: Local directory to upload
        remote_root: Remote directory that will contain local_root's name
        sink: Receives output of remote mkdir commands

    Returns:
        Number of files uploaded

    Raises:
        TransferError: Naming the entry whose directory creation, read
            or upload failed
    """
    logger.info("Uploading directory %s to %s", local_root, remote_root)
    files = 0
    try:
        for task in iter_upload_tasks(local_root, remote_root):
            if task.is_dir:
                await create_remote_directory(channel, task.remote_path, sink)
            else:
                await upload_file(channel, task.local_path, task.remote_path)
                files += 1
    except OSError as e:
        # Raised by the walk itself (unreadable directory)
        raise TransferError(getattr(e, "filename", None) or str(local_root), e) from e

    logger.info("Uploaded %d file(s) from %s", files, local_root)
    return files
