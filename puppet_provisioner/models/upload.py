"""Upload data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadTask:
    """One local filesystem entry and where it lands on the remote machine."""

    local_path: Path
    remote_path: str
    is_dir: bool


def remote_dir_name(local_root: Path | str) -> str:
    """Name a local directory keeps under the remote module root.

    ``.`` and trailing slashes resolve to the directory's real name.
    """
    return Path(local_root).resolve().name
