"""Shell command construction."""

import shlex
from collections.abc import Iterable

DEFAULT_ELEVATION_PREFIX = "sudo"


def quote_path(path: str) -> str:
    """Safely quote a path for shell commands.

    Args:
        path: File system path to quote

    Returns:
        Shell-safe quoted path
    """
    return shlex.quote(path)


def build_command(
    base: str,
    elevate: bool,
    prefix: str = DEFAULT_ELEVATION_PREFIX,
) -> str:
    """Prefix a command line with the elevation prefix when requested.

    Args:
        base: Command line to run
        elevate: Whether to request elevated privileges
        prefix: Elevation command (e.g. "sudo")

    Returns:
        Final command line
    """
    if elevate and prefix:
        return f"{prefix} {base}"
    return base


def mkdir_command(path: str) -> str:
    """Command creating a remote directory and any missing parents."""
    return f"mkdir -p {quote_path(path)}"


def install_command() -> str:
    """Command installing Puppet on the remote machine."""
    return "gem install puppet"


def apply_command(module_dirs: Iterable[str], manifest_path: str | None = None) -> str:
    """Command running Puppet against the uploaded modules.

    Args:
        module_dirs: Remote module directories, in search order
        manifest_path: Remote manifest to apply, if one was uploaded

    Returns:
        puppet apply command line
    """
    parts = ["puppet", "apply", "--verbose"]
    module_path = ":".join(module_dirs)
    if module_path:
        parts.append(f"--modulepath={quote_path(module_path)}")
    if manifest_path:
        parts.append(quote_path(manifest_path))
    return " ".join(parts)
