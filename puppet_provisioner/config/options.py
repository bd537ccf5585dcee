"""Provisioner option decoding and validation.

Options arrive from the host orchestrator as one or more mappings
(for example a template's provisioner block plus per-build overrides).
They are merged in order, type-checked, and validated against the local
filesystem before any remote action is taken.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from puppet_provisioner.errors import ConfigurationError
from puppet_provisioner.models import (
    DEFAULT_MODULES_PATH,
    ProvisionerConfig,
    remote_dir_name,
)

logger = logging.getLogger(__name__)

_BOOL_OPTIONS = ("prevent_sudo", "skip_install")
_KNOWN_OPTIONS = ("modules_paths", "manifest_file", *_BOOL_OPTIONS)


def decode_options(*raws: Mapping[str, Any] | None) -> ProvisionerConfig:
    """Merge raw option mappings into a ProvisionerConfig.

    Later mappings override earlier ones key by key. Unknown keys are
    ignored.

    Args:
        *raws: Option mappings, in precedence order (lowest first)

    Returns:
        Decoded configuration (not yet validated against the filesystem)

    Raises:
        ConfigurationError: If any option has the wrong type
    """
    merged: dict[str, Any] = {}
    for raw in raws:
        if raw is None:
            continue
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                [f"Options must be a mapping, got {type(raw).__name__}"]
            )
        merged.update(raw)

    unknown = sorted(set(merged) - set(_KNOWN_OPTIONS))
    if unknown:
        logger.debug("Ignoring unknown options: %s", ", ".join(unknown))

    errors: list[str] = []
    config = ProvisionerConfig()

    modules_paths = merged.get("modules_paths")
    if modules_paths is None:
        config.modules_paths = [DEFAULT_MODULES_PATH]
    elif isinstance(modules_paths, str) or not isinstance(modules_paths, list):
        errors.append(
            f"modules_paths must be a list of paths, got {type(modules_paths).__name__}"
        )
    else:
        bad = [p for p in modules_paths if not isinstance(p, str) or not p]
        if bad:
            errors.append(f"modules_paths entries must be non-empty strings: {bad!r}")
        else:
            config.modules_paths = list(modules_paths)

    for key in _BOOL_OPTIONS:
        value = merged.get(key)
        if value is None:
            continue
        if not isinstance(value, bool):
            errors.append(f"{key} must be a boolean, got {value!r}")
        else:
            setattr(config, key, value)

    manifest_file = merged.get("manifest_file")
    if manifest_file is not None:
        if not isinstance(manifest_file, str) or not manifest_file:
            errors.append(f"manifest_file must be a path, got {manifest_file!r}")
        else:
            config.manifest_file = manifest_file

    if errors:
        raise ConfigurationError(errors)

    logger.debug(
        "Options decoded: modules_paths=%s, prevent_sudo=%s, skip_install=%s, "
        "manifest_file=%s",
        config.modules_paths,
        config.prevent_sudo,
        config.skip_install,
        config.manifest_file,
    )
    return config


def validate_config(config: ProvisionerConfig) -> None:
    """Check every local path the configuration refers to.

    All problems are collected before raising so the operator sees
    every bad path at once.

    Args:
        config: Decoded configuration

    Raises:
        ConfigurationError: Listing every missing or non-directory module
            path, module paths sharing a remote directory name, and a
            missing manifest file
    """
    errors: list[str] = []
    remote_names: dict[str, str] = {}

    for path in config.modules_paths:
        local = Path(path)
        if not local.exists():
            errors.append(f"Bad module path '{path}': no such file or directory")
        elif not local.is_dir():
            errors.append(f"Bad module path '{path}': not a directory")
        else:
            name = remote_dir_name(local)
            if name in remote_names:
                errors.append(
                    f"Module paths '{remote_names[name]}' and '{path}' would both "
                    f"upload to remote directory '{name}'"
                )
            else:
                remote_names[name] = path

    if config.manifest_file is not None:
        manifest = Path(config.manifest_file)
        if not manifest.is_file():
            errors.append(
                f"Bad manifest file '{config.manifest_file}': not an existing file"
            )

    if errors:
        logger.warning("Configuration rejected with %d error(s)", len(errors))
        raise ConfigurationError(errors)
