from __future__ import annotations

import os
from pathlib import Path

from uniforge.core import get_logger
from uniforge.core.exceptions import ConfigurationError, NotFoundError

from ._constants import VOLUME_EXTENSION, get_volumes_dir
from ._models import Config

logger = get_logger(__name__)


def parse_mount(mount: str) -> tuple[str, str]:
    """Split a ``volume:/mount/path`` entry."""
    parts = mount.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ConfigurationError(f"mount config invalid: missing parts: {mount}")
    volume, path = parts
    if not path.startswith("/"):
        raise ConfigurationError(
            f"mount path must start with /, has {path[0]!r}: {mount}"
        )
    return volume, path


def find_volume(volume_dir: str, volume: str) -> str:
    """Find a volume by name or id.

    Volume files are named ``<name>:<id>.raw``.

    Returns:
        Volume id.
    """
    matches = []
    directory = Path(volume_dir)
    if directory.is_dir():
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read volumes in {volume_dir}: {e}"
            ) from e
        for entry in entries:
            if not entry.name.endswith(VOLUME_EXTENSION):
                continue
            stem = entry.name[: -len(VOLUME_EXTENSION)]
            name, _, id = stem.partition(":")
            if volume in (name, id or name, stem):
                matches.append(id or name)
    if not matches:
        raise NotFoundError(f"volume {volume} not found in {volume_dir}")
    if len(matches) > 1:
        raise ConfigurationError(
            f"volume {volume} is ambiguous, use its id: {', '.join(matches)}"
        )
    return matches[0]


def attach_mounts(
    config: Config,
    mounts: list[str] | None,
    volume_dir: str | os.PathLike | None = None,
) -> Config:
    """Resolve declared mounts into the run configuration.

    Resolution runs against a copy whose build directory is the volume
    directory. The returned configuration keeps the original build
    directory, also when resolution fails part way.

    Args:
        config: Configuration.
        mounts: ``volume:/mount/path`` entries.
        volume_dir: Directory holding volumes.

    Returns:
        Configuration with ``run_config.mounts`` filled in.
    """
    if not mounts:
        return config
    parsed = [parse_mount(mount) for mount in mounts]
    scoped = config.update(build_dir=str(volume_dir or get_volumes_dir()))
    resolved = dict(config.run_config.mounts)
    for volume, path in parsed:
        id = find_volume(scoped.build_dir, volume)
        logger.debug("Mounting volume %s (%s) at %s", volume, id, path)
        resolved[id] = path
    return config.update_run_config(mounts=resolved)
