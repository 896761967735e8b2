from __future__ import annotations

import shutil
from typing import Callable, NamedTuple

from uniforge.core import get_logger

from .component import Hypervisor

logger = get_logger(__name__)


class HypervisorEntry(NamedTuple):
    """Executable that must be on the search path, and its provider."""

    executable: str
    provider: str


# Checked in order, first available wins.
HYPERVISORS: tuple[HypervisorEntry, ...] = (
    HypervisorEntry("qemu-system-x86_64", "qemu"),
)


def select_hypervisor(
    registry: tuple[HypervisorEntry, ...] = HYPERVISORS,
    which: Callable[[str], str | None] = shutil.which,
) -> Hypervisor | None:
    """Select the first hypervisor whose executable is available.

    Returns:
        Hypervisor bound to the matching provider, or None when no
        executable is found.
    """
    for entry in registry:
        path = which(entry.executable)
        if path:
            logger.debug("Using hypervisor %s at %s", entry.provider, path)
            return Hypervisor(
                __provider__=dict(
                    type=entry.provider,
                    parameters=dict(executable=path),
                )
            )
    logger.debug(
        "No hypervisor found, looked for %s",
        ", ".join(entry.executable for entry in registry),
    )
    return None
