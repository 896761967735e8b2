from __future__ import annotations

import re

from rich.console import Console
from rich.table import Table

from uniforge.core.exceptions import ConfigurationError

from ._models import CloudImage

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([kmgt]?)(i?b)?\s*$", re.IGNORECASE)
_SIZE_FACTORS = {"": 1, "k": 1 << 10, "m": 1 << 20, "g": 1 << 30, "t": 1 << 40}


def parse_size(size: str) -> int:
    """Parse a human size such as ``512M``, ``2G`` or ``1048576``."""
    match = _SIZE_RE.match(size)
    if not match:
        raise ConfigurationError(f"Invalid size '{size}'")
    return int(match.group(1)) * _SIZE_FACTORS[match.group(2).lower()]


def render_images(images: list[CloudImage], console: Console | None = None) -> None:
    table = Table(show_header=True, header_style="bold cyan", show_lines=True)
    for column in ("Name", "Id", "Status", "Created"):
        table.add_column(column)
    for image in images:
        table.add_row(image.name, image.id, image.status, image.created)
    (console or Console()).print(table)
