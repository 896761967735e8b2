from __future__ import annotations

from typing import TypeVar

from uniforge.core import DataModel

T = TypeVar("T", bound=DataModel)


def merge_configs(base: T, override: T) -> T:
    """Overlay the explicitly set fields of ``override`` onto ``base``.

    Nested models merge field by field. Any other explicitly set value
    replaces the base value as a whole. Fields left at their default on
    ``override`` keep the value from ``base``.

    Args:
        base: Base configuration, e.g. read from a package manifest.
        override: Configuration whose explicit fields win.

    Returns:
        New merged configuration. Neither input is modified.
    """
    update = dict()
    for name in override.model_fields_set:
        value = getattr(override, name)
        current = getattr(base, name)
        if isinstance(value, DataModel) and isinstance(current, DataModel):
            update[name] = merge_configs(current, value)
        else:
            update[name] = value
    return base.model_copy(update=update)
