from __future__ import annotations

import os
from typing import Any

from pydantic import ValidationError

from uniforge.core import YamlLoader, get_logger
from uniforge.core.exceptions import ConfigurationError

from ._constants import PACKAGE_MANIFEST_FILE
from ._models import Config

logger = get_logger(__name__)

# Keys older config files and package manifests keep at the top level.
_RUN_CONFIG_KEYS = {
    "Program": "Program",
    "program": "Program",
    "Args": "Args",
    "args": "Args",
}


def load_config(path: str | None = None) -> Config:
    """Load a configuration file.

    Args:
        path: JSON or YAML file. Empty or None gives a default
            configuration with no field explicitly set.

    Returns:
        Configuration.
    """
    if path is None or not path.strip():
        return Config()
    logger.debug("Loading config %s", path)
    return parse_config(YamlLoader.load(path.strip()), source=path)


def parse_config(obj: dict[str, Any], source: str = "<config>") -> Config:
    try:
        return Config.model_validate(_normalize(obj))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {e}") from e


def load_package_config(package_dir: str) -> Config:
    """Parse the manifest embedded in an extracted package."""
    manifest = os.path.join(package_dir, PACKAGE_MANIFEST_FILE)
    if not os.path.isfile(manifest):
        raise ConfigurationError(f"Package manifest {manifest} not found")
    return parse_config(YamlLoader.load(manifest), source=manifest)


def _normalize(obj: dict[str, Any]) -> dict[str, Any]:
    obj = dict(obj)
    run_config_key = "run_config" if "run_config" in obj else "RunConfig"
    run_config = dict(obj.get(run_config_key) or {})
    moved = False
    for key, target in _RUN_CONFIG_KEYS.items():
        if key in obj:
            value = obj.pop(key)
            if target not in run_config and target.lower() not in run_config:
                run_config[target] = value
                moved = True
    if moved or run_config_key in obj:
        obj[run_config_key] = run_config
    return obj
