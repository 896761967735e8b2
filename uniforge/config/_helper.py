from __future__ import annotations

import os

from uniforge.core import Context
from uniforge.core.exceptions import ConfigurationError

from ._constants import (
    CLOUD_INIT_KLIB,
    IMAGE_EXTENSION,
    PLATFORM_AZURE,
    PLATFORM_ONPREM,
    PLATFORMS,
    RADAR_ENV_KEY,
    RADAR_KLIBS,
    get_images_dir,
)
from ._models import Config


def new_context(config: Config) -> Context:
    """Bind a context to a configuration.

    Must be called again whenever the configuration is replaced.
    """
    return Context(
        config=config,
        data=dict(
            platform=config.cloud_config.platform,
            images_dir=str(get_images_dir()),
        ),
    )


def set_default_image_name(config: Config, image_name: str | None = None) -> Config:
    """Derive the local artifact path and the cloud image name.

    Without an explicit name both come from the program's base name:
    ``<images>/<program>.img`` locally and ``<program>-image`` in the
    cloud. An explicit name is used as is in the cloud and as
    ``<images>/<name>.img`` locally.
    """
    images_dir = get_images_dir()
    if image_name:
        basename = os.path.basename(image_name)
        if not basename.endswith(IMAGE_EXTENSION):
            basename = f"{basename}{IMAGE_EXTENSION}"
        imagename = str(images_dir / basename)
        cloud_image_name = image_name
    else:
        program = os.path.basename(config.run_config.program)
        if not program:
            raise ConfigurationError("Please mention program to run")
        imagename = str(images_dir / f"{program}{IMAGE_EXTENSION}")
        cloud_image_name = f"{program}-image"
    return config.update_cloud_config(image_name=cloud_image_name).update_run_config(
        imagename=imagename
    )


def apply_klib_policy(config: Config) -> Config:
    """Add the kernel libraries implied by platform and environment."""
    klibs = list(config.run_config.klibs)
    required: list[str] = []
    if config.cloud_config.platform == PLATFORM_AZURE:
        required.append(CLOUD_INIT_KLIB)
    if RADAR_ENV_KEY in config.env:
        required.extend(RADAR_KLIBS)
    missing = [klib for klib in required if klib not in klibs]
    if not missing:
        return config
    return config.update_run_config(klibs=klibs + missing)


def validate_cloud_config(config: Config) -> None:
    platform = config.cloud_config.platform
    if not platform:
        raise ConfigurationError(
            "Please select one of the cloud platforms in config. "
            f"[{', '.join(PLATFORMS)}]"
        )
    if platform not in PLATFORMS:
        raise ConfigurationError(
            f"Unknown platform '{platform}'. [{', '.join(PLATFORMS)}]"
        )
    if not config.cloud_config.bucket_name and platform != PLATFORM_ONPREM:
        raise ConfigurationError("Please specify a cloud bucket in config")


def resolve_program(config: Config, args: list[str] | None = None) -> Config:
    """Pick the program from command line arguments or the config."""
    if args:
        return config.update_run_config(program=args[0], args=list(args))
    if config.run_config.program:
        return config
    if config.run_config.args:
        return config.update_run_config(program=config.run_config.args[0])
    raise ConfigurationError("Please mention program to run")
