from __future__ import annotations

from typing import Any

from rich.console import Console

from uniforge.compute.image import CloudImage, Image, get_cloud_provider
from uniforge.config import (
    PLATFORM_ONPREM,
    Config,
    apply_klib_policy,
    attach_mounts,
    load_config,
    load_package_config,
    merge_configs,
    new_context,
    resolve_program,
    set_default_image_name,
    validate_cloud_config,
)
from uniforge.core import get_logger
from uniforge.core.exceptions import NotImplementedYetError
from uniforge.packages import download_and_extract_package

logger = get_logger(__name__)


def _load(
    config_path: str | None,
    platform: str | None,
    zone: str | None,
) -> Config:
    config = load_config(config_path)
    if platform:
        config = config.update_cloud_config(platform=platform)
    if zone:
        config = config.update_cloud_config(zone=zone)
    return config


def _resolve(
    config: Config,
    parameters: dict[str, Any] | None = None,
) -> Image:
    return get_cloud_provider(
        config.platform,
        config.cloud_config,
        parameters=parameters,
    )


def create_image(
    config_path: str | None = None,
    platform: str | None = None,
    zone: str | None = None,
    package: str | None = None,
    args: list[str] | None = None,
    mounts: list[str] | None = None,
    nightly: bool = False,
    image_name: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> str:
    """
    Build a program or package into an image on a platform.

    Returns:
        Cloud image name.
    """
    config = _load(config_path, platform, zone)
    if nightly:
        config = config.update(nightly_build=True)
    validate_cloud_config(config)
    config = attach_mounts(config, mounts)

    image = _resolve(config, parameters)
    try:
        if package:
            if args:
                config = config.update_run_config(
                    args=list(config.run_config.args) + list(args)
                )
            package_dir = download_and_extract_package(package)
            config = merge_configs(load_package_config(package_dir), config)
            config = apply_klib_policy(config)
            explicit_name = image_name or config.cloud_config.image_name
            if not explicit_name and not config.run_config.program:
                explicit_name = package
            config = set_default_image_name(config, explicit_name)
            ctx = new_context(config)
            image_path = image.build_image_with_package(
                ctx, package_path=package_dir
            ).result
        else:
            config = resolve_program(config, args)
            config = apply_klib_policy(config)
            config = set_default_image_name(
                config, image_name or config.cloud_config.image_name
            )
            ctx = new_context(config)
            image_path = image.build_image(ctx).result

        image.create_image(ctx, image_path=image_path)
    finally:
        image.close()

    print(f"{config.platform} image '{config.cloud_config.image_name}' created...")
    return config.cloud_config.image_name


def list_images(
    config_path: str | None = None,
    platform: str | None = None,
    zone: str | None = None,
    console: Console | None = None,
    parameters: dict[str, Any] | None = None,
) -> list[CloudImage]:
    config = _load(config_path, platform, zone)
    image = _resolve(config, dict(parameters or {}, console=console))
    try:
        return image.list_images(new_context(config)).result
    finally:
        image.close()


def delete_image(
    name: str,
    config_path: str | None = None,
    platform: str | None = None,
    zone: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> None:
    config = _load(config_path, platform, zone)
    image = _resolve(config, parameters)
    try:
        image.delete_image(new_context(config), name=name)
    finally:
        image.close()


def resize_image(
    name: str,
    size: str,
    config_path: str | None = None,
    platform: str | None = None,
    zone: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> None:
    config = _load(config_path, platform, zone)
    image = _resolve(config, parameters)
    try:
        image.resize_image(new_context(config), name=name, size=size)
    finally:
        image.close()


def sync_image(
    name: str,
    source: str = PLATFORM_ONPREM,
    config_path: str | None = None,
    platform: str | None = None,
    zone: str | None = None,
    parameters: dict[str, Any] | None = None,
) -> None:
    """
    Copy an image from the source platform to the target platform.

    Only local images can be synced today.
    """
    if source != PLATFORM_ONPREM:
        raise NotImplementedYetError(f"{source} sync not yet implemented")

    config = _load(config_path, platform, zone)
    src = get_cloud_provider(source, config.cloud_config, parameters=parameters)
    try:
        target = get_cloud_provider(
            config.platform, config.cloud_config, parameters=parameters
        )
        try:
            src.sync_image(config, target=target, name=name)
        finally:
            target.close()
    finally:
        src.close()
