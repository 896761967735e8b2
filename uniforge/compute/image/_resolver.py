from __future__ import annotations

from typing import Any, NamedTuple

from uniforge.compute.builder import Builder
from uniforge.config import (
    PLATFORM_AWS,
    PLATFORM_GCP,
    PLATFORM_ONPREM,
    PLATFORMS,
    CloudConfig,
)
from uniforge.core.exceptions import ConfigurationError

from .component import Image


class PlatformEntry(NamedTuple):
    platform: str
    provider: str


PLATFORM_PROVIDERS: tuple[PlatformEntry, ...] = (
    PlatformEntry(PLATFORM_ONPREM, "onprem"),
    PlatformEntry(PLATFORM_AWS, "amazon_ec2"),
    PlatformEntry(PLATFORM_GCP, "google_compute_engine"),
)


def get_cloud_provider(
    platform: str,
    cloud_config: CloudConfig | None = None,
    zone: str | None = None,
    builder: Builder | None = None,
    parameters: dict[str, Any] | None = None,
    registry: tuple[PlatformEntry, ...] = PLATFORM_PROVIDERS,
) -> Image:
    """Resolve the image component of a platform.

    Args:
        platform: Platform identifier.
        cloud_config: Cloud configuration handed to the provider.
        zone: Zone overriding the cloud configuration's.
        builder: Builder used by the provider.
        parameters: Extra provider parameters, e.g. credentials.
        registry: Ordered platform entries, first match wins.

    Raises:
        ConfigurationError: The platform is empty or has no provider.
    """
    if not platform:
        raise ConfigurationError(
            "Please select one of the cloud platforms in config. "
            f"[{', '.join(PLATFORMS)}]"
        )
    cloud_config = cloud_config or CloudConfig(platform=platform)
    update: dict[str, Any] = dict(platform=platform)
    if zone:
        update["zone"] = zone
    cloud_config = cloud_config.model_copy(update=update)

    for entry in registry:
        if entry.platform != platform:
            continue
        return Image(
            __provider__=dict(
                type=entry.provider,
                parameters=dict(cloud_config=cloud_config, builder=builder)
                | (parameters or {}),
            )
        )
    raise ConfigurationError(f"unknown platform '{platform}'")
