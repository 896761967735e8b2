from ._constants import (
    IMAGE_EXTENSION,
    PACKAGE_MANIFEST_FILE,
    PLATFORM_AWS,
    PLATFORM_AZURE,
    PLATFORM_DO,
    PLATFORM_GCP,
    PLATFORM_ONPREM,
    PLATFORM_VSPHERE,
    PLATFORM_VULTR,
    PLATFORMS,
    get_home_dir,
    get_images_dir,
    get_packages_dir,
    get_volumes_dir,
)
from ._helper import (
    apply_klib_policy,
    new_context,
    resolve_program,
    set_default_image_name,
    validate_cloud_config,
)
from ._loader import load_config, load_package_config, parse_config
from ._merge import merge_configs
from ._models import CloudConfig, Config, RunConfig, Tag
from ._mounts import attach_mounts, find_volume, parse_mount

__all__ = [
    "CloudConfig",
    "Config",
    "IMAGE_EXTENSION",
    "PACKAGE_MANIFEST_FILE",
    "PLATFORMS",
    "PLATFORM_AWS",
    "PLATFORM_AZURE",
    "PLATFORM_DO",
    "PLATFORM_GCP",
    "PLATFORM_ONPREM",
    "PLATFORM_VSPHERE",
    "PLATFORM_VULTR",
    "RunConfig",
    "Tag",
    "apply_klib_policy",
    "attach_mounts",
    "find_volume",
    "get_home_dir",
    "get_images_dir",
    "get_packages_dir",
    "get_volumes_dir",
    "load_config",
    "load_package_config",
    "merge_configs",
    "new_context",
    "parse_config",
    "parse_mount",
    "resolve_program",
    "set_default_image_name",
    "validate_cloud_config",
]
