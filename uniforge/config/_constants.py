import os
from pathlib import Path

PLATFORM_ONPREM = "onprem"
PLATFORM_AWS = "aws"
PLATFORM_GCP = "gcp"
PLATFORM_AZURE = "azure"
PLATFORM_DO = "do"
PLATFORM_VULTR = "vultr"
PLATFORM_VSPHERE = "vsphere"

PLATFORMS = (
    PLATFORM_ONPREM,
    PLATFORM_AWS,
    PLATFORM_GCP,
    PLATFORM_AZURE,
    PLATFORM_DO,
    PLATFORM_VULTR,
    PLATFORM_VSPHERE,
)

PACKAGE_MANIFEST_FILE = "package.manifest"
IMAGE_EXTENSION = ".img"
VOLUME_EXTENSION = ".raw"

RADAR_ENV_KEY = "RADAR_KEY"
CLOUD_INIT_KLIB = "cloud_init"
RADAR_KLIBS = ("tls", "radar")


def get_home_dir() -> Path:
    home = os.environ.get("UNIFORGE_HOME")
    if home:
        return Path(home)
    return Path.home() / ".uniforge"


def get_images_dir() -> Path:
    return get_home_dir() / "images"


def get_volumes_dir() -> Path:
    return get_home_dir() / "volumes"


def get_packages_dir() -> Path:
    return get_home_dir() / "packages"
