from ._helper import parse_size, render_images
from ._models import CloudImage
from ._resolver import PLATFORM_PROVIDERS, PlatformEntry, get_cloud_provider
from .component import Image

__all__ = [
    "CloudImage",
    "Image",
    "PLATFORM_PROVIDERS",
    "PlatformEntry",
    "get_cloud_provider",
    "parse_size",
    "render_images",
]
