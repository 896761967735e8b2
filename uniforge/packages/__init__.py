from ._downloader import (
    DEFAULT_PACKAGES_URL,
    download_and_extract_package,
    get_package_url,
)

__all__ = [
    "DEFAULT_PACKAGES_URL",
    "download_and_extract_package",
    "get_package_url",
]
