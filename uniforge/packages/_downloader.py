from __future__ import annotations

import os
import tarfile
from pathlib import Path

import httpx

from uniforge.config import PACKAGE_MANIFEST_FILE, get_packages_dir
from uniforge.core import get_logger
from uniforge.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ProviderCallError,
)

logger = get_logger(__name__)

DEFAULT_PACKAGES_URL = "https://storage.googleapis.com/packagehub"
PACKAGES_URL_ENV = "UNIFORGE_PACKAGES_URL"
ARCHIVE_EXTENSION = ".tar.gz"


def get_package_url(name: str, base_url: str | None = None) -> str:
    base_url = base_url or os.environ.get(PACKAGES_URL_ENV, DEFAULT_PACKAGES_URL)
    return f"{base_url.rstrip('/')}/{name}{ARCHIVE_EXTENSION}"


def download_and_extract_package(
    name: str,
    base_url: str | None = None,
    packages_dir: str | Path | None = None,
    timeout: float = 60,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Fetch a package archive and extract it into the packages cache.

    Packages already extracted are not fetched again.

    Args:
        name: Package name, e.g. ``node_v14.2.0``.
        base_url: Repository URL the archive is fetched from.
        packages_dir: Cache directory, defaults to ``<home>/packages``.
        timeout: HTTP timeout in seconds.
        transport: HTTP transport, defaults to the network.

    Returns:
        Directory holding the package manifest.
    """
    if not name:
        raise ConfigurationError("Package name is empty")
    packages_dir = Path(packages_dir) if packages_dir else get_packages_dir()
    package_dir = packages_dir / name
    if (package_dir / PACKAGE_MANIFEST_FILE).is_file():
        logger.debug("Package %s found in %s", name, package_dir)
        return str(package_dir)

    archive_path = packages_dir / f"{name}{ARCHIVE_EXTENSION}"
    url = get_package_url(name, base_url)
    logger.info("Downloading package %s from %s", name, url)
    try:
        with httpx.Client(
            timeout=timeout, follow_redirects=True, transport=transport
        ) as client:
            with client.stream("GET", url) as response:
                if response.status_code == 404:
                    raise NotFoundError(f"package {name} not found")
                response.raise_for_status()
                packages_dir.mkdir(parents=True, exist_ok=True)
                with open(archive_path, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
    except httpx.HTTPError as e:
        raise ProviderCallError(f"download of package {name} failed: {e}") from e
    except OSError as e:
        raise ProviderCallError(f"cannot store package {name}: {e}") from e

    try:
        _extract(archive_path, packages_dir)
    finally:
        archive_path.unlink(missing_ok=True)

    if not (package_dir / PACKAGE_MANIFEST_FILE).is_file():
        raise ConfigurationError(
            f"Package {name} has no {PACKAGE_MANIFEST_FILE}"
        )
    return str(package_dir)


def _extract(archive_path: Path, target_dir: Path) -> None:
    root = target_dir.resolve()
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            for member in archive.getmembers():
                path = (root / member.name).resolve()
                if path != root and root not in path.parents:
                    raise ConfigurationError(
                        f"Package archive entry {member.name} escapes {root}"
                    )
            archive.extractall(root, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise ProviderCallError(f"extraction of {archive_path} failed: {e}") from e
