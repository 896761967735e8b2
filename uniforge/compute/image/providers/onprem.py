"""
Image provider for the local machine.
"""

__all__ = ["OnPrem"]

import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from uniforge.config import (
    IMAGE_EXTENSION,
    PLATFORM_ONPREM,
    Config,
    get_images_dir,
    new_context,
    validate_cloud_config,
)
from uniforge.core import Context, NCall, Response, get_logger
from uniforge.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ProviderCallError,
)

from .._helper import parse_size
from .._models import CloudImage
from ._base import BaseImageProvider

logger = get_logger(__name__)

ERROR_MAP = {OSError: ProviderCallError}


class OnPrem(BaseImageProvider):
    platform = PLATFORM_ONPREM

    def __init__(self, **kwargs):
        """Initialize.

        Args:
            cloud_config:
                Cloud configuration.
            builder:
                Builder used to build images.
            console:
                Console list output is rendered to.
        """
        super().__init__(**kwargs)

    def _images_dir(self, ctx: Context | None = None) -> Path:
        if ctx is not None and ctx.get("images_dir"):
            return Path(ctx.get("images_dir"))
        return get_images_dir()

    def _find_image(self, name: str, ctx: Context | None = None) -> Path:
        images_dir = self._images_dir(ctx)
        for candidate in (name, f"{name}{IMAGE_EXTENSION}"):
            path = images_dir / os.path.basename(candidate)
            if path.is_file():
                return path
        raise NotFoundError(f"image {name} not found")

    def create_image(self, ctx: Context, image_path: str) -> Response[str]:
        self._get_config(ctx)
        if not os.path.isfile(image_path):
            raise NotFoundError(f"image file {image_path} not found")
        images_dir = self._images_dir(ctx)
        _call(images_dir.mkdir, parents=True, exist_ok=True)
        target = images_dir / os.path.basename(image_path)
        if Path(image_path).resolve() != target.resolve():
            _call(shutil.copyfile, image_path, target)
        logger.debug("Image available at %s", target)
        return Response(result=str(target))

    def get_images(self, ctx: Context) -> Response[list[CloudImage]]:
        images_dir = self._images_dir(ctx)
        images = []
        if images_dir.is_dir():
            for entry in sorted(images_dir.glob(f"*{IMAGE_EXTENSION}")):
                if not entry.is_file():
                    continue
                stat = entry.stat()
                created = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
                images.append(
                    CloudImage(
                        name=entry.name,
                        id=str(entry),
                        status=f"{stat.st_size} bytes",
                        created=created.isoformat(timespec="seconds"),
                    )
                )
        return Response(result=images)

    def delete_image(self, ctx: Context, name: str) -> Response[None]:
        path = self._find_image(name, ctx)
        _call(path.unlink)
        logger.info("Deleted image %s", path)
        return Response(result=None)

    def resize_image(self, ctx: Context, name: str, size: str) -> Response[None]:
        path = self._find_image(name, ctx)
        new_size = parse_size(size)
        current = path.stat().st_size
        if new_size < current:
            raise ConfigurationError(
                f"cannot shrink {path.name} from {current} to {new_size} bytes"
            )
        _call(os.truncate, path, new_size)
        logger.info("Resized image %s to %d bytes", path, new_size)
        return Response(result=None)

    def sync_image(self, config: Config, target: Any, name: str) -> Response[None]:
        path = self._find_image(name)
        image_name = path.name
        if image_name.endswith(IMAGE_EXTENSION):
            image_name = image_name[: -len(IMAGE_EXTENSION)]
        target_config = config.update_cloud_config(
            platform=target.platform, image_name=image_name
        ).update_run_config(imagename=str(path))
        validate_cloud_config(target_config)
        ctx = new_context(target_config)
        logger.info("Syncing image %s to %s", name, target.platform)
        image_path = target.customize_image(ctx).result
        target.create_image(ctx, image_path)
        return Response(result=None)


def _call(func, *args, **kwargs) -> Any:
    return NCall(
        func, list(args), nargs=kwargs, error_map=ERROR_MAP
    ).invoke()
