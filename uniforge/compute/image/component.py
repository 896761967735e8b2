from __future__ import annotations

from typing import Any

from uniforge.config import Config
from uniforge.core import Component, Context, Response, operation
from uniforge.core.exceptions import (
    NotImplementedYetError,
    UnsupportedOperationError,
)

from ._models import CloudImage


class Image(Component):
    """Image lifecycle on one platform.

    Every platform provider implements the same operations, so callers
    only deal with the platform when the provider is resolved.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @property
    def platform(self) -> str:
        return self.__provider__.platform  # type: ignore[attr-defined]

    @operation()
    def build_image(self, ctx: Context) -> Response[str]:
        """Build the local image of a bare program.

        Args:
            ctx: Context bound to the configuration to build.

        Returns:
            Local artifact path, adapted by :meth:`customize_image`.
        """
        ...

    @operation()
    def build_image_with_package(
        self,
        ctx: Context,
        package_path: str,
    ) -> Response[str]:
        """Build the local image of an extracted package.

        Args:
            ctx: Context bound to the merged configuration.
            package_path: Extracted package directory.

        Returns:
            Local artifact path, adapted by :meth:`customize_image`.
        """
        ...

    @operation()
    def customize_image(self, ctx: Context) -> Response[str]:
        """Adapt the built artifact to the format the platform imports.

        Returns:
            Path of the adapted artifact.
        """
        return Response(result=ctx.config.run_config.imagename)

    @operation()
    def create_image(self, ctx: Context, image_path: str) -> Response[str]:
        """Realize a local artifact as a platform image.

        Args:
            ctx: Context.
            image_path: Local artifact path.

        Returns:
            Platform identifier of the created image.
        """
        ...

    @operation()
    def get_images(self, ctx: Context) -> Response[list[CloudImage]]:
        """Get the images managed by this tool on the platform."""
        ...

    @operation()
    def list_images(self, ctx: Context) -> Response[list[CloudImage]]:
        """Render the images managed by this tool."""
        ...

    @operation()
    def delete_image(self, ctx: Context, name: str) -> Response[None]:
        """Delete an image and what backs it.

        Raises:
            NotFoundError: No managed image has this name.
        """
        ...

    @operation()
    def resize_image(self, ctx: Context, name: str, size: str) -> Response[None]:
        """Resize an image.

        Args:
            ctx: Context.
            name: Image name.
            size: New size, e.g. ``2G``.

        Raises:
            UnsupportedOperationError: The platform cannot resize images.
        """
        raise UnsupportedOperationError("Operation not supported")

    @operation()
    def sync_image(self, config: Config, target: Any, name: str) -> Response[None]:
        """Copy an image from this platform to another.

        Args:
            config: Configuration.
            target: Image component of the target platform.
            name: Image name.
        """
        raise NotImplementedYetError(f"{self.platform} sync not yet implemented")

    @operation()
    def close(self) -> Response[None]:
        """Release the platform clients."""
        return Response(result=None)
