from __future__ import annotations

from rich.console import Console

from uniforge.compute.builder import Builder
from uniforge.config import CloudConfig, Config
from uniforge.core import Context, Provider, Response
from uniforge.core.exceptions import ConfigurationError

from .._helper import render_images
from .._models import CloudImage


class BaseImageProvider(Provider):
    platform: str

    cloud_config: CloudConfig
    builder: Builder | None
    console: Console | None

    def __init__(
        self,
        cloud_config: CloudConfig | None = None,
        builder: Builder | None = None,
        console: Console | None = None,
        **kwargs,
    ):
        self.cloud_config = cloud_config or CloudConfig(platform=self.platform)
        self.builder = builder
        self.console = console
        super().__init__(**kwargs)

    def _get_builder(self) -> Builder:
        if self.builder is None:
            self.builder = Builder(__provider__="default")
        return self.builder

    def _get_config(self, ctx: Context) -> Config:
        config = ctx.config
        if not isinstance(config, Config):
            raise ConfigurationError("Context is not bound to a configuration")
        if config.cloud_config.platform != self.platform:
            raise ConfigurationError(
                f"Context is bound to platform '{config.cloud_config.platform}', "
                f"provider is '{self.platform}'"
            )
        return config

    def build_image(self, ctx: Context) -> Response[str]:
        config = self._get_config(ctx)
        self._get_builder().build_image(config=config)
        return self.customize_image(ctx)

    def build_image_with_package(
        self,
        ctx: Context,
        package_path: str,
    ) -> Response[str]:
        config = self._get_config(ctx)
        self._get_builder().build_image_from_package(
            package_path=package_path, config=config
        )
        return self.customize_image(ctx)

    def customize_image(self, ctx: Context) -> Response[str]:
        return Response(result=self._get_config(ctx).run_config.imagename)

    def get_images(self, ctx: Context) -> Response[list[CloudImage]]:
        raise NotImplementedError

    def list_images(self, ctx: Context) -> Response[list[CloudImage]]:
        images = self.get_images(ctx).result
        render_images(images, self.console)
        return Response(result=images)

    def close(self) -> Response[None]:
        return Response(result=None)
