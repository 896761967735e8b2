"""
Builder running the unikernel mkfs tool.
"""

__all__ = ["Mkfs"]

import os
import shutil
import subprocess

from uniforge.config import Config, get_home_dir
from uniforge.core import Provider, Response, get_logger
from uniforge.core.exceptions import ConfigurationError, ProviderCallError

from .._helper import render_manifest

logger = get_logger(__name__)


class Mkfs(Provider):
    executable: str
    kernel: str | None
    boot: str | None

    def __init__(
        self,
        executable: str = "mkfs",
        kernel: str | None = None,
        boot: str | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            executable:
                mkfs tool, looked up on the search path when not
                absolute.
            kernel:
                Default kernel image, used when the configuration
                has none.
            boot:
                Default boot loader image.
        """
        self.executable = executable
        self.kernel = kernel
        self.boot = boot
        super().__init__(**kwargs)

    def build_image(self, config: Config) -> Response[str]:
        return Response(result=self._build(config, None))

    def build_image_from_package(
        self,
        package_path: str,
        config: Config,
    ) -> Response[str]:
        if not os.path.isdir(package_path):
            raise ConfigurationError(f"Package directory {package_path} not found")
        return Response(result=self._build(config, package_path))

    def _kernel_dir(self, config: Config) -> str:
        channel = "nightly" if config.nightly_build else "release"
        return str(get_home_dir() / channel)

    def _build(self, config: Config, source_dir: str | None) -> str:
        if not config.run_config.program:
            raise ConfigurationError("Please mention program to run")
        image_path = config.run_config.imagename
        if not image_path:
            raise ConfigurationError("Image path is not set")
        executable = shutil.which(self.executable) or self.executable
        kernel_dir = self._kernel_dir(config)
        kernel = config.kernel or self.kernel or os.path.join(kernel_dir, "kernel.img")
        boot = config.boot or self.boot or os.path.join(kernel_dir, "boot.img")

        try:
            os.makedirs(os.path.dirname(os.path.abspath(image_path)), exist_ok=True)
        except OSError as e:
            raise ProviderCallError(
                f"Cannot create directory for {image_path}: {e}"
            ) from e
        manifest = render_manifest(config, source_dir)
        cmd = [executable, "-k", kernel, "-b", boot, image_path]
        logger.debug("Building %s: %s", image_path, " ".join(cmd))
        try:
            subprocess.run(
                cmd,
                input=manifest,
                text=True,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise ProviderCallError(f"{self.executable} not found") from e
        except subprocess.CalledProcessError as e:
            raise ProviderCallError(
                f"{self.executable} failed for {image_path}:\n{e.stdout}"
            ) from e
        return image_path
