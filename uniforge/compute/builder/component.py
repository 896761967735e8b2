from uniforge.config import Config
from uniforge.core import Component, Response, operation


class Builder(Component):
    """Turns a program and its run configuration into a raw disk image."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @operation()
    def build_image(self, config: Config) -> Response[str]:
        """Build an image from a bare program.

        Args:
            config: Configuration; the image is written to
                ``config.run_config.imagename``.

        Returns:
            Local image path.
        """
        ...

    @operation()
    def build_image_from_package(
        self,
        package_path: str,
        config: Config,
    ) -> Response[str]:
        """Build an image from an extracted package directory.

        Args:
            package_path: Extracted package directory.
            config: Merged configuration.

        Returns:
            Local image path.
        """
        ...
