from uniforge.config import Config
from uniforge.core import Component, Response, operation


class Bucket(Component):
    """Object storage used to stage images before import."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @operation()
    def copy_to_bucket(
        self,
        config: Config,
        local_path: str,
        key: str | None = None,
    ) -> Response[str]:
        """Upload a local file to the configured bucket.

        Args:
            config: Configuration naming the bucket.
            local_path: File to upload.
            key: Object key, defaults to the cloud image name.

        Returns:
            Object key.
        """
        ...

    @operation()
    def delete_from_bucket(self, config: Config, key: str) -> Response[None]:
        """Delete an object from the configured bucket.

        Args:
            config: Configuration naming the bucket.
            key: Object key.
        """
        ...

    @operation()
    def close(self) -> Response[None]:
        """Close the storage client."""
        return Response(result=None)
