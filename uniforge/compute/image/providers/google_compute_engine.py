"""
Image provider for Google Compute Engine.

Raw images are packed as ``disk.raw`` inside a gzipped tarball, staged
in Cloud Storage and inserted as Compute Engine images.
"""

__all__ = ["GoogleComputeEngine"]

import os
import tarfile
from typing import Any, Callable

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from uniforge._common.google_provider import GoogleProvider
from uniforge.compute._common._waiter import Waiter, WaitState
from uniforge.config import PLATFORM_GCP
from uniforge.core import Context, Response, Time, get_logger
from uniforge.core.exceptions import (
    NotFoundError,
    ProviderCallError,
    UnsupportedOperationError,
)
from uniforge.storage.bucket import Bucket

from .._models import CloudImage
from ._base import BaseImageProvider

logger = get_logger(__name__)

OWNER_LABEL_KEY = "createdby"
OWNER_LABEL_VALUE = "ops"
DISK_FILE_NAME = "disk.raw"
ARCHIVE_EXTENSION = ".tar.gz"


class GoogleComputeEngine(GoogleProvider, BaseImageProvider):
    platform = PLATFORM_GCP

    bucket: Bucket | None
    poll_delay: float
    poll_attempts: int

    _client: Any
    _sleep: Callable[[float], None]
    _clock: Callable[[], float]

    def __init__(
        self,
        bucket: Bucket | None = None,
        poll_delay: float = 15,
        poll_attempts: int = 120,
        sleep: Callable[[float], None] = Time.sleep,
        clock: Callable[[], float] = Time.monotonic,
        **kwargs,
    ):
        """Initialize.

        Args:
            cloud_config:
                Cloud configuration, its project id names the project.
            builder:
                Builder used to build images.
            bucket:
                Bucket used to stage images, defaults to Cloud Storage.
            poll_delay:
                Seconds between operation polls.
            poll_attempts:
                Maximum number of operation polls.
            project:
                Google Cloud project, defaults to the configured project id.
            service_account_info:
                Google service account info with serialized credentials.
            service_account_file:
                Google service account file with credentials.
            access_token:
                Google access token.
        """
        self.bucket = bucket
        self.poll_delay = poll_delay
        self.poll_attempts = poll_attempts
        self._sleep = sleep
        self._clock = clock
        self._client = None
        super().__init__(**kwargs)
        if not self.project:
            self.project = self.cloud_config.project_id or None

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        credentials = self._get_credentials()
        if credentials is not None:
            self._client = build(
                "compute", "v1", credentials=credentials, cache_discovery=False
            )
        else:
            self._client = build("compute", "v1", cache_discovery=False)
        return self._client

    def _get_bucket(self) -> Bucket:
        if self.bucket is None:
            self.bucket = Bucket(
                __provider__=dict(
                    type="google_cloud_storage",
                    parameters=dict(
                        project=self.project,
                        service_account_info=self.service_account_info,
                        service_account_file=self.service_account_file,
                        access_token=self.access_token,
                    ),
                )
            )
        return self.bucket

    def _execute(self, request: Any, name: str) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            if e.status_code == 404:
                raise NotFoundError(f"{name} not found") from e
            raise ProviderCallError(f"{name}: {e}") from e

    def customize_image(self, ctx: Context) -> Response[str]:
        config = self._get_config(ctx)
        image_path = config.run_config.imagename
        archive_path = os.path.join(
            os.path.dirname(image_path),
            f"{config.cloud_config.image_name}{ARCHIVE_EXTENSION}",
        )
        try:
            with tarfile.open(archive_path, "w:gz") as archive:
                archive.add(image_path, arcname=DISK_FILE_NAME)
        except (tarfile.TarError, OSError) as e:
            raise ProviderCallError(f"Cannot pack {image_path}: {e}") from e
        return Response(result=archive_path)

    def create_image(self, ctx: Context, image_path: str) -> Response[str]:
        config = self._get_config(ctx)
        project = self._get_project()
        bucket = config.cloud_config.bucket_name
        image_name = config.cloud_config.image_name
        key = f"{image_name}{ARCHIVE_EXTENSION}"

        self._get_bucket().copy_to_bucket(config=config, local_path=image_path, key=key)

        labels = {
            tag.key.lower(): tag.value.lower() for tag in config.cloud_config.tags
        }
        labels[OWNER_LABEL_KEY] = OWNER_LABEL_VALUE
        body = {
            "name": image_name,
            "labels": labels,
            "rawDisk": {
                "source": f"https://storage.googleapis.com/{bucket}/{key}"
            },
        }
        logger.info("Creating image %s", image_name)
        operation = self._execute(
            self._get_client().images().insert(project=project, body=body),
            f"image {image_name}",
        )
        self._wait_operation(project, operation["name"])

        logger.info("Deleting staged image file")
        self._get_bucket().delete_from_bucket(config=config, key=key)
        return Response(result=image_name)

    def _wait_operation(self, project: str, operation_name: str) -> None:
        waiter = Waiter(
            name=f"operation {operation_name}",
            delay=self.poll_delay,
            max_attempts=self.poll_attempts,
            sleep=self._sleep,
            clock=self._clock,
        )

        def poll() -> tuple[WaitState, Any]:
            operation = self._execute(
                self._get_client().globalOperations().get(
                    project=project, operation=operation_name
                ),
                f"operation {operation_name}",
            )
            if operation.get("status") != "DONE":
                return WaitState.RETRY, None
            if "error" in operation:
                errors = operation["error"].get("errors", [])
                return WaitState.FAILURE, ", ".join(
                    e.get("message", "") for e in errors
                )
            return WaitState.SUCCESS, operation

        waiter.wait(poll)
        logger.info("%s done - took %f minutes", operation_name, waiter.elapsed_minutes)

    def get_images(self, ctx: Context) -> Response[list[CloudImage]]:
        project = self._get_project()
        images = []
        request = self._get_client().images().list(
            project=project,
            filter=f"labels.{OWNER_LABEL_KEY}={OWNER_LABEL_VALUE}",
        )
        while request is not None:
            res = self._execute(request, f"images of {project}")
            for item in res.get("items", []):
                if not _is_owned(item):
                    continue
                images.append(
                    CloudImage(
                        name=item["name"],
                        id=str(item.get("id", "")),
                        status=item.get("status", ""),
                        created=item.get("creationTimestamp", ""),
                    )
                )
            request = self._get_client().images().list_next(
                previous_request=request, previous_response=res
            )
        return Response(result=images)

    def delete_image(self, ctx: Context, name: str) -> Response[None]:
        project = self._get_project()
        image = self._execute(
            self._get_client().images().get(project=project, image=name),
            f"image {name}",
        )
        if not _is_owned(image):
            raise NotFoundError(f"image {name} not found")
        logger.info("Deleting image %s", name)
        operation = self._execute(
            self._get_client().images().delete(project=project, image=name),
            f"image {name}",
        )
        self._wait_operation(project, operation["name"])
        return Response(result=None)

    def resize_image(self, ctx: Context, name: str, size: str) -> Response[None]:
        raise UnsupportedOperationError("Operation not supported")

    def close(self) -> Response[None]:
        if self.bucket is not None:
            self.bucket.close()
        if self._client is not None:
            self._client.close()
            self._client = None
        return Response(result=None)


def _is_owned(image: dict[str, Any]) -> bool:
    labels = image.get("labels") or {}
    return labels.get(OWNER_LABEL_KEY) == OWNER_LABEL_VALUE
