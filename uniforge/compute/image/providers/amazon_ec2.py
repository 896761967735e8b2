"""
Image provider for Amazon EC2.

Images are imported as EBS snapshots from S3 and registered as AMIs.
"""

__all__ = ["AmazonEC2"]

from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

from uniforge._common.amazon_provider import AmazonProvider
from uniforge.compute._common._amazon_ec2_helper import (
    NAME_TAG_KEY,
    build_tags,
    get_snapshot_id,
    get_tag,
    is_owned,
    owner_filter,
)
from uniforge.compute._common._waiter import Waiter, WaitState
from uniforge.config import PLATFORM_AWS, Config
from uniforge.core import Context, NCall, Response, Time, get_logger
from uniforge.core.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    ProviderCallError,
    UnsupportedOperationError,
)
from uniforge.storage.bucket import Bucket

from .._models import CloudImage
from ._base import BaseImageProvider

logger = get_logger(__name__)

ERROR_MAP = {
    ClientError: ProviderCallError,
    BotoCoreError: ProviderCallError,
}

SNAPSHOT_DESCRIPTION = "uniforge image"
ARCHITECTURE = "x86_64"
BOOT_MODE = "legacy-bios"
ROOT_DEVICE_NAME = "/dev/sda1"
VOLUME_TYPE = "gp2"
IMPORT_COMPLETED = "completed"
IMPORT_FAILED = ("deleted", "deleting")


class AmazonEC2(AmazonProvider, BaseImageProvider):
    platform = PLATFORM_AWS

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
                Cloud configuration, its zone is the AWS region.
            builder:
                Builder used to build images.
            bucket:
                Bucket used to stage images, defaults to S3 in the
                same region.
            poll_delay:
                Seconds between import task polls.
            poll_attempts:
                Maximum number of import task polls.
            sleep:
                Sleep function used between polls.
            clock:
                Monotonic clock used to measure the import.
            region:
                AWS region, defaults to the cloud configuration zone.
            aws_access_key_id:
                AWS access key ID.
            aws_secret_access_key:
                AWS secret access key.
            aws_session_token:
                AWS session token.
            profile_name:
                AWS profile name.
            nparams:
                Native parameters to the EC2 client.
        """
        self.bucket = bucket
        self.poll_delay = poll_delay
        self.poll_attempts = poll_attempts
        self._sleep = sleep
        self._clock = clock
        self._client = None
        super().__init__(**kwargs)
        if self.region is None:
            self.region = self.cloud_config.zone

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        self._client = self._create_client("ec2")
        return self._client

    def _get_bucket(self) -> Bucket:
        if self.bucket is None:
            self.bucket = Bucket(
                __provider__=dict(
                    type="amazon_s3",
                    parameters=dict(
                        region=self.region,
                        aws_access_key_id=self.aws_access_key_id,
                        aws_secret_access_key=self.aws_secret_access_key,
                        aws_session_token=self.aws_session_token,
                        profile_name=self.profile_name,
                    ),
                )
            )
        return self.bucket

    def _call(self, func: Callable, **args: Any) -> Any:
        return NCall(func, args, None, ERROR_MAP).invoke()

    def create_image(self, ctx: Context, image_path: str) -> Response[str]:
        config = self._get_config(ctx)
        bucket = config.cloud_config.bucket_name
        key = config.cloud_config.image_name

        self._get_bucket().copy_to_bucket(config=config, local_path=image_path, key=key)

        logger.info("Importing snapshot from s3 image file")
        res = self._call(
            self._get_client().import_snapshot,
            Description=SNAPSHOT_DESCRIPTION,
            DiskContainer={
                "Description": SNAPSHOT_DESCRIPTION,
                "Format": "raw",
                "UserBucket": {"S3Bucket": bucket, "S3Key": key},
            },
        )
        snapshot_id = self._wait_snapshot_ready(res["ImportTaskId"])

        tags, _ = build_tags(config.cloud_config.tags, key)
        logger.info("Deleting s3 image file")
        try:
            self._get_bucket().delete_from_bucket(config=config, key=key)
        except Exception:
            self._tag_orphan_snapshot(snapshot_id, tags)
            raise

        logger.info("Tagging snapshot")
        self._call(self._get_client().create_tags, Resources=[snapshot_id], Tags=tags)

        ami_name = f"{key}{Time.now_ns()}"
        logger.info("Registering image")
        res = self._call(
            self._get_client().register_image,
            Name=ami_name,
            Architecture=ARCHITECTURE,
            BootMode=BOOT_MODE,
            BlockDeviceMappings=[
                {
                    "DeviceName": ROOT_DEVICE_NAME,
                    "Ebs": {
                        "DeleteOnTermination": False,
                        "SnapshotId": snapshot_id,
                        "VolumeType": VOLUME_TYPE,
                    },
                }
            ],
            Description=f"{SNAPSHOT_DESCRIPTION} {key}",
            RootDeviceName=ROOT_DEVICE_NAME,
            VirtualizationType="hvm",
            EnaSupport=False,
        )
        image_id = res["ImageId"]

        logger.info("Tagging image")
        self._call(self._get_client().create_tags, Resources=[image_id], Tags=tags)
        return Response(result=image_id)

    def _tag_orphan_snapshot(self, snapshot_id: str, tags: list[dict]) -> None:
        # The snapshot exists already; keep it discoverable by its tags.
        try:
            self._call(self._get_client().create_tags, Resources=[snapshot_id], Tags=tags)
            logger.warning(
                "Snapshot %s was imported and tagged, but the staged "
                "object could not be deleted",
                snapshot_id,
            )
        except ProviderCallError as e:
            logger.error("Snapshot %s left untagged: %s", snapshot_id, e)

    def _wait_snapshot_ready(self, import_task_id: str) -> str:
        logger.info("waiting for snapshot - can take like 5min.... ")
        waiter = Waiter(
            name=f"import snapshot task {import_task_id}",
            delay=self.poll_delay,
            max_attempts=self.poll_attempts,
            sleep=self._sleep,
            clock=self._clock,
        )

        def poll() -> tuple[WaitState, Any]:
            res = self._call(
                self._get_client().describe_import_snapshot_tasks,
                ImportTaskIds=[import_task_id],
            )
            details = [
                task.get("SnapshotTaskDetail", {})
                for task in res.get("ImportSnapshotTasks", [])
            ]
            statuses = [detail.get("Status") for detail in details]
            if any(status in IMPORT_FAILED for status in statuses):
                messages = [d.get("StatusMessage") or d.get("Status") for d in details]
                return WaitState.FAILURE, ", ".join(m for m in messages if m)
            if statuses and all(status == IMPORT_COMPLETED for status in statuses):
                return WaitState.SUCCESS, details[0].get("SnapshotId")
            return WaitState.RETRY, None

        try:
            snapshot_id = waiter.wait(poll)
        except OperationTimeoutError:
            logger.error("import timed out after %f minutes", waiter.elapsed_minutes)
            raise
        except KeyboardInterrupt:
            logger.warning(
                "Interrupted, import task %s keeps running on AWS", import_task_id
            )
            raise
        logger.info("import done - took %f minutes", waiter.elapsed_minutes)
        if not snapshot_id:
            raise ProviderCallError(
                f"import snapshot task {import_task_id} completed without a snapshot"
            )
        return snapshot_id

    def get_images(self, ctx: Context) -> Response[list[CloudImage]]:
        res = self._call(
            self._get_client().describe_images,
            Owners=["self"],
            Filters=[owner_filter()],
        )
        images = []
        for image in res.get("Images", []):
            if not is_owned(image):
                continue
            images.append(
                CloudImage(
                    name=get_tag(image, NAME_TAG_KEY) or "n/a",
                    id=image.get("Name", ""),
                    status=image.get("State", ""),
                    created=image.get("CreationDate", ""),
                )
            )
        return Response(result=images)

    def delete_image(self, ctx: Context, name: str) -> Response[None]:
        res = self._call(
            self._get_client().describe_images,
            Owners=["self"],
            Filters=[{"Name": "name", "Values": [name]}, owner_filter()],
        )
        images = [image for image in res.get("Images", []) if is_owned(image)]
        if not images:
            raise NotFoundError(
                f"Error running deregister image operation: image {name} not found"
            )

        image_id = images[0]["ImageId"]
        snapshot_id = get_snapshot_id(images[0])

        logger.info("Deregistering image %s", image_id)
        self._call(self._get_client().deregister_image, ImageId=image_id)
        if snapshot_id:
            logger.info("Deleting snapshot %s", snapshot_id)
            self._call(self._get_client().delete_snapshot, SnapshotId=snapshot_id)
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
