"""
Bucket on Amazon S3.
"""

__all__ = ["AmazonS3"]

from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from uniforge._common.amazon_provider import AmazonProvider
from uniforge.config import Config
from uniforge.core import NCall, Response, get_logger
from uniforge.core.exceptions import ProviderCallError

from .._helper import check_local_file, get_bucket_name, get_object_key

logger = get_logger(__name__)

ERROR_MAP = {
    ClientError: ProviderCallError,
    BotoCoreError: ProviderCallError,
    S3UploadFailedError: ProviderCallError,
    OSError: ProviderCallError,
}


class AmazonS3(AmazonProvider):
    _client: Any

    def __init__(self, **kwargs):
        """Initialize.

        Args:
            region:
                AWS region name.
            aws_access_key_id:
                AWS access key id.
            aws_secret_access_key:
                AWS secret access key.
            aws_session_token:
                AWS session token.
            profile_name:
                AWS profile name.
            nparams:
                Native parameters to boto3 client.
        """
        self._client = None
        super().__init__(**kwargs)

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        self._client = self._create_client("s3")
        return self._client

    def copy_to_bucket(
        self,
        config: Config,
        local_path: str,
        key: str | None = None,
    ) -> Response[str]:
        bucket = get_bucket_name(config)
        key = get_object_key(config, key)
        check_local_file(local_path)
        logger.info("Uploading %s to s3://%s/%s", local_path, bucket, key)
        NCall(
            self._get_client().upload_file,
            {"Filename": local_path, "Bucket": bucket, "Key": key},
            None,
            ERROR_MAP,
        ).invoke()
        return Response(result=key)

    def delete_from_bucket(self, config: Config, key: str) -> Response[None]:
        bucket = get_bucket_name(config)
        logger.info("Deleting s3://%s/%s", bucket, key)
        NCall(
            self._get_client().delete_object,
            {"Bucket": bucket, "Key": key},
            None,
            ERROR_MAP,
        ).invoke()
        return Response(result=None)

    def close(self) -> Response[None]:
        if self._client is not None:
            self._client.close()
            self._client = None
        return Response(result=None)
