"""
Bucket on Google Cloud Storage.
"""

__all__ = ["GoogleCloudStorage"]

from typing import Any

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud.storage import Client

from uniforge._common.google_provider import GoogleProvider
from uniforge.config import Config
from uniforge.core import NCall, Response, get_logger
from uniforge.core.exceptions import NotFoundError, ProviderCallError

from .._helper import check_local_file, get_bucket_name, get_object_key

logger = get_logger(__name__)


class GoogleCloudStorage(GoogleProvider):
    nparams: dict[str, Any]

    _storage_client: Any

    def __init__(
        self,
        project: str | None = None,
        service_account_info: str | None = None,
        service_account_file: str | None = None,
        access_token: str | None = None,
        nparams: dict[str, Any] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            project:
                Google Cloud project name.
            service_account_info:
                Google service account info with serialized credentials.
            service_account_file:
                Google service account file with credentials.
            access_token:
                Google access token.
            nparams:
                Native params to Google Cloud Storage client.
        """
        self.nparams = nparams or dict()
        self._storage_client = None
        GoogleProvider.__init__(
            self,
            project=project,
            service_account_info=service_account_info,
            service_account_file=service_account_file,
            access_token=access_token,
            **kwargs,
        )

    def _get_client(self) -> Any:
        if self._storage_client is not None:
            return self._storage_client
        args: dict[str, Any] = dict()
        if self.project is not None:
            args["project"] = self.project
        credentials = self._get_credentials()
        if credentials is not None:
            args["credentials"] = credentials
        self._storage_client = Client(**(args | self.nparams))
        return self._storage_client

    def copy_to_bucket(
        self,
        config: Config,
        local_path: str,
        key: str | None = None,
    ) -> Response[str]:
        bucket = get_bucket_name(config)
        key = get_object_key(config, key)
        check_local_file(local_path)
        logger.info("Uploading %s to gs://%s/%s", local_path, bucket, key)
        blob = self._get_client().bucket(bucket).blob(key)
        NCall(
            blob.upload_from_filename,
            {"filename": local_path},
            None,
            {GoogleAPIError: ProviderCallError, OSError: ProviderCallError},
        ).invoke()
        return Response(result=key)

    def delete_from_bucket(self, config: Config, key: str) -> Response[None]:
        bucket = get_bucket_name(config)
        logger.info("Deleting gs://%s/%s", bucket, key)
        blob = self._get_client().bucket(bucket).blob(key)
        NCall(
            blob.delete,
            None,
            None,
            {NotFound: NotFoundError, GoogleAPIError: ProviderCallError},
        ).invoke()
        return Response(result=None)

    def close(self) -> Response[None]:
        if self._storage_client is not None:
            self._storage_client.close()
            self._storage_client = None
        return Response(result=None)
