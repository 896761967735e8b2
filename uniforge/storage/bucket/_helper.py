import os

from uniforge.config import Config
from uniforge.core.exceptions import ConfigurationError


def get_bucket_name(config: Config) -> str:
    bucket = config.cloud_config.bucket_name
    if not bucket:
        raise ConfigurationError("Please specify a cloud bucket in config")
    return bucket


def get_object_key(config: Config, key: str | None) -> str:
    key = key or config.cloud_config.image_name
    if not key:
        raise ConfigurationError("Image name is not set")
    return key


def check_local_file(local_path: str) -> None:
    if not os.path.isfile(local_path):
        raise ConfigurationError(f"Image file {local_path} not found")
