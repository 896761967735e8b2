import pytest

from uniforge.compute.image import PLATFORM_PROVIDERS, Image, get_cloud_provider
from uniforge.compute.image.providers.amazon_ec2 import AmazonEC2
from uniforge.compute.image.providers.google_compute_engine import (
    GoogleComputeEngine,
)
from uniforge.compute.image.providers.onprem import OnPrem
from uniforge.config import CloudConfig
from uniforge.core.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "platform, provider_class",
    [
        ("onprem", OnPrem),
        ("aws", AmazonEC2),
        ("gcp", GoogleComputeEngine),
    ],
)
def test_resolves_known_platforms(platform, provider_class):
    image = get_cloud_provider(platform, CloudConfig(platform=platform))
    assert isinstance(image, Image)
    assert isinstance(image.provider, provider_class)
    assert image.platform == platform


@pytest.mark.parametrize("platform", ["azure", "do", "vultr", "vsphere", "mainframe"])
def test_unknown_platform(platform):
    with pytest.raises(ConfigurationError, match="unknown platform"):
        get_cloud_provider(platform, CloudConfig())


def test_empty_platform():
    with pytest.raises(ConfigurationError):
        get_cloud_provider("", CloudConfig())


def test_zone_override():
    cloud_config = CloudConfig(platform="aws", zone="us-west-2", bucket_name="b")
    image = get_cloud_provider("aws", cloud_config, zone="eu-central-1")
    assert image.provider.cloud_config.zone == "eu-central-1"
    assert image.provider.cloud_config.bucket_name == "b"
    assert image.provider.region == "eu-central-1"
    assert cloud_config.zone == "us-west-2"

    image = get_cloud_provider("aws", cloud_config)
    assert image.provider.region == "us-west-2"


def test_platform_overrides_cloud_config():
    image = get_cloud_provider("onprem", CloudConfig(platform="aws"))
    assert image.provider.cloud_config.platform == "onprem"


def test_registry_order_first_match_wins():
    registry = (
        PLATFORM_PROVIDERS[0]._replace(platform="aws"),
        *PLATFORM_PROVIDERS,
    )
    image = get_cloud_provider("aws", registry=registry)
    assert isinstance(image.provider, OnPrem)
