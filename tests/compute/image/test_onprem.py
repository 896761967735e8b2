import os
from unittest import mock

import pytest

from uniforge.compute.image import Image, get_cloud_provider
from uniforge.config import Config, RunConfig, new_context, set_default_image_name
from uniforge.core import Response
from uniforge.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ProviderCallError,
)

from ._helpers import make_config, write_image


@pytest.fixture
def onprem() -> Image:
    return get_cloud_provider("onprem")


def test_build_and_create_image_locally(onprem, uniforge_home):
    config = set_default_image_name(
        Config(run_config=RunConfig(program="/bin/hello"))
    )
    ctx = new_context(config)
    builder = mock.Mock()
    onprem.provider.builder = builder

    def build(config):
        write_image(uniforge_home / "images" / "hello.img")
        return Response(result=config.run_config.imagename)

    builder.build_image.side_effect = build

    image_path = onprem.build_image(ctx).result
    assert image_path == str(uniforge_home / "images" / "hello.img")
    res = onprem.create_image(ctx, image_path)
    assert res.result == image_path
    builder.build_image.assert_called_once_with(config=config)


def test_create_image_copies_artifact(onprem, uniforge_home, tmp_path):
    image_path = write_image(tmp_path / "build" / "web.img")
    ctx = new_context(make_config("onprem", image_path))
    res = onprem.create_image(ctx, image_path)
    assert res.result == str(uniforge_home / "images" / "web.img")
    assert os.path.getsize(res.result) == 1024


def test_create_image_unwritable_images_dir(onprem, uniforge_home, tmp_path):
    image_path = write_image(tmp_path / "build" / "web.img")
    images_dir = uniforge_home / "images"
    images_dir.rmdir()
    images_dir.write_text("not a directory")
    ctx = new_context(make_config("onprem", image_path))
    with pytest.raises(ProviderCallError) as e:
        onprem.create_image(ctx, image_path)
    assert isinstance(e.value.__cause__, OSError)


def test_create_image_missing_artifact(onprem, tmp_path):
    image_path = str(tmp_path / "missing.img")
    ctx = new_context(make_config("onprem", image_path))
    with pytest.raises(NotFoundError):
        onprem.create_image(ctx, image_path)


def test_get_and_delete_images(onprem, uniforge_home):
    write_image(uniforge_home / "images" / "a.img")
    write_image(uniforge_home / "images" / "b.img", size=2048)
    write_image(uniforge_home / "images" / "notes.txt")
    ctx = new_context(Config())

    images = onprem.get_images(ctx).result
    assert [image.name for image in images] == ["a.img", "b.img"]
    assert images[1].status == "2048 bytes"

    onprem.delete_image(ctx, "a")
    onprem.delete_image(ctx, "b.img")
    assert onprem.get_images(ctx).result == []

    with pytest.raises(NotFoundError):
        onprem.delete_image(ctx, "a")


def test_resize_image(onprem, uniforge_home):
    path = write_image(uniforge_home / "images" / "hello.img", size=1024)
    ctx = new_context(Config())

    onprem.resize_image(ctx, "hello", "1M")
    assert os.path.getsize(path) == 1 << 20

    with pytest.raises(ConfigurationError):
        onprem.resize_image(ctx, "hello", "512K")
    assert os.path.getsize(path) == 1 << 20

    with pytest.raises(ConfigurationError):
        onprem.resize_image(ctx, "hello", "big")
    with pytest.raises(NotFoundError):
        onprem.resize_image(ctx, "missing", "2G")


def test_sync_image_hands_artifact_to_target(onprem, uniforge_home):
    path = write_image(uniforge_home / "images" / "hello.img")
    config = make_config("onprem", "", image_name="")
    target = mock.Mock()
    target.platform = "aws"
    target.customize_image.return_value = Response(result=path)

    onprem.sync_image(config, target, "hello")

    ctx = target.customize_image.call_args.args[0]
    assert ctx.config.cloud_config.platform == "aws"
    assert ctx.config.cloud_config.image_name == "hello"
    assert ctx.config.run_config.imagename == path
    assert ctx.get("platform") == "aws"
    target.create_image.assert_called_once_with(ctx, path)


def test_sync_image_requires_target_bucket(onprem, uniforge_home):
    write_image(uniforge_home / "images" / "hello.img")
    config = make_config("onprem", "", bucket_name="")
    target = mock.Mock()
    target.platform = "aws"
    with pytest.raises(ConfigurationError):
        onprem.sync_image(config, target, "hello")
    target.create_image.assert_not_called()


def test_sync_image_missing(onprem):
    with pytest.raises(NotFoundError):
        onprem.sync_image(Config(), mock.Mock(), "missing")


@pytest.mark.parametrize(
    "size, expected",
    [("512", 512), ("512M", 512 << 20), ("2G", 2 << 30), ("1gb", 1 << 30), ("4KiB", 4096)],
)
def test_parse_size(size, expected):
    from uniforge.compute.image import parse_size

    assert parse_size(size) == expected
