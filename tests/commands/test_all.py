import json
from unittest import mock

import pytest

from uniforge.commands import (
    create_image,
    delete_image,
    list_images,
    resize_image,
    sync_image,
)
from uniforge.core import Response
from uniforge.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    NotImplementedYetError,
    UnsupportedOperationError,
)
from uniforge.main import build_parser, main


@pytest.fixture
def builder():
    def build(config):
        path = config.run_config.imagename
        with open(path, "wb") as f:
            f.write(b"\0" * 512)
        return Response(result=path)

    def build_from_package(package_path, config):
        return build(config)

    builder = mock.Mock()
    builder.build_image.side_effect = build
    builder.build_image_from_package.side_effect = build_from_package
    return builder


@pytest.fixture
def no_cloud():
    with mock.patch("boto3.Session") as session, mock.patch(
        "uniforge.compute.image.providers.google_compute_engine.build"
    ) as build:
        yield session, build
    session.assert_not_called()
    build.assert_not_called()


def _write_config(tmp_path, obj) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(obj))
    return str(path)


def test_create_onprem_image(builder, no_cloud, uniforge_home, capsys):
    name = create_image(args=["/bin/hello", "-v"], parameters=dict(builder=builder))

    assert name == "hello-image"
    assert (uniforge_home / "images" / "hello.img").is_file()
    config = builder.build_image.call_args.kwargs["config"]
    assert config.run_config.program == "/bin/hello"
    assert config.run_config.args == ["/bin/hello", "-v"]
    assert "onprem image 'hello-image' created..." in capsys.readouterr().out


def test_create_image_explicit_name(builder, no_cloud, uniforge_home):
    name = create_image(
        args=["/bin/hello"], image_name="web", parameters=dict(builder=builder)
    )
    assert name == "web"
    assert (uniforge_home / "images" / "web.img").is_file()

    images = list_images()
    assert [image.name for image in images] == ["web.img"]

    delete_image("web")
    assert list_images() == []


def test_create_image_program_from_config(builder, no_cloud, tmp_path):
    path = _write_config(tmp_path, {"Args": ["/bin/server", "--port", "80"]})
    create_image(config_path=path, parameters=dict(builder=builder))
    config = builder.build_image.call_args.kwargs["config"]
    assert config.run_config.program == "/bin/server"


def test_create_image_without_program(builder, no_cloud):
    with pytest.raises(ConfigurationError, match="Please mention program to run"):
        create_image(parameters=dict(builder=builder))
    builder.build_image.assert_not_called()


def test_create_aws_image_without_bucket(builder, no_cloud, tmp_path):
    path = _write_config(
        tmp_path, {"CloudConfig": {"Platform": "aws", "BucketName": ""}}
    )
    with pytest.raises(ConfigurationError, match="bucket"):
        create_image(
            config_path=path, args=["/bin/hello"], parameters=dict(builder=builder)
        )
    builder.build_image.assert_not_called()


def test_create_image_unknown_platform(builder, no_cloud):
    with pytest.raises(ConfigurationError):
        create_image(
            platform="mainframe", args=["/bin/hello"], parameters=dict(builder=builder)
        )


def test_create_image_malformed_mount(builder, no_cloud):
    with pytest.raises(ConfigurationError):
        create_image(
            args=["/bin/hello"],
            mounts=["data"],
            parameters=dict(builder=builder),
        )
    builder.build_image.assert_not_called()


def test_create_image_with_mounts_and_klibs(builder, no_cloud, tmp_path, uniforge_home):
    (uniforge_home / "volumes" / "data:1234.raw").write_bytes(b"")
    path = _write_config(
        tmp_path, {"BuildDir": "/build", "Env": {"RADAR_KEY": "k"}}
    )
    create_image(
        config_path=path,
        args=["/bin/hello"],
        mounts=["data:/var/data"],
        nightly=True,
        parameters=dict(builder=builder),
    )
    config = builder.build_image.call_args.kwargs["config"]
    assert config.run_config.mounts == {"1234": "/var/data"}
    assert config.build_dir == "/build"
    assert config.nightly_build is True
    assert config.run_config.klibs == ["tls", "radar"]


def test_create_image_with_package(builder, no_cloud, tmp_path, uniforge_home):
    package_dir = tmp_path / "node_v14"
    package_dir.mkdir()
    (package_dir / "package.manifest").write_text(
        json.dumps(
            {
                "Program": "node_v14/node",
                "Args": ["node"],
                "Env": {"NODE_ENV": "production"},
                "RunConfig": {"Klibs": ["ntp"]},
            }
        )
    )
    path = _write_config(tmp_path, {"Env": {"NODE_ENV": "test"}})
    with mock.patch(
        "uniforge.commands.image.download_and_extract_package",
        return_value=str(package_dir),
    ) as download:
        name = create_image(
            config_path=path,
            package="node_v14",
            args=["app.js"],
            parameters=dict(builder=builder),
        )

    download.assert_called_once_with("node_v14")
    assert name == "node-image"
    kwargs = builder.build_image_from_package.call_args.kwargs
    assert kwargs["package_path"] == str(package_dir)
    config = kwargs["config"]
    assert config.run_config.program == "node_v14/node"
    assert config.run_config.args == ["app.js"]
    assert config.run_config.klibs == ["ntp"]
    assert config.env == {"NODE_ENV": "test"}
    assert config.run_config.imagename == str(uniforge_home / "images" / "node.img")


def test_list_images(no_cloud, uniforge_home):
    (uniforge_home / "images" / "hello.img").write_bytes(b"\0")
    images = list_images()
    assert [image.name for image in images] == ["hello.img"]


def test_delete_image(no_cloud, uniforge_home):
    (uniforge_home / "images" / "hello.img").write_bytes(b"\0")
    delete_image("hello")
    assert not (uniforge_home / "images" / "hello.img").exists()
    with pytest.raises(NotFoundError):
        delete_image("hello")


def test_resize_image_on_aws_is_unsupported(tmp_path):
    path = _write_config(
        tmp_path, {"CloudConfig": {"Platform": "aws", "BucketName": "b"}}
    )
    with mock.patch("boto3.Session") as session:
        with pytest.raises(UnsupportedOperationError):
            resize_image("hello", "2G", config_path=path)
    session.assert_not_called()


def test_sync_from_unsupported_source(no_cloud):
    with pytest.raises(NotImplementedYetError, match="gcp sync not yet implemented"):
        sync_image("hello", source="gcp", platform="aws")


def test_sync_onprem_to_aws(uniforge_home, tmp_path):
    (uniforge_home / "images" / "hello.img").write_bytes(b"\0")
    path = _write_config(
        tmp_path,
        {"CloudConfig": {"Platform": "aws", "BucketName": "b", "Zone": "us-west-2"}},
    )
    with mock.patch(
        "uniforge.compute.image.providers.amazon_ec2.AmazonEC2.create_image",
        autospec=True,
        return_value=Response(result="ami-1"),
    ) as create:
        sync_image("hello", config_path=path)

    ctx = create.call_args.kwargs["ctx"]
    assert ctx.config.cloud_config.platform == "aws"
    assert ctx.config.cloud_config.image_name == "hello"
    assert create.call_args.kwargs["image_path"] == str(uniforge_home / "images" / "hello.img")


def test_parser():
    args = build_parser().parse_args(
        [
            "image",
            "create",
            "-t",
            "aws",
            "-a",
            "/bin/hello",
            "-a",
            "world",
            "--mounts",
            "data:/data",
            "-n",
            "-i",
            "web",
        ]
    )
    assert args.target_cloud == "aws"
    assert args.args == ["/bin/hello", "world"]
    assert args.mounts == ["data:/data"]
    assert args.nightly is True
    assert args.imagename == "web"

    args = build_parser().parse_args(["image", "sync", "hello", "-t", "aws"])
    assert args.source_cloud == "onprem"


def test_zone_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLOUD_ZONE", "us-central1-a")
    args = build_parser().parse_args(["image", "list"])
    assert args.zone == "us-central1-a"


def test_main_exit_codes(no_cloud, tmp_path, uniforge_home, capsys):
    (uniforge_home / "images" / "hello.img").write_bytes(b"\0")
    assert main(["image", "delete", "hello"]) == 0

    assert main(["image", "delete", "hello"]) == 1
    assert "not found" in capsys.readouterr().err

    path = _write_config(
        tmp_path, {"CloudConfig": {"Platform": "aws", "BucketName": ""}}
    )
    assert main(["image", "create", "-c", path, "-a", "/bin/hello"]) == 1
    assert "bucket" in capsys.readouterr().err

    assert main(["image", "sync", "hello", "-s", "gcp", "-t", "aws"]) == 1
    assert "gcp sync not yet implemented" in capsys.readouterr().err


def test_create_keeps_configured_zone(monkeypatch, tmp_path):
    monkeypatch.setenv("GOOGLE_CLOUD_ZONE", "us-central1-a")
    path = _write_config(
        tmp_path,
        {"CloudConfig": {"Platform": "aws", "BucketName": "b", "Zone": "us-east-1"}},
    )
    with mock.patch(
        "uniforge.compute.image.providers._base.BaseImageProvider.build_image",
        autospec=True,
        return_value=Response(result=str(tmp_path / "hello.img")),
    ), mock.patch(
        "uniforge.compute.image.providers.amazon_ec2.AmazonEC2.create_image",
        autospec=True,
        return_value=Response(result="ami-1"),
    ) as create:
        assert main(["image", "create", "-c", path, "-a", "/bin/hello"]) == 0

    provider = create.call_args.args[0]
    assert provider.region == "us-east-1"
    assert create.call_args.kwargs["ctx"].config.cloud_config.zone == "us-east-1"

    args = build_parser().parse_args(["image", "create", "-z", "eu-west-1"])
    assert args.zone == "eu-west-1"
    args = build_parser().parse_args(["image", "create"])
    assert args.zone is None


def test_main_reports_local_io_errors(no_cloud, uniforge_home, capsys):
    images_dir = uniforge_home / "images"
    images_dir.rmdir()
    images_dir.write_text("not a directory")
    with mock.patch("subprocess.run") as run:
        assert main(["image", "create", "-a", "/bin/true"]) == 1
    run.assert_not_called()
    assert "error:" in capsys.readouterr().err


def test_main_rejects_unknown_command():
    with pytest.raises(SystemExit) as e:
        main(["image", "explode"])
    assert e.value.code != 0
