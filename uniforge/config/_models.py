from __future__ import annotations

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_pascal

from uniforge.core import DataModel

from ._constants import PLATFORM_ONPREM


class ConfigModel(DataModel):
    """Frozen configuration value.

    Accepts both PascalCase keys (the on-disk convention of config
    files and package manifests) and field names.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )


class Tag(ConfigModel):
    """Key/value tag applied to cloud resources."""

    key: str
    value: str


class CloudConfig(ConfigModel):
    """Cloud specific configuration.

    Attributes:
        platform: Target platform identifier.
        project_id: Cloud project (GCP).
        zone: Zone or region of the platform.
        bucket_name: Bucket used to stage images.
        image_name: Name of the image in the cloud.
        tags: Tags applied to created resources.
    """

    platform: str = PLATFORM_ONPREM
    project_id: str | None = Field(default=None, alias="ProjectID")
    zone: str | None = None
    bucket_name: str = ""
    image_name: str = ""
    tags: list[Tag] = Field(default_factory=list)


class RunConfig(ConfigModel):
    """Run configuration of the program inside the image.

    Attributes:
        program: Program to run.
        args: Program arguments, the program itself first.
        klibs: Kernel libraries to include.
        mounts: Volume id to mount path mapping.
        imagename: Path of the local disk image.
        ports: Ports to expose when running locally.
        memory: Memory size for local runs.
    """

    program: str = ""
    args: list[str] = Field(default_factory=list)
    klibs: list[str] = Field(default_factory=list)
    mounts: dict[str, str] = Field(default_factory=dict)
    imagename: str = ""
    ports: list[int] = Field(default_factory=list)
    memory: str = "2G"


class Config(ConfigModel):
    """Unit of intent for one command invocation.

    Attributes:
        cloud_config: Cloud specific configuration.
        run_config: Run configuration.
        build_dir: Directory used while building.
        kernel: Kernel image path.
        boot: Boot loader image path.
        nightly_build: Use nightly kernel builds.
        env: Environment variables of the program.
        files: Files to add to the image.
        dirs: Directories to add to the image.
        version: Package version when read from a manifest.
    """

    cloud_config: CloudConfig = Field(default_factory=CloudConfig)
    run_config: RunConfig = Field(default_factory=RunConfig)
    build_dir: str = ""
    kernel: str = ""
    boot: str = ""
    nightly_build: bool = False
    env: dict[str, str] = Field(default_factory=dict)
    files: list[str] = Field(default_factory=list)
    dirs: list[str] = Field(default_factory=list)
    version: str | None = None

    @property
    def platform(self) -> str:
        return self.cloud_config.platform

    def update(self, **kwargs) -> Config:
        return self.model_copy(update=kwargs)

    def update_cloud_config(self, **kwargs) -> Config:
        return self.update(cloud_config=self.cloud_config.model_copy(update=kwargs))

    def update_run_config(self, **kwargs) -> Config:
        return self.update(run_config=self.run_config.model_copy(update=kwargs))
