"""
QEMU hypervisor.
"""

__all__ = ["Qemu"]

import os
import subprocess

from uniforge.core import Context, Provider, Response, get_logger
from uniforge.core.exceptions import ConflictError, ProviderCallError

logger = get_logger(__name__)


class Qemu(Provider):
    executable: str
    memory: str
    accel: str | None
    extra_args: list[str]

    _process: subprocess.Popen | None

    def __init__(
        self,
        executable: str = "qemu-system-x86_64",
        memory: str = "2G",
        accel: str | None = None,
        extra_args: list[str] | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            executable:
                QEMU system emulator path.
            memory:
                Guest memory size.
            accel:
                Accelerator, defaults to kvm when /dev/kvm is usable
                and tcg otherwise.
            extra_args:
                Additional QEMU arguments.
        """
        self.executable = executable
        self.memory = memory
        self.accel = accel
        self.extra_args = extra_args or []
        self._process = None
        super().__init__(**kwargs)

    def __setup__(self, context: Context | None = None) -> None:
        if self.accel is None:
            kvm = "/dev/kvm"
            usable = os.path.exists(kvm) and os.access(kvm, os.R_OK | os.W_OK)
            self.accel = "kvm" if usable else "tcg"

    def build_command(self, image_path: str, port: int) -> list[str]:
        return [
            self.executable,
            "-machine",
            "q35",
            "-accel",
            self.accel or "tcg",
            "-m",
            self.memory,
            "-drive",
            f"file={image_path},format=raw,if=none,id=hd0",
            "-device",
            "virtio-blk-pci,drive=hd0",
            "-netdev",
            f"user,id=n0,hostfwd=tcp::{port}-:{port}",
            "-device",
            "virtio-net-pci,netdev=n0",
            "-display",
            "none",
            "-serial",
            "stdio",
            "-no-reboot",
            *self.extra_args,
        ]

    def start(self, image_path: str, port: int) -> Response[None]:
        if self.is_running().result:
            raise ConflictError("Virtual machine already running")
        if not os.path.isfile(image_path):
            raise ProviderCallError(f"Image {image_path} not found")
        cmd = self.build_command(image_path, port)
        logger.info("Booting image %s", image_path)
        logger.debug(" ".join(cmd))
        try:
            self._process = subprocess.Popen(cmd)
        except OSError as e:
            raise ProviderCallError(f"Cannot start {self.executable}: {e}") from e
        return Response(result=None)

    def stop(self) -> Response[None]:
        process = self._process
        self._process = None
        if process is None or process.poll() is not None:
            return Response(result=None)
        process.terminate()
        try:
            process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
        return Response(result=None)

    def is_running(self) -> Response[bool]:
        return Response(
            result=self._process is not None and self._process.poll() is None
        )
