from uniforge.core import Component, Response, operation
from uniforge.core.exceptions import NotSupportedError


class Hypervisor(Component):
    """Local virtualization backend running one virtual machine."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    @operation()
    def start(self, image_path: str, port: int) -> Response[None]:
        """Boot a disk image.

        Args:
            image_path: Local raw disk image.
            port: Guest port forwarded to the same host port.
        """
        raise NotSupportedError("start")

    @operation()
    def stop(self) -> Response[None]:
        """Stop the virtual machine.

        Safe to call when it was never started or failed to start.
        """
        return Response(result=None)

    @operation()
    def is_running(self) -> Response[bool]:
        """Check whether the virtual machine is running."""
        return Response(result=False)
