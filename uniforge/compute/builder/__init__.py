from ._helper import render_manifest
from .component import Builder

__all__ = ["Builder", "render_manifest"]
