from .component import Bucket

__all__ = ["Bucket"]
