from .image import (
    create_image,
    delete_image,
    list_images,
    resize_image,
    sync_image,
)

__all__ = [
    "create_image",
    "delete_image",
    "list_images",
    "resize_image",
    "sync_image",
]
