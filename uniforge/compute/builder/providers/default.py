"""
Default builder.
"""

__all__ = ["Default"]


from .mkfs import Mkfs


class Default(Mkfs):
    pass
