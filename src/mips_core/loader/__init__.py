"""Raw image loader module."""

from .image import load_binary, read_image

__all__ = ["load_binary", "read_image"]
