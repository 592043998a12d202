"""Image encoding modules."""

from calbuilder.render.image import (
    IMAGE_FORMATS,
    ImageResult,
    get_image_properties,
    load_image_from_bytes,
    normalize_format,
    save_image_to_bytes,
)

__all__ = [
    "IMAGE_FORMATS",
    "ImageResult",
    "get_image_properties",
    "load_image_from_bytes",
    "normalize_format",
    "save_image_to_bytes",
]
