"""Image builders: the rendering contract and its engines."""

from calbuilder.builder.base import BaseImageBuilder
from calbuilder.builder.factory import (
    ENGINES,
    REFERENCE_ENGINE,
    get_builder_class,
    get_image_builder,
    get_metrics_provider,
)
from calbuilder.builder.pillow import PillowImageBuilder

__all__ = [
    "ENGINES",
    "REFERENCE_ENGINE",
    "BaseImageBuilder",
    "PillowImageBuilder",
    "get_builder_class",
    "get_image_builder",
    "get_metrics_provider",
]
