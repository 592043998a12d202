"""Photo calendar page builder with a pixel-accurate text layout engine."""

__version__ = "0.1.0"

# High-level Python API
from calbuilder.builder import BaseImageBuilder, PillowImageBuilder, get_image_builder
from calbuilder.config import BuilderSettings, Config, load_config
from calbuilder.design import DesignBase, DesignText
from calbuilder.layout import Align, CharacterMetrics, PillowMetrics, Row, Rows, Text, Valign
from calbuilder.render import ImageResult

__all__ = [
    "Align",
    "BaseImageBuilder",
    "BuilderSettings",
    "CharacterMetrics",
    "Config",
    "DesignBase",
    "DesignText",
    "ImageResult",
    "PillowImageBuilder",
    "PillowMetrics",
    "Row",
    "Rows",
    "Text",
    "Valign",
    "get_image_builder",
    "load_config",
]
