"""Page designs drawn through the image builders."""

from calbuilder.design.base import DesignBase
from calbuilder.design.text import DesignText, TextDesignConfig

__all__ = [
    "DesignBase",
    "DesignText",
    "TextDesignConfig",
]
