"""Configuration loading and validation."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from calbuilder.types import EngineName, OutputFormat, RGBColor

# Reference page height; all configured sizes are given for a page this tall
TARGET_HEIGHT = 4000

DEFAULT_COLOR: RGBColor = (47, 141, 171)


class BuilderSettings(BaseModel):
    """
    Settings shared by all image builders.

    All parameters have sensible defaults. Override only what you need using
    Pydantic's model_copy():

        base = BuilderSettings(font_path=Path("data/font/OpenSans.ttf"))
        preview = base.model_copy(update={"target_height": 1000})
    """

    # ========================================================================
    # Engine
    # ========================================================================
    engine: EngineName = "imagick"
    """Rendering engine: "gdimage" (Pillow raster) or "imagick" (ImageMagick via Wand)."""

    # ========================================================================
    # Fonts
    # ========================================================================
    font_path: Path | None = None
    """Absolute path of the TrueType font used for captions. Resolved by the caller."""

    # ========================================================================
    # Target Page
    # ========================================================================
    target_height: int = Field(default=TARGET_HEIGHT, gt=0)
    """Height of the rendered page in pixels. Sizes are zoomed relative to 4000 px."""

    aspect_ratio: float = Field(default=3 / 2, gt=0)
    """Width to height ratio of the rendered page."""

    # ========================================================================
    # Output
    # ========================================================================
    output_format: OutputFormat = "jpeg"
    """Encoded output format."""

    output_quality: int = Field(default=100, ge=1, le=100)
    """JPEG quality (1-100). Ignored for PNG."""

    # ========================================================================
    # Colors
    # ========================================================================
    default_color: RGBColor = DEFAULT_COLOR
    """Fallback color for config-driven colors that are missing or incomplete."""


class Config(BaseModel):
    """Root configuration: builder settings plus the raw design configuration."""

    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    design: dict[str, Any] = Field(default_factory=dict)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, looks for calbuilder.toml in current directory.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "calbuilder.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create a calbuilder.toml with [builder] and [design] tables."
        )

    with open(config_path, "rb") as f:
        config_dict = tomllib.load(f)

    return Config(**config_dict)
