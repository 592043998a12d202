"""Engine selection by config name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from calbuilder.builder.base import BaseImageBuilder
from calbuilder.config import BuilderSettings
from calbuilder.errors import UnsupportedEngineError
from calbuilder.layout import CharacterMetrics, FontMetricsProvider, PillowMetrics

if TYPE_CHECKING:
    from calbuilder.design.base import DesignBase

logger = logging.getLogger(__name__)

ENGINES = ("gdimage", "imagick")

# Reference metric that needs no font file, for previews and tests
REFERENCE_ENGINE = "reference"


def get_builder_class(engine: str) -> type[BaseImageBuilder]:
    """
    Get the builder class for an engine name.

    The ImageMagick builder is imported on demand so the raster engine keeps
    working on hosts without the MagickWand library.

    Args:
        engine: "gdimage" or "imagick".

    Returns:
        Builder class.

    Raises:
        UnsupportedEngineError: If the engine name is unknown.
    """
    if engine == "gdimage":
        from calbuilder.builder.pillow import PillowImageBuilder
        return PillowImageBuilder
    if engine == "imagick":
        from calbuilder.builder.wand import WandImageBuilder
        return WandImageBuilder
    raise UnsupportedEngineError(f"Unsupported design engine \"{engine}\" was given.")


def get_image_builder(
    design: DesignBase,
    settings: BuilderSettings | None = None,
    config: dict[str, Any] | None = None,
    engine: str | None = None,
) -> BaseImageBuilder:
    """
    Create the image builder for a design.

    Args:
        design: Design that draws the page.
        settings: Builder settings (defaults if None).
        config: Design configuration merged over the design defaults.
        engine: Engine name overriding settings.engine.

    Returns:
        Builder ready for build().
    """
    settings = settings or BuilderSettings()
    engine = engine or settings.engine

    builder_class = get_builder_class(engine)
    logger.debug(f"Using {builder_class.__name__} for engine '{engine}' and design {type(design).__name__}")
    return builder_class(design, settings, config)


def get_metrics_provider(engine: str) -> FontMetricsProvider:
    """
    Get the font metrics of an engine without creating a builder.

    Args:
        engine: "reference", "gdimage" or "imagick".

    Returns:
        Metrics provider.
    """
    if engine == REFERENCE_ENGINE:
        return CharacterMetrics()
    if engine == "gdimage":
        return PillowMetrics()
    if engine == "imagick":
        from calbuilder.builder.wand import WandMetrics
        return WandMetrics()
    raise UnsupportedEngineError(f"Unsupported design engine \"{engine}\" was given.")
