"""Font path validation and cached TrueType loading."""

import logging
from functools import lru_cache
from pathlib import Path

from PIL import ImageFont

from calbuilder.errors import FontNotFoundError

logger = logging.getLogger(__name__)


def resolve_font_path(font: str | Path) -> Path:
    """
    Validate an already-resolved font path.

    Font directories are never searched; the caller hands over the final path.

    Args:
        font: Path to a TrueType/OpenType font file.

    Returns:
        The font path as a Path object.

    Raises:
        FontNotFoundError: If the path does not point to a readable file.
    """
    path = Path(font)
    if not path.is_file():
        raise FontNotFoundError(f"Font file not found: {path}")
    return path


@lru_cache(maxsize=64)
def _load_truetype(font_path: str, font_size: int) -> ImageFont.FreeTypeFont:
    logger.info(f"Loading font {Path(font_path).name} at {font_size}px")
    return ImageFont.truetype(font_path, font_size)


def load_truetype(font: str | Path, font_size: int) -> ImageFont.FreeTypeFont:
    """
    Load a FreeType font at the given pixel size.

    Loaded fonts are memoized per (path, size) so repeated measurements of the
    same run do not reopen the font file.

    Args:
        font: Path to the font file.
        font_size: Font size in pixels.

    Returns:
        Pillow FreeTypeFont.

    Raises:
        FontNotFoundError: If the font is missing or FreeType cannot read it.
    """
    path = resolve_font_path(font)
    try:
        return _load_truetype(str(path), font_size)
    except OSError as e:
        raise FontNotFoundError(f"Unable to read font {path}: {e}") from e
