"""Font metrics providers: pixel bounding boxes of styled text runs."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import ClassVar

from PIL import ImageFont

from calbuilder.errors import MetricsError
from calbuilder.fonts import load_truetype
from calbuilder.layout.align import round_half_up


@dataclass(frozen=True)
class Dimension:
    """Width and height of a rendered run, independent of its position."""

    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def rotated_extent(left: float, top: float, right: float, bottom: float, angle: int) -> Dimension:
    """
    Get the axis-aligned envelope of a box rotated counter-clockwise.

    Args:
        left: Left edge of the unrotated box.
        top: Top edge of the unrotated box.
        right: Right edge of the unrotated box.
        bottom: Bottom edge of the unrotated box.
        angle: Rotation in degrees, counter-clockwise.

    Returns:
        Dimension of the rotated envelope, rounded to whole pixels.
    """
    if angle % 360 == 0:
        return Dimension(round_half_up(right - left), round_half_up(bottom - top))

    theta = math.radians(angle)
    cos, sin = math.cos(theta), math.sin(theta)

    # Image coordinates (y grows downwards), so a visual CCW turn flips sin
    xs = []
    ys = []
    for x, y in ((left, top), (right, top), (right, bottom), (left, bottom)):
        xs.append(x * cos + y * sin)
        ys.append(-x * sin + y * cos)

    return Dimension(round_half_up(max(xs) - min(xs)), round_half_up(max(ys) - min(ys)))


class FontMetricsProvider(ABC):
    """
    Computes the pixel bounding box of a text run.

    Implementations are pure: the result depends only on the arguments.
    """

    correction: ClassVar[float] = 1.0
    """Scale between this engine's font sizes and the raster reference engine."""

    @abstractmethod
    def get_metrics(self, text: str, font: str | Path, font_size: int, angle: int = 0) -> Dimension:
        """
        Get the dimension of the given text, font, font size and angle.

        Args:
            text: Text run (UTF-8, may be empty).
            font: Font path.
            font_size: Font size in pixels.
            angle: Rotation in degrees, counter-clockwise.

        Returns:
            Dimension of the rendered run.
        """


class CharacterMetrics(FontMetricsProvider):
    """
    Reference metric: every character is one font size wide and tall.

    Needs no font file, which makes layouts reproducible in tests and in
    previews where the real font is not available.
    """

    def get_metrics(self, text: str, font: str | Path, font_size: int, angle: int = 0) -> Dimension:
        lines = text.split("\n")
        characters = max(len(line) for line in lines)

        if characters == 0:
            return Dimension(0, round_half_up(font_size))

        return rotated_extent(0, 0, font_size * characters, font_size * len(lines), angle)


class PillowMetrics(FontMetricsProvider):
    """Glyph metrics from FreeType through Pillow (raster engine)."""

    # Extra gap between the line boxes of multiline text
    LINE_SPACING = 4

    @classmethod
    def get_line_height(cls, face: ImageFont.FreeTypeFont) -> int:
        """
        Get the distance between two baselines of multiline text.

        The raster builder steps its lines by the same amount, so measured and
        drawn multiline text agree.

        Args:
            face: Loaded font.

        Returns:
            Baseline to baseline distance in pixels.
        """
        ascent, descent = face.getmetrics()
        return ascent + descent + cls.LINE_SPACING

    def get_metrics(self, text: str, font: str | Path, font_size: int, angle: int = 0) -> Dimension:
        face = load_truetype(font, font_size)
        ascent, descent = face.getmetrics()

        if text == "":
            return Dimension(0, ascent + descent)

        lines = text.split("\n")
        line_height = self.get_line_height(face)

        left = top = right = bottom = 0
        inked = False
        try:
            for index, line in enumerate(lines):
                line_left, line_top, line_right, line_bottom = face.getbbox(line, anchor="ls")
                if line_bottom <= line_top:
                    continue
                offset = index * line_height
                if inked:
                    left, right = min(left, line_left), max(right, line_right)
                    top, bottom = min(top, line_top + offset), max(bottom, line_bottom + offset)
                else:
                    left, top, right, bottom = line_left, line_top + offset, line_right, line_bottom + offset
                    inked = True
            advance = max(face.getlength(line) for line in lines)
        except (OSError, ValueError) as e:
            raise MetricsError(f"Unable to get bounding box of {text!r} ({Path(font).name}, {font_size}px): {e}") from e

        if not inked:
            # Whitespace only: advance wide, line box high
            top, bottom = -ascent, descent + line_height * (len(lines) - 1)

        # Advance keeps trailing spaces, so concatenated runs do not overlap
        return rotated_extent(min(left, 0), top, max(right, advance), bottom, angle)
