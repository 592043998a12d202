"""Raster image builder on Pillow (config name "gdimage")."""

import logging
import math
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw

from calbuilder.builder.base import BaseImageBuilder
from calbuilder.errors import ResourceError
from calbuilder.fonts import load_truetype
from calbuilder.layout import FontMetricsProvider, PillowMetrics
from calbuilder.layout.align import round_half_up
from calbuilder.render.image import load_image_from_bytes, normalize_format, save_image_to_bytes

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


def make_color_transparent(img: Image.Image, color: Sequence[int]) -> Image.Image:
    """
    Make every pixel of exactly the given color fully transparent.

    Args:
        img: RGBA image.
        color: RGB color to key out.

    Returns:
        New RGBA image.
    """
    red, green, blue, alpha = img.split()

    matches = [
        band.point(lambda value, wanted=wanted: 255 if value == wanted else 0)
        for band, wanted in zip((red, green, blue), color[:3])
    ]
    # 255 where all three channels match
    mask = ImageChops.multiply(ImageChops.multiply(matches[0], matches[1]), matches[2])

    keyed = img.copy()
    keyed.putalpha(ImageChops.subtract(alpha, mask))
    return keyed


class PillowImageBuilder(BaseImageBuilder):
    """Image builder drawing on Pillow RGBA canvases."""

    engine = "gdimage"

    _metrics = PillowMetrics()

    @property
    def metrics(self) -> FontMetricsProvider:
        return self._metrics

    def create_image(self, width: int, height: int) -> Image.Image:
        try:
            return Image.new("RGBA", (width, height), (0, 0, 0, 255))
        except (ValueError, MemoryError) as e:
            raise ResourceError(f"Unable to create image {width}x{height}: {e}") from e

    def create_image_from_file(self, path: str | Path, image_format: str | None = None) -> Image.Image:
        path = self.check_source_path(path)
        normalize_format(image_format or path.suffix)

        try:
            with Image.open(path) as img:
                image = img.convert("RGBA")
        except OSError as e:
            raise ResourceError(f"Unable to create image from \"{path}\": {e}") from e

        logger.debug(f"Loaded source {path.name} ({image.width}x{image.height})")
        return image

    def get_canvas_size(self, canvas: Image.Image) -> tuple[int, int]:
        return canvas.size

    def release_canvas(self, canvas: Image.Image) -> None:
        canvas.close()

    def allocate_color(self, red: int, green: int, blue: int, alpha: int | None = None) -> RGBA:
        if alpha is None:
            return (red, green, blue, 255)
        return (red, green, blue, round_half_up(alpha * 255 / 100))

    def get_angle(self, angle: int) -> int:
        # Pillow rotates counter-clockwise, like the layout engine
        return angle

    def _draw(self) -> ImageDraw.ImageDraw:
        return ImageDraw.Draw(self.get_image_target(), "RGBA")

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
        self._draw().line([(x1, y1), (x2, y2)], fill=self.get_color(key_color), width=1)

    def add_rectangle(self, x: int, y: int, width: int, height: int, key_color: str) -> None:
        color = self.get_color(key_color)
        if width <= 0 or height <= 0:
            return
        self._draw().rectangle([x, y, x + width - 1, y + height - 1], fill=color)

    def add_image(self, x: int, y: int, width: int, height: int) -> None:
        with self.get_image_source().resize((width, height), Image.Resampling.LANCZOS) as resized:
            self.get_image_target().paste(resized, (x, y))

    def add_image_blob(
        self,
        blob: bytes,
        x: int,
        y: int,
        width: int,
        height: int,
        background_color: Sequence[int],
    ) -> None:
        target = self.get_image_target()

        with load_image_from_bytes(blob) as overlay, overlay.convert("RGBA") as rgba:
            with make_color_transparent(rgba, background_color) as keyed:
                with keyed.resize((width, height), Image.Resampling.LANCZOS) as resized:
                    target.paste(resized, (x, y), resized)

    def draw_text(self, text: str, font: str, font_size: int, color: RGBA, x: int, y: int, angle: int) -> None:
        face = load_truetype(font, font_size)
        ascent, descent = face.getmetrics()
        line_height = PillowMetrics.get_line_height(face)
        lines = text.split("\n")

        if angle % 360 == 0:
            draw = self._draw()
            for index, line in enumerate(lines):
                draw.text((x, y + index * line_height), line, font=face, fill=color, anchor="ls")
            return

        # Rotated text: draw on a transparent layer, rotate it and paste it
        # so that the baseline origin of the first line lands on (x, y)
        width = max(1, max(math.ceil(face.getlength(line)) for line in lines))
        height = ascent + descent + line_height * (len(lines) - 1)

        with Image.new("RGBA", (width, height), (0, 0, 0, 0)) as layer:
            draw = ImageDraw.Draw(layer)
            for index, line in enumerate(lines):
                draw.text((0, ascent + index * line_height), line, font=face, fill=color, anchor="ls")

            with layer.rotate(angle, resample=Image.Resampling.BICUBIC, expand=True) as rotated:
                theta = math.radians(angle)
                origin_x = 0 - width / 2
                origin_y = ascent - height / 2
                rotated_x = origin_x * math.cos(theta) + origin_y * math.sin(theta)
                rotated_y = -origin_x * math.sin(theta) + origin_y * math.cos(theta)

                paste_x = round_half_up(x - (rotated.width / 2 + rotated_x))
                paste_y = round_half_up(y - (rotated.height / 2 + rotated_y))
                self.get_image_target().paste(rotated, (paste_x, paste_y), rotated)

    def get_image_string(self, image_format: str | None = None, quality: int | None = None) -> bytes:
        pil_format = normalize_format(image_format or self.settings.output_format)
        return save_image_to_bytes(
            self.get_image_target(),
            pil_format,
            quality or self.settings.output_quality,
        )
