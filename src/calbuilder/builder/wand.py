"""Vector/compositing image builder on ImageMagick through Wand (config name "imagick")."""

import logging
from collections.abc import Sequence
from pathlib import Path

from wand.color import Color
from wand.drawing import Drawing
from wand.exceptions import WandException
from wand.image import Image

from calbuilder.builder.base import BaseImageBuilder
from calbuilder.errors import MetricsError, ResourceError
from calbuilder.fonts import resolve_font_path
from calbuilder.layout import Dimension, FontMetricsProvider, rotated_extent
from calbuilder.layout.align import round_half_up
from calbuilder.render.image import normalize_format

logger = logging.getLogger(__name__)

# ImageMagick renders a given point size about 3/4 as large as the raster
# engine; sizes are scaled up by this factor before they reach ImageMagick
GD_IMAGE_TO_IMAGICK_CORRECTION = 1 + 1 / 3

# ImageMagick's text height is a full line box; this brings it down to the
# glyph height the raster engine reports
TEXT_HEIGHT_DIVISOR = 1.9


class WandMetrics(FontMetricsProvider):
    """Font metrics from ImageMagick's query_font_metrics."""

    correction = GD_IMAGE_TO_IMAGICK_CORRECTION

    def get_metrics(self, text: str, font: str | Path, font_size: int, angle: int = 0) -> Dimension:
        path = resolve_font_path(font)
        # Empty text is probed with a space for its line height
        blank = text == ""

        try:
            with Drawing() as draw, Image(width=1, height=1) as probe:
                draw.font = str(path)
                draw.font_size = font_size * self.correction
                font_metrics = draw.get_font_metrics(probe, " " if blank else text, multiline="\n" in text)
        except WandException as e:
            raise MetricsError(f"Unable to get font metrics of {text!r} ({path.name}, {font_size}px): {e}") from e

        width = round_half_up(font_metrics.text_width)
        height = round_half_up(font_metrics.text_height / TEXT_HEIGHT_DIVISOR)

        if blank:
            return Dimension(0, height)

        return rotated_extent(0, 0, width, height, angle)


class WandImageBuilder(BaseImageBuilder):
    """Image builder drawing on ImageMagick canvases."""

    engine = "imagick"

    _metrics = WandMetrics()

    @property
    def metrics(self) -> FontMetricsProvider:
        return self._metrics

    def create_image(self, width: int, height: int) -> Image:
        try:
            image = Image(width=width, height=height, background=Color("rgba(0, 0, 0, 1)"))
        except (WandException, ValueError) as e:
            raise ResourceError(f"Unable to create image {width}x{height}: {e}") from e
        self._activate_alpha(image)
        return image

    def create_image_from_file(self, path: str | Path, image_format: str | None = None) -> Image:
        path = self.check_source_path(path)
        normalize_format(image_format or path.suffix)

        try:
            image = Image(filename=str(path))
        except WandException as e:
            raise ResourceError(f"Unable to create image from \"{path}\": {e}") from e
        self._activate_alpha(image)
        logger.debug(f"Loaded source {path.name} ({image.width}x{image.height})")
        return image

    @staticmethod
    def _activate_alpha(image: Image) -> None:
        # A canvas that cannot take an alpha channel is released before the error propagates
        try:
            image.alpha_channel = "activate"
        except (WandException, ValueError) as e:
            image.close()
            raise ResourceError(f"Unable to activate the alpha channel: {e}") from e

    def get_canvas_size(self, canvas: Image) -> tuple[int, int]:
        return canvas.width, canvas.height

    def release_canvas(self, canvas: Image) -> None:
        canvas.close()

    def allocate_color(self, red: int, green: int, blue: int, alpha: int | None = None) -> str:
        if alpha is None:
            return f"rgb({red}, {green}, {blue})"
        return f"rgba({red}, {green}, {blue}, {alpha / 100:.2f})"

    def get_angle(self, angle: int) -> int:
        # ImageMagick rotates clockwise
        return (360 - angle) % 360

    def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
        with Drawing() as draw:
            draw.stroke_color = Color(self.get_color(key_color))
            draw.line((x1, y1), (x2, y2))
            draw(self.get_image_target())

    def add_rectangle(self, x: int, y: int, width: int, height: int, key_color: str) -> None:
        color = self.get_color(key_color)
        if width <= 0 or height <= 0:
            return
        with Drawing() as draw:
            draw.fill_color = Color(color)
            draw.rectangle(left=x, top=y, width=width - 1, height=height - 1)
            draw(self.get_image_target())

    def add_image(self, x: int, y: int, width: int, height: int) -> None:
        with self.get_image_source().clone() as source:
            source.resize(width, height, filter="lanczos")
            self.get_image_target().composite(source, left=x, top=y, operator="over")

    def add_image_blob(
        self,
        blob: bytes,
        x: int,
        y: int,
        width: int,
        height: int,
        background_color: Sequence[int],
    ) -> None:
        background = "rgb({}, {}, {})".format(*background_color[:3])
        target = self.get_image_target()

        try:
            with Image(blob=blob) as overlay:
                overlay.transparent_color(Color(background), alpha=0.0)
                overlay.resize(width, height, filter="lanczos")
                target.composite(overlay, left=x, top=y)
        except WandException as e:
            raise ResourceError(f"Unable to create image from blob ({len(blob)} bytes): {e}") from e

        target.background_color = Color(background)
        target.alpha_channel = "remove"

    def draw_text(self, text: str, font: str, font_size: int, color: str, x: int, y: int, angle: int) -> None:
        with Drawing() as draw:
            draw.text_antialias = True
            draw.fill_color = Color(color)
            draw.font = font
            draw.font_size = self.get_corrected_value(font_size)
            self.get_image_target().annotate(text, draw, left=x, baseline=y, angle=angle)

    def get_image_string(self, image_format: str | None = None, quality: int | None = None) -> bytes:
        pil_format = normalize_format(image_format or self.settings.output_format)

        with self.get_image_target().clone() as output:
            if pil_format == "JPEG":
                output.alpha_channel = "remove"
                output.compression_quality = quality or self.settings.output_quality
                output.format = "jpeg"
            else:
                output.format = "png"
            return output.make_blob()
