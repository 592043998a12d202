"""Rendering contract shared by the Pillow and ImageMagick image builders."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from calbuilder.config import TARGET_HEIGHT, BuilderSettings
from calbuilder.errors import (
    ColorNotDefinedError,
    ConfigurationError,
    FontNotFoundError,
    ResourceError,
    SourceImageNotFoundError,
)
from calbuilder.layout import Align, Dimension, FontMetricsProvider, Position, RowMetrics, RowsMetrics, Valign
from calbuilder.layout.align import round_half_up
from calbuilder.render.image import ImageResult, get_image_properties, normalize_format
from calbuilder.types import RGBColor

if TYPE_CHECKING:
    from calbuilder.design.base import DesignBase

logger = logging.getLogger(__name__)

EXPECTED_COLOR_VALUES = 3


class BaseImageBuilder(ABC):
    """
    Abstract image builder.

    Holds the mutable state of one render: the target canvas, the loaded
    source photo, the registered colors and the drawing cursor. Layout
    objects stay engine independent; everything engine specific sits behind
    the abstract primitives below.

    One builder renders one page at a time. Use a separate instance per
    thread or process.
    """

    engine: ClassVar[str]
    """Config name of the engine ("gdimage" or "imagick")."""

    def __init__(
        self,
        design: DesignBase,
        settings: BuilderSettings | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize image builder.

        Args:
            design: Design that draws the page.
            settings: Builder settings (defaults if None).
            config: Design configuration merged over the design defaults.
        """
        self.design = design
        self.settings = settings or BuilderSettings()

        if config is not None:
            design.configure(config)

        self.colors: dict[str, Any] = {}

        self.image_target: Any = None
        self.image_source: Any = None

        self.height_target = self.settings.target_height
        self.width_target = int(math.floor(self.height_target * self.settings.aspect_ratio))
        self.width_source = 0
        self.height_source = 0

        self.zoom_target = self.height_target / TARGET_HEIGHT

        self.position_x = 0
        self.position_y = 0

    # ========================================================================
    # Build Pipeline
    # ========================================================================

    @contextmanager
    def session(self, source_path: str | Path) -> Iterator[BaseImageBuilder]:
        """
        Acquire the target and source canvases for one render.

        Both canvases are released when the block exits, also on errors.

        Args:
            source_path: Source photo.

        Yields:
            This builder, ready to draw.
        """
        try:
            self.image_target = self.create_image(self.width_target, self.height_target)
            self.image_source = self.create_image_from_file(source_path)
            self.width_source, self.height_source = self.get_canvas_size(self.image_source)
            yield self
        finally:
            self.destroy_images()

    def build(self, source_path: str | Path) -> ImageResult:
        """
        Build the given source photo into a page.

        Args:
            source_path: Source photo.

        Returns:
            Encoded page with its metadata.
        """
        logger.info(f"Building page from {Path(source_path).name} with engine '{self.engine}'")

        with self.session(source_path):
            self.design.do_init(self)
            self.design.do_build(self)
            data = self.get_image_string()

        result = get_image_properties(data, self.engine)
        logger.info(f"Built {result.width}x{result.height} {result.mime_type} ({result.size_byte} bytes)")
        return result

    def destroy_images(self) -> None:
        """Release the target and source canvases. Safe to call repeatedly."""
        for attribute in ("image_target", "image_source"):
            canvas = getattr(self, attribute)
            if canvas is None:
                continue
            setattr(self, attribute, None)
            self.release_canvas(canvas)

    def get_image_target(self) -> Any:
        """Get the target canvas, failing outside of a session."""
        if self.image_target is None:
            raise ResourceError("No target image; draw calls must run inside session()")
        return self.image_target

    def get_image_source(self) -> Any:
        """Get the source canvas, failing outside of a session."""
        if self.image_source is None:
            raise ResourceError("No source image; draw calls must run inside session()")
        return self.image_source

    @staticmethod
    def check_source_path(path: str | Path) -> Path:
        """
        Check that a source photo exists.

        Args:
            path: Source photo path.

        Returns:
            The path as a Path object.

        Raises:
            SourceImageNotFoundError: If there is no such file.
        """
        path = Path(path)
        if not path.is_file():
            raise SourceImageNotFoundError(f"Given source image was not found: \"{path}\"")
        return path

    # ========================================================================
    # Engine Primitives
    # ========================================================================

    @property
    @abstractmethod
    def metrics(self) -> FontMetricsProvider:
        """Font metrics of this engine."""

    @abstractmethod
    def create_image(self, width: int, height: int) -> Any:
        """
        Create an empty opaque black canvas.

        Args:
            width: Width in pixels.
            height: Height in pixels.

        Returns:
            Engine canvas.
        """

    @abstractmethod
    def create_image_from_file(self, path: str | Path, image_format: str | None = None) -> Any:
        """
        Load a source photo.

        Args:
            path: Image file.
            image_format: "jpg", "jpeg" or "png". Taken from the extension if None.

        Returns:
            Engine canvas.
        """

    @abstractmethod
    def get_canvas_size(self, canvas: Any) -> tuple[int, int]:
        """Get (width, height) of an engine canvas."""

    @abstractmethod
    def release_canvas(self, canvas: Any) -> None:
        """Release the native handle of an engine canvas."""

    @abstractmethod
    def allocate_color(self, red: int, green: int, blue: int, alpha: int | None = None) -> Any:
        """
        Convert a color into the engine's representation.

        Args:
            red: Red (0-255).
            green: Green (0-255).
            blue: Blue (0-255).
            alpha: Visibility (0-100, 100 = opaque). Opaque if None.

        Returns:
            Engine color value.
        """

    @abstractmethod
    def get_angle(self, angle: int) -> int:
        """
        Convert a layout angle (counter-clockwise degrees) into the engine's convention.

        Args:
            angle: Angle in degrees, counter-clockwise.

        Returns:
            Angle as the engine expects it.
        """

    @abstractmethod
    def draw_line(self, x1: int, y1: int, x2: int, y2: int, key_color: str) -> None:
        """Draw a one pixel line between two points."""

    @abstractmethod
    def add_rectangle(self, x: int, y: int, width: int, height: int, key_color: str) -> None:
        """Draw a filled rectangle."""

    @abstractmethod
    def add_image(self, x: int, y: int, width: int, height: int) -> None:
        """Resample the source photo into the given box of the target canvas."""

    @abstractmethod
    def add_image_blob(
        self,
        blob: bytes,
        x: int,
        y: int,
        width: int,
        height: int,
        background_color: Sequence[int],
    ) -> None:
        """
        Composite an in-memory image (e.g. a QR code) onto the target canvas.

        Args:
            blob: Encoded image.
            x: Left edge on the target.
            y: Top edge on the target.
            width: Width on the target.
            height: Height on the target.
            background_color: RGB color of the blob to treat as transparent.
        """

    @abstractmethod
    def draw_text(self, text: str, font: str, font_size: int, color: Any, x: int, y: int, angle: int) -> None:
        """
        Draw text with its baseline origin at (x, y).

        Args:
            text: Text, lines separated by "\\n".
            font: Font path.
            font_size: Font size in pixels (raster reference scale).
            color: Engine color value.
            x: Baseline origin x.
            y: Baseline origin y.
            angle: Angle already converted by get_angle().
        """

    @abstractmethod
    def get_image_string(self, image_format: str | None = None, quality: int | None = None) -> bytes:
        """
        Encode the target canvas.

        Args:
            image_format: "jpg", "jpeg" or "png". Settings default if None.
            quality: JPEG quality. Settings default if None.

        Returns:
            Encoded image.
        """

    # ========================================================================
    # Metrics
    # ========================================================================

    @property
    def font_path(self) -> str:
        """Configured caption font."""
        if self.settings.font_path is None:
            raise FontNotFoundError("No font configured (settings.font_path is empty)")
        return str(self.settings.font_path)

    def get_dimension(self, text: str, font_size: int, angle: int = 0, font: str | None = None) -> Dimension:
        """
        Get the dimension of given text, font size and angle.

        Args:
            text: Text to measure.
            font_size: Font size in pixels.
            angle: Angle in degrees, counter-clockwise.
            font: Font path. Configured font if None.

        Returns:
            Dimension of the rendered text.
        """
        return self.metrics.get_metrics(text, font or self.font_path, font_size, angle)

    def get_corrected_value(self, value: float) -> float:
        """
        Scale a metric of this engine back to the raster reference scale.

        Args:
            value: Value measured at the reference font size.

        Returns:
            Corrected value.
        """
        return value * self.metrics.correction

    def get_size(self, size: int) -> int:
        """
        Get a size scaled to the target page.

        Args:
            size: Size for a 4000 px high page.

        Returns:
            Size for the configured page height.
        """
        return round_half_up(size * self.zoom_target)

    # ========================================================================
    # Colors
    # ========================================================================

    def create_color(self, key_color: str, red: int, green: int, blue: int, alpha: int | None = None) -> None:
        """
        Register a named color.

        Args:
            key_color: Name used by drawing calls.
            red: Red (0-255).
            green: Green (0-255).
            blue: Blue (0-255).
            alpha: Visibility (0-100, 100 = opaque). Opaque if None.

        Raises:
            ResourceError: If a channel is out of range.
        """
        for channel in (red, green, blue):
            if not 0 <= channel <= 255:
                raise ResourceError(f"Unable to create color \"{key_color}\": channel {channel} is out of range 0-255")
        if alpha is not None and not 0 <= alpha <= 100:
            raise ResourceError(f"Unable to create color \"{key_color}\": alpha {alpha} is out of range 0-100")

        self.colors[key_color] = self.allocate_color(red, green, blue, alpha)

    def get_color(self, key_color: str) -> Any:
        """
        Get a registered color.

        Raises:
            ColorNotDefinedError: If the key was never registered.
        """
        if key_color not in self.colors:
            raise ColorNotDefinedError(f"Color \"{key_color}\" is not defined.")
        return self.colors[key_color]

    def reset_colors(self) -> None:
        """Forget all registered colors."""
        self.colors = {}

    def create_color_from_config(self, key_color: str, value: Sequence[Any] | None) -> None:
        """
        Register a color from a configuration value.

        Missing or incomplete values fall back to the default color.

        Args:
            key_color: Name used by drawing calls.
            value: [red, green, blue] from the configuration.

        Raises:
            ConfigurationError: If a channel is not an integer.
        """
        color: Sequence[Any] | RGBColor
        if value is None or len(value) < EXPECTED_COLOR_VALUES:
            logger.warning(f"Color \"{key_color}\" is missing or incomplete, using default {self.settings.default_color}")
            color = self.settings.default_color
        else:
            color = value

        red, green, blue = color[0], color[1], color[2]
        if not all(isinstance(channel, int) and not isinstance(channel, bool) for channel in (red, green, blue)):
            raise ConfigurationError(f"Invalid color value given for \"{key_color}\": {list(color)}")

        self.create_color(key_color, red, green, blue)

    # ========================================================================
    # Cursor
    # ========================================================================

    def init_xy(self, position_x: int = 0, position_y: int = 0) -> None:
        """Move the drawing cursor to an absolute position."""
        self.position_x = position_x
        self.position_y = position_y

    def add_x(self, position_x: int) -> None:
        self.position_x += position_x

    def add_y(self, position_y: int) -> None:
        self.position_y += position_y

    def remove_x(self, position_x: int) -> None:
        self.position_x -= position_x

    def remove_y(self, position_y: int) -> None:
        self.position_y -= position_y

    # ========================================================================
    # Text
    # ========================================================================

    def add_text_raw(
        self,
        text: str,
        font_size: int,
        key_color: str,
        position_x: int,
        position_y: int,
        angle: int = 0,
        align: Align = Align.LEFT,
        valign: Valign = Valign.BOTTOM,
        font: str | None = None,
    ) -> None:
        """
        Draw text anchored at a reference point.

        Alignment is resolved here with the same Position rules the layout
        engine uses, so both engines anchor text identically.

        Args:
            text: Text, lines separated by "\\n".
            font_size: Font size in pixels.
            key_color: Registered color name.
            position_x: Reference x.
            position_y: Reference y.
            angle: Angle in degrees, counter-clockwise.
            align: Horizontal alignment against position_x.
            valign: Vertical alignment against position_y.
            font: Font path. Configured font if None.
        """
        font = font or self.font_path
        color = self.get_color(key_color)

        position = Position(position_x, position_y, align, valign)
        if position.align is Align.LEFT and position.valign is Valign.BOTTOM:
            x, y = position_x, position_y
        else:
            dimension = self.get_dimension(text, font_size, angle, font)
            x = position.get_position_x(dimension.width)
            y = position.get_position_y(dimension.height)

        logger.debug(f"Text {text!r} at ({x}, {y}), {font_size}px, angle {angle}")
        self.draw_text(text, font, font_size, color, x, y, self.get_angle(angle))

    def add_text(
        self,
        text: str,
        font_size: int,
        key_color: str | None = None,
        padding_top: int = 0,
        align: Align = Align.LEFT,
        valign: Valign = Valign.BOTTOM,
        angle: int = 0,
    ) -> Dimension:
        """
        Draw text at the cursor.

        "<br>" starts a new line.

        Args:
            text: Text to draw.
            font_size: Font size in pixels.
            key_color: Registered color name ("white" if None).
            padding_top: Offset added to the cursor y.
            align: Horizontal alignment against the cursor.
            valign: Vertical alignment against the cursor.
            angle: Angle in degrees, counter-clockwise.

        Returns:
            Width and height taken by the text. Single lines report the
            font size as height so stacked captions keep a regular rhythm.
        """
        if key_color is None:
            key_color = "white"

        lines = text.split("<br>")
        text = "\n".join(lines)

        self.add_text_raw(
            text,
            font_size,
            key_color,
            self.position_x,
            self.position_y + padding_top,
            angle,
            align,
            valign,
        )

        dimension = self.get_dimension(text, font_size, angle)

        return Dimension(
            width=dimension.width,
            height=round_half_up(self.get_corrected_value(dimension.height)) if len(lines) > 1 else font_size,
        )

    def add_row(self, metrics: RowMetrics, key_color: str) -> None:
        """
        Draw an anchored row, run by run.

        Args:
            metrics: Result of Row.get_metrics().
            key_color: Registered color name.
        """
        for run in metrics.row:
            self.add_text_raw(run.text, run.font_size, key_color, run.x, run.y, run.angle, font=run.font)

    def add_rows(self, metrics: RowsMetrics, key_color: str) -> None:
        """
        Draw an anchored block of rows.

        Args:
            metrics: Result of Rows.get_metrics().
            key_color: Registered color name.
        """
        for row in metrics.rows:
            self.add_row(row, key_color)
