"""Single styled text run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from calbuilder.errors import InvalidRunError
from calbuilder.layout.align import Align, Position, Valign
from calbuilder.layout.metrics import CharacterMetrics, Dimension, FontMetricsProvider


@dataclass(frozen=True)
class TextMetrics:
    """Anchored metrics of one run plus the fields needed to draw it."""

    width: int
    height: int
    x: int
    y: int
    text: str
    font: str
    font_size: int
    angle: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "text": self.text,
            "font": self.font,
            "font-size": self.font_size,
            "angle": self.angle,
        }


@dataclass(frozen=True)
class Text:
    """
    One styled run: text, font, font size and angle.

    Attributes:
        text: Run content (UTF-8).
        font: Resolved font path (or a font name for the reference metric).
        font_size: Font size in pixels, must be positive.
        angle: Rotation in degrees, counter-clockwise.
        metrics: Provider used to measure the run.
    """

    text: str
    font: str
    font_size: int
    angle: int = 0
    metrics: FontMetricsProvider = field(default_factory=CharacterMetrics, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise InvalidRunError(f"Font size must be positive, got {self.font_size} for {self.text!r}")
        object.__setattr__(self, "font", str(self.font))

    @property
    def text_length(self) -> int:
        """Number of characters (not bytes) in the run."""
        return len(self.text)

    def get_dimension(self) -> Dimension:
        """Get the unanchored size of the run."""
        return self.metrics.get_metrics(self.text, self.font, self.font_size, self.angle)

    def get_metrics(
        self,
        position_x: int = 0,
        position_y: int = 0,
        align: Align = Align.LEFT,
        valign: Valign = Valign.BOTTOM,
    ) -> TextMetrics:
        """
        Get the metrics of the run anchored at the given reference point.

        Args:
            position_x: Reference x.
            position_y: Reference y.
            align: Horizontal alignment against position_x.
            valign: Vertical alignment against position_y.

        Returns:
            TextMetrics with size, anchor and run fields.
        """
        dimension = self.get_dimension()
        position = Position(position_x, position_y, align, valign)

        return TextMetrics(
            width=dimension.width,
            height=dimension.height,
            x=position.get_position_x(dimension.width),
            y=position.get_position_y(dimension.height),
            text=self.text,
            font=self.font,
            font_size=self.font_size,
            angle=self.angle,
        )
