"""Horizontal sequence of text runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from calbuilder.layout.align import Align, Position, Valign
from calbuilder.layout.metrics import Dimension
from calbuilder.layout.text import Text, TextMetrics


@dataclass(frozen=True)
class RowMetrics:
    """Anchored metrics of a row and of each of its runs."""

    width: int
    height: int
    x: int
    y: int
    row: tuple[TextMetrics, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "row": [text.to_dict() for text in self.row],
        }


@dataclass(frozen=True)
class Row:
    """
    Runs laid out left to right without gaps.

    The row is as wide as all runs together and as tall as its tallest run.
    """

    row: tuple[Text, ...]

    def __init__(self, row: Iterable[Text] = ()) -> None:
        object.__setattr__(self, "row", tuple(row))

    def _get_dimensions(self) -> list[Dimension]:
        return [text.get_dimension() for text in self.row]

    def get_dimension(self) -> Dimension:
        """Get the unanchored size of the row."""
        dimensions = self._get_dimensions()
        return Dimension(
            width=sum(dimension.width for dimension in dimensions),
            height=max((dimension.height for dimension in dimensions), default=0),
        )

    def get_metrics(
        self,
        position_x: int = 0,
        position_y: int = 0,
        align: Align = Align.LEFT,
        valign: Valign = Valign.BOTTOM,
    ) -> RowMetrics:
        """
        Get the metrics of the row anchored at the given reference point.

        All runs share the row's baseline, so runs of different sizes line up
        on one baseline instead of each being aligned on its own.

        Args:
            position_x: Reference x.
            position_y: Reference y.
            align: Horizontal alignment of the whole row against position_x.
            valign: Vertical alignment of the whole row against position_y.

        Returns:
            RowMetrics with the row's size and anchor and one entry per run.
        """
        dimensions = self._get_dimensions()

        width = sum(dimension.width for dimension in dimensions)
        height = max((dimension.height for dimension in dimensions), default=0)

        position = Position(position_x, position_y, align, valign)
        row_x = position.get_position_x(width)
        row_y = position.get_position_y(height)

        runs: list[TextMetrics] = []
        current_x = row_x
        for text, dimension in zip(self.row, dimensions):
            runs.append(TextMetrics(
                width=dimension.width,
                height=dimension.height,
                x=current_x,
                y=row_y,
                text=text.text,
                font=text.font,
                font_size=text.font_size,
                angle=text.angle,
            ))
            current_x += dimension.width

        return RowMetrics(width=width, height=height, x=row_x, y=row_y, row=tuple(runs))
