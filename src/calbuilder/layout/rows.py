"""Vertical stack of rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from calbuilder.errors import InvalidRunError
from calbuilder.layout.align import Align, Position, Valign
from calbuilder.layout.metrics import Dimension
from calbuilder.layout.row import Row, RowMetrics


@dataclass(frozen=True)
class RowsMetrics:
    """Anchored metrics of a block of rows and of each row in it."""

    width: int
    height: int
    x: int
    y: int
    rows: tuple[RowMetrics, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "rows": [row.to_dict() for row in self.rows],
        }


@dataclass(frozen=True)
class Rows:
    """
    Rows stacked top to bottom with a fixed distance between neighbours.

    Attributes:
        rows: Rows in drawing order.
        distance: Gap in pixels between two consecutive rows.
    """

    rows: tuple[Row, ...]
    distance: int = 0

    def __init__(self, rows: Iterable[Row] = (), distance: int = 0) -> None:
        if distance < 0:
            raise InvalidRunError(f"Row distance must not be negative, got {distance}")
        object.__setattr__(self, "rows", tuple(rows))
        object.__setattr__(self, "distance", distance)

    def get_dimension(self) -> Dimension:
        """Get the unanchored size of the block."""
        dimensions = [row.get_dimension() for row in self.rows]

        height = sum(dimension.height for dimension in dimensions)
        if len(dimensions) > 1:
            height += (len(dimensions) - 1) * self.distance

        return Dimension(
            width=max((dimension.width for dimension in dimensions), default=0),
            height=height,
        )

    def get_metrics(
        self,
        position_x: int = 0,
        position_y: int = 0,
        align: Align = Align.LEFT,
        valign: Valign = Valign.BOTTOM,
    ) -> RowsMetrics:
        """
        Get the metrics of the block anchored at the given reference point.

        Every row is aligned on its own against position_x, so rows of
        different widths are each left/center/right aligned within the block.

        Args:
            position_x: Reference x.
            position_y: Reference y of the first row.
            align: Horizontal alignment, applied to the block and every row.
            valign: Vertical alignment, applied to the block and every row.

        Returns:
            RowsMetrics with the block's size and anchor and one entry per row.
        """
        rows: list[RowMetrics] = []

        current_y = position_y
        for row in self.rows:
            metrics = row.get_metrics(position_x, current_y, align, valign)
            rows.append(metrics)
            current_y += metrics.height + self.distance

        width = max((metrics.width for metrics in rows), default=0)
        height = sum(metrics.height for metrics in rows)
        if len(rows) > 1:
            height += (len(rows) - 1) * self.distance

        position = Position(position_x, position_y, align, valign)

        return RowsMetrics(
            width=width,
            height=height,
            x=position.get_position_x(width),
            y=position.get_position_y(height),
            rows=tuple(rows),
        )
