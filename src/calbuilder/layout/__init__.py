"""Text layout engine: metrics, runs, rows and row blocks."""

from calbuilder.layout.align import Align, Position, Valign, round_half_up
from calbuilder.layout.metrics import (
    CharacterMetrics,
    Dimension,
    FontMetricsProvider,
    PillowMetrics,
    rotated_extent,
)
from calbuilder.layout.row import Row, RowMetrics
from calbuilder.layout.rows import Rows, RowsMetrics
from calbuilder.layout.text import Text, TextMetrics

__all__ = [
    "Align",
    "CharacterMetrics",
    "Dimension",
    "FontMetricsProvider",
    "PillowMetrics",
    "Position",
    "Row",
    "RowMetrics",
    "Rows",
    "RowsMetrics",
    "Text",
    "TextMetrics",
    "Valign",
    "rotated_extent",
    "round_half_up",
]
