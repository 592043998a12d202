"""Quote page: a centered caption with its author on a plain background."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from calbuilder.design.base import DesignBase
from calbuilder.layout import Align, Row, Rows, Text, Valign
from calbuilder.layout.align import round_half_up
from calbuilder.types import RGBColor

if TYPE_CHECKING:
    from calbuilder.builder.base import BaseImageBuilder

logger = logging.getLogger(__name__)

WHITE = "white"
BACKGROUND_COLOR = "background-color"


class TextDesignConfig(BaseModel):
    """Configuration of the quote page. Sizes are given for a 4000 px high page."""

    background_color: RGBColor = (255, 0, 0)
    """Page background as RGB."""

    box_bottom_ratio: float = Field(default=9 / 48, ge=0, lt=1)
    """Share of the page height kept free at the bottom (calendar box)."""

    text: str = "Some nice text."
    """Caption; "<br>" starts a new line."""

    text_font_size: int = Field(default=300, gt=0)
    text_line_distance: int = Field(default=0, ge=0)
    """Gap between caption lines."""

    author: str = "Author name"
    author_font_size: int = Field(default=100, gt=0)
    author_distance: int = Field(default=400, ge=0)
    """Gap between the caption and the author line."""


class DesignText(DesignBase):
    """Quote page design."""

    config_model = TextDesignConfig
    config: TextDesignConfig

    def do_init(self, builder: BaseImageBuilder) -> None:
        self.text_font_size = builder.get_size(self.config.text_font_size)
        self.text_line_distance = builder.get_size(self.config.text_line_distance)
        self.author_font_size = builder.get_size(self.config.author_font_size)
        self.author_distance = builder.get_size(self.config.author_distance)

        builder.reset_colors()
        builder.create_color(WHITE, 255, 255, 255)
        builder.create_color_from_config(BACKGROUND_COLOR, self.config.background_color)

    def do_build(self, builder: BaseImageBuilder) -> None:
        builder.add_rectangle(0, 0, builder.width_target, builder.height_target, BACKGROUND_COLOR)

        font = builder.font_path
        metrics = builder.metrics

        caption = Rows(
            [Row([Text(line, font, self.text_font_size, metrics=metrics)]) for line in self.config.text.split("<br>")],
            distance=self.text_line_distance,
        )
        author = Row([Text(f"- {self.config.author} -", font, self.author_font_size, metrics=metrics)])

        center_x = round_half_up(builder.width_target / 2)
        center_y = round_half_up((builder.height_target - builder.height_target * self.config.box_bottom_ratio) / 2)

        # Center caption and author together around the free area's middle
        caption_height = caption.get_dimension().height
        total_height = caption_height + self.author_distance + author.get_dimension().height
        top = center_y - round_half_up(total_height / 2)

        caption_metrics = caption.get_metrics(center_x, top, Align.CENTER, Valign.TOP)
        author_metrics = author.get_metrics(
            center_x, top + caption_metrics.height + self.author_distance, Align.CENTER, Valign.TOP
        )

        logger.debug(f"Caption block {caption_metrics.width}x{caption_metrics.height} at top {top}")

        builder.add_rows(caption_metrics, WHITE)
        builder.add_row(author_metrics, WHITE)
