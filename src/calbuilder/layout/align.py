"""Horizontal/vertical alignment policies and anchor computation."""

import math
from dataclasses import dataclass
from enum import Enum


class Align(Enum):
    """Horizontal alignment relative to the reference x."""

    LEFT = 1
    CENTER = 2
    RIGHT = 3


class Valign(Enum):
    """Vertical alignment relative to the reference y."""

    TOP = 1
    MIDDLE = 2
    BOTTOM = 3


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() rounds halves to even, which would make round(50 / 2)
    and round(70 / 2) disagree on direction; anchors must not.

    Args:
        value: Value to round.

    Returns:
        Rounded integer.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Position:
    """
    Anchor policy for a reference point.

    The returned y is a baseline: BOTTOM keeps the reference y as is, while
    TOP and MIDDLE treat the reference y as the top edge and move the
    baseline down by the full or half height.
    """

    position_x: int = 0
    position_y: int = 0
    align: Align = Align.LEFT
    valign: Valign = Valign.BOTTOM

    def __post_init__(self) -> None:
        # Accept the legacy integer constants (1, 2, 3) as well as members
        object.__setattr__(self, "align", Align(self.align))
        object.__setattr__(self, "valign", Valign(self.valign))

    def get_position_x(self, width: int) -> int:
        """
        Get the x anchor for a box of the given width.

        Args:
            width: Box width in pixels.

        Returns:
            Anchored x in pixels.
        """
        if self.align is Align.LEFT:
            # | ->
            return self.position_x
        if self.align is Align.CENTER:
            # | ->   <- |
            return self.position_x - round_half_up(width / 2)
        # <- |
        return self.position_x - width

    def get_position_y(self, height: int) -> int:
        """
        Get the baseline y for a box of the given height.

        Args:
            height: Box height in pixels.

        Returns:
            Anchored y in pixels.
        """
        if self.valign is Valign.TOP:
            return self.position_y + height
        if self.valign is Valign.MIDDLE:
            return self.position_y + round_half_up(height / 2)
        return self.position_y
