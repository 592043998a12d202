"""Tests for anchor computation and rounding."""

import pytest

from calbuilder.layout import Align, Position, Valign, round_half_up


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, 0),
        (2.5, 3),
        (3.5, 4),
        (25, 25),
        (-2.5, -3),
        (-2.4, -2),
        (12.49, 12),
    ],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize(
    "align, expected",
    [
        (Align.LEFT, 200),
        (Align.CENTER, 160),
        (Align.RIGHT, 120),
    ],
)
def test_position_x(align, expected):
    assert Position(200, 100, align, Valign.BOTTOM).get_position_x(80) == expected


@pytest.mark.parametrize(
    "valign, expected",
    [
        (Valign.TOP, 120),
        (Valign.MIDDLE, 110),
        (Valign.BOTTOM, 100),
    ],
)
def test_position_y(valign, expected):
    assert Position(200, 100, Align.LEFT, valign).get_position_y(20) == expected


def test_center_rounds_odd_width_half_up():
    # 25 / 2 = 12.5 rounds to 13, not to the even 12
    assert Position(0, 0, Align.CENTER).get_position_x(25) == -13
    assert Position(0, 0, valign=Valign.MIDDLE).get_position_y(25) == 13


def test_accepts_integer_constants():
    position = Position(0, 0, 2, 1)

    assert position.align is Align.CENTER
    assert position.valign is Valign.TOP


def test_rejects_unknown_constant():
    with pytest.raises(ValueError):
        Position(0, 0, 4, 1)


def test_defaults_are_left_bottom():
    position = Position()

    assert position.get_position_x(80) == 0
    assert position.get_position_y(20) == 0
