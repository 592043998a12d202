"""Tests for single text runs."""

import pytest

from calbuilder.errors import InvalidRunError
from calbuilder.layout import Align, Dimension, Text, Valign


@pytest.mark.parametrize(
    "text, position_x, position_y, align, valign, expected",
    [
        ("Text", 0, 0, Align.LEFT, Valign.BOTTOM, (80, 20, 0, 0)),
        ("Text Text Text", 0, 0, Align.LEFT, Valign.BOTTOM, (280, 20, 0, 0)),
        ("AÄÀÁÅ OÖÒÓ UÜÙ", 0, 0, Align.LEFT, Valign.BOTTOM, (280, 20, 0, 0)),
        ("Text", 200, 100, Align.LEFT, Valign.BOTTOM, (80, 20, 200, 100)),
        ("AÄÀÁÅ OÖÒÓ UÜÙ", 200, 100, Align.LEFT, Valign.BOTTOM, (280, 20, 200, 100)),
        ("Text", 0, 0, Align.CENTER, Valign.BOTTOM, (80, 20, -40, 0)),
        ("Text", 0, 0, Align.RIGHT, Valign.BOTTOM, (80, 20, -80, 0)),
        ("Text", 0, 0, Align.CENTER, Valign.MIDDLE, (80, 20, -40, 10)),
        ("Text", 0, 0, Align.CENTER, Valign.TOP, (80, 20, -40, 20)),
    ],
)
def test_get_metrics(text, position_x, position_y, align, valign, expected):
    metrics = Text(text, "Arial", 20).get_metrics(position_x, position_y, align, valign)

    assert (metrics.width, metrics.height, metrics.x, metrics.y) == expected
    assert metrics.text == text
    assert metrics.font == "Arial"
    assert metrics.font_size == 20
    assert metrics.angle == 0


def test_to_dict_keys():
    metrics = Text("Text", "Arial", 20).get_metrics(200, 100)

    assert metrics.to_dict() == {
        "width": 80,
        "height": 20,
        "x": 200,
        "y": 100,
        "text": "Text",
        "font": "Arial",
        "font-size": 20,
        "angle": 0,
    }


def test_get_dimension_ignores_position():
    assert Text("Text", "Arial", 20).get_dimension() == Dimension(80, 20)


def test_text_length_counts_characters():
    assert Text("AÄÀÁÅ", "Arial", 20).text_length == 5


def test_empty_text():
    metrics = Text("", "Arial", 20).get_metrics()

    assert metrics.width == 0
    assert metrics.height == 20


def test_font_path_is_stored_as_string(tmp_path):
    assert Text("Text", tmp_path / "font.ttf", 20).font == str(tmp_path / "font.ttf")


@pytest.mark.parametrize("font_size", [0, -20])
def test_rejects_non_positive_font_size(font_size):
    with pytest.raises(InvalidRunError):
        Text("Text", "Arial", font_size)


def test_is_immutable():
    text = Text("Text", "Arial", 20)

    with pytest.raises(AttributeError):
        text.text = "Other"


def test_equality_ignores_metrics_provider():
    assert Text("Text", "Arial", 20) == Text("Text", "Arial", 20)
