"""Tests for the ImageMagick (imagick) image builder."""

import io

import pytest
from PIL import Image

pytest.importorskip("wand.image", exc_type=ImportError)

from wand.exceptions import WandException  # noqa: E402
from wand.image import Image as WandImage  # noqa: E402

from calbuilder.builder.wand import (  # noqa: E402
    GD_IMAGE_TO_IMAGICK_CORRECTION,
    WandImageBuilder,
    WandMetrics,
)
from calbuilder.errors import ColorNotDefinedError, FontNotFoundError, ResourceError  # noqa: E402


@pytest.fixture
def builder(blank_design, page_settings):
    return WandImageBuilder(blank_design, page_settings)


@pytest.fixture
def font_builder(blank_design, font_settings):
    return WandImageBuilder(blank_design, font_settings)


def target_png(builder) -> Image.Image:
    return Image.open(io.BytesIO(builder.get_image_string("png"))).convert("RGB")


@pytest.mark.parametrize("angle, expected", [(0, 0), (90, 270), (270, 90), (360, 0)])
def test_angle_is_clockwise(builder, angle, expected):
    assert builder.get_angle(angle) == expected


def test_corrected_value(builder):
    assert builder.get_corrected_value(300) == pytest.approx(400)
    assert GD_IMAGE_TO_IMAGICK_CORRECTION == pytest.approx(4 / 3)


def test_allocate_color(builder):
    builder.create_color("red", 255, 0, 0)
    builder.create_color("shadow", 0, 0, 0, 50)

    assert builder.get_color("red") == "rgb(255, 0, 0)"
    assert builder.get_color("shadow") == "rgba(0, 0, 0, 0.50)"


def test_unknown_color(builder):
    with pytest.raises(ColorNotDefinedError):
        builder.get_color("missing")


def test_session_releases_canvases(builder, source_photo):
    with builder.session(source_photo):
        assert builder.get_canvas_size(builder.get_image_target()) == (600, 400)
        assert (builder.width_source, builder.height_source) == (300, 200)

    assert builder.image_target is None
    with pytest.raises(ResourceError):
        builder.get_image_target()


def test_add_rectangle(builder, source_photo):
    with builder.session(source_photo):
        builder.create_color("red", 255, 0, 0)
        builder.add_rectangle(10, 20, 30, 40, "red")
        page = target_png(builder)

    assert page.getpixel((25, 40)) == (255, 0, 0)
    assert page.getpixel((300, 200)) == (0, 0, 0)


def test_add_image(builder, source_photo):
    with builder.session(source_photo):
        builder.add_image(100, 50, 150, 100)
        page = target_png(builder)

    red, green, blue = page.getpixel((175, 100))
    assert blue >= 250 and red <= 5 and green <= 5


def test_add_image_blob(builder, source_photo, qr_blob):
    with builder.session(source_photo):
        builder.create_color("red", 255, 0, 0)
        builder.add_rectangle(0, 0, 600, 400, "red")
        builder.add_image_blob(qr_blob, 0, 0, 20, 20, (255, 255, 255))
        page = target_png(builder)

    red, green, blue = page.getpixel((1, 1))
    assert red >= 250 and green <= 5 and blue <= 5
    assert sum(page.getpixel((10, 10))) < 100


def test_source_is_closed_when_alpha_fails(builder, source_photo, monkeypatch):
    closed = []
    close = WandImage.close

    def record_close(image):
        closed.append(image)
        close(image)

    def refuse_alpha(image, value):
        raise WandException("no alpha channel")

    monkeypatch.setattr(WandImage, "close", record_close)
    monkeypatch.setattr(WandImage, "alpha_channel", property(lambda image: False, refuse_alpha))

    with pytest.raises(ResourceError, match="alpha channel"):
        builder.create_image_from_file(source_photo)

    assert len(closed) == 1


def test_build(blank_design, page_settings, source_photo):
    builder = WandImageBuilder(blank_design, page_settings, {"fill": [0, 255, 0]})

    result = builder.build(source_photo)

    assert (result.width, result.height) == (600, 400)
    assert result.engine == "imagick"
    assert result.mime_type == "image/png"


def test_metrics_missing_font(tmp_path):
    with pytest.raises(FontNotFoundError):
        WandMetrics().get_metrics("Text", tmp_path / "missing.ttf", 20)


class TestWithFont:
    def test_metrics(self, font_path):
        metrics = WandMetrics()

        short = metrics.get_metrics("Text", font_path, 20)
        long = metrics.get_metrics("Text Text Text", font_path, 20)

        assert 0 < short.width < long.width
        assert short.height > 0

    def test_blank_text_has_no_width(self, font_path):
        assert WandMetrics().get_metrics("", font_path, 20).width == 0

    def test_space_has_advance_width(self, font_path):
        assert WandMetrics().get_metrics(" ", font_path, 20).width > 0

    def test_draw_text(self, font_builder, source_photo):
        with font_builder.session(source_photo):
            font_builder.create_color("white", 255, 255, 255)
            font_builder.add_text_raw("Text", 40, "white", 10, 60)
            page = target_png(font_builder)

        with page.convert("L") as gray:
            left, top, right, bottom = gray.getbbox()

        assert left >= 5
        assert bottom <= 65
