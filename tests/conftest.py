"""Shared fixtures: a system TrueType font and small source images."""

import io
from pathlib import Path

import pytest
from PIL import Image
from pydantic import BaseModel

from calbuilder.config import BuilderSettings
from calbuilder.design import DesignBase

FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


def find_font() -> Path | None:
    for candidate in FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path

    fonts_dir = Path("/usr/share/fonts")
    if fonts_dir.is_dir():
        return next(iter(sorted(fonts_dir.rglob("*.ttf"))), None)

    return None


@pytest.fixture(scope="session")
def font_path() -> Path:
    """Path of a TrueType font; tests using it are skipped when none is installed."""
    path = find_font()
    if path is None:
        pytest.skip("No TrueType font installed")
    return path


@pytest.fixture
def source_photo(tmp_path: Path) -> Path:
    """A 300x200 blue PNG standing in for the calendar photo."""
    path = tmp_path / "photo.png"
    Image.new("RGB", (300, 200), (0, 0, 255)).save(path)
    return path


@pytest.fixture
def qr_blob() -> bytes:
    """A 10x10 PNG: white with a black 4x4 square in the middle."""
    img = Image.new("RGB", (10, 10), (255, 255, 255))
    img.paste((0, 0, 0), (3, 3, 7, 7))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class BlankConfig(BaseModel):
    fill: tuple[int, int, int] = (0, 0, 0)


class BlankDesign(DesignBase):
    """Design that only paints the page in one color."""

    config_model = BlankConfig

    def do_init(self, builder):
        builder.create_color_from_config("fill", self.config.fill)

    def do_build(self, builder):
        builder.add_rectangle(0, 0, builder.width_target, builder.height_target, "fill")


@pytest.fixture
def blank_design() -> BlankDesign:
    return BlankDesign()


@pytest.fixture
def page_settings() -> BuilderSettings:
    """Settings for a 600x400 PNG page without a font."""
    return BuilderSettings(engine="gdimage", target_height=400, output_format="png")


@pytest.fixture
def font_settings(page_settings, font_path) -> BuilderSettings:
    """Settings for a 600x400 PNG page with the installed font."""
    return page_settings.model_copy(update={"font_path": font_path})
