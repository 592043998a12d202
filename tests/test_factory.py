"""Tests for engine selection."""

import pytest

from calbuilder.builder import (
    ENGINES,
    PillowImageBuilder,
    get_builder_class,
    get_image_builder,
    get_metrics_provider,
)
from calbuilder.errors import ConfigurationError, UnsupportedEngineError
from calbuilder.layout import CharacterMetrics, PillowMetrics


def test_engines():
    assert ENGINES == ("gdimage", "imagick")


def test_gdimage_builder_class():
    assert get_builder_class("gdimage") is PillowImageBuilder


def test_imagick_builder_class():
    pytest.importorskip("wand.image", exc_type=ImportError)
    from calbuilder.builder.wand import WandImageBuilder

    assert get_builder_class("imagick") is WandImageBuilder


@pytest.mark.parametrize("engine", ["", "gd", "ImageMagick"])
def test_unknown_engine(engine):
    with pytest.raises(UnsupportedEngineError, match=f'Unsupported design engine "{engine}" was given.'):
        get_builder_class(engine)


def test_unknown_engine_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        get_builder_class("svg")


def test_get_image_builder_uses_settings_engine(blank_design, page_settings):
    builder = get_image_builder(blank_design, page_settings)

    assert isinstance(builder, PillowImageBuilder)
    assert builder.design is blank_design
    assert builder.settings is page_settings


def test_get_image_builder_engine_override(blank_design, page_settings):
    with pytest.raises(UnsupportedEngineError):
        get_image_builder(blank_design, page_settings, engine="svg")


def test_get_image_builder_configures_design(blank_design, page_settings):
    get_image_builder(blank_design, page_settings, {"fill": [1, 2, 3]})

    assert blank_design.config.fill == (1, 2, 3)


def test_get_image_builder_rejects_invalid_design_config(blank_design, page_settings):
    with pytest.raises(ConfigurationError):
        get_image_builder(blank_design, page_settings, {"fill": "red"})


@pytest.mark.parametrize(
    "engine, provider",
    [
        ("reference", CharacterMetrics),
        ("gdimage", PillowMetrics),
    ],
)
def test_get_metrics_provider(engine, provider):
    assert isinstance(get_metrics_provider(engine), provider)


def test_get_metrics_provider_unknown():
    with pytest.raises(UnsupportedEngineError):
        get_metrics_provider("svg")
