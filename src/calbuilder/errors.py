"""Exception hierarchy for layout and rendering failures."""


class CalendarBuilderError(Exception):
    """Base class for all calbuilder errors."""


class ConfigurationError(CalendarBuilderError, ValueError):
    """Invalid or missing configuration (fonts, source images, run specs)."""


class FontNotFoundError(ConfigurationError, FileNotFoundError):
    """A font path is missing or not readable."""


class SourceImageNotFoundError(ConfigurationError, FileNotFoundError):
    """A source photo does not exist."""


class InvalidRunError(ConfigurationError):
    """A text run is malformed (e.g. non-positive font size)."""


class UnsupportedEngineError(ConfigurationError):
    """The requested rendering engine is unknown."""


class UnsupportedFormatError(ConfigurationError):
    """The requested image format can be neither read nor written."""


class MetricsError(CalendarBuilderError, RuntimeError):
    """The font engine failed to compute a bounding box."""


class ResourceError(CalendarBuilderError, RuntimeError):
    """A native resource (canvas, color, blob) could not be created or used."""


class ColorNotDefinedError(ResourceError, KeyError):
    """A drawing call referenced a color key that was never registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
