"""Type aliases used across the calbuilder package."""

from typing import Literal, Tuple

# Color types
RGBColor = Tuple[int, int, int]  # RGB color in 0-255 range

# Rendering engines, named after the imaging libraries the calendar builder
# historically shipped with
EngineName = Literal["gdimage", "imagick"]

# Encoded output formats
OutputFormat = Literal["jpg", "jpeg", "png"]
