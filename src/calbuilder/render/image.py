"""Image encoding and inspection utilities using Pillow."""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image

from calbuilder.errors import ResourceError, UnsupportedFormatError

# Accepted format names mapped to Pillow's format identifiers
IMAGE_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
}


@dataclass(frozen=True)
class ImageResult:
    """Encoded page plus the metadata callers need to store or serve it."""

    data: bytes
    width: int
    height: int
    mime_type: str
    size_byte: int
    engine: str


def normalize_format(image_format: str) -> str:
    """
    Map a format name or file extension to Pillow's format identifier.

    Args:
        image_format: Format name such as "jpg", "jpeg", "png" or ".png".

    Returns:
        "JPEG" or "PNG".

    Raises:
        UnsupportedFormatError: If the format is not supported.
    """
    key = image_format.lower().lstrip(".")
    if key not in IMAGE_FORMATS:
        raise UnsupportedFormatError(f"Unsupported image format \"{image_format}\"")
    return IMAGE_FORMATS[key]


def load_image_from_bytes(image_data: bytes) -> Image.Image:
    """
    Load image from raw bytes.

    Args:
        image_data: Raw image bytes (JPEG, PNG, etc.).

    Returns:
        PIL Image object, fully loaded.

    Raises:
        ResourceError: If the bytes are not a readable image.
    """
    try:
        img = Image.open(BytesIO(image_data))
        img.load()
    except OSError as e:
        raise ResourceError(f"Unable to create image from blob ({len(image_data)} bytes): {e}") from e
    return img


def save_image_to_bytes(img: Image.Image, format: str = "PNG", quality: int = 100) -> bytes:
    """
    Save PIL Image to bytes.

    Args:
        img: PIL Image object.
        format: Image format (PNG, JPEG).
        quality: JPEG quality (1-100).

    Returns:
        Image as bytes.
    """
    buffer = BytesIO()
    if format == "JPEG":
        # JPEG has no alpha channel
        with img.convert("RGB") as rgb:
            rgb.save(buffer, format=format, quality=quality)
    else:
        img.save(buffer, format=format)
    return buffer.getvalue()


def get_image_properties(image_data: bytes, engine: str) -> ImageResult:
    """
    Describe encoded image bytes.

    Args:
        image_data: Encoded image.
        engine: Name of the engine that produced it.

    Returns:
        ImageResult with dimensions, mime type and byte size.
    """
    with load_image_from_bytes(image_data) as img:
        width, height = img.size
        mime_type = Image.MIME.get(img.format or "", "application/octet-stream")

    return ImageResult(
        data=image_data,
        width=width,
        height=height,
        mime_type=mime_type,
        size_byte=len(image_data),
        engine=engine,
    )
