"""
Image Processing for ZPL Graphics.

Converts images to the 1-bit ASCII hex format used by ^GFA and ~DG:
8 pixels per byte, most significant bit leftmost, 1 = black (burn),
every row padded to a whole byte.
"""

from io import BytesIO
from pathlib import Path
from typing import Iterator, Union

from PIL import Image, UnidentifiedImageError

from .exceptions import ImageError
from .zpl import DownloadGraphic, GraphicField, bytes_per_row

# Image size limits to prevent memory exhaustion from malicious/malformed images
MAX_IMAGE_DIMENSION = 10000  # Maximum width or height in pixels
MAX_IMAGE_PIXELS = 10_000_000  # Maximum total pixels (10 megapixels)

DEFAULT_THRESHOLD = 128


class ImageSizeError(ValueError):
    """Image dimensions exceed safety limits."""

    pass


def load_image(source: Union[str, Path, bytes, Image.Image]) -> Image.Image:
    """
    Load an image from various sources.

    Args:
        source: File path, bytes, or PIL Image

    Returns:
        PIL Image object

    Raises:
        ImageSizeError: If image dimensions exceed safety limits
        ImageError: If the source is missing, unreadable or of unsupported type
    """
    if isinstance(source, Image.Image):
        img = source
    elif isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise ImageError(f"Image file not found: {path}")
        try:
            img = Image.open(path)
        except (UnidentifiedImageError, OSError) as e:
            raise ImageError(f"Failed to load image: {e}") from e
    elif isinstance(source, bytes):
        try:
            img = Image.open(BytesIO(source))
        except (UnidentifiedImageError, OSError) as e:
            raise ImageError(f"Failed to load image: {e}") from e
    else:
        raise ImageError(f"Unsupported image type: {type(source)}")

    if img.width > MAX_IMAGE_DIMENSION or img.height > MAX_IMAGE_DIMENSION:
        raise ImageSizeError(
            f"Image dimensions ({img.width}x{img.height}) exceed maximum "
            f"({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"
        )
    if img.width * img.height > MAX_IMAGE_PIXELS:
        raise ImageSizeError(
            f"Image pixel count ({img.width * img.height:,}) exceeds "
            f"maximum ({MAX_IMAGE_PIXELS:,})"
        )

    return img


def _luma(pixel: tuple) -> int:
    """ITU-R 601 luma with integer arithmetic."""
    r, g, b = pixel[0], pixel[1], pixel[2]
    return (r * 299 + g * 587 + b * 114) // 1000


def iter_rows(image: Image.Image, threshold: int = DEFAULT_THRESHOLD) -> Iterator[bytes]:
    """
    Iterate over image rows as packed 1-bit bytes.

    A pixel is black when its luma is below threshold. Each row is exactly
    ceil(width / 8) bytes; unused trailing bits are zero.
    """
    if image.mode != "RGB":
        image = image.convert("RGB")

    width = image.width
    row_len = bytes_per_row(width)

    for y in range(image.height):
        row = bytearray(row_len)
        for x in range(width):
            if _luma(image.getpixel((x, y))) < threshold:
                row[x // 8] |= 1 << (7 - x % 8)
        yield bytes(row)


def image_to_zpl_hex(image: Image.Image, threshold: int = DEFAULT_THRESHOLD) -> str:
    """Encode an image as one contiguous uppercase hex string covering all rows."""
    return "".join(row.hex().upper() for row in iter_rows(image, threshold))


def graphic_field_from_image(
    image: Image.Image, threshold: int = DEFAULT_THRESHOLD
) -> GraphicField:
    """Build an inline ^GFA command from an image."""
    return GraphicField(
        width=image.width,
        height=image.height,
        data=image_to_zpl_hex(image, threshold),
    )


def download_graphic_from_image(
    name: str, image: Image.Image, threshold: int = DEFAULT_THRESHOLD
) -> DownloadGraphic:
    """Build a ~DG command that stores an image on the printer under name."""
    return DownloadGraphic(
        name=name,
        width=image.width,
        height=image.height,
        data=image_to_zpl_hex(image, threshold),
    )


def create_test_pattern(width: int = 96, height: int = 96) -> Image.Image:
    """Create a simple test pattern image: border plus both diagonals."""
    img = Image.new("1", (width, height), color=1)  # White background

    for x in range(width):
        img.putpixel((x, 0), 0)
        img.putpixel((x, height - 1), 0)
    for y in range(height):
        img.putpixel((0, y), 0)
        img.putpixel((width - 1, y), 0)

    for i in range(min(width, height)):
        img.putpixel((i, i), 0)
        img.putpixel((width - 1 - i, i), 0)

    return img
