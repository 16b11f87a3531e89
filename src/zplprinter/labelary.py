"""
Client for the Labelary ZPL rendering service.

Turning ZPL into pixels is left to Labelary (http://labelary.com/service.html):
this module only ships ZPL text out and hands back the opaque image bytes, plus
the reverse direction (image upload → ZPL graphic).
"""

import logging
from io import BytesIO

import requests
from PIL import Image, UnidentifiedImageError

from .exceptions import RenderError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://api.labelary.com/v1"

# Formats accepted by the /graphics endpoint, Pillow format -> file extension
GRAPHIC_FORMATS = {
    "PNG": "png",
    "JPEG": "jpg",
    "GIF": "gif",
    "BMP": "bmp",
}


class LabelaryClient:
    """Render ZPL labels to PNG through the Labelary API."""

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        dpmm: int = 8,
        width: float = 4.0,
        height: float = 6.0,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize client.

        Args:
            dpmm: Print density in dots per millimetre (6, 8, 12 or 24)
            width: Label width in inches
            height: Label height in inches
            base_url: API root
            timeout: Request timeout in seconds
        """
        self.dpmm = dpmm
        self.width = width
        self.height = height
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        """Render endpoint for the first label of the configured size."""
        return (
            f"{self.base_url}/printers/{self.dpmm}dpmm/"
            f"labels/{self.width:g}x{self.height:g}/0/"
        )

    def render(self, zpl: str) -> bytes:
        """
        Render ZPL to PNG.

        Raises:
            RenderError: On network failure or a non-2xx response
        """
        logger.debug("Rendering %d characters of ZPL via %s", len(zpl), self.url)
        try:
            response = requests.post(
                self.url,
                data=zpl.encode("utf-8"),
                headers={
                    "Accept": "image/png",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RenderError(f"Request failed: {e}") from e

        if not response.ok:
            raise RenderError(f"API returned status: {response.status_code} {response.text}")
        return response.content

    def convert_image(self, image_bytes: bytes) -> str:
        """
        Convert an image to ZPL with the /graphics endpoint.

        Raises:
            RenderError: Empty or unsupported image, network failure,
                non-2xx response or empty reply
        """
        if not image_bytes:
            raise RenderError("Image data is empty")

        try:
            with Image.open(BytesIO(image_bytes)) as img:
                image_format = img.format
        except (UnidentifiedImageError, OSError) as e:
            raise RenderError(f"Unable to detect image format: {e}") from e

        extension = GRAPHIC_FORMATS.get(image_format or "")
        if extension is None:
            raise RenderError(
                f"Unsupported image format: {image_format}. Use PNG, JPG, GIF, or BMP"
            )

        try:
            response = requests.post(
                f"{self.base_url}/graphics",
                files={"file": (f"image.{extension}", image_bytes)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RenderError(f"Network error: {e}") from e

        if not response.ok:
            raise RenderError(f"API error ({response.status_code}): {response.text}")
        if not response.text:
            raise RenderError("API returned empty response")
        return response.text
