"""Downscale and re-encode uploaded plant photos as embedded data URLs."""
import base64
import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_WIDTH = 600
JPEG_QUALITY = 70  # 0.7 on a 0-1 scale
DATA_URL_PREFIX = "data:image/jpeg;base64,"


class DecodeError(Exception):
    """The uploaded bytes could not be interpreted as an image."""


def target_size(width: int, height: int, max_width: int = MAX_WIDTH) -> tuple[int, int]:
    if width <= max_width:
        return width, height
    scale = max_width / width
    return max_width, max(1, int(height * scale))


def compress_image(data: bytes) -> str:
    """Decode, shrink to at most MAX_WIDTH wide, and encode as a JPEG data URL.

    Raises DecodeError if the bytes are not a decodable image.
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning("Could not decode uploaded image: %s", e)
        raise DecodeError(str(e)) from e

    size = target_size(img.width, img.height)
    if size != img.size:
        img = img.resize(size, Image.Resampling.LANCZOS)
    if img.mode != "RGB":
        img = img.convert("RGB")

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=JPEG_QUALITY)
    return DATA_URL_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


def compress_image_file(path: str) -> str:
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read {path}: {e}") from e
    return compress_image(data)


def is_embedded_image(ref: str) -> bool:
    return ref.startswith("data:")


def decode_data_url(ref: str) -> bytes:
    if not is_embedded_image(ref) or "," not in ref:
        raise ValueError("Not a data URL")
    return base64.b64decode(ref.split(",", 1)[1])


def image_size(ref: str) -> tuple[int, int]:
    """Pixel dimensions of an embedded image."""
    with Image.open(io.BytesIO(decode_data_url(ref))) as img:
        return img.size
