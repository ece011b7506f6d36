import asyncio
import base64
import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from config import IMAGE_SETTINGS
from errors import ImageLoadError

logger = logging.getLogger(__name__)


def load_image(source):
    """
    Open an image from any of the supported sources.

    Args:
        source: Raw bytes, a path (str or Path), a binary file object or a PIL Image

    Returns:
        PIL.Image.Image: The decoded image

    Raises:
        ImageLoadError: If the source cannot be read or decoded
    """
    if isinstance(source, Image.Image):
        return source
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    elif isinstance(source, (str, Path)):
        source = Path(source)
    elif not hasattr(source, "read"):
        raise ImageLoadError(f"unsupported image source {type(source).__name__}")

    try:
        img = Image.open(source)
        img.load()
    except FileNotFoundError:
        raise ImageLoadError(f"file not found: {source}")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageLoadError(str(e))
    return img


def optimize_image(img, max_size=IMAGE_SETTINGS["max_size"], quality=IMAGE_SETTINGS["quality"]):
    """
    Resize and compress an image for upload.

    Args:
        img: PIL Image to optimize
        max_size: Maximum width and height
        quality: JPEG compression quality (1-100)

    Returns:
        BytesIO: JPEG image data
    """
    # Respect camera orientation before measuring
    img = ImageOps.exif_transpose(img)

    if img.mode != 'RGB':
        img = img.convert('RGB')

    # Calculate new size while maintaining aspect ratio
    ratio = min(max_size[0] / img.size[0], max_size[1] / img.size[1])
    if ratio < 1:
        new_size = (max(1, int(img.size[0] * ratio)), max(1, int(img.size[1] * ratio)))
        logger.debug("Resizing image from %s to %s", img.size, new_size)
        img = img.resize(new_size, Image.Resampling.LANCZOS)

    output = BytesIO()
    img.save(output, format='JPEG', quality=quality, optimize=True)
    output.seek(0)
    return output


def encode_image(source):
    """
    Load, optimize and base64-encode an image.

    Returns:
        str: Base64 JPEG data, ready for a data:image/jpeg;base64 URI
    """
    img = load_image(source)
    try:
        optimized = optimize_image(img)
    except OSError as e:
        raise ImageLoadError(str(e))
    return base64.b64encode(optimized.read()).decode('utf-8')


async def prepare_image(source):
    """Encode an image off the event loop. See encode_image()."""
    return await asyncio.to_thread(encode_image, source)
