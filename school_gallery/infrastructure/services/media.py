"""Media processing (image sniffing, size checks and resize transforms)."""
import warnings
from io import BytesIO
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from ... import config

# Magic bytes of accepted image formats -> MIME type
IMAGE_SIGNATURES = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]

# Formats served back unchanged by resize; others are re-encoded as PNG
_OUTPUT_FORMATS = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}

MAX_TRANSFORM_DIMENSION = 2500


class ImageTooLargeError(ValueError):
    """The image decodes to more pixels than allowed."""
    pass


def _open_image(image_data: bytes) -> Image.Image:
    """Open an image lazily, refusing pixel counts over ``MAX_IMAGE_PIXELS``.

    Only the header is read, so oversized images are rejected before their
    bitmap is decoded.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", Image.DecompressionBombWarning)
            img = Image.open(BytesIO(image_data))
    except Image.DecompressionBombError as e:
        raise ImageTooLargeError(str(e))
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Not a readable image: {e}")

    width, height = img.size
    if width * height > config.MAX_IMAGE_PIXELS:
        raise ImageTooLargeError(
            f"Image has {width * height} pixels, limit is {config.MAX_IMAGE_PIXELS}"
        )
    return img


def image_size(image_data: bytes) -> tuple[int, int]:
    """Pixel dimensions of an image.

    Raises:
        ImageTooLargeError: If the image has too many pixels
        ValueError: If the bytes are not a readable image
    """
    return _open_image(image_data).size


def sniff_image_type(content: bytes) -> Optional[str]:
    """Return the MIME type implied by the file's magic bytes, or None."""
    for signature, mime in IMAGE_SIGNATURES:
        if content.startswith(signature):
            return mime
    # WebP: RIFF container with WEBP fourcc
    if len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


def resize_image_bytes(
    image_data: bytes,
    width: Optional[int] = None,
    height: Optional[int] = None
) -> tuple[bytes, str]:
    """Resize an image the way storage image transforms do.

    With both dimensions the image is scaled and center-cropped to fill the box
    (``cover``). With one dimension the other follows the aspect ratio.

    Returns:
        (encoded bytes, MIME type)

    Raises:
        ImageTooLargeError: If the image has too many pixels
        ValueError: If the bytes are not a readable image
    """
    img = _open_image(image_data)
    try:
        img.load()
    except OSError as e:
        raise ValueError(f"Not a readable image: {e}")

    source_format = img.format or "PNG"
    # Apply EXIF orientation to fix rotated images from cameras/phones
    img = ImageOps.exif_transpose(img)

    width = min(width, MAX_TRANSFORM_DIMENSION) if width else None
    height = min(height, MAX_TRANSFORM_DIMENSION) if height else None

    if width and height:
        img = ImageOps.fit(img, (width, height), Image.Resampling.LANCZOS)
    elif width:
        ratio = width / img.width
        img = img.resize((width, max(1, round(img.height * ratio))), Image.Resampling.LANCZOS)
    elif height:
        ratio = height / img.height
        img = img.resize((max(1, round(img.width * ratio)), height), Image.Resampling.LANCZOS)

    output_format = source_format if source_format in _OUTPUT_FORMATS else "PNG"
    if output_format == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    output = BytesIO()
    save_kwargs = {"quality": 85} if output_format in ("JPEG", "WEBP") else {}
    img.save(output, output_format, **save_kwargs)
    return output.getvalue(), _OUTPUT_FORMATS[output_format]
