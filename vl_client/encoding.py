"""Image → base64 data URI conversion."""
import base64
import io
import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from vl_client.constants import (
    DATA_URI_PREFIX,
    DATA_URI_TEMPLATE,
    DEFAULT_IMAGE_MIME,
    MSG_UNREADABLE_IMAGE,
    MSG_UNSUPPORTED_IMAGE,
    PIL_SAVE_FORMAT,
)
from vl_client.errors import ImageEncodingError

logger = logging.getLogger(__name__)


def _sniff_mime(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format or "", DEFAULT_IMAGE_MIME)
    except (UnidentifiedImageError, OSError):
        logger.debug("Could not identify image bytes, assuming %s", DEFAULT_IMAGE_MIME)
        return DEFAULT_IMAGE_MIME


def _bytes_to_data_uri(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return DATA_URI_TEMPLATE % (_sniff_mime(data), encoded)


def _pil_to_data_uri(image: Image.Image) -> str:
    buffered = io.BytesIO()
    try:
        image.convert("RGB").save(buffered, format=PIL_SAVE_FORMAT)
    except (OSError, ValueError) as exc:
        raise ImageEncodingError(MSG_UNREADABLE_IMAGE % exc) from exc
    encoded = base64.b64encode(buffered.getvalue()).decode("ascii")
    return DATA_URI_TEMPLATE % (DEFAULT_IMAGE_MIME, encoded)


def _file_to_data_uri(path: Path) -> str:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ImageEncodingError(MSG_UNREADABLE_IMAGE % exc) from exc
    return _bytes_to_data_uri(data)


def image_to_base64(image: bytes | bytearray | str | os.PathLike | Image.Image) -> str:
    """Return ``image`` as a ``data:<mime>;base64,...`` string.

    Accepts raw image bytes, a path to an image file, an existing data URI
    (returned unchanged) or a PIL image (re-encoded as JPEG). Raises
    ``ImageEncodingError`` for anything unreadable or unsupported.
    """
    match image:
        case bytes() | bytearray():
            return _bytes_to_data_uri(bytes(image))
        case str() as uri if uri.startswith(DATA_URI_PREFIX):
            return uri
        case str() | os.PathLike():
            return _file_to_data_uri(Path(image))
        case Image.Image():
            return _pil_to_data_uri(image)
        case _:
            raise ImageEncodingError(MSG_UNSUPPORTED_IMAGE % type(image).__name__)
