"""
Cover artwork encoding for ID3 and FLAC.

A cover is either an embedded image (raw bytes plus a real MIME type) or a
reference to an external image: the payload is then the URL itself and the
MIME type is the ``-->`` marker understood by ID3/FLAC readers.
"""

import logging
from io import BytesIO
from typing import Optional

import mutagen.flac as flac
from mutagen.id3 import APIC, Encoding, PictureType
from PIL import Image

from .core import PictureEncodeError
from .utils import Config, COVER_URL_MIME

logger = logging.getLogger(__name__)

# Common misspellings seen in the wild
MIME_ALIASES = {
    'image/jpg': 'image/jpeg',
    'image/pjpeg': 'image/jpeg',
    'image/x-png': 'image/png',
}

# Bits per pixel for Pillow image modes
MODE_DEPTH = {
    '1': 1,
    'L': 8,
    'P': 8,
    'LA': 16,
    'I;16': 16,
    'RGB': 24,
    'YCbCr': 24,
    'RGBA': 32,
    'CMYK': 32,
    'I': 32,
    'F': 32,
}

def normalize_mime(mime: str) -> str:
    """Lowercase a MIME type and resolve known aliases."""
    m = (mime or '').strip().lower()
    return MIME_ALIASES.get(m, m)

def sniff_mime(data: bytes) -> Optional[str]:
    """Return the MIME type of image ``data`` as detected by Pillow, or None."""
    try:
        with Image.open(BytesIO(data)) as img:
            return Image.MIME.get(img.format)
    except (OSError, SyntaxError, ValueError) as e:
        logger.debug(f"Could not identify cover image: {e}")
        return None

def _check_size(payload: bytes, what: str) -> None:
    if len(payload) > Config.MAX_COVER_SIZE:
        raise PictureEncodeError(
            f"{what} is {len(payload)} bytes, limit is {Config.MAX_COVER_SIZE}")

def _check_embedded(data: bytes, mime: str) -> str:
    if not data:
        raise PictureEncodeError("cover image data is empty")
    mime = normalize_mime(mime)
    if not mime:
        raise PictureEncodeError("cover MIME type is empty")
    if mime == COVER_URL_MIME:
        raise PictureEncodeError(f"MIME type {COVER_URL_MIME!r} is reserved for cover URLs")
    # APIC stores the MIME type as Latin-1
    try:
        mime.encode('latin-1')
    except UnicodeEncodeError as e:
        raise PictureEncodeError(f"cover MIME type {mime!r} is not Latin-1") from e
    _check_size(data, "cover image")
    return mime

def _url_payload(url: str) -> bytes:
    if not url:
        raise PictureEncodeError("cover URL is empty")
    payload = url.encode(Config.DEFAULT_ENCODING)
    _check_size(payload, "cover URL")
    return payload

# ---------- ID3 ----------
def id3_picture(data: bytes, mime: str, desc: Optional[str] = None) -> APIC:
    """Build a front cover APIC frame embedding ``data``."""
    mime = _check_embedded(data, mime)
    return APIC(
        encoding=Encoding.LATIN1,
        mime=mime,
        type=PictureType.COVER_FRONT,
        desc=desc if desc is not None else Config.COVER_DESCRIPTION,
        data=bytes(data),
    )

def id3_url_picture(url: str, desc: Optional[str] = None) -> APIC:
    """Build a front cover APIC frame whose payload is ``url``."""
    return APIC(
        encoding=Encoding.LATIN1,
        mime=COVER_URL_MIME,
        type=PictureType.COVER_FRONT,
        desc=desc if desc is not None else Config.COVER_DESCRIPTION,
        data=_url_payload(url),
    )

# ---------- FLAC ----------
def flac_picture(data: bytes, mime: str) -> flac.Picture:
    """
    Build a front cover PICTURE block embedding ``data``.

    The image is decoded to fill in its dimensions and colour depth. Data that
    Pillow cannot decode, or whose format does not match ``mime``, is rejected.

    Raises:
        PictureEncodeError: if the data or MIME type is unusable
    """
    mime = _check_embedded(data, mime)
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            detected = Image.MIME.get(img.format)
            width, height = img.size
            depth = MODE_DEPTH.get(img.mode, len(img.getbands()) * 8)
            colors = 0
            if img.mode == 'P':
                palette = img.getpalette() or []
                colors = len(palette) // 3
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise PictureEncodeError(f"cannot decode cover image as {mime}: {e}") from e

    if detected != mime:
        raise PictureEncodeError(f"cover image is {detected or 'unknown'}, not {mime}")

    pic = flac.Picture()
    pic.type = PictureType.COVER_FRONT
    pic.mime = mime
    pic.desc = Config.COVER_DESCRIPTION
    pic.width = width
    pic.height = height
    pic.depth = depth
    pic.colors = colors
    pic.data = bytes(data)
    return pic

def flac_url_picture(url: str) -> flac.Picture:
    """Build a front cover PICTURE block whose payload is ``url``."""
    pic = flac.Picture()
    pic.type = PictureType.COVER_FRONT
    pic.mime = COVER_URL_MIME
    pic.desc = Config.COVER_DESCRIPTION
    pic.data = _url_payload(url)
    return pic
